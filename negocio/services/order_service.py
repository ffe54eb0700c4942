"""
Order Service - accessor for the order aggregate (header + line items)
"""
import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from negocio.models.order import Order, OrderItem
from negocio.repositories.base import StoreError
from negocio.repositories.order_repository import OrderRepository, OrderItemRepository
from negocio.schemas.order import OrderResponse, OrderItemResponse, OrderWithItems

logger = logging.getLogger(__name__)

# columns an existing line item may change; product and order stay fixed
ITEM_UPDATE_FIELDS = ("quantity", "unit_price", "total_price")


class OrderService:
    """
    Accessor layer for orders

    Store failures are logged and turned into None / [] / False; they never
    propagate to the pages. total_amount is always caller-supplied and is
    not recomputed when items change.
    """

    def __init__(self, db: Session):
        self.repository = OrderRepository(db)
        self.item_repository = OrderItemRepository(db)

    @staticmethod
    def _aggregate(order: Order, items: List[OrderItem]) -> OrderWithItems:
        return OrderWithItems(
            order=OrderResponse.model_validate(order),
            items=[OrderItemResponse.model_validate(i) for i in items]
        )

    def get_all(self, limit: Optional[int] = None) -> List[OrderResponse]:
        """All orders, newest order_date first"""
        try:
            orders = self.repository.select(order_by="order_date", descending=True, limit=limit)
        except StoreError as e:
            logger.error(f"Error fetching orders: {e}")
            return []
        return [OrderResponse.model_validate(o) for o in orders]

    def get_by_id(self, order_id: str) -> Optional[OrderWithItems]:
        """
        Get an order header with its line items

        Returns:
            None if the header is missing or cannot be fetched. If only the
            items fail to load, the header comes back with an empty item list.
        """
        try:
            order = self.repository.select_one({"id": order_id})
        except StoreError as e:
            logger.error(f"Error fetching order {order_id}: {e}")
            return None
        if not order:
            return None

        try:
            items = self.item_repository.select({"order_id": order_id}, order_by="created_at")
        except StoreError as e:
            logger.error(f"Error fetching items for order {order_id}: {e}")
            items = []

        return self._aggregate(order, items)

    def get_by_customer_id(self, customer_id: str) -> List[OrderResponse]:
        """Orders placed by one customer, newest first"""
        try:
            orders = self.repository.select(
                {"customer_id": customer_id}, order_by="order_date", descending=True
            )
        except StoreError as e:
            logger.error(f"Error fetching orders for customer {customer_id}: {e}")
            return []
        return [OrderResponse.model_validate(o) for o in orders]

    def create(self, header: Dict[str, Any], items: List[Dict[str, Any]]) -> Optional[OrderWithItems]:
        """
        Create an order header and its line items

        Steps:
        1. Insert the header to obtain its generated id
        2. Insert every line item tagged with that id
        3. Commit both together

        Args:
            header: Order columns (customer_id, order_date, total_amount,
                status, payment_status, notes)
            items: Line items without ids (product_id, quantity, unit_price,
                total_price)

        Returns:
            The stored aggregate, or None if anything failed. A failure at
            any step rolls back the whole order.
        """
        try:
            order = self.repository.insert([header], commit=False)[0]
            new_items = self.item_repository.insert(
                [{**item, "order_id": order.id} for item in items], commit=False
            ) if items else []
            self.repository.commit()
        except StoreError as e:
            logger.error(f"Error creating order, nothing was saved: {e}")
            return None

        logger.info(f"✓ Order {order.id} created with {len(new_items)} item(s)")
        return self._aggregate(order, new_items)

    def update(self, order_id: str, fields: Dict[str, Any]) -> Optional[OrderResponse]:
        """Partial update of the order header; line items are untouched"""
        try:
            orders = self.repository.update(fields, {"id": order_id})
        except StoreError as e:
            logger.error(f"Error updating order {order_id}: {e}")
            return None
        if not orders:
            logger.error(f"Error updating order {order_id}: not found")
            return None
        return OrderResponse.model_validate(orders[0])

    def _stage_item_updates(self, order_id: str, items: List[Dict[str, Any]]) -> List[OrderItem]:
        """
        Apply item updates without committing

        Raises:
            StoreError: If an item is not on this order; the session is rolled back
        """
        updated: List[OrderItem] = []
        for item in items:
            fields = {key: item[key] for key in ITEM_UPDATE_FIELDS if key in item}
            rows = self.item_repository.update(
                fields, {"id": item["id"], "order_id": order_id}, commit=False
            )
            if not rows:
                self.item_repository.rollback()
                raise StoreError(f"order item {item['id']} is not on order {order_id}")
            updated.extend(rows)
        return updated

    def update_items(self, order_id: str, items: List[Dict[str, Any]]) -> Optional[List[OrderItemResponse]]:
        """
        Update quantity/unit_price/total_price of existing line items

        Each update is scoped to both the item id and order_id, so an item
        belonging to another order counts as a failure. All updates share
        one transaction: if any fails, none are kept and None is returned.
        """
        try:
            updated = self._stage_item_updates(order_id, items)
            self.item_repository.commit()
        except StoreError as e:
            logger.error(f"Error updating items of order {order_id}: {e}")
            return None
        return [OrderItemResponse.model_validate(i) for i in updated]

    def update_with_items(
        self,
        order_id: str,
        fields: Dict[str, Any],
        items: List[Dict[str, Any]],
    ) -> Optional[OrderWithItems]:
        """
        Update the order header and existing line items in one transaction

        Used by the edit-sale form. If the header is missing or any item
        update fails, nothing is kept and None is returned. The returned
        aggregate carries only the updated items.
        """
        try:
            orders = self.repository.update(fields, {"id": order_id}, commit=False)
            if not orders:
                self.repository.rollback()
                logger.error(f"Error updating order {order_id}: not found")
                return None
            updated = self._stage_item_updates(order_id, items)
            self.repository.commit()
        except StoreError as e:
            logger.error(f"Error updating order {order_id}, nothing was saved: {e}")
            return None
        return self._aggregate(orders[0], updated)

    def add_items(self, order_id: str, items: List[Dict[str, Any]]) -> Optional[List[OrderItemResponse]]:
        """Append line items to an existing order"""
        try:
            new_items = self.item_repository.insert(
                [{**item, "order_id": order_id} for item in items]
            )
        except StoreError as e:
            logger.error(f"Error adding items to order {order_id}: {e}")
            return None
        return [OrderItemResponse.model_validate(i) for i in new_items]

    def remove_item(self, order_id: str, item_id: str) -> bool:
        """Remove one line item; False if it failed or the item is not on this order"""
        try:
            removed = self.item_repository.delete({"id": item_id, "order_id": order_id})
        except StoreError as e:
            logger.error(f"Error removing item {item_id} from order {order_id}: {e}")
            return False
        return removed > 0

    def delete(self, order_id: str) -> bool:
        """Delete an order; its line items go with it through ON DELETE CASCADE"""
        try:
            removed = self.repository.delete({"id": order_id})
        except StoreError as e:
            logger.error(f"Error deleting order {order_id}: {e}")
            return False
        return removed > 0
