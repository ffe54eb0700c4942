"""
Customer Service - accessor for the customers table
"""
import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from negocio.repositories.base import StoreError
from negocio.repositories.customer_repository import CustomerRepository
from negocio.repositories.order_repository import OrderRepository
from negocio.schemas.customer import CustomerResponse
from negocio.schemas.order import OrderResponse
from negocio.services.order_service import OrderService

logger = logging.getLogger(__name__)


class CustomerService:
    """Accessor layer for customers"""

    def __init__(self, db: Session):
        self.repository = CustomerRepository(db)
        self.order_repository = OrderRepository(db)
        self.orders = OrderService(db)

    def get_all(self) -> List[CustomerResponse]:
        """All customers ordered by name"""
        try:
            customers = self.repository.select(order_by="name")
        except StoreError as e:
            logger.error(f"Error fetching customers: {e}")
            return []
        return [CustomerResponse.model_validate(c) for c in customers]

    def get_by_id(self, customer_id: str) -> Optional[CustomerResponse]:
        try:
            customer = self.repository.select_one({"id": customer_id})
        except StoreError as e:
            logger.error(f"Error fetching customer {customer_id}: {e}")
            return None
        if not customer:
            return None
        return CustomerResponse.model_validate(customer)

    def create(self, fields: Dict[str, Any]) -> Optional[CustomerResponse]:
        try:
            customer = self.repository.insert([fields])[0]
        except StoreError as e:
            logger.error(f"Error creating customer: {e}")
            return None
        logger.info(f"✓ Customer {customer.id} created")
        return CustomerResponse.model_validate(customer)

    def update(self, customer_id: str, fields: Dict[str, Any]) -> Optional[CustomerResponse]:
        """Partial update; only the given fields change"""
        try:
            customers = self.repository.update(fields, {"id": customer_id})
        except StoreError as e:
            logger.error(f"Error updating customer {customer_id}: {e}")
            return None
        if not customers:
            logger.error(f"Error updating customer {customer_id}: not found")
            return None
        return CustomerResponse.model_validate(customers[0])

    def delete(self, customer_id: str) -> bool:
        """
        Delete a customer

        Their orders are kept for the sales history and detached in the same
        transaction (customer_id set to NULL); they show as "Unknown Customer".
        """
        try:
            detached = self.order_repository.update(
                {"customer_id": None}, {"customer_id": customer_id}, commit=False
            )
            removed = self.repository.delete({"id": customer_id}, commit=False)
            self.repository.commit()
        except StoreError as e:
            logger.error(f"Error deleting customer {customer_id}: {e}")
            return False
        if removed and detached:
            logger.info(f"Customer {customer_id} deleted, {len(detached)} order(s) detached")
        return removed > 0

    def get_orders(self, customer_id: str) -> List[OrderResponse]:
        return self.orders.get_by_customer_id(customer_id)
