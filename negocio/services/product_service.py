"""
Product Service - accessor for the products table
"""
import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from negocio.repositories.base import StoreError
from negocio.repositories.product_repository import ProductRepository
from negocio.schemas.product import ProductResponse

logger = logging.getLogger(__name__)


class ProductService:
    """
    Accessor layer for products

    Price and stock bounds are enforced by ProductForm only; values passed
    here are written as given.
    """

    def __init__(self, db: Session):
        self.repository = ProductRepository(db)

    def get_all(self) -> List[ProductResponse]:
        """All products ordered by name"""
        try:
            products = self.repository.select(order_by="name")
        except StoreError as e:
            logger.error(f"Error fetching products: {e}")
            return []
        return [ProductResponse.model_validate(p) for p in products]

    def get_by_id(self, product_id: str) -> Optional[ProductResponse]:
        try:
            product = self.repository.select_one({"id": product_id})
        except StoreError as e:
            logger.error(f"Error fetching product {product_id}: {e}")
            return None
        if not product:
            return None
        return ProductResponse.model_validate(product)

    def get_price(self, product_id: str) -> Optional[float]:
        """Current price of a product, used to fill blank unit prices"""
        product = self.get_by_id(product_id)
        return product.price if product else None

    def get_low_stock(self, threshold: int) -> List[ProductResponse]:
        try:
            products = self.repository.get_low_stock(threshold)
        except StoreError as e:
            logger.error(f"Error fetching low stock products: {e}")
            return []
        return [ProductResponse.model_validate(p) for p in products]

    def create(self, fields: Dict[str, Any]) -> Optional[ProductResponse]:
        try:
            product = self.repository.insert([fields])[0]
        except StoreError as e:
            logger.error(f"Error creating product: {e}")
            return None
        logger.info(f"✓ Product {product.id} created")
        return ProductResponse.model_validate(product)

    def update(self, product_id: str, fields: Dict[str, Any]) -> Optional[ProductResponse]:
        """Partial update; only the given fields change"""
        try:
            products = self.repository.update(fields, {"id": product_id})
        except StoreError as e:
            logger.error(f"Error updating product {product_id}: {e}")
            return None
        if not products:
            logger.error(f"Error updating product {product_id}: not found")
            return None
        return ProductResponse.model_validate(products[0])

    def delete(self, product_id: str) -> bool:
        """Delete a product; fails while order items still reference it"""
        try:
            removed = self.repository.delete({"id": product_id})
        except StoreError as e:
            logger.error(f"Error deleting product {product_id}: {e}")
            return False
        return removed > 0
