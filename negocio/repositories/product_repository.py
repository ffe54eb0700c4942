"""
Product Repository - Data Access Layer
"""
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from negocio.models.product import Product
from negocio.repositories.base import TableRepository


class ProductRepository(TableRepository[Product]):
    """Record store access for the products table"""

    model = Product

    def get_low_stock(self, threshold: int) -> List[Product]:
        """Products at or below the threshold, emptiest first"""
        try:
            return self.db.query(Product).filter(
                Product.stock_quantity <= threshold
            ).order_by(Product.stock_quantity, Product.name).all()
        except SQLAlchemyError as e:
            raise self._fail("select", e)
