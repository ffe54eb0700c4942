"""
SQLAlchemy Product model
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, Text

from negocio.database import Base
from negocio.models.common import new_id, utcnow


class Product(Base):
    """Product database model"""

    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False)
    sku = Column(String(100), nullable=True, unique=True)
    stock_quantity = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # price and stock bounds are checked by the forms, not the table

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', price={self.price}, stock={self.stock_quantity})>"
