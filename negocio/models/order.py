"""
SQLAlchemy Order and OrderItem models
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship

from negocio.database import Base
from negocio.models.common import new_id, utcnow


class Order(Base):
    """Order header database model"""

    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=new_id)
    customer_id = Column(String(36), ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)
    order_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    total_amount = Column(Float, nullable=False, default=0)
    status = Column(String(50), nullable=False, default="pending", index=True)
    payment_status = Column(String(50), nullable=False, default="unpaid")
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    customer = relationship("Customer", lazy="joined")

    def __repr__(self):
        return f"<Order(id={self.id}, customer_id={self.customer_id}, status='{self.status}')>"

    @property
    def customer_name(self) -> str:
        return self.customer.name if self.customer else "Unknown Customer"


class OrderItem(Base):
    """Order line item database model"""

    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, default=new_id)
    # items go with their order through the store's cascade, never app code
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    unit_price = Column(Float, nullable=False)
    total_price = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    product = relationship("Product", lazy="joined")

    def __repr__(self):
        return f"<OrderItem(id={self.id}, order_id={self.order_id}, product_id={self.product_id}, quantity={self.quantity})>"

    @property
    def product_name(self) -> str:
        return self.product.name if self.product else "Unknown Product"
