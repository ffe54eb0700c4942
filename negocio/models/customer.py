"""
SQLAlchemy Customer model
"""
from sqlalchemy import Column, String, Text, DateTime

from negocio.database import Base
from negocio.models.common import new_id, utcnow


class Customer(Base):
    """Customer database model"""

    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=True, unique=True)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<Customer(id={self.id}, name='{self.name}')>"
