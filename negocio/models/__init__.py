"""
Models package
"""
from negocio.models.customer import Customer
from negocio.models.product import Product
from negocio.models.order import Order, OrderItem
from negocio.models.user import User

__all__ = ["Customer", "Product", "Order", "OrderItem", "User"]
