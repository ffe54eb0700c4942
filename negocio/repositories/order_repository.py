"""
Order Repository - Data Access Layer
"""
from negocio.models.order import Order, OrderItem
from negocio.repositories.base import TableRepository


class OrderRepository(TableRepository[Order]):
    """Record store access for the orders table"""

    model = Order


class OrderItemRepository(TableRepository[OrderItem]):
    """Record store access for the order_items table"""

    model = OrderItem
