"""
Repositories package
"""
from negocio.repositories.base import StoreError, TableRepository
from negocio.repositories.customer_repository import CustomerRepository
from negocio.repositories.product_repository import ProductRepository
from negocio.repositories.order_repository import OrderRepository, OrderItemRepository
from negocio.repositories.user_repository import UserRepository

__all__ = [
    "StoreError",
    "TableRepository",
    "CustomerRepository",
    "ProductRepository",
    "OrderRepository",
    "OrderItemRepository",
    "UserRepository"
]
