"""
Services package
"""
from negocio.services.auth_service import AuthService
from negocio.services.customer_service import CustomerService
from negocio.services.order_service import OrderService
from negocio.services.product_service import ProductService

__all__ = ["AuthService", "CustomerService", "OrderService", "ProductService"]
