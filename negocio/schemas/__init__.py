"""
Schemas package
"""
from negocio.schemas.customer import CustomerResponse
from negocio.schemas.product import ProductResponse
from negocio.schemas.order import (
    OrderStatus,
    PaymentStatus,
    OrderResponse,
    OrderItemResponse,
    OrderWithItems
)
from negocio.schemas.user import SessionUser
from negocio.schemas.forms import (
    FormError,
    CustomerForm,
    ProductForm,
    OrderForm,
    OrderItemForm,
    OrderItemUpdateForm
)

__all__ = [
    "CustomerResponse",
    "ProductResponse",
    "OrderStatus",
    "PaymentStatus",
    "OrderResponse",
    "OrderItemResponse",
    "OrderWithItems",
    "SessionUser",
    "FormError",
    "CustomerForm",
    "ProductForm",
    "OrderForm",
    "OrderItemForm",
    "OrderItemUpdateForm"
]
