"""
Pydantic schemas for order responses
"""
from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import List, Optional
from datetime import datetime


class OrderStatus(str, Enum):
    """Known order status values; the column itself is free text"""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    SHIPPED = "shipped"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Known payment status values; the column itself is free text"""
    UNPAID = "unpaid"
    PAID = "paid"
    PARTIALLY_PAID = "partially_paid"


class OrderResponse(BaseModel):
    """Schema for order header response"""
    id: str
    customer_id: Optional[str] = None
    customer_name: str
    order_date: datetime
    total_amount: float
    status: str
    payment_status: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderItemResponse(BaseModel):
    """Schema for order line item response"""
    id: str
    order_id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    total_price: float
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderWithItems(BaseModel):
    """An order header together with its line items"""
    order: OrderResponse
    items: List[OrderItemResponse]
