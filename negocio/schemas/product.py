"""
Pydantic schemas for product responses
"""
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class ProductResponse(BaseModel):
    """Schema for product response"""
    id: str
    name: str
    description: Optional[str] = None
    price: float
    sku: Optional[str] = None
    stock_quantity: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
