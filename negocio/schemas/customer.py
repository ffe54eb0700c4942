"""
Pydantic schemas for customer responses
"""
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class CustomerResponse(BaseModel):
    """Schema for customer response"""
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
