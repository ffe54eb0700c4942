"""
Pydantic schema for the signed-in user
"""
from pydantic import BaseModel, ConfigDict


class SessionUser(BaseModel):
    """The user resolved for the current request"""
    id: str
    email: str

    model_config = ConfigDict(from_attributes=True)
