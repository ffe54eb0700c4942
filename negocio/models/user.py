"""
SQLAlchemy User model for dashboard sign-in
"""
from sqlalchemy import Column, String, DateTime
from werkzeug.security import check_password_hash

from negocio.database import Base
from negocio.models.common import new_id, utcnow


class User(Base):
    """Dashboard operator account"""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
