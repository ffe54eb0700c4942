"""
User Repository - Data Access Layer
"""
from negocio.models.user import User
from negocio.repositories.base import TableRepository


class UserRepository(TableRepository[User]):
    """Record store access for the users table"""

    model = User
