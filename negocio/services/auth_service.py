"""
Auth Service - dashboard sign-in
"""
import logging
from typing import Optional
from sqlalchemy.orm import Session

from negocio.repositories.base import StoreError
from negocio.repositories.user_repository import UserRepository
from negocio.schemas.user import SessionUser
from werkzeug.security import generate_password_hash

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class AuthService:
    """Looks up dashboard users and checks their passwords"""

    def __init__(self, db: Session):
        self.repository = UserRepository(db)

    def authenticate(self, email: str, password: str) -> Optional[SessionUser]:
        """The matching user, or None for an unknown email or wrong password"""
        try:
            user = self.repository.select_one({"email": normalize_email(email)})
        except StoreError as e:
            logger.error(f"Error fetching user for sign-in: {e}")
            return None
        if not user or not user.check_password(password or ""):
            logger.warning(f"Failed sign-in for {normalize_email(email)!r}")
            return None
        return SessionUser.model_validate(user)

    def get_user(self, user_id: str) -> Optional[SessionUser]:
        try:
            user = self.repository.select_one({"id": user_id})
        except StoreError as e:
            logger.error(f"Error fetching user {user_id}: {e}")
            return None
        return SessionUser.model_validate(user) if user else None

    def ensure_user(self, email: str, password: str) -> Optional[SessionUser]:
        """Create the account if it does not exist yet; an existing password is left alone"""
        try:
            user = self.repository.select_one({"email": normalize_email(email)})
            if not user:
                user = self.repository.insert([{
                    "email": normalize_email(email),
                    "password_hash": generate_password_hash(password)
                }])[0]
                logger.info(f"✓ Created dashboard user {user.email}")
        except StoreError as e:
            logger.error(f"Error creating user {email}: {e}")
            return None
        return SessionUser.model_validate(user)
