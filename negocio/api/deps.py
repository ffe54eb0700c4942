"""
Shared FastAPI dependencies: services and the signed-in user
"""
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from negocio.database import get_db
from negocio.exceptions import NotAuthenticated
from negocio.schemas.user import SessionUser
from negocio.services.auth_service import AuthService
from negocio.services.customer_service import CustomerService
from negocio.services.order_service import OrderService
from negocio.services.product_service import ProductService

SESSION_USER_KEY = "user_id"


def get_customer_service(db: Session = Depends(get_db)) -> CustomerService:
    """Dependency to get CustomerService instance"""
    return CustomerService(db)


def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    """Dependency to get ProductService instance"""
    return ProductService(db)


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    """Dependency to get OrderService instance"""
    return OrderService(db)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Dependency to get AuthService instance"""
    return AuthService(db)


def get_current_user(
    request: Request,
    auth: AuthService = Depends(get_auth_service)
) -> Optional[SessionUser]:
    """
    Resolve the signed-in user from the session cookie

    FastAPI caches dependencies per request, so the lookup runs once no
    matter how many handlers and sub-dependencies ask for it. The result is
    also left on ``request.state.user`` for the templates.
    """
    user_id = request.session.get(SESSION_USER_KEY)
    user = auth.get_user(user_id) if user_id else None
    if user_id and user is None:
        # account gone since sign-in
        request.session.clear()
    request.state.user = user
    return user


def require_user(user: Optional[SessionUser] = Depends(get_current_user)) -> SessionUser:
    """Guard for protected routers; anonymous requests go to the sign-in page"""
    if user is None:
        raise NotAuthenticated()
    return user
