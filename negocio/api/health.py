"""
Health check endpoint
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from negocio.config import settings
from negocio.database import Base, get_db
from negocio.repositories.base import StoreError
from negocio.repositories.user_repository import UserRepository

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """
    Report whether the dashboard can serve pages

    Healthy means the record store answers, every table the models declare
    exists, and at least one operator account can sign in.
    """
    missing_tables = sorted(Base.metadata.tables)
    operators = 0
    try:
        existing = set(inspect(db.get_bind()).get_table_names())
        missing_tables = [name for name in missing_tables if name not in existing]
        operators = UserRepository(db).count()
        db_status = "healthy"
    except (SQLAlchemyError, StoreError) as e:
        db_status = f"unhealthy: {e}"

    healthy = db_status == "healthy" and not missing_tables and operators > 0
    return {
        "service": settings.SERVICE_NAME,
        "status": "healthy" if healthy else "unhealthy",
        "database": db_status,
        "missing_tables": missing_tables,
        "operator_accounts": operators,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
