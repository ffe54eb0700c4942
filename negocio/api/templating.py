"""
Jinja2 templates, filters and the render helper used by every page
"""
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

from negocio.config import settings
from negocio.schemas.order import OrderStatus, PaymentStatus
from negocio.services.listing import status_color, stock_badge

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATE_DIR))


def format_currency(amount: Optional[float]) -> str:
    return f"{settings.CURRENCY_SYMBOL}{(amount or 0):,.2f}"


def format_date(value: Optional[datetime], fmt: str = "%b %d, %Y") -> str:
    return value.strftime(fmt) if value else ""


templates.env.filters["currency"] = format_currency
templates.env.filters["date"] = format_date
templates.env.globals.update(
    stock_badge=lambda quantity: stock_badge(quantity, settings.LOW_STOCK_THRESHOLD),
    status_color=status_color,
    order_statuses=[s.value for s in OrderStatus],
    payment_statuses=[s.value for s in PaymentStatus],
    low_stock_threshold=settings.LOW_STOCK_THRESHOLD,
)


def render(request: Request, name: str, context: Optional[Dict[str, Any]] = None, status_code: int = 200):
    """Render a page with the signed-in user in its context"""
    data = {"user": getattr(request.state, "user", None)}
    data.update(context or {})
    return templates.TemplateResponse(request, name, data, status_code=status_code)
