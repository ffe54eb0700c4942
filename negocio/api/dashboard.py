"""
Dashboard page
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from negocio.api.deps import get_customer_service, get_order_service, get_product_service, require_user
from negocio.api.templating import render
from negocio.config import settings
from negocio.services.customer_service import CustomerService
from negocio.services.listing import customer_stats, product_summary, recent_customers
from negocio.services.order_service import OrderService
from negocio.services.product_service import ProductService

router = APIRouter(tags=["dashboard"], dependencies=[Depends(require_user)])


@router.get("/", response_class=HTMLResponse, summary="Dashboard")
def dashboard(
    request: Request,
    customers: CustomerService = Depends(get_customer_service),
    products: ProductService = Depends(get_product_service),
    orders: OrderService = Depends(get_order_service)
):
    """Entity counts, newest orders and customers, and products running low"""
    all_customers = customers.get_all()
    all_products = products.get_all()
    return render(request, "dashboard.html", {
        "customer_stats": customer_stats(all_customers),
        "recent_customers": recent_customers(all_customers, settings.RECENT_LIMIT),
        "product_stats": product_summary(all_products, settings.LOW_STOCK_THRESHOLD),
        "recent_orders": orders.get_all(limit=settings.RECENT_LIMIT),
        "low_stock": products.get_low_stock(settings.LOW_STOCK_THRESHOLD)[:settings.RECENT_LIMIT],
    })
