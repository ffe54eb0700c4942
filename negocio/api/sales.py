"""
Sales (order) pages
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from negocio.api.deps import get_customer_service, get_order_service, get_product_service, require_user
from negocio.api.templating import render
from negocio.schemas.forms import FormError, OrderForm, OrderItemForm, OrderItemUpdateForm
from negocio.schemas.order import OrderWithItems
from negocio.services.customer_service import CustomerService
from negocio.services.listing import SALES_LIST, filter_by_status, filter_rows, sales_summary, sort_query, sort_rows
from negocio.services.order_service import OrderService
from negocio.services.product_service import ProductService

router = APIRouter(prefix="/sales", tags=["sales"], dependencies=[Depends(require_user)])

# blank line-item rows offered on the new-sale form
NEW_SALE_ROWS = 3


def _get_order_or_404(service: OrderService, order_id: str) -> OrderWithItems:
    order = service.get_by_id(order_id)
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Order with id={order_id} not found"
        )
    return order


def _header_values(customer_id, order_date, total_amount, status_value, payment_status, notes) -> dict:
    return {
        "customer_id": customer_id,
        "order_date": order_date,
        "total_amount": total_amount,
        "status": status_value,
        "payment_status": payment_status,
        "notes": notes,
    }


def _render_new(request, customers, products, values, rows, errors, status_code):
    return render(request, "sales/new.html", {
        "customers": customers.get_all(),
        "products": products.get_all(),
        "values": values,
        "rows": rows + [{}] * max(NEW_SALE_ROWS - len(rows), 0),
        "errors": errors,
    }, status_code=status_code)


def _render_detail(request, sale: OrderWithItems, products: ProductService, errors=None, status_code=200):
    return render(request, "sales/detail.html", {
        "sale": sale,
        "products": products.get_all(),
        "errors": errors or [],
    }, status_code=status_code)


@router.get("", response_class=HTMLResponse, summary="List sales")
def list_sales(
    request: Request,
    search: Optional[str] = Query(None, description="Matches id, customer name, status or payment status"),
    sort: Optional[str] = Query(None, description="order_date, status, payment_status, total_amount or customer_name"),
    order: Optional[str] = Query(None, description="asc or desc"),
    status_filter: Optional[str] = Query(None, alias="status", description="Exact order status"),
    service: OrderService = Depends(get_order_service)
):
    orders = service.get_all()
    sort, order = SALES_LIST.resolve(sort, order)
    rows = filter_by_status(filter_rows(orders, search, SALES_LIST.search_fields), status_filter)
    rows = sort_rows(rows, sort, order, SALES_LIST)
    return render(request, "sales/list.html", {
        "orders": rows,
        "stats": sales_summary(orders),
        "search": search or "",
        "status_filter": status_filter or "",
        "sort": sort,
        "order": order,
        "sort_links": {
            f: sort_query(f, sort, order, search=search, status=status_filter)
            for f in SALES_LIST.sort_fields
        },
    })


@router.get("/new", response_class=HTMLResponse, summary="New sale form")
def new_sale(
    request: Request,
    customer_id: Optional[str] = Query(None, description="Preselected customer"),
    customers: CustomerService = Depends(get_customer_service),
    products: ProductService = Depends(get_product_service)
):
    return _render_new(request, customers, products, {"customer_id": customer_id or ""}, [], [], 200)


@router.post("/new", response_class=HTMLResponse, summary="Create sale")
def create_sale(
    request: Request,
    customer_id: str = Form(""),
    order_date: str = Form(""),
    total_amount: str = Form(""),
    status_value: str = Form("", alias="status"),
    payment_status: str = Form(""),
    notes: str = Form(""),
    product_id: List[str] = Form([]),
    quantity: List[str] = Form([]),
    unit_price: List[str] = Form([]),
    service: OrderService = Depends(get_order_service),
    customers: CustomerService = Depends(get_customer_service),
    products: ProductService = Depends(get_product_service)
):
    """
    Create an order with its line items

    Process:
    1. Validate the header and every non-empty line item row
    2. Fill blank unit prices from the product's current price
    3. Compute each total_price, and total_amount when left blank
    4. Store header and items in one transaction
    """
    values = _header_values(customer_id, order_date, total_amount, status_value, payment_status, notes)
    rows = OrderForm.collect_items(product_id, quantity, unit_price)
    try:
        form = OrderForm.parse({**values, "items": rows})
        items = form.line_items(products.get_price)
    except FormError as e:
        return _render_new(request, customers, products, values, rows, e.messages, 422)

    sale = service.create(form.header_fields(items), items)
    if not sale:
        return _render_new(
            request, customers, products, values, rows,
            ["An error occurred while creating the sale"], status.HTTP_400_BAD_REQUEST
        )
    return RedirectResponse(f"/sales/{sale.order.id}", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/{order_id}", response_class=HTMLResponse, summary="Sale detail")
def view_sale(
    request: Request,
    order_id: str,
    service: OrderService = Depends(get_order_service),
    products: ProductService = Depends(get_product_service)
):
    return _render_detail(request, _get_order_or_404(service, order_id), products)


@router.get("/{order_id}/edit", response_class=HTMLResponse, summary="Edit sale form")
def edit_sale(
    request: Request,
    order_id: str,
    service: OrderService = Depends(get_order_service),
    customers: CustomerService = Depends(get_customer_service)
):
    sale = _get_order_or_404(service, order_id)
    values = sale.order.model_dump()
    values["order_date"] = sale.order.order_date.strftime("%Y-%m-%d")
    return render(request, "sales/edit.html", {
        "sale": sale,
        "customers": customers.get_all(),
        "values": values,
        "errors": [],
    })


@router.post("/{order_id}/edit", response_class=HTMLResponse, summary="Update sale")
def update_sale(
    request: Request,
    order_id: str,
    customer_id: str = Form(""),
    order_date: str = Form(""),
    total_amount: str = Form(""),
    status_value: str = Form("", alias="status"),
    payment_status: str = Form(""),
    notes: str = Form(""),
    item_id: List[str] = Form([]),
    item_quantity: List[str] = Form([]),
    item_unit_price: List[str] = Form([]),
    service: OrderService = Depends(get_order_service),
    customers: CustomerService = Depends(get_customer_service)
):
    """
    Update the order header and the quantity/unit price of existing items

    Header and items are saved together or not at all. The order total is
    taken from the form as entered; it is not recalculated from the items.
    """
    sale = _get_order_or_404(service, order_id)
    values = _header_values(customer_id, order_date, total_amount, status_value, payment_status, notes)

    def _failed(errors, status_code):
        return render(request, "sales/edit.html", {
            "sale": sale,
            "customers": customers.get_all(),
            "values": values,
            "errors": errors,
        }, status_code=status_code)

    try:
        form = OrderForm.parse(values)
        updates = OrderItemUpdateForm.parse_many(item_id, item_quantity, item_unit_price)
    except FormError as e:
        return _failed(e.messages, 422)

    if service.update_with_items(order_id, form.header_fields(), [u.to_fields() for u in updates]) is None:
        return _failed(["An error occurred while updating the sale"], status.HTTP_400_BAD_REQUEST)
    return RedirectResponse(f"/sales/{order_id}", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/{order_id}/items", response_class=HTMLResponse, summary="Add a line item")
def add_sale_item(
    request: Request,
    order_id: str,
    product_id: str = Form(""),
    quantity: str = Form("1"),
    unit_price: str = Form(""),
    service: OrderService = Depends(get_order_service),
    products: ProductService = Depends(get_product_service)
):
    """Append one line item; the order total is left as it is"""
    sale = _get_order_or_404(service, order_id)
    try:
        line = OrderItemForm.parse({
            "product_id": product_id,
            "quantity": quantity,
            "unit_price": unit_price,
        }).to_line(products.get_price)
    except FormError as e:
        return _render_detail(request, sale, products, e.messages, 422)

    if service.add_items(order_id, [line]) is None:
        return _render_detail(
            request, sale, products, ["An error occurred while adding the item"], status.HTTP_400_BAD_REQUEST
        )
    return RedirectResponse(f"/sales/{order_id}", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/{order_id}/items/{item_id}/delete", summary="Remove a line item")
def remove_sale_item(
    order_id: str,
    item_id: str,
    service: OrderService = Depends(get_order_service)
):
    if not service.remove_item(order_id, item_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Item with id={item_id} not found on order {order_id}"
        )
    return RedirectResponse(f"/sales/{order_id}", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/{order_id}/delete", response_class=HTMLResponse, summary="Confirm sale deletion")
def confirm_delete_sale(
    request: Request,
    order_id: str,
    service: OrderService = Depends(get_order_service)
):
    sale = _get_order_or_404(service, order_id)
    return render(request, "sales/delete.html", {"sale": sale, "error": None})


@router.post("/{order_id}/delete", response_class=HTMLResponse, summary="Delete sale")
def delete_sale(
    request: Request,
    order_id: str,
    service: OrderService = Depends(get_order_service)
):
    sale = _get_order_or_404(service, order_id)
    if not service.delete(order_id):
        return render(
            request, "sales/delete.html",
            {"sale": sale, "error": "An error occurred while deleting the sale"},
            status_code=status.HTTP_400_BAD_REQUEST
        )
    return RedirectResponse("/sales", status_code=status.HTTP_303_SEE_OTHER)
