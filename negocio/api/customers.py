"""
Customer pages
"""
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from negocio.api.deps import get_customer_service, require_user
from negocio.api.templating import render
from negocio.config import settings
from negocio.schemas.customer import CustomerResponse
from negocio.schemas.forms import CustomerForm, FormError
from negocio.services.customer_service import CustomerService
from negocio.services.listing import (
    CUSTOMER_LIST,
    customer_stats,
    customer_summary,
    filter_rows,
    recent_customers,
    sort_query,
    sort_rows,
)

router = APIRouter(prefix="/customers", tags=["customers"], dependencies=[Depends(require_user)])


def _get_customer_or_404(service: CustomerService, customer_id: str) -> CustomerResponse:
    customer = service.get_by_id(customer_id)
    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Customer with id={customer_id} not found"
        )
    return customer


def _form_values(name: str, email: str, phone: str, address: str) -> dict:
    return {"name": name, "email": email, "phone": phone, "address": address}


@router.get("", response_class=HTMLResponse, summary="List customers")
def list_customers(
    request: Request,
    search: Optional[str] = Query(None, description="Matches name, email or phone"),
    sort: Optional[str] = Query(None, description="name, email or created_at"),
    order: Optional[str] = Query(None, description="asc or desc"),
    service: CustomerService = Depends(get_customer_service)
):
    customers = service.get_all()
    sort, order = CUSTOMER_LIST.resolve(sort, order)
    rows = sort_rows(filter_rows(customers, search, CUSTOMER_LIST.search_fields), sort, order, CUSTOMER_LIST)
    return render(request, "customers/list.html", {
        "customers": rows,
        "stats": customer_stats(customers),
        "recent_customers": recent_customers(customers, settings.RECENT_LIMIT),
        "search": search or "",
        "sort": sort,
        "order": order,
        "sort_links": {f: sort_query(f, sort, order, search=search) for f in CUSTOMER_LIST.sort_fields},
    })


@router.get("/new", response_class=HTMLResponse, summary="New customer form")
def new_customer(request: Request):
    return render(request, "customers/form.html", {"customer": None, "values": {}, "errors": []})


@router.post("/new", response_class=HTMLResponse, summary="Create customer")
def create_customer(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    address: str = Form(""),
    service: CustomerService = Depends(get_customer_service)
):
    values = _form_values(name, email, phone, address)
    try:
        form = CustomerForm.parse(values)
    except FormError as e:
        return render(
            request, "customers/form.html",
            {"customer": None, "values": values, "errors": e.messages},
            status_code=422
        )

    customer = service.create(form.to_fields())
    if not customer:
        return render(
            request, "customers/form.html",
            {"customer": None, "values": values, "errors": ["An error occurred while creating the customer"]},
            status_code=status.HTTP_400_BAD_REQUEST
        )
    return RedirectResponse("/customers", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/{customer_id}", response_class=HTMLResponse, summary="Customer detail")
def view_customer(
    request: Request,
    customer_id: str,
    service: CustomerService = Depends(get_customer_service)
):
    customer = _get_customer_or_404(service, customer_id)
    orders = service.get_orders(customer_id)
    return render(request, "customers/detail.html", {
        "customer": customer,
        "orders": orders,
        "summary": customer_summary(orders),
    })


@router.get("/{customer_id}/edit", response_class=HTMLResponse, summary="Edit customer form")
def edit_customer(
    request: Request,
    customer_id: str,
    service: CustomerService = Depends(get_customer_service)
):
    customer = _get_customer_or_404(service, customer_id)
    return render(request, "customers/form.html", {
        "customer": customer,
        "values": customer.model_dump(),
        "errors": [],
    })


@router.post("/{customer_id}/edit", response_class=HTMLResponse, summary="Update customer")
def update_customer(
    request: Request,
    customer_id: str,
    name: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    address: str = Form(""),
    service: CustomerService = Depends(get_customer_service)
):
    customer = _get_customer_or_404(service, customer_id)
    values = _form_values(name, email, phone, address)
    try:
        form = CustomerForm.parse(values)
    except FormError as e:
        return render(
            request, "customers/form.html",
            {"customer": customer, "values": values, "errors": e.messages},
            status_code=422
        )

    if not service.update(customer_id, form.to_fields()):
        return render(
            request, "customers/form.html",
            {"customer": customer, "values": values, "errors": ["An error occurred while updating the customer"]},
            status_code=status.HTTP_400_BAD_REQUEST
        )
    return RedirectResponse(f"/customers/{customer_id}", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/{customer_id}/delete", response_class=HTMLResponse, summary="Confirm customer deletion")
def confirm_delete_customer(
    request: Request,
    customer_id: str,
    service: CustomerService = Depends(get_customer_service)
):
    customer = _get_customer_or_404(service, customer_id)
    return render(request, "customers/delete.html", {
        "customer": customer,
        "order_count": len(service.get_orders(customer_id)),
        "error": None,
    })


@router.post("/{customer_id}/delete", response_class=HTMLResponse, summary="Delete customer")
def delete_customer(
    request: Request,
    customer_id: str,
    service: CustomerService = Depends(get_customer_service)
):
    customer = _get_customer_or_404(service, customer_id)
    if not service.delete(customer_id):
        return render(
            request, "customers/delete.html",
            {
                "customer": customer,
                "order_count": len(service.get_orders(customer_id)),
                "error": "An error occurred while deleting the customer",
            },
            status_code=status.HTTP_400_BAD_REQUEST
        )
    return RedirectResponse("/customers", status_code=status.HTTP_303_SEE_OTHER)
