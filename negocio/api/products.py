"""
Product pages
"""
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from negocio.api.deps import get_product_service, require_user
from negocio.api.templating import render
from negocio.config import settings
from negocio.schemas.forms import FormError, ProductForm
from negocio.schemas.product import ProductResponse
from negocio.services.listing import PRODUCT_LIST, filter_rows, product_summary, sort_query, sort_rows
from negocio.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"], dependencies=[Depends(require_user)])


def _get_product_or_404(service: ProductService, product_id: str) -> ProductResponse:
    product = service.get_by_id(product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with id={product_id} not found"
        )
    return product


def _form_values(name: str, description: str, price: str, sku: str, stock_quantity: str) -> dict:
    return {
        "name": name,
        "description": description,
        "price": price,
        "sku": sku,
        "stock_quantity": stock_quantity,
    }


@router.get("", response_class=HTMLResponse, summary="List products")
def list_products(
    request: Request,
    search: Optional[str] = Query(None, description="Matches name, description or SKU"),
    sort: Optional[str] = Query(None, description="name, price, stock_quantity or created_at"),
    order: Optional[str] = Query(None, description="asc or desc"),
    service: ProductService = Depends(get_product_service)
):
    products = service.get_all()
    sort, order = PRODUCT_LIST.resolve(sort, order)
    rows = sort_rows(filter_rows(products, search, PRODUCT_LIST.search_fields), sort, order, PRODUCT_LIST)
    return render(request, "products/list.html", {
        "products": rows,
        "stats": product_summary(products, settings.LOW_STOCK_THRESHOLD),
        "search": search or "",
        "sort": sort,
        "order": order,
        "sort_links": {f: sort_query(f, sort, order, search=search) for f in PRODUCT_LIST.sort_fields},
    })


@router.get("/new", response_class=HTMLResponse, summary="New product form")
def new_product(request: Request):
    return render(request, "products/form.html", {"product": None, "values": {}, "errors": []})


@router.post("/new", response_class=HTMLResponse, summary="Create product")
def create_product(
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    price: str = Form(""),
    sku: str = Form(""),
    stock_quantity: str = Form(""),
    service: ProductService = Depends(get_product_service)
):
    """
    Create a new product

    - **name**: required
    - **price**: required, must be a positive number
    - **stock_quantity**: required, whole number of at least 0
    """
    values = _form_values(name, description, price, sku, stock_quantity)
    try:
        form = ProductForm.parse(values)
    except FormError as e:
        return render(
            request, "products/form.html",
            {"product": None, "values": values, "errors": e.messages},
            status_code=422
        )

    product = service.create(form.to_fields())
    if not product:
        return render(
            request, "products/form.html",
            {"product": None, "values": values, "errors": ["An error occurred while creating the product"]},
            status_code=status.HTTP_400_BAD_REQUEST
        )
    return RedirectResponse("/products", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/{product_id}", response_class=HTMLResponse, summary="Product detail")
def view_product(
    request: Request,
    product_id: str,
    service: ProductService = Depends(get_product_service)
):
    product = _get_product_or_404(service, product_id)
    return render(request, "products/detail.html", {"product": product})


@router.get("/{product_id}/edit", response_class=HTMLResponse, summary="Edit product form")
def edit_product(
    request: Request,
    product_id: str,
    service: ProductService = Depends(get_product_service)
):
    product = _get_product_or_404(service, product_id)
    return render(request, "products/form.html", {
        "product": product,
        "values": product.model_dump(),
        "errors": [],
    })


@router.post("/{product_id}/edit", response_class=HTMLResponse, summary="Update product")
def update_product(
    request: Request,
    product_id: str,
    name: str = Form(""),
    description: str = Form(""),
    price: str = Form(""),
    sku: str = Form(""),
    stock_quantity: str = Form(""),
    service: ProductService = Depends(get_product_service)
):
    product = _get_product_or_404(service, product_id)
    values = _form_values(name, description, price, sku, stock_quantity)
    try:
        form = ProductForm.parse(values)
    except FormError as e:
        return render(
            request, "products/form.html",
            {"product": product, "values": values, "errors": e.messages},
            status_code=422
        )

    if not service.update(product_id, form.to_fields()):
        return render(
            request, "products/form.html",
            {"product": product, "values": values, "errors": ["An error occurred while updating the product"]},
            status_code=status.HTTP_400_BAD_REQUEST
        )
    return RedirectResponse(f"/products/{product_id}", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/{product_id}/delete", response_class=HTMLResponse, summary="Confirm product deletion")
def confirm_delete_product(
    request: Request,
    product_id: str,
    service: ProductService = Depends(get_product_service)
):
    product = _get_product_or_404(service, product_id)
    return render(request, "products/delete.html", {"product": product, "error": None})


@router.post("/{product_id}/delete", response_class=HTMLResponse, summary="Delete product")
def delete_product(
    request: Request,
    product_id: str,
    service: ProductService = Depends(get_product_service)
):
    product = _get_product_or_404(service, product_id)
    if not service.delete(product_id):
        # most often the product still appears on an order
        return render(
            request, "products/delete.html",
            {"product": product, "error": "An error occurred while deleting the product"},
            status_code=status.HTTP_400_BAD_REQUEST
        )
    return RedirectResponse("/products", status_code=status.HTTP_303_SEE_OTHER)
