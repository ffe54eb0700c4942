"""
List page helpers: in-memory search, sort, badges and summary counts

Every list page fetches the whole table through its accessor and narrows it
here. This is linear in the table size on each request.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
from urllib.parse import urlencode

ASC = "asc"
DESC = "desc"

# how a sortable field is compared
TEXT = "text"
NUMBER = "number"
DATE = "date"


@dataclass(frozen=True)
class ListConfig:
    """Searchable fields, sortable fields and defaults of one list page"""
    search_fields: Tuple[str, ...]
    sort_fields: Dict[str, str]
    default_sort: str
    default_order: str = ASC

    def resolve(self, sort: Optional[str], order: Optional[str]) -> Tuple[str, str]:
        """Unknown sort fields and orders fall back to the page defaults"""
        field = sort if sort in self.sort_fields else self.default_sort
        direction = order if order in (ASC, DESC) else self.default_order
        return field, direction


CUSTOMER_LIST = ListConfig(
    search_fields=("name", "email", "phone"),
    sort_fields={"name": TEXT, "email": TEXT, "created_at": DATE},
    default_sort="name",
)

PRODUCT_LIST = ListConfig(
    search_fields=("name", "description", "sku"),
    sort_fields={"name": TEXT, "price": NUMBER, "stock_quantity": NUMBER, "created_at": DATE},
    default_sort="name",
)

SALES_LIST = ListConfig(
    search_fields=("id", "customer_name", "status", "payment_status"),
    sort_fields={
        "order_date": DATE,
        "status": TEXT,
        "payment_status": TEXT,
        "total_amount": NUMBER,
        "customer_name": TEXT,
    },
    default_sort="order_date",
    default_order=DESC,
)


def filter_rows(rows: Iterable[Any], search: Optional[str], fields: Sequence[str]) -> List[Any]:
    """Rows where any of the fields contains the search text, ignoring case"""
    rows = list(rows)
    if not search:
        return rows
    needle = search.casefold()
    return [
        row for row in rows
        if any(
            needle in str(value).casefold()
            for value in (getattr(row, field, None) for field in fields)
            if value is not None
        )
    ]


def filter_by_status(rows: Iterable[Any], status: Optional[str]) -> List[Any]:
    rows = list(rows)
    if not status:
        return rows
    return [row for row in rows if row.status == status]


def _sort_key(kind: str, value: Any):
    if kind == TEXT:
        return (value or "").casefold()
    if kind == DATE:
        return value.timestamp() if isinstance(value, datetime) else float("-inf")
    return value if value is not None else 0


def sort_rows(rows: Iterable[Any], sort: Optional[str], order: Optional[str], config: ListConfig) -> List[Any]:
    """
    Single-key stable sort

    Text compares case-insensitively with missing values as "", numbers and
    dates compare numerically. ``desc`` is the exact reverse comparator of
    ``asc``; equal keys keep their incoming order either way.
    """
    field, direction = config.resolve(sort, order)
    kind = config.sort_fields[field]
    return sorted(
        rows,
        key=lambda row: _sort_key(kind, getattr(row, field, None)),
        reverse=direction == DESC,
    )


def next_sort_order(current_sort: str, current_order: str, field: str) -> str:
    """Order a column header link should request when clicked"""
    return DESC if field == current_sort and current_order == ASC else ASC


def sort_query(field: str, current_sort: str, current_order: str, **params: Optional[str]) -> str:
    """Query string for a column header link, keeping search/status params"""
    query = {key: value for key, value in params.items() if value}
    query["sort"] = field
    query["order"] = next_sort_order(current_sort, current_order, field)
    return "?" + urlencode(query)


def stock_badge(quantity: int, threshold: int = 10) -> str:
    """Badge variant for a stock level"""
    if quantity <= 0:
        return "destructive"
    if quantity <= threshold:
        return "secondary"
    return "default"


STATUS_COLORS = {
    "completed": "green",
    "paid": "green",
    "pending": "yellow",
    "partially_paid": "yellow",
    "cancelled": "red",
    "unpaid": "red",
    "shipped": "blue",
    "processing": "blue",
}


def status_color(status: Optional[str]) -> str:
    """Badge color for an order status or payment status value"""
    return STATUS_COLORS.get((status or "").lower(), "gray")


def product_summary(products: Sequence[Any], threshold: int = 10) -> Dict[str, int]:
    """
    Stock counts for the product list and dashboard

    ``low_stock`` includes empty products; ``running_low`` only counts those
    with some stock left.
    """
    return {
        "total": len(products),
        "low_stock": sum(1 for p in products if p.stock_quantity <= threshold),
        "running_low": sum(1 for p in products if 0 < p.stock_quantity <= threshold),
        "out_of_stock": sum(1 for p in products if p.stock_quantity <= 0),
    }


def sales_summary(orders: Sequence[Any]) -> Dict[str, Any]:
    return {
        "total": len(orders),
        "pending": sum(1 for o in orders if o.status == "pending"),
        "completed": sum(1 for o in orders if o.status == "completed"),
        "unpaid": sum(1 for o in orders if o.payment_status == "unpaid"),
        "total_sales": round(sum(o.total_amount for o in orders), 2),
    }


def customer_summary(orders: Sequence[Any]) -> Dict[str, Any]:
    """Spend figures shown on a customer's detail page"""
    total_spent = round(sum(o.total_amount for o in orders), 2)
    return {
        "order_count": len(orders),
        "total_spent": total_spent,
        "average_order_value": round(total_spent / len(orders), 2) if orders else 0.0,
        "last_order_date": max((o.order_date for o in orders), default=None),
    }


def customer_stats(customers: Sequence[Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """Customer count, customers added in the current calendar month and their share in percent"""
    now = now or datetime.now(timezone.utc)
    new_this_month = sum(
        1 for c in customers
        if c.created_at is not None
        and (c.created_at.year, c.created_at.month) == (now.year, now.month)
    )
    return {
        "total": len(customers),
        "new_this_month": new_this_month,
        "growth_rate": round(new_this_month / len(customers) * 100, 1) if customers else 0.0,
    }


def recent_customers(customers: Iterable[Any], limit: int = 5) -> List[Any]:
    """Newest customers by created_at"""
    return sorted(
        customers,
        key=lambda c: _sort_key(DATE, c.created_at),
        reverse=True,
    )[:limit]
