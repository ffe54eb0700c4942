from datetime import datetime, timedelta
from types import SimpleNamespace

from negocio.services.listing import (
    CUSTOMER_LIST,
    PRODUCT_LIST,
    SALES_LIST,
    customer_stats,
    customer_summary,
    filter_by_status,
    filter_rows,
    next_sort_order,
    product_summary,
    recent_customers,
    sales_summary,
    sort_query,
    sort_rows,
    status_color,
    stock_badge,
)

NOW = datetime(2024, 5, 1, 12, 0)


def _order(id, customer_name, status, payment_status, total_amount, days_ago):
    return SimpleNamespace(
        id=id,
        customer_name=customer_name,
        status=status,
        payment_status=payment_status,
        total_amount=total_amount,
        order_date=NOW - timedelta(days=days_ago),
    )


ORDERS = [
    _order("a1", "zed", "pending", "unpaid", 10.0, 3),
    _order("b2", "Amy", "completed", "paid", 30.0, 1),
    _order("c3", "bob", "pending", "paid", 20.0, 2),
]

PRODUCTS = [
    SimpleNamespace(name="Gadget", description="Shiny", sku="GAD-1", price=25.0, stock_quantity=50),
    SimpleNamespace(name="Widget", description=None, sku="WID-1", price=10.0, stock_quantity=5),
    SimpleNamespace(name="doohickey", description="small part", sku=None, price=3.5, stock_quantity=0),
]


class TestFilter:
    """Case-insensitive substring search"""

    def test_empty_search_keeps_everything(self):
        assert filter_rows(PRODUCTS, "", PRODUCT_LIST.search_fields) == PRODUCTS
        assert filter_rows(PRODUCTS, None, PRODUCT_LIST.search_fields) == PRODUCTS

    def test_matches_any_field(self):
        assert [p.name for p in filter_rows(PRODUCTS, "wid", PRODUCT_LIST.search_fields)] == ["Widget"]
        assert [p.name for p in filter_rows(PRODUCTS, "SHINY", PRODUCT_LIST.search_fields)] == ["Gadget"]

    def test_missing_values_never_match(self):
        assert filter_rows(PRODUCTS, "none", PRODUCT_LIST.search_fields) == []

    def test_sales_search_by_customer_and_status(self):
        assert [o.id for o in filter_rows(ORDERS, "amy", SALES_LIST.search_fields)] == ["b2"]
        assert [o.id for o in filter_rows(ORDERS, "pend", SALES_LIST.search_fields)] == ["a1", "c3"]

    def test_status_filter_is_exact(self):
        assert [o.id for o in filter_by_status(ORDERS, "pending")] == ["a1", "c3"]
        assert filter_by_status(ORDERS, "pend") == []
        assert filter_by_status(ORDERS, "") == ORDERS


class TestSort:
    """Single-key stable sort"""

    def test_text_sort_ignores_case(self):
        rows = sort_rows(PRODUCTS, "name", "asc", PRODUCT_LIST)
        assert [p.name for p in rows] == ["doohickey", "Gadget", "Widget"]

    def test_numeric_sort(self):
        rows = sort_rows(PRODUCTS, "price", "desc", PRODUCT_LIST)
        assert [p.price for p in rows] == [25.0, 10.0, 3.5]

    def test_sales_default_is_newest_first(self):
        rows = sort_rows(ORDERS, None, None, SALES_LIST)
        assert [o.id for o in rows] == ["b2", "c3", "a1"]

    def test_unknown_field_falls_back_to_default(self):
        rows = sort_rows(ORDERS, "bogus", "sideways", SALES_LIST)
        assert [o.id for o in rows] == ["b2", "c3", "a1"]

    def test_ties_keep_incoming_order(self):
        asc = sort_rows(ORDERS, "status", "asc", SALES_LIST)
        desc = sort_rows(ORDERS, "status", "desc", SALES_LIST)
        assert [o.id for o in asc] == ["b2", "a1", "c3"]
        assert [o.id for o in desc] == ["a1", "c3", "b2"]

    def test_missing_text_sorts_first(self):
        rows = PRODUCTS + [SimpleNamespace(name=None, price=1.0)]
        assert sort_rows(rows, "name", "asc", PRODUCT_LIST)[0].name is None

    def test_resolve_defaults(self):
        assert CUSTOMER_LIST.resolve(None, None) == ("name", "asc")
        assert SALES_LIST.resolve("total_amount", None) == ("total_amount", "desc")

    def test_header_links_toggle_order(self):
        assert next_sort_order("name", "asc", "name") == "desc"
        assert next_sort_order("name", "desc", "name") == "asc"
        assert next_sort_order("name", "asc", "price") == "asc"
        assert sort_query("name", "name", "asc", search="wid", status=None) == "?search=wid&sort=name&order=desc"


class TestBadges:
    """Stock and status badge variants"""

    def test_stock_badge(self):
        assert stock_badge(0) == "destructive"
        assert stock_badge(-2) == "destructive"
        assert stock_badge(5) == "secondary"
        assert stock_badge(10) == "secondary"
        assert stock_badge(11) == "default"
        assert stock_badge(11, threshold=20) == "secondary"

    def test_status_color(self):
        assert status_color("completed") == "green"
        assert status_color("PAID") == "green"
        assert status_color("pending") == "yellow"
        assert status_color("cancelled") == "red"
        assert status_color("shipped") == "blue"
        assert status_color("on hold") == "gray"
        assert status_color(None) == "gray"


class TestSummaries:
    """Page summary counts"""

    def test_sales_summary(self):
        assert sales_summary(ORDERS) == {
            "total": 3,
            "pending": 2,
            "completed": 1,
            "unpaid": 1,
            "total_sales": 60.0,
        }

    def test_product_summary(self):
        stats = product_summary(PRODUCTS, threshold=10)
        assert stats == {"total": 3, "low_stock": 2, "running_low": 1, "out_of_stock": 1}

    def test_customer_summary(self):
        summary = customer_summary(ORDERS)
        assert summary["order_count"] == 3
        assert summary["total_spent"] == 60.0
        assert summary["average_order_value"] == 20.0
        assert summary["last_order_date"] == NOW - timedelta(days=1)

    def test_customer_summary_without_orders(self):
        assert customer_summary([]) == {
            "order_count": 0,
            "total_spent": 0,
            "average_order_value": 0.0,
            "last_order_date": None,
        }


CUSTOMERS = [
    SimpleNamespace(name="March", created_at=datetime(2024, 3, 20)),
    SimpleNamespace(name="May", created_at=NOW - timedelta(hours=2)),
    SimpleNamespace(name="Last May", created_at=datetime(2023, 5, 3)),
    SimpleNamespace(name="Undated", created_at=None),
]


class TestCustomerStats:
    """New-this-month count and recent customers"""

    def test_counts_current_calendar_month_only(self):
        assert customer_stats(CUSTOMERS, now=NOW) == {
            "total": 4,
            "new_this_month": 1,
            "growth_rate": 25.0,
        }

    def test_no_customers(self):
        assert customer_stats([], now=NOW) == {"total": 0, "new_this_month": 0, "growth_rate": 0.0}

    def test_recent_customers_newest_first(self):
        assert [c.name for c in recent_customers(CUSTOMERS, limit=3)] == ["May", "March", "Last May"]

    def test_recent_customers_limit(self):
        assert recent_customers(CUSTOMERS, limit=0) == []
        assert len(recent_customers(CUSTOMERS)) == 4
