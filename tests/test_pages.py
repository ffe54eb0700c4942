from datetime import datetime, timezone

import pytest

from negocio.repositories.order_repository import OrderItemRepository, OrderRepository
from negocio.services.customer_service import CustomerService
from negocio.services.order_service import OrderService
from negocio.services.product_service import ProductService


class TestAuth:
    """Session sign-in and the guard on every dashboard page"""

    @pytest.mark.parametrize("path", ["/", "/customers", "/products/new", "/sales", "/sales/anything"])
    def test_anonymous_is_sent_to_sign_in(self, client, path):
        response = client.get(path, follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/sign-in"

    def test_sign_in_page(self, client):
        response = client.get("/sign-in")
        assert response.status_code == 200
        assert 'name="password"' in response.text

    def test_wrong_password(self, client, operator):
        response = client.post("/sign-in", data={"email": operator.email, "password": "wrong"})
        assert response.status_code == 401
        assert "Invalid email or password" in response.text

    def test_sign_in_then_out(self, signed_in):
        assert signed_in.get("/", follow_redirects=False).status_code == 200

        response = signed_in.post("/sign-out", follow_redirects=False)
        assert response.status_code == 303
        assert signed_in.get("/", follow_redirects=False).status_code == 303

    def test_signed_in_user_skips_sign_in_page(self, signed_in):
        response = signed_in.get("/sign-in", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/"

    def test_health_is_public(self, client, operator):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["missing_tables"] == []
        assert body["operator_accounts"] == 1

    def test_health_without_operator_account(self, client):
        body = client.get("/health").json()
        assert body["status"] == "unhealthy"
        assert body["database"] == "healthy"
        assert body["operator_accounts"] == 0


class TestDashboard:
    """Landing page"""

    def test_counts_and_low_stock(self, signed_in, customer, products):
        response = signed_in.get("/")
        assert response.status_code == 200
        assert "Widget" in response.text
        assert "Doohickey" in response.text

    def test_low_stock_card_skips_empty_products(self, signed_in, products):
        text = signed_in.get("/").text
        assert 'data-stat="running-low">1<' in text

    def test_customer_stats(self, signed_in, customer, other_customer, db):
        CustomerService(db).update(customer.id, {"created_at": datetime(2020, 1, 1, tzinfo=timezone.utc)})

        text = signed_in.get("/").text
        assert "+1 new this month (50.0%)" in text
        assert "Recent Customers" in text
        assert text.index("Bob Builder") < text.index("Ada Lovelace")


class TestCustomerPages:
    """Customer list and forms"""

    def test_list_and_search(self, signed_in, customer, other_customer):
        response = signed_in.get("/customers", params={"search": "bob"})
        assert response.status_code == 200
        assert "Bob Builder" in response.text
        assert f'href="/customers/{other_customer.id}/edit"' in response.text
        assert f'href="/customers/{customer.id}/edit"' not in response.text

    def test_new_this_month_and_recent(self, signed_in, customer, other_customer):
        text = signed_in.get("/customers").text
        assert 'data-stat="new-this-month">2<' in text
        assert "Recent Customers" in text

    def test_create(self, signed_in, fresh):
        response = signed_in.post(
            "/customers/new",
            data={"name": "Cleo", "email": "cleo@example.com", "phone": "", "address": ""},
            follow_redirects=False,
        )
        assert response.status_code == 303
        assert [c.name for c in CustomerService(fresh()).get_all()] == ["Cleo"]

    def test_create_without_name_is_rejected(self, signed_in, fresh):
        response = signed_in.post("/customers/new", data={"name": "", "email": "x@example.com"})
        assert response.status_code == 422
        assert "Name is required" in response.text
        assert 'value="x@example.com"' in response.text
        assert CustomerService(fresh()).get_all() == []

    def test_duplicate_email_shows_store_error(self, signed_in, customer):
        response = signed_in.post("/customers/new", data={"name": "Ada 2", "email": "ada@example.com"})
        assert response.status_code == 400
        assert "An error occurred while creating the customer" in response.text

    def test_edit(self, signed_in, customer, fresh):
        response = signed_in.post(
            f"/customers/{customer.id}/edit",
            data={"name": "Ada King", "email": "ada@example.com"},
            follow_redirects=False,
        )
        assert response.status_code == 303
        assert CustomerService(fresh()).get_by_id(customer.id).name == "Ada King"

    def test_missing_customer(self, signed_in):
        assert signed_in.get("/customers/missing").status_code == 404

    def test_delete_keeps_orders(self, signed_in, customer, products, db, fresh):
        sale = OrderService(db).create({"customer_id": customer.id, "total_amount": 25.0}, [])

        response = signed_in.post(f"/customers/{customer.id}/delete", follow_redirects=False)

        assert response.status_code == 303
        kept = OrderService(fresh()).get_by_id(sale.order.id)
        assert kept.order.customer_name == "Unknown Customer"
        assert "Unknown Customer" in signed_in.get(f"/sales/{sale.order.id}").text


class TestProductPages:
    """Product list and forms"""

    def test_stock_badges(self, signed_in, products):
        response = signed_in.get("/products")
        assert response.status_code == 200
        assert 'data-badge="secondary">5<' in response.text
        assert 'data-badge="destructive">0<' in response.text
        assert 'data-badge="default">50<' in response.text

    def test_sort_by_price(self, signed_in, products):
        text = signed_in.get("/products", params={"sort": "price", "order": "desc"}).text
        assert text.index("Gadget") < text.index("Widget") < text.index("Doohickey")

    def test_negative_price_is_rejected(self, signed_in, fresh):
        response = signed_in.post(
            "/products/new",
            data={"name": "Bad", "price": "-1", "stock_quantity": "1"},
        )
        assert response.status_code == 422
        assert "Valid price is required" in response.text
        assert ProductService(fresh()).get_all() == []

    def test_create(self, signed_in, fresh):
        response = signed_in.post(
            "/products/new",
            data={"name": "Sprocket", "price": "4.20", "stock_quantity": "7", "sku": "SPR-1"},
            follow_redirects=False,
        )
        assert response.status_code == 303
        product = ProductService(fresh()).get_all()[0]
        assert (product.name, product.price, product.stock_quantity) == ("Sprocket", 4.2, 7)

    def test_delete_product_on_an_order_fails(self, signed_in, customer, products, db):
        OrderService(db).create(
            {"customer_id": customer.id, "total_amount": 10.0},
            [{"product_id": products[1].id, "quantity": 1, "unit_price": 10.0, "total_price": 10.0}],
        )
        response = signed_in.post(f"/products/{products[1].id}/delete")
        assert response.status_code == 400
        assert "An error occurred while deleting the product" in response.text


class TestSalesPages:
    """Sales list, new sale and order detail pages"""

    def test_new_sale(self, signed_in, customer, products, fresh):
        gadget, widget, _ = products
        response = signed_in.post(
            "/sales/new",
            data={
                "customer_id": customer.id,
                "order_date": "2024-03-15",
                "total_amount": "",
                "status": "",
                "payment_status": "",
                "notes": "",
                "product_id": [gadget.id, widget.id, ""],
                "quantity": ["2", "3", "1"],
                "unit_price": ["", "9", ""],
            },
            follow_redirects=False,
        )

        assert response.status_code == 303
        order_id = response.headers["location"].rsplit("/", 1)[-1]
        sale = OrderService(fresh()).get_by_id(order_id)
        assert sale.order.total_amount == 77.0
        assert sale.order.status == "pending"
        assert sale.order.order_date.date().isoformat() == "2024-03-15"
        assert sorted((i.quantity, i.unit_price) for i in sale.items) == [(2, 25.0), (3, 9.0)]

    def test_new_sale_without_customer(self, signed_in, products, db):
        response = signed_in.post(
            "/sales/new",
            data={"customer_id": "", "product_id": [products[0].id], "quantity": ["1"], "unit_price": [""]},
        )
        assert response.status_code == 422
        assert "Customer is required" in response.text
        assert OrderRepository(db).count() == 0

    def test_new_sale_with_unknown_product_saves_nothing(self, signed_in, customer, db):
        response = signed_in.post(
            "/sales/new",
            data={"customer_id": customer.id, "product_id": ["ghost"], "quantity": ["1"], "unit_price": ["5"]},
        )
        assert response.status_code == 400
        assert OrderRepository(db).count() == 0
        assert OrderItemRepository(db).count() == 0

    def test_list_filter_by_status(self, signed_in, customer, db):
        service = OrderService(db)
        service.create({"customer_id": customer.id, "total_amount": 11.0, "status": "pending"}, [])
        service.create({"customer_id": customer.id, "total_amount": 22.0, "status": "completed"}, [])

        text = signed_in.get("/sales", params={"status": "completed"}).text
        assert "$22.00" in text
        assert "$11.00" not in text

    def test_edit_sale_and_items(self, signed_in, customer, products, db, fresh):
        sale = OrderService(db).create(
            {"customer_id": customer.id, "total_amount": 25.0},
            [{"product_id": products[0].id, "quantity": 1, "unit_price": 25.0, "total_price": 25.0}],
        )
        item = sale.items[0]

        response = signed_in.post(
            f"/sales/{sale.order.id}/edit",
            data={
                "customer_id": customer.id,
                "total_amount": "40",
                "status": "completed",
                "payment_status": "paid",
                "item_id": [item.id],
                "item_quantity": ["2"],
                "item_unit_price": ["20"],
            },
            follow_redirects=False,
        )

        assert response.status_code == 303
        updated = OrderService(fresh()).get_by_id(sale.order.id)
        assert (updated.order.status, updated.order.payment_status, updated.order.total_amount) == (
            "completed", "paid", 40.0
        )
        assert (updated.items[0].quantity, updated.items[0].total_price) == (2, 40.0)

    def test_failed_item_edit_keeps_header(self, signed_in, customer, products, db, fresh):
        service = OrderService(db)
        sale = service.create(
            {"customer_id": customer.id, "total_amount": 25.0},
            [{"product_id": products[0].id, "quantity": 1, "unit_price": 25.0, "total_price": 25.0}],
        )
        other = service.create(
            {"customer_id": customer.id, "total_amount": 10.0},
            [{"product_id": products[1].id, "quantity": 1, "unit_price": 10.0, "total_price": 10.0}],
        )

        response = signed_in.post(
            f"/sales/{sale.order.id}/edit",
            data={
                "customer_id": customer.id,
                "total_amount": "25",
                "status": "cancelled",
                "payment_status": "paid",
                "item_id": [other.items[0].id],
                "item_quantity": ["4"],
                "item_unit_price": ["10"],
            },
        )

        assert response.status_code == 400
        assert "An error occurred while updating the sale" in response.text
        stored = OrderService(fresh()).get_by_id(sale.order.id).order
        assert (stored.status, stored.payment_status) == ("pending", "unpaid")
        assert OrderService(fresh()).get_by_id(other.order.id).items[0].quantity == 1

    def test_add_and_remove_item(self, signed_in, customer, products, db, fresh):
        sale = OrderService(db).create({"customer_id": customer.id, "total_amount": 0}, [])

        response = signed_in.post(
            f"/sales/{sale.order.id}/items",
            data={"product_id": products[1].id, "quantity": "2", "unit_price": ""},
            follow_redirects=False,
        )
        assert response.status_code == 303
        items = OrderService(fresh()).get_by_id(sale.order.id).items
        assert [(i.product_name, i.total_price) for i in items] == [("Widget", 20.0)]

        response = signed_in.post(f"/sales/{sale.order.id}/items/{items[0].id}/delete", follow_redirects=False)
        assert response.status_code == 303
        assert OrderService(fresh()).get_by_id(sale.order.id).items == []

    def test_remove_unknown_item(self, signed_in, customer, db):
        sale = OrderService(db).create({"customer_id": customer.id, "total_amount": 0}, [])
        response = signed_in.post(f"/sales/{sale.order.id}/items/nope/delete")
        assert response.status_code == 404

    def test_delete_sale(self, signed_in, customer, products, db, fresh):
        sale = OrderService(db).create(
            {"customer_id": customer.id, "total_amount": 25.0},
            [{"product_id": products[0].id, "quantity": 1, "unit_price": 25.0, "total_price": 25.0}],
        )
        assert signed_in.get(f"/sales/{sale.order.id}/delete").status_code == 200

        response = signed_in.post(f"/sales/{sale.order.id}/delete", follow_redirects=False)

        assert response.status_code == 303
        assert OrderService(fresh()).get_by_id(sale.order.id) is None
        assert OrderItemRepository(fresh()).count() == 0

    def test_sale_pages_render(self, signed_in, customer, products, db):
        sale = OrderService(db).create(
            {"customer_id": customer.id, "total_amount": 25.0},
            [{"product_id": products[0].id, "quantity": 1, "unit_price": 25.0, "total_price": 25.0}],
        )
        for path in ("/sales", "/sales/new", f"/sales/{sale.order.id}", f"/sales/{sale.order.id}/edit"):
            assert signed_in.get(path).status_code == 200, path
