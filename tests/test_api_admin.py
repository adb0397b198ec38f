"""Tests for the back-office API."""

import pytest
from sqlmodel import select

from app.models.notifications import Notification
from app.models.order import Order
from app.models.product import Product
from app.notifications import OrderEvent, subscribe

PLACE_ORDER = {"shipping": {"address": "Av. Amazonas 123", "city": "Quito"}}


@pytest.fixture
def placed_order(client, user, auth_headers, make_product, add_to_cart):
    add_to_cart(user, make_product(price="10.00", stock=5), 2)
    return client.post("/checkout/place-order", json=PLACE_ORDER, headers=auth_headers).json()


class TestAdminGuard:
    @pytest.mark.parametrize("path", [
        "/admin/products",
        "/admin/orders",
        "/admin/inventory",
        "/admin/users",
        "/admin/dashboard",
        "/admin/notifications",
    ])
    def test_client_is_forbidden(self, client, auth_headers, path):
        assert client.get(path, headers=auth_headers).status_code == 403


class TestAdminProducts:
    def test_create_update_toggle(self, client, admin_headers, category):
        created = client.post("/admin/products", json={
            "name": "Desk",
            "price": "149.90",
            "stock": 3,
            "category_id": category.id,
        }, headers=admin_headers)
        assert created.status_code == 201
        product_id = created.json()["id"]
        assert created.json()["price"] == "149.90"
        assert created.json()["slug"] == "desk"

        updated = client.put(f"/admin/products/{product_id}", json={"price": "139.90"}, headers=admin_headers)
        assert updated.json()["price"] == "139.90"
        assert updated.json()["stock"] == 3

        toggled = client.patch(f"/admin/products/{product_id}/toggle-active", headers=admin_headers)
        assert toggled.json()["is_active"] is False

    def test_unknown_category_rejected(self, client, admin_headers):
        response = client.post("/admin/products", json={"name": "Desk", "price": "1.00", "category_id": 42},
                               headers=admin_headers)
        assert response.status_code == 400

    def test_non_positive_price_rejected(self, client, admin_headers):
        response = client.post("/admin/products", json={"name": "Desk", "price": "0"}, headers=admin_headers)
        assert response.status_code == 422

    def test_delete_unused_product(self, client, session, admin_headers, make_product):
        product = make_product()

        response = client.delete(f"/admin/products/{product.id}", headers=admin_headers)

        assert response.json()["archived"] is False
        session.expire_all()
        assert session.get(Product, product.id) is None

    def test_delete_ordered_product_archives_it(self, client, session, admin_headers, placed_order):
        product_id = session.exec(select(Product.id)).first()

        response = client.delete(f"/admin/products/{product_id}", headers=admin_headers)

        assert response.json()["archived"] is True
        session.expire_all()
        assert session.get(Product, product_id).is_active is False


class TestAdminCategories:
    def test_crud(self, client, admin_headers):
        created = client.post("/admin/categories", json={"name": "Lighting"}, headers=admin_headers)
        assert created.status_code == 201
        category_id = created.json()["id"]

        assert client.post("/admin/categories", json={"name": "Lighting"}, headers=admin_headers).status_code == 400

        renamed = client.put(f"/admin/categories/{category_id}", json={"name": "Lamps"}, headers=admin_headers)
        assert renamed.json()["name"] == "Lamps"

        assert client.delete(f"/admin/categories/{category_id}", headers=admin_headers).status_code == 200
        assert client.get("/admin/categories", headers=admin_headers).json() == []


class TestAdminOrders:
    def test_list_with_filters(self, client, admin_headers, placed_order):
        data = client.get("/admin/orders", params={"status": "confirmed"}, headers=admin_headers).json()
        assert data["total_items"] == 1
        assert data["results"][0]["order_number"] == placed_order["order_number"]

        data = client.get("/admin/orders", params={"search": placed_order["order_number"][:10]},
                          headers=admin_headers).json()
        assert data["total_items"] == 1

        data = client.get("/admin/orders", params={"status": "shipped"}, headers=admin_headers).json()
        assert data["total_items"] == 0

    def test_detail(self, client, admin_headers, user, placed_order):
        data = client.get(f"/admin/orders/{placed_order['order_id']}", headers=admin_headers).json()
        assert data["customer"]["email"] == user.email
        assert data["invoice"]["total_amount"] == "22.40"

    def test_status_update_syncs_shipment_and_notifies(self, client, admin_headers, placed_order):
        received = []
        subscribe(OrderEvent.ORDER_STATUS_CHANGED, received.append)
        order_id = placed_order["order_id"]

        for status in ("processing", "shipped"):
            response = client.patch(f"/admin/orders/{order_id}/status", json={"status": status},
                                    headers=admin_headers)
            assert response.status_code == 200

        assert [p["to"] for p in received] == ["processing", "shipped"]

        shipments = client.get("/admin/shipments", headers=admin_headers).json()["results"]
        assert shipments[0]["status"] == "shipped"

    def test_invalid_transition_is_400(self, client, admin_headers, placed_order):
        response = client.patch(f"/admin/orders/{placed_order['order_id']}/status",
                                json={"status": "delivered"}, headers=admin_headers)
        assert response.status_code == 400

    def test_cancelled_is_terminal(self, client, admin_headers, placed_order):
        order_id = placed_order["order_id"]
        client.patch(f"/admin/orders/{order_id}/status", json={"status": "cancelled"}, headers=admin_headers)

        response = client.patch(f"/admin/orders/{order_id}/status", json={"status": "processing"},
                                headers=admin_headers)
        assert response.status_code == 400


class TestAdminShipments:
    def test_delivery_completes_order(self, client, session, admin_headers, placed_order):
        shipment = client.get("/admin/shipments", headers=admin_headers).json()["results"][0]

        for status in ("shipped", "delivered"):
            response = client.patch(f"/admin/shipments/{shipment['id']}/status", json={"status": status},
                                    headers=admin_headers)
            assert response.status_code == 200

        assert response.json()["order_status"] == "delivered"
        session.expire_all()
        assert session.get(Order, placed_order["order_id"]).status == "delivered"

    def test_update_tracking(self, client, admin_headers, placed_order):
        shipment = client.get("/admin/shipments", headers=admin_headers).json()["results"][0]

        response = client.patch(f"/admin/shipments/{shipment['id']}",
                                json={"tracking_number": "EC123", "carrier": "Servientrega"},
                                headers=admin_headers)

        assert response.json()["tracking_number"] == "EC123"
        assert response.json()["carrier"] == "Servientrega"

    def test_invalid_transition_is_400(self, client, admin_headers, placed_order):
        shipment = client.get("/admin/shipments", headers=admin_headers).json()["results"][0]
        response = client.patch(f"/admin/shipments/{shipment['id']}/status", json={"status": "returned"},
                                headers=admin_headers)
        assert response.status_code == 400


class TestAdminInventory:
    def test_summary_and_filter(self, client, admin_headers, make_product):
        make_product(name="Plenty", stock=50)
        make_product(name="Few", stock=2)
        make_product(name="None", stock=0)

        summary = client.get("/admin/inventory/summary", headers=admin_headers).json()
        assert (summary["total_products"], summary["low_stock"], summary["out_of_stock"]) == (3, 1, 1)

        low = client.get("/admin/inventory", params={"status": "low_stock"}, headers=admin_headers).json()
        assert [p["name"] for p in low] == ["Few"]

    def test_low_stock_update_notifies_admin(self, client, session, admin_headers, make_product):
        product = make_product(stock=50)

        response = client.patch(f"/admin/inventory/{product.id}", json={"stock": 3}, headers=admin_headers)

        assert response.json()["new_stock"] == 3
        assert response.json()["status"] == "LOW_STOCK"
        notification = session.exec(select(Notification)).one()
        assert notification.related_id == product.id

        listed = client.get("/admin/notifications", headers=admin_headers).json()["results"]
        assert listed[0]["id"] == notification.id

        client.patch(f"/admin/notifications/{notification.id}/read", headers=admin_headers)
        unread = client.get("/admin/notifications", params={"unread": True}, headers=admin_headers).json()
        assert unread["total_items"] == 0

    def test_negative_stock_rejected(self, client, admin_headers, make_product):
        product = make_product()
        response = client.patch(f"/admin/inventory/{product.id}", json={"stock": -1}, headers=admin_headers)
        assert response.status_code == 422


class TestAdminUsers:
    def test_list_includes_spend(self, client, admin_headers, user, placed_order):
        results = client.get("/admin/users", headers=admin_headers).json()["results"]
        shopper = next(u for u in results if u["email"] == user.email)

        assert shopper["total_orders"] == 1
        assert shopper["total_spent"] == "22.40"

    def test_user_orders(self, client, admin_headers, user, placed_order):
        data = client.get(f"/admin/users/{user.id}/orders", headers=admin_headers).json()
        assert [o["id"] for o in data["orders"]] == [placed_order["order_id"]]

    def test_role_and_login_access(self, client, admin_headers, user, auth_headers):
        assert client.patch(f"/admin/users/{user.id}/role", json={"role": "admin"},
                            headers=admin_headers).json()["role"] == "admin"
        assert client.patch(f"/admin/users/{user.id}/role", json={"role": "root"},
                            headers=admin_headers).status_code == 422

        client.patch(f"/admin/users/{user.id}/login-access", json={"can_login": False}, headers=admin_headers)
        assert client.get("/users/me", headers=auth_headers).status_code == 403

    def test_admin_cannot_lock_themselves_out(self, client, admin, admin_headers):
        response = client.patch(f"/admin/users/{admin.id}/login-access", json={"can_login": False},
                                headers=admin_headers)
        assert response.status_code == 400


class TestDashboard:
    def test_totals(self, client, admin_headers, placed_order):
        data = client.get("/admin/dashboard", headers=admin_headers).json()

        assert data["total_orders"] == 1
        assert data["pending_orders"] == 1
        assert data["total_revenue"] == "22.40"
        assert data["low_stock_products"] == 1
        assert data["recent_orders"][0]["order_number"] == placed_order["order_number"]
