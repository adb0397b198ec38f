"""Tests for the customer-facing API."""

from sqlmodel import select

from app.errors import OrderCreationFailed
from app.models.payment import Payment
from app.services import order_service
from app.utils.token import create_access_token

PLACE_ORDER = {
    "shipping": {"address": "Av. Amazonas 123", "city": "Quito", "postal_code": "170135"},
    "payment_method": "card",
}


class TestAuth:
    def test_register_and_login(self, client):
        response = client.post("/auth/register", json={
            "email": "new@example.com",
            "password": "pw123456",
            "confirm_password": "pw123456",
        })
        assert response.status_code == 200
        assert response.json()["role"] == "client"

        response = client.post("/auth/login", json={"email": "new@example.com", "password": "pw123456"})
        assert response.status_code == 200
        token = response.json()["access_token"]

        me = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["email"] == "new@example.com"
        assert me.json()["roles"] == ["client"]

    def test_duplicate_email(self, client, user):
        response = client.post("/auth/register", json={
            "email": user.email,
            "password": "pw123456",
            "confirm_password": "pw123456",
        })
        assert response.status_code == 400

    def test_wrong_password(self, client, user):
        response = client.post("/auth/login", json={"email": user.email, "password": "nope"})
        assert response.status_code == 401

    def test_disabled_user_is_locked_out(self, client, session, user, auth_headers):
        user.can_login = False
        session.add(user)
        session.commit()

        assert client.post("/auth/login", json={"email": user.email, "password": "secret123"}).status_code == 403
        assert client.get("/users/me", headers=auth_headers).status_code == 403

    def test_missing_token(self, client):
        assert client.get("/users/me").status_code == 401

    def test_admin_identity_has_both_roles(self, client, admin_headers):
        assert client.get("/users/me", headers=admin_headers).json()["roles"] == ["admin", "client"]


class TestCatalog:
    def test_lists_only_active_products(self, client, make_product):
        make_product(name="Visible")
        make_product(name="Hidden", is_active=False)

        data = client.get("/products").json()

        assert [p["name"] for p in data["results"]] == ["Visible"]
        assert data["results"][0]["price"] == "10.00"

    def test_search_and_category_filter(self, client, make_product, category):
        make_product(name="Blue lamp", category_id=category.id)
        make_product(name="Red lamp")
        make_product(name="Chair", category_id=category.id)

        data = client.get("/products", params={"search": "lamp", "category_id": category.id}).json()

        assert [p["name"] for p in data["results"]] == ["Blue lamp"]

    def test_inactive_product_detail_is_404(self, client, make_product):
        product = make_product(is_active=False)
        assert client.get(f"/products/{product.id}").status_code == 404

    def test_category_with_products(self, client, make_product, category):
        make_product(name="Lamp", category_id=category.id)

        listing = client.get("/categories").json()
        assert listing[0]["product_count"] == 1

        detail = client.get(f"/categories/{category.id}").json()
        assert [p["name"] for p in detail["products"]] == ["Lamp"]


class TestCart:
    def test_add_merges_quantities(self, client, auth_headers, make_product):
        product = make_product()

        client.post("/cart/add", json={"product_id": product.id, "quantity": 1}, headers=auth_headers)
        response = client.post("/cart/add", json={"product_id": product.id, "quantity": 2}, headers=auth_headers)

        assert response.json()["quantity"] == 3

        cart = client.get("/cart", headers=auth_headers).json()
        assert cart["total_items"] == 3
        assert cart["summary"]["subtotal"] == "30.00"
        assert cart["summary"]["grand_total"] == "33.60"

    def test_cannot_add_inactive_product(self, client, auth_headers, make_product):
        product = make_product(is_active=False)
        response = client.post("/cart/add", json={"product_id": product.id, "quantity": 1}, headers=auth_headers)
        assert response.status_code == 404

    def test_update_and_remove(self, client, auth_headers, make_product):
        product = make_product()
        item_id = client.post(
            "/cart/add", json={"product_id": product.id, "quantity": 1}, headers=auth_headers
        ).json()["item_id"]

        assert client.put(f"/cart/update/{item_id}", json={"quantity": 4}, headers=auth_headers).json()["quantity"] == 4
        assert client.delete(f"/cart/remove/{item_id}", headers=auth_headers).status_code == 200
        assert client.get("/cart", headers=auth_headers).json()["items"] == []

    def test_other_users_item_is_404(self, client, make_user, make_product, add_to_cart, auth_headers):
        other = make_user(email="other@example.com")
        item = add_to_cart(other, make_product(), 1)

        assert client.delete(f"/cart/remove/{item.id}", headers=auth_headers).status_code == 404


class TestCheckout:
    def test_summary(self, client, user, auth_headers, make_product, add_to_cart):
        add_to_cart(user, make_product(price="10.00"), 2)

        data = client.get("/checkout/summary", headers=auth_headers).json()

        assert data["items"][0]["line_total"] == "20.00"
        assert data["pricing"] == {
            "subtotal": "20.00",
            "tax_amount": "2.40",
            "shipping_cost": "0.00",
            "grand_total": "22.40",
        }

    def test_place_order(self, client, user, auth_headers, make_product, add_to_cart):
        add_to_cart(user, make_product(price="10.00", stock=5), 2)

        response = client.post("/checkout/place-order", json=PLACE_ORDER, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "confirmed"
        assert data["pricing"]["grand_total"] == "22.40"
        assert data["warnings"] == []
        assert data["needs_followup"] is False

        assert client.get("/cart", headers=auth_headers).json()["items"] == []

    def test_insufficient_stock_is_409(self, client, user, auth_headers, make_product, add_to_cart):
        product = make_product(stock=2)
        add_to_cart(user, product, 5)

        response = client.post("/checkout/place-order", json=PLACE_ORDER, headers=auth_headers)

        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["error"] == "InsufficientStock"
        assert (detail["product_id"], detail["requested"], detail["available"]) == (product.id, 5, 2)

    def test_empty_cart_is_400(self, client, auth_headers):
        response = client.post("/checkout/place-order", json=PLACE_ORDER, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "EmptyCart"

    def test_missing_address_is_400(self, client, user, auth_headers, make_product, add_to_cart):
        add_to_cart(user, make_product(), 1)

        response = client.post(
            "/checkout/place-order",
            json={"shipping": {"address": "", "city": ""}},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "MissingShippingAddress"

    def test_unknown_payment_method_is_422(self, client, auth_headers):
        response = client.post(
            "/checkout/place-order",
            json={**PLACE_ORDER, "payment_method": "bitcoin"},
            headers=auth_headers,
        )
        assert response.status_code == 422

    def test_critical_failure_is_500(self, client, user, auth_headers, make_product, add_to_cart, monkeypatch):
        add_to_cart(user, make_product(stock=5), 1)

        def failing_writer(*args, **kwargs):
            raise OrderCreationFailed("connection reset")

        monkeypatch.setattr(order_service, "create_order", failing_writer)

        response = client.post("/checkout/place-order", json=PLACE_ORDER, headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["detail"]["message"] == "Order could not be placed. Nothing was charged."

    def test_requires_login(self, client):
        assert client.post("/checkout/place-order", json=PLACE_ORDER).status_code == 401


class TestMyOrders:
    def _place(self, client, user, auth_headers, make_product, add_to_cart):
        add_to_cart(user, make_product(price="10.00", stock=5), 2)
        return client.post("/checkout/place-order", json=PLACE_ORDER, headers=auth_headers).json()

    def test_list_and_detail(self, client, user, auth_headers, make_product, add_to_cart):
        placed = self._place(client, user, auth_headers, make_product, add_to_cart)

        listing = client.get("/orders", headers=auth_headers).json()
        assert listing["total_items"] == 1
        assert listing["results"][0]["order_number"] == placed["order_number"]

        detail = client.get(f"/orders/{placed['order_id']}", headers=auth_headers).json()
        assert detail["total_amount"] == "22.40"
        assert detail["items"][0]["quantity"] == 2
        assert detail["payment"]["status"] == "completed"
        assert detail["shipment"]["status"] == "processing"
        assert "order_placed" in [e["event_type"] for e in detail["timeline"]]

    def test_invoice_and_download(self, client, user, auth_headers, make_product, add_to_cart):
        placed = self._place(client, user, auth_headers, make_product, add_to_cart)

        invoice = client.get(f"/orders/{placed['order_id']}/invoice", headers=auth_headers).json()
        assert invoice["total_amount"] == "22.40"
        assert invoice["status"] == "paid"

        pdf = client.get(f"/orders/{placed['order_id']}/invoice/download", headers=auth_headers)
        assert pdf.status_code == 200
        assert pdf.headers["content-type"] == "application/pdf"
        assert pdf.content.startswith(b"%PDF")

    def test_cannot_see_other_users_order(self, client, user, auth_headers, make_user, make_product, add_to_cart):
        placed = self._place(client, user, auth_headers, make_product, add_to_cart)

        other = make_user(email="other@example.com")
        headers = {"Authorization": f"Bearer {create_access_token(other)}"}

        assert client.get(f"/orders/{placed['order_id']}", headers=headers).status_code == 404


class TestPaymentMethods:
    CARD = {"type": "card", "card_brand": "Visa", "card_last_four": "4111 1111 1111 1234", "card_holder_name": "Ana Ruiz"}

    def test_first_method_becomes_default(self, client, auth_headers):
        first = client.post("/users/payment-methods", json=self.CARD, headers=auth_headers)
        second = client.post("/users/payment-methods", json={"type": "paypal"}, headers=auth_headers)

        assert first.status_code == 201
        assert first.json()["card_last_four"] == "1234"
        assert first.json()["is_default"] is True
        assert second.json()["is_default"] is False
        assert second.json()["card_last_four"] is None

        methods = client.get("/users/payment-methods", headers=auth_headers).json()
        assert [m["is_default"] for m in methods] == [True, False]

    def test_card_needs_last_four(self, client, auth_headers):
        response = client.post(
            "/users/payment-methods",
            json={"type": "card", "card_last_four": "12"},
            headers=auth_headers,
        )
        assert response.status_code == 422

    def test_set_default_clears_the_others(self, client, auth_headers):
        card = client.post("/users/payment-methods", json=self.CARD, headers=auth_headers).json()
        paypal = client.post("/users/payment-methods", json={"type": "paypal"}, headers=auth_headers).json()

        response = client.patch(f"/users/payment-methods/{paypal['id']}/default", headers=auth_headers)

        assert response.status_code == 200
        methods = client.get("/users/payment-methods", headers=auth_headers).json()
        assert [(m["id"], m["is_default"]) for m in methods] == [(paypal["id"], True), (card["id"], False)]

    def test_deleting_default_promotes_another(self, client, auth_headers):
        card = client.post("/users/payment-methods", json=self.CARD, headers=auth_headers).json()
        paypal = client.post("/users/payment-methods", json={"type": "paypal"}, headers=auth_headers).json()

        assert client.delete(f"/users/payment-methods/{card['id']}", headers=auth_headers).status_code == 200

        methods = client.get("/users/payment-methods", headers=auth_headers).json()
        assert [(m["id"], m["is_default"]) for m in methods] == [(paypal["id"], True)]

    def test_other_users_method_is_404(self, client, make_user, auth_headers):
        other = make_user(email="other@example.com")
        other_headers = {"Authorization": f"Bearer {create_access_token(other)}"}
        method = client.post("/users/payment-methods", json=self.CARD, headers=other_headers).json()

        assert client.delete(f"/users/payment-methods/{method['id']}", headers=auth_headers).status_code == 404
        assert client.patch(f"/users/payment-methods/{method['id']}/default", headers=auth_headers).status_code == 404
        assert client.get("/users/payment-methods", headers=auth_headers).json() == []

    def test_place_order_with_saved_method(self, client, session, user, auth_headers, make_product, add_to_cart):
        paypal = client.post("/users/payment-methods", json={"type": "paypal"}, headers=auth_headers).json()
        add_to_cart(user, make_product(price="10.00", stock=5), 1)

        response = client.post(
            "/checkout/place-order",
            json={**PLACE_ORDER, "payment_method_id": paypal["id"]},
            headers=auth_headers,
        )

        assert response.status_code == 200
        payment = session.exec(select(Payment).where(Payment.order_id == response.json()["order_id"])).one()
        assert payment.method == "paypal"

    def test_place_order_with_unknown_saved_method_is_404(self, client, user, auth_headers, make_product, add_to_cart):
        product = make_product(stock=5)
        add_to_cart(user, product, 1)

        response = client.post(
            "/checkout/place-order",
            json={**PLACE_ORDER, "payment_method_id": 999},
            headers=auth_headers,
        )

        assert response.status_code == 404
        assert client.get(f"/products/{product.id}").json()["stock"] == 5


class TestHealth:
    def test_health(self, client):
        data = client.get("/health").json()
        assert data["status"] == "ok"
        assert data["database"] == "ok"
