"""Integration tests for the Storefront HTTP API via TestClient."""

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from protean.utils.globals import current_domain

from storefront.api import auth_router, order_router, product_router, register_error_handlers, user_router
from storefront.domain import storefront
from storefront.product.product import Product
from storefront.user.promotion import PromoteToAdmin

ADDRESS = {"street": "1 Main St", "city": "Springfield", "state": "IL", "postal_code": "62701", "country": "US"}


@pytest.fixture()
def client():
    app = FastAPI()

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        with storefront.domain_context():
            return await call_next(request)

    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(product_router)
    app.include_router(order_router)
    register_error_handlers(app)
    return TestClient(app)


def _register(client, email="jane@example.com", name="Jane Doe", password="secret123"):
    response = client.post("/auth/register", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201
    return response.json()


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def user(client):
    return _register(client)


@pytest.fixture()
def admin(client):
    data = _register(client, email="admin@example.com", name="Admin User")
    current_domain.process(PromoteToAdmin(user_id=data["id"]), asynchronous=False)
    return data


def _create_product(client, admin, **overrides):
    body = {
        "name": "Desk Lamp",
        "description": "Adjustable LED desk lamp",
        "price": 40.0,
        "category": "Home",
        "stock": 5,
    }
    body.update(overrides)
    response = client.post("/products", json=body, headers=_auth(admin["token"]))
    assert response.status_code == 201
    return response.json()


def _place_order(client, token, items):
    return client.post(
        "/orders",
        json={"items": items, "shipping_address": ADDRESS, "payment_method": "card"},
        headers=_auth(token),
    )


class TestAuthEndpoints:
    def test_register_returns_profile_and_token(self, client):
        data = _register(client, email="Mixed@Example.com")
        assert data["email"] == "mixed@example.com"
        assert data["role"] == "user"
        assert data["token"]

    def test_duplicate_registration(self, client, user):
        response = client.post(
            "/auth/register", json={"name": "Jane", "email": "jane@example.com", "password": "secret123"}
        )
        assert response.status_code == 409
        assert response.json()["message"] == "User already exists"

    def test_short_password(self, client):
        response = client.post("/auth/register", json={"name": "Jane", "email": "j@example.com", "password": "abc"})
        assert response.status_code == 400

    def test_login(self, client, user):
        response = client.post("/auth/login", json={"email": "jane@example.com", "password": "secret123"})
        assert response.status_code == 200
        assert response.json()["id"] == user["id"]

    def test_bad_login(self, client, user):
        response = client.post("/auth/login", json={"email": "jane@example.com", "password": "nope-nope"})
        assert response.status_code == 401
        assert response.json() == {"message": "Invalid email or password", "error_type": "Unauthorized"}

    def test_me(self, client, user):
        response = client.get("/auth/me", headers=_auth(user["token"]))
        assert response.status_code == 200
        assert response.json()["email"] == "jane@example.com"

    def test_missing_token(self, client):
        response = client.get("/auth/me")
        assert response.status_code == 401
        assert response.json()["message"] == "Not authorized, no token"

    def test_forged_token(self, client):
        response = client.get("/auth/me", headers=_auth("aaa.bbb.ccc"))
        assert response.status_code == 401


class TestUserEndpoints:
    def test_update_profile(self, client, user):
        response = client.put(
            "/users/profile",
            json={"bio": "Hello", "email_preferences": {"newsletter": False, "promotions": True, "product_updates": True}},
            headers=_auth(user["token"]),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["bio"] == "Hello"
        assert data["email_preferences"]["newsletter"] is False

    def test_address_book(self, client, user):
        headers = _auth(user["token"])
        body = {k: v for k, v in ADDRESS.items()}
        first = client.post("/users/addresses", json=body, headers=headers)
        assert first.status_code == 201
        assert first.json()["is_default"] is True

        second = client.post("/users/addresses", json={**body, "city": "Shelbyville"}, headers=headers).json()
        response = client.put(f"/users/addresses/{second['id']}/default", headers=headers)
        assert response.json()["is_default"] is True

        response = client.put(f"/users/addresses/{second['id']}", json={"street": "2 Elm St"}, headers=headers)
        assert response.json()["street"] == "2 Elm St"

        response = client.delete(f"/users/addresses/{first.json()['id']}", headers=headers)
        assert response.json()["message"] == "Address deleted successfully"
        addresses = client.get("/users/addresses", headers=headers).json()
        assert [a["id"] for a in addresses] == [second["id"]]


class TestProductEndpoints:
    def test_non_admin_cannot_create(self, client, user):
        response = client.post(
            "/products",
            json={"name": "X", "description": "Y", "price": 1.0, "category": "Z"},
            headers=_auth(user["token"]),
        )
        assert response.status_code == 403
        assert response.json()["message"] == "Not authorized as admin"

    def test_listing_is_public(self, client, admin):
        _create_product(client, admin, name="Lamp")
        _create_product(client, admin, name="Phone", category="Electronics")
        response = client.get("/products", params={"category": "Electronics"})
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["products"][0]["name"] == "Phone"

    def test_apply_sale(self, client, admin):
        product = _create_product(client, admin, price=19.99)
        response = client.put(
            f"/products/{product['id']}/sale", json={"sale_percentage": 15}, headers=_auth(admin["token"])
        )
        assert response.status_code == 200
        assert response.json()["sale_price"] == 16.99

    def test_invalid_sale_percentage(self, client, admin):
        product = _create_product(client, admin)
        response = client.put(
            f"/products/{product['id']}/sale", json={"sale_percentage": 150}, headers=_auth(admin["token"])
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Sale percentage must be between 0 and 100"

    def test_bulk_sale(self, client, admin):
        first = _create_product(client, admin, name="A", price=10.0)
        second = _create_product(client, admin, name="B", price=20.0)
        response = client.post(
            "/products/bulk-sale",
            json={"product_ids": [first["id"], second["id"], "missing"], "sale_percentage": 50},
            headers=_auth(admin["token"]),
        )
        assert response.status_code == 200
        assert sorted(response.json()["updated"]) == sorted([first["id"], second["id"]])
        sale = client.get("/products", params={"sale": "true"}).json()
        assert sale["total"] == 2

    def test_bulk_sale_without_ids(self, client, admin):
        response = client.post(
            "/products/bulk-sale", json={"product_ids": [], "sale_percentage": 10}, headers=_auth(admin["token"])
        )
        assert response.status_code == 400

    def test_set_stock(self, client, admin):
        product = _create_product(client, admin, stock=5)
        response = client.put(f"/products/{product['id']}/stock", json={"stock": 12}, headers=_auth(admin["token"]))
        assert response.json()["stock"] == 12
        response = client.put(f"/products/{product['id']}/stock", json={"delta": -2}, headers=_auth(admin["token"]))
        assert response.json()["stock"] == 10

    def test_missing_product(self, client):
        response = client.get("/products/missing")
        assert response.status_code == 404

    def test_delete_product(self, client, admin):
        product = _create_product(client, admin)
        response = client.delete(f"/products/{product['id']}", headers=_auth(admin["token"]))
        assert response.status_code == 200
        assert client.get(f"/products/{product['id']}").status_code == 404


class TestOrderEndpoints:
    def test_create_order(self, client, admin, user):
        product = _create_product(client, admin, stock=5, price=40.0)
        response = _place_order(client, user["token"], [{"product_id": product["id"], "quantity": 2}])

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["payment_status"] == "pending"
        assert data["total_amount"] == 80.0
        assert data["user_id"] == user["id"]
        assert data["items"][0]["product_name"] == "Desk Lamp"
        assert current_domain.repository_for(Product).get(product["id"]).stock == 3

    def test_create_order_requires_token(self, client):
        response = _place_order(client, "", [{"product_id": "p", "quantity": 1}])
        assert response.status_code == 401

    def test_insufficient_stock_body(self, client, admin, user):
        product = _create_product(client, admin, stock=1)
        response = _place_order(client, user["token"], [{"product_id": product["id"], "quantity": 2}])
        assert response.status_code == 400
        body = response.json()
        assert body["error_type"] == "InsufficientStock"
        assert body["product_name"] == "Desk Lamp"
        assert body["available"] == 1

    def test_empty_order(self, client, user):
        response = _place_order(client, user["token"], [])
        assert response.status_code == 400
        assert response.json()["message"] == "No order items"

    def test_unknown_product(self, client, user):
        response = _place_order(client, user["token"], [{"product_id": "missing", "quantity": 1}])
        assert response.status_code == 404

    def test_owner_flow(self, client, admin, user):
        product = _create_product(client, admin, stock=5)
        order = _place_order(client, user["token"], [{"product_id": product["id"], "quantity": 2}]).json()

        mine = client.get("/orders", headers=_auth(user["token"])).json()
        assert [o["id"] for o in mine] == [order["id"]]

        fetched = client.get(f"/orders/{order['id']}", headers=_auth(user["token"]))
        assert fetched.status_code == 200

        cancelled = client.put(f"/orders/{order['id']}/cancel", headers=_auth(user["token"]))
        assert cancelled.status_code == 200
        assert cancelled.json()["status"] == "cancelled"
        assert current_domain.repository_for(Product).get(product["id"]).stock == 5

        again = client.put(f"/orders/{order['id']}/cancel", headers=_auth(user["token"]))
        assert again.status_code == 400
        assert again.json()["message"] == "Cannot cancel order with status: cancelled"

    def test_other_user_cannot_view(self, client, admin, user):
        product = _create_product(client, admin)
        order = _place_order(client, user["token"], [{"product_id": product["id"], "quantity": 1}]).json()
        other = _register(client, email="other@example.com")
        assert client.get(f"/orders/{order['id']}", headers=_auth(other["token"])).status_code == 403
        assert client.put(f"/orders/{order['id']}/cancel", headers=_auth(other["token"])).status_code == 403

    def test_admin_status_updates(self, client, admin, user):
        product = _create_product(client, admin)
        order = _place_order(client, user["token"], [{"product_id": product["id"], "quantity": 1}]).json()
        headers = _auth(admin["token"])

        response = client.put(f"/orders/{order['id']}/status", json={"status": "delivered"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["delivered_at"] is not None

        response = client.put(f"/orders/{order['id']}/payment", json={"payment_status": "paid"}, headers=headers)
        assert response.json()["payment_status"] == "completed"
        assert response.json()["paid_at"] is not None

        response = client.put(f"/orders/{order['id']}/status", json={"status": "bogus"}, headers=headers)
        assert response.status_code == 400

    def test_status_update_requires_admin(self, client, admin, user):
        product = _create_product(client, admin)
        order = _place_order(client, user["token"], [{"product_id": product["id"], "quantity": 1}]).json()
        response = client.put(
            f"/orders/{order['id']}/status", json={"status": "shipped"}, headers=_auth(user["token"])
        )
        assert response.status_code == 403

    def test_admin_listing(self, client, admin, user):
        product = _create_product(client, admin, stock=20)
        for _ in range(3):
            _place_order(client, user["token"], [{"product_id": product["id"], "quantity": 1}])

        response = client.get("/orders/admin/all", params={"page": 1, "limit": 2}, headers=_auth(admin["token"]))
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["pages"] == 2
        assert len(data["orders"]) == 2
        assert data["orders"][0]["user"]["email"] == "jane@example.com"
        assert data["orders"][0]["items"][0]["product"]["name"] == "Desk Lamp"

    def test_admin_listing_forbidden_for_users(self, client, user):
        response = client.get("/orders/admin/all", headers=_auth(user["token"]))
        assert response.status_code == 403
