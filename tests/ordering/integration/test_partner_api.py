"""Integration tests for partner order ingestion (``POST /v1/orders``)."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from inventory import reservation
from ordering.api.errors import register_exception_handlers
from ordering.api.routes import partner_router
from ordering.customer.customer import Customer
from ordering.partner.api_key import ApiKey
from ordering.partner.management import IssueApiKey, SetApiKeyActive
from protean import current_domain


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(partner_router)
    register_exception_handlers(app)
    return TestClient(app)


@pytest.fixture()
def api_key():
    return current_domain.process(IssueApiKey(name="Marketplace"), asynchronous=False)


@pytest.fixture()
def catalogue(add_product):
    add_product("A", price=20000, stock=3)


def _body(address, **extra):
    body = {
        "items": [{"product_id": "A", "quantity": 2}],
        "shipping_address": address,
        "customer_email": "buyer@partner.example",
        "customer_name": "Partner Buyer",
    }
    body.update(extra)
    return body


def test_guest_order_accepted(client, api_key, catalogue, address, store):
    response = client.post("/v1/orders", json=_body(address), headers={"X-API-Key": api_key["key"]})

    assert response.status_code == 201
    payload = response.json()
    assert payload["success"] is True
    order = payload["order"]
    assert set(order) == {"id", "order_number", "total", "status", "payment_status", "created_at", "items"}
    # 40000 below threshold: flat 5000 shipping, 7200 tax
    assert order["total"] == 52200
    assert order["status"] == "CREATED"
    assert order["payment_status"] == "PENDING"
    assert len(order["items"]) == 1
    assert store.get_product("A").stock == 1


def test_explicit_user_owns_order(client, api_key, catalogue, address):
    response = client.post(
        "/v1/orders",
        json=_body(address, user_id="user-777", customer_email=None),
        headers={"X-API-Key": api_key["key"]},
    )
    assert response.status_code == 201
    assert current_domain.repository_for(Customer)._dao.query.all().items == []


def test_repeat_guest_reuses_customer(client, api_key, catalogue, address):
    headers = {"X-API-Key": api_key["key"]}
    client.post("/v1/orders", json=_body(address, items=[{"product_id": "A", "quantity": 1}]), headers=headers)
    client.post("/v1/orders", json=_body(address, items=[{"product_id": "A", "quantity": 1}]), headers=headers)

    assert len(current_domain.repository_for(Customer)._dao.query.all().items) == 1


def test_key_use_recorded(client, api_key, catalogue, address):
    client.post("/v1/orders", json=_body(address), headers={"X-API-Key": api_key["key"]})
    assert current_domain.repository_for(ApiKey).get(api_key["id"]).last_used_at is not None


def test_prepaid_partner_order(client, api_key, catalogue, address):
    response = client.post(
        "/v1/orders",
        json=_body(address, payment_method="CARD"),
        headers={"X-API-Key": api_key["key"]},
    )
    assert response.json()["order"]["payment_status"] == "PAID"


class TestRejections:
    def test_missing_key(self, client, catalogue, address):
        response = client.post("/v1/orders", json=_body(address))
        assert response.status_code == 401
        assert response.json()["error"] == "Unauthenticated"

    def test_inactive_key_never_touches_catalogue(self, client, api_key, catalogue, address, store, monkeypatch):
        current_domain.process(SetApiKeyActive(api_key_id=api_key["id"], is_active=False), asynchronous=False)

        calls = []
        real_get_store = reservation.get_store

        def spy():
            calls.append("get_store")
            return real_get_store()

        monkeypatch.setattr(reservation, "get_store", spy)

        response = client.post("/v1/orders", json=_body(address), headers={"X-API-Key": api_key["key"]})

        assert response.status_code == 401
        assert calls == []
        assert store.get_product("A").stock == 3

    def test_incomplete_address(self, client, api_key, catalogue, address, store):
        del address["state"]
        response = client.post("/v1/orders", json=_body(address), headers={"X-API-Key": api_key["key"]})
        assert response.status_code == 400
        assert response.json()["error"] == "ValidationFailed"
        assert store.get_product("A").stock == 3

    def test_no_owner(self, client, api_key, catalogue, address):
        response = client.post(
            "/v1/orders",
            json=_body(address, customer_email=None),
            headers={"X-API-Key": api_key["key"]},
        )
        assert response.status_code == 400
        assert "User ID or customer email is required" in response.json()["message"]

    def test_insufficient_stock(self, client, api_key, catalogue, address):
        response = client.post(
            "/v1/orders",
            json=_body(address, items=[{"product_id": "A", "quantity": 4}]),
            headers={"X-API-Key": api_key["key"]},
        )
        assert response.status_code == 409
