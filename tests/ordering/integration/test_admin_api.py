"""Integration tests for partner API key administration."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api.errors import register_exception_handlers
from ordering.api.routes import admin_router
from ordering.partner.api_key import ApiKey
from protean import current_domain


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(admin_router)
    register_exception_handlers(app)
    return TestClient(app)


_ADMIN = {"Authorization": "Bearer token-admin"}


def test_issue_key(client, identity):
    response = client.post("/admin/api-keys", json={"name": "Marketplace", "description": "Nightly"}, headers=_ADMIN)

    assert response.status_code == 201
    body = response.json()
    assert len(body["key"]) == 64
    assert body["is_active"] is True
    assert current_domain.repository_for(ApiKey).get(body["id"]).name == "Marketplace"


def test_deactivate_key(client, identity):
    issued = client.post("/admin/api-keys", json={"name": "Marketplace"}, headers=_ADMIN).json()

    response = client.put(f"/admin/api-keys/{issued['id']}/active", json={"is_active": False}, headers=_ADMIN)

    assert response.status_code == 200
    assert response.json() == {"id": issued["id"], "is_active": False}


def test_unknown_key_id(client, identity):
    response = client.put("/admin/api-keys/missing/active", json={"is_active": False}, headers=_ADMIN)
    assert response.status_code == 404


def test_customer_cannot_issue(client, identity):
    response = client.post("/admin/api-keys", json={"name": "Sneaky"}, headers={"Authorization": "Bearer token-user"})
    assert response.status_code == 403
    assert current_domain.repository_for(ApiKey)._dao.query.all().items == []
