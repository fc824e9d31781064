"""API endpoint tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from rolegate.api.routes import get_permission_manager
from rolegate.main import app
from rolegate.permissions.manager import StoragePermissionManager
from rolegate.persistence.memory import InMemoryPermissionStore


@pytest.fixture
def store() -> InMemoryPermissionStore:
    return InMemoryPermissionStore()


@pytest.fixture
def client(store: InMemoryPermissionStore) -> TestClient:
    """Test client backed by an in-memory store."""
    app.dependency_overrides[get_permission_manager] = lambda: StoragePermissionManager(store)
    yield TestClient(app)
    app.dependency_overrides.clear()


def check(client: TestClient, role: str, action: str, resource: str) -> bool:
    response = client.get("/api/v1/access", params={"role": role, "action": action, "resource": resource})
    assert response.status_code == 200
    return response.json()["allowed"]


class TestHealthEndpoint:
    """Tests for the health check endpoints."""

    def test_health_returns_healthy(self, client: TestClient) -> None:
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, client: TestClient) -> None:
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["name"] == "RoleGate"


class TestRuleEndpoints:
    """Tests for allow/deny endpoints."""

    def test_allow_returns_rule(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/permissions/allow",
            json={"role": "admin", "action": "read", "resource": "doc1"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "ALLOW"
        assert data["action"] == "read"
        assert data["id"] is not None

    def test_deny_flips_allow(self, client: TestClient, store: InMemoryPermissionStore) -> None:
        body = {"role": "admin", "action": "read", "resource": "doc1"}
        allowed = client.post("/api/v1/permissions/allow", json=body).json()
        denied = client.post("/api/v1/permissions/deny", json=body).json()

        assert denied["id"] == allowed["id"]
        assert denied["type"] == "DENY"
        assert len(store.all()) == 1

    def test_blanket_rules(self, client: TestClient) -> None:
        response = client.post("/api/v1/permissions/deny-all", json={"role": "guest", "resource": "doc1"})
        assert response.status_code == 200
        assert response.json()["type"] == "DENY_ALL"
        assert response.json()["action"] is None

        response = client.post("/api/v1/permissions/allow-all", json={"role": "guest", "resource": "doc1"})
        assert response.json()["type"] == "ALLOW_ALL"

    def test_empty_role_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/permissions/allow",
            json={"role": "", "action": "read", "resource": "doc1"},
        )
        assert response.status_code == 422

    def test_missing_resource_rejected(self, client: TestClient) -> None:
        response = client.post("/api/v1/permissions/allow-all", json={"role": "admin"})
        assert response.status_code == 422


class TestAccessEndpoint:
    """Tests for the access check endpoint."""

    def test_unguarded_resource_is_open(self, client: TestClient) -> None:
        assert check(client, "admin", "read", "doc1") is True

    def test_default_deny_once_guarded(self, client: TestClient) -> None:
        client.post("/api/v1/permissions/allow", json={"role": "admin", "action": "read", "resource": "doc1"})

        assert check(client, "admin", "read", "doc1") is True
        assert check(client, "guest", "read", "doc1") is False

    def test_action_rule_overrides_deny_all(self, client: TestClient) -> None:
        client.post("/api/v1/permissions/deny-all", json={"role": "admin", "resource": "doc1"})
        client.post("/api/v1/permissions/allow", json={"role": "admin", "action": "read", "resource": "doc1"})

        assert check(client, "admin", "read", "doc1") is True
        assert check(client, "admin", "write", "doc1") is False

    def test_empty_resource_is_bad_request(self, client: TestClient) -> None:
        response = client.get("/api/v1/access", params={"role": "admin", "action": "read", "resource": ""})
        assert response.status_code == 400
