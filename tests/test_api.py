"""Tests for the FastAPI API."""

import pytest
from fastapi.testclient import TestClient

from ordertrack.api import create_app

ORDER = {
    "order_number": "A1",
    "due_date": "2030-01-15",
    "buyer_name": "Bob",
    "address": "1 Main St",
    "phone": "1234567890",
    "total": 10.5,
}


@pytest.fixture
def client(temp_dir):
    """Test client over an empty data directory."""
    return TestClient(create_app(temp_dir))


@pytest.fixture
def logged_in(client):
    """Client with alice registered and logged in."""
    client.post(
        "/api/register",
        json={"username": "alice", "password": "secret1", "confirm_password": "secret1"},
    )
    response = client.post("/api/login", json={"username": "alice", "password": "secret1"})
    assert response.status_code == 200
    return client


class TestHealthCheck:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["logged_in"] is False


class TestAccounts:
    def test_register(self, client):
        response = client.post(
            "/api/register",
            json={"username": "alice", "password": "secret1", "confirm_password": "secret1"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "alice"
        assert "password" not in data

    def test_register_taken(self, logged_in):
        response = logged_in.post(
            "/api/register",
            json={"username": "alice", "password": "other12", "confirm_password": "other12"},
        )
        assert response.status_code == 409
        assert response.json()["error_type"] == "UsernameTakenError"

    def test_register_mismatch(self, client):
        response = client.post(
            "/api/register",
            json={"username": "alice", "password": "secret1", "confirm_password": "secret2"},
        )
        assert response.status_code == 400
        assert response.json()["error_type"] == "PasswordMismatchError"

    def test_login_invalid(self, logged_in):
        response = logged_in.post("/api/login", json={"username": "alice", "password": "nope123"})
        assert response.status_code == 401
        assert response.json()["error_type"] == "InvalidCredentialsError"

    def test_session(self, logged_in):
        data = logged_in.get("/api/session").json()
        assert data["logged_in"] is True
        assert data["user"]["username"] == "alice"
        assert data["remembered_username"] is None

    def test_logout(self, logged_in):
        assert logged_in.post("/api/logout").json() == {"status": "ok"}
        data = logged_in.get("/api/session").json()
        assert data["logged_in"] is False
        assert data["user"] is None

    def test_remembered_login_survives_new_app(self, client, temp_dir):
        client.post(
            "/api/register",
            json={"username": "alice", "password": "secret1", "confirm_password": "secret1"},
        )
        client.post(
            "/api/login",
            json={"username": "alice", "password": "secret1", "remember": True},
        )

        restarted = TestClient(create_app(temp_dir))
        data = restarted.get("/api/session").json()
        assert data["logged_in"] is True
        assert data["user"]["username"] == "alice"
        assert data["remembered_username"] == "alice"


class TestOrders:
    def test_requires_login(self, client):
        response = client.get("/api/orders")
        assert response.status_code == 401
        assert response.json()["error_type"] == "NotLoggedInError"

    def test_create_and_list(self, logged_in):
        response = logged_in.post("/api/orders", json=ORDER)
        assert response.status_code == 201
        created = response.json()
        assert created["order_number"] == "A1"
        assert created["due_date"] == "2030-01-15"
        assert created["total"] == 10.5

        data = logged_in.get("/api/orders").json()
        assert data["count"] == 1
        assert data["orders"][0]["id"] == created["id"]

    def test_total_as_string(self, logged_in):
        response = logged_in.post("/api/orders", json={**ORDER, "total": "49.99"})
        assert response.status_code == 201
        assert response.json()["total"] == 49.99

    def test_validation_error(self, logged_in):
        response = logged_in.post("/api/orders", json={**ORDER, "phone": "12345"})
        assert response.status_code == 400
        data = response.json()
        assert data["error_type"] == "ValidationError"
        assert data["field"] == "phone"

    def test_update(self, logged_in):
        order_id = logged_in.post("/api/orders", json=ORDER).json()["id"]

        response = logged_in.put(
            f"/api/orders/{order_id}", json={**ORDER, "buyer_name": "Carol", "due_date": None}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["buyer_name"] == "Carol"
        assert data["due_date"] is None

    def test_delete(self, logged_in):
        order_id = logged_in.post("/api/orders", json=ORDER).json()["id"]

        response = logged_in.delete(f"/api/orders/{order_id}")
        assert response.status_code == 200
        assert logged_in.get("/api/orders").json()["count"] == 0

    def test_get_missing(self, logged_in):
        response = logged_in.get("/api/orders/nope")
        assert response.status_code == 404

    def test_other_users_orders_hidden(self, logged_in):
        order_id = logged_in.post("/api/orders", json=ORDER).json()["id"]

        logged_in.post(
            "/api/register",
            json={"username": "bob", "password": "secret2", "confirm_password": "secret2"},
        )
        logged_in.post("/api/login", json={"username": "bob", "password": "secret2"})

        assert logged_in.get("/api/orders").json()["count"] == 0
        assert logged_in.get(f"/api/orders/{order_id}").status_code == 404
        assert logged_in.delete(f"/api/orders/{order_id}").status_code == 404
        assert logged_in.put(f"/api/orders/{order_id}", json=ORDER).status_code == 404


class TestStoreFailures:
    def test_malformed_store_is_503(self, client, temp_dir):
        (temp_dir / "store.json").write_text("[]")
        response = client.post(
            "/api/register",
            json={"username": "alice", "password": "secret1", "confirm_password": "secret1"},
        )
        assert response.status_code == 503
        assert response.json()["error_type"] == "StoreError"
