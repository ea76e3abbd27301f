"""Integration tests for Order API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api import order_router
from ordering.order.exceptions import StorageError
from ordering.order.lifecycle import OrderLifecycleManager
from ordering.order.store import InMemoryOrderStore


@pytest.fixture()
def client(manager):
    app = FastAPI()
    app.state.order_manager = manager
    app.include_router(order_router)
    return TestClient(app)


def _create_order(client, **overrides):
    """Helper: POST /orders and return the response body."""
    body = {
        "customer_email": "jane@example.com",
        "items": [
            {"product_id": "P1", "quantity": 2, "unit_price": "9.99"},
            {"product_id": "P2", "quantity": 1, "unit_price": "5.00"},
        ],
        "delivery_address": "123 Main St",
    }
    body.update(overrides)
    response = client.post("/orders", json=body)
    assert response.status_code == 201
    return response.json()


class TestCreateOrderEndpoint:
    def test_create_order(self, client, store):
        data = _create_order(client)
        assert data["order_id"].startswith("ORD-")
        assert store.exists(data["order_id"])

    def test_create_order_response_format(self, client):
        data = _create_order(client)
        assert data["status"] == "PENDING"
        assert data["total_amount"] == "24.98"
        assert data["customer_email"] == "jane@example.com"
        assert data["delivery_address"] == "123 Main St"
        assert data["items"][0] == {"product_id": "P1", "quantity": 2, "unit_price": "9.99"}
        assert data["created_at"] == data["updated_at"]

    def test_create_order_sends_confirmation(self, client, gateway):
        data = _create_order(client)
        assert [c["order_id"] for c in gateway.calls_for("confirm")] == [data["order_id"]]

    def test_create_order_with_empty_items(self, client):
        response = client.post("/orders", json={"customer_email": "jane@example.com", "items": []})
        assert response.status_code == 400
        assert "items" in response.json()["detail"]
        assert client.get("/orders").json() == []

    def test_create_order_with_blank_email(self, client):
        response = client.post(
            "/orders",
            json={"customer_email": "   ", "items": [{"product_id": "P1", "quantity": 1, "unit_price": "1.00"}]},
        )
        assert response.status_code == 400

    def test_create_order_schema_violation(self, client):
        response = client.post(
            "/orders",
            json={"customer_email": "jane@example.com", "items": [{"product_id": "P1", "quantity": 0, "unit_price": "1"}]},
        )
        assert response.status_code == 422

    def test_create_order_succeeds_when_notification_fails(self, client, gateway):
        gateway.configure(raise_error=True)
        data = _create_order(client)
        assert client.get(f"/orders/{data['order_id']}").status_code == 200


class TestGetOrderEndpoints:
    def test_get_order(self, client):
        created = _create_order(client)
        response = client.get(f"/orders/{created['order_id']}")
        assert response.status_code == 200
        assert response.json() == created

    def test_get_unknown_order(self, client):
        response = client.get("/orders/ORD-NOTHERE")
        assert response.status_code == 404

    def test_list_orders(self, client):
        first = _create_order(client)
        second = _create_order(client, customer_email="john@example.com")
        response = client.get("/orders")
        assert response.status_code == 200
        assert [o["order_id"] for o in response.json()] == [first["order_id"], second["order_id"]]


class TestUpdateStatusEndpoint:
    def test_update_status(self, client, gateway):
        created = _create_order(client)
        response = client.put(f"/orders/{created['order_id']}/status", json={"status": "SHIPPED"})
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "SHIPPED"
        assert data["updated_at"] > created["updated_at"]
        assert gateway.calls_for("status_changed")[0]["status"] == "SHIPPED"

    def test_update_status_unknown_order(self, client, store):
        response = client.put("/orders/ORD-NOTHERE/status", json={"status": "SHIPPED"})
        assert response.status_code == 404
        assert not store.exists("ORD-NOTHERE")

    def test_update_status_unknown_status(self, client):
        created = _create_order(client)
        response = client.put(f"/orders/{created['order_id']}/status", json={"status": "TELEPORTED"})
        assert response.status_code == 400
        assert "status" in response.json()["detail"]


class BrokenStore(InMemoryOrderStore):
    def put(self, order):
        raise StorageError("database unavailable")

    def list(self):
        raise StorageError("database unavailable")


class TestStorageUnavailable:
    @pytest.fixture()
    def broken_client(self, gateway):
        manager = OrderLifecycleManager(store=BrokenStore(), gateway=gateway, notification_timeout=0.5)
        app = FastAPI()
        app.state.order_manager = manager
        app.include_router(order_router)
        yield TestClient(app)
        manager.shutdown()

    def test_create_returns_503(self, broken_client, gateway):
        response = broken_client.post(
            "/orders",
            json={"customer_email": "jane@example.com", "items": [{"product_id": "P1", "quantity": 1, "unit_price": "1"}]},
        )
        assert response.status_code == 503
        assert gateway.calls == []

    def test_list_returns_503(self, broken_client):
        assert broken_client.get("/orders").status_code == 503
