import pytest
from notifications.gateway.fake_adapter import FakeNotificationGateway
from ordering.order.lifecycle import OrderLifecycleManager
from ordering.order.store import InMemoryOrderStore


@pytest.fixture()
def store():
    return InMemoryOrderStore()


@pytest.fixture()
def gateway():
    return FakeNotificationGateway()


@pytest.fixture()
def manager(store, gateway):
    mgr = OrderLifecycleManager(store=store, gateway=gateway, notification_timeout=0.5)
    yield mgr
    mgr.shutdown()


@pytest.fixture()
def sample_items():
    return [
        {"product_id": "P1", "quantity": 2, "unit_price": "9.99"},
        {"product_id": "P2", "quantity": 1, "unit_price": "5.00"},
    ]
