"""Shared BDD fixtures and step definitions for order lifecycle scenarios."""

from decimal import Decimal

import pytest
from notifications.gateway.fake_adapter import FakeNotificationGateway
from ordering.order.lifecycle import OrderLifecycleManager
from ordering.order.order import OrderStatus
from ordering.order.store import InMemoryOrderStore
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def bdd_gateway():
    return FakeNotificationGateway()


@pytest.fixture()
def bdd_store():
    return InMemoryOrderStore()


@pytest.fixture()
def bdd_manager(bdd_store, bdd_gateway):
    manager = OrderLifecycleManager(store=bdd_store, gateway=bdd_gateway, notification_timeout=0.5)
    yield manager
    manager.shutdown()


@pytest.fixture()
def outcome():
    """Container for the result of the last When step."""
    return {"order": None, "error": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("the notification service is available")
def _(bdd_gateway):
    bdd_gateway.configure(should_succeed=True)


@given("the notification service is failing")
def _(bdd_gateway):
    bdd_gateway.configure(raise_error=True)


@given(parsers.cfparse('"{email}" has placed an order'))
def _(bdd_manager, outcome, email):
    outcome["order"] = bdd_manager.create(
        customer_email=email,
        items=[{"product_id": "P1", "quantity": 1, "unit_price": "10.00"}],
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the order is stored as {status}"))
def _(bdd_store, outcome, status):
    stored = bdd_store.get(outcome["order"].order_id)
    assert stored.status == OrderStatus.parse(status).value


@then(parsers.cfparse('the order total is "{total}"'))
def _(bdd_store, outcome, total):
    assert bdd_store.get(outcome["order"].order_id).total_amount == Decimal(total)


@then(parsers.cfparse('a confirmation is sent to "{email}"'))
def _(bdd_gateway, outcome, email):
    calls = bdd_gateway.calls_for("confirm")
    assert calls == [{"method": "confirm", "order_id": outcome["order"].order_id, "recipient": email}]


@then(parsers.cfparse('a status update for "{status}" is sent'))
def _(bdd_gateway, status):
    assert [c["status"] for c in bdd_gateway.calls_for("status_changed")] == [status]


@then("the order is rejected")
def _(outcome):
    assert isinstance(outcome["error"], ValidationError)


@then("no order is stored")
def _(bdd_store):
    assert bdd_store.list() == []


@then("no order is found")
def _(outcome):
    assert outcome["order"] is None
    assert outcome["error"] is None


@then("no notification is sent")
def _(bdd_gateway):
    assert bdd_gateway.calls == []
