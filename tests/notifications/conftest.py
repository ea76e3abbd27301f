import pytest
from notifications.gateway import reset_gateway
from ordering.order.order import Order


@pytest.fixture(autouse=True)
def _fresh_gateway():
    reset_gateway()
    yield
    reset_gateway()


@pytest.fixture()
def order():
    return Order.create(
        customer_email="jane@example.com",
        items=[{"product_id": "P1", "quantity": 1, "unit_price": "12.50"}],
        order_id="ORD-0000ABCD",
    )
