"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the order validation rules
(non-blank email, at least one item, positive quantity and unit price)
and match the field names of the API's Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()

ORDER_STATUSES = ["PENDING", "CONFIRMED", "SHIPPED", "DELIVERED", "CANCELLED"]


def valid_email() -> str:
    local = fake.user_name()[:20]
    domain = fake.free_email_domain()
    return f"{local}.{uuid.uuid4().hex[:4]}@{domain}"


def product_id() -> str:
    """Generate product ids like 'PRD-a1b2c3'."""
    return f"PRD-{uuid.uuid4().hex[:6]}"


def unit_price() -> str:
    """Prices travel as strings so no binary float rounding happens on the way."""
    return f"{random.randint(1, 50000) / 100:.2f}"


def order_item_data() -> dict:
    return {
        "product_id": product_id(),
        "quantity": random.randint(1, 5),
        "unit_price": unit_price(),
    }


def order_data(item_count: int | None = None) -> dict:
    """Generate a CreateOrderRequest payload with 1-4 line items."""
    count = item_count or random.randint(1, 4)
    return {
        "customer_email": valid_email(),
        "items": [order_item_data() for _ in range(count)],
        "delivery_address": fake.address().replace("\n", ", ")[:500],
    }


def invalid_order_data() -> dict:
    """An order the API must reject with 400 (no items)."""
    return {"customer_email": valid_email(), "items": []}


def status_update_data(status: str | None = None) -> dict:
    return {"status": status or random.choice(ORDER_STATUSES)}
