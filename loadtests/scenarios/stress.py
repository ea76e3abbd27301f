"""Stress test scenarios for the orders API.

OrderFloodUser creates orders as fast as it can, SpikeUser simulates
sudden bursts, and HotOrderUser hammers status updates on a handful of
orders to exercise per-order update serialization.
"""

import random

from locust import HttpUser, constant_pacing, task

from loadtests.data_generators import ORDER_STATUSES, order_data, status_update_data


class OrderFloodUser(HttpUser):
    """Stress test: maximum order creation throughput.

    Every task creates a new order, so there is no contention between
    users. Each creation also triggers one confirmation notification.
    """

    wait_time = constant_pacing(0.1)  # ~10 requests/sec per user

    @task(5)
    def create_order(self):
        self.client.post("/orders", json=order_data(), name="[STRESS] POST /orders")

    @task(1)
    def list_orders(self):
        self.client.get("/orders", name="[STRESS] GET /orders")


class SpikeUser(HttpUser):
    """Spike test: rapid-fire order creation.

    Spawn 50-100 of these simultaneously to simulate a sudden burst.
    """

    wait_time = constant_pacing(0.05)  # ~20 req/sec per user

    @task
    def rapid_order(self):
        self.client.post("/orders", json=order_data(item_count=1), name="[SPIKE] POST /orders")


class HotOrderUser(HttpUser):
    """Contention test: many users updating the same few orders."""

    wait_time = constant_pacing(0.05)
    hot_order_ids: list[str] = []

    def on_start(self):
        if len(HotOrderUser.hot_order_ids) < 5:
            resp = self.client.post("/orders", json=order_data(), name="[HOT] POST /orders")
            if resp.status_code == 201:
                HotOrderUser.hot_order_ids.append(resp.json()["order_id"])

    @task
    def update_hot_order(self):
        if not HotOrderUser.hot_order_ids:
            return
        order_id = random.choice(HotOrderUser.hot_order_ids)
        self.client.put(
            f"/orders/{order_id}/status",
            json=status_update_data(random.choice(ORDER_STATUSES)),
            name="[HOT] PUT /orders/{id}/status",
        )
