"""Order lifecycle load test scenarios.

Three stateful SequentialTaskSet journeys: the happy path through
delivery, a cancellation, and a customer who checks on an order while it
is being handled. Every status change goes through PUT /orders/{id}/status.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import invalid_order_data, order_data, status_update_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import OrderState


class _OrderJourney(SequentialTaskSet):
    def on_start(self):
        self.state = OrderState()

    def create_order(self):
        with self.client.post(
            "/orders",
            json=order_data(),
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.order_id = body["order_id"]
                self.state.total_amount = body["total_amount"]
            else:
                resp.failure(f"Create order failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    def change_status(self, status):
        with self.client.put(
            f"/orders/{self.state.order_id}/status",
            json=status_update_data(status),
            catch_response=True,
            name="PUT /orders/{id}/status",
        ) as resp:
            if resp.status_code == 200 and resp.json()["status"] == status:
                self.state.current_status = status
                self.state.status_history.append(status)
            else:
                resp.failure(f"Status {status} failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    def check_order(self):
        with self.client.get(
            f"/orders/{self.state.order_id}",
            catch_response=True,
            name="GET /orders/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Get order failed: {resp.status_code} - {extract_error_detail(resp)}")
            elif resp.json()["status"] != self.state.current_status:
                resp.failure(f"Expected {self.state.current_status}, got {resp.json()['status']}")


class OrderFullLifecycleJourney(_OrderJourney):
    """Create Order -> Confirm -> Ship -> Deliver -> Check."""

    @task
    def create(self):
        self.create_order()

    @task
    def confirm(self):
        self.change_status("CONFIRMED")

    @task
    def ship(self):
        self.change_status("SHIPPED")

    @task
    def deliver(self):
        self.change_status("DELIVERED")

    @task
    def check(self):
        self.check_order()

    @task
    def done(self):
        self.interrupt()


class OrderCancellationJourney(_OrderJourney):
    """Create Order -> Confirm -> Cancel -> Check."""

    @task
    def create(self):
        self.create_order()

    @task
    def confirm(self):
        self.change_status("CONFIRMED")

    @task
    def cancel(self):
        self.change_status("CANCELLED")

    @task
    def check(self):
        self.check_order()

    @task
    def done(self):
        self.interrupt()


class OrderTrackingJourney(_OrderJourney):
    """Create Order -> Check (x3) -> Ship -> Check.

    Read-heavy: a customer refreshing the order page.
    """

    @task
    def create(self):
        self.create_order()

    @task
    def check_1(self):
        self.check_order()

    @task
    def check_2(self):
        self.check_order()

    @task
    def ship(self):
        self.change_status("SHIPPED")

    @task
    def check_3(self):
        self.check_order()

    @task
    def done(self):
        self.interrupt()


class OrderingUser(HttpUser):
    """Locust user simulating order lifecycle interactions.

    Weighted distribution:
    - 50% Full order lifecycle (happy path)
    - 20% Order cancellation
    - 30% Order tracking
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        OrderFullLifecycleJourney: 5,
        OrderCancellationJourney: 2,
        OrderTrackingJourney: 3,
    }


class RejectedOrderUser(HttpUser):
    """Sends invalid orders and unknown ids; every answer must be a 4xx."""

    wait_time = between(1.0, 3.0)

    @task(3)
    def empty_order(self):
        with self.client.post(
            "/orders",
            json=invalid_order_data(),
            catch_response=True,
            name="POST /orders [invalid]",
        ) as resp:
            if resp.status_code == 400:
                resp.success()
            else:
                resp.failure(f"Expected 400, got {resp.status_code}")

    @task(1)
    def unknown_order(self):
        with self.client.put(
            f"/orders/ORD-{random.randint(0, 0xFFFFFFF):08X}/status",
            json=status_update_data("SHIPPED"),
            catch_response=True,
            name="PUT /orders/{id}/status [unknown]",
        ) as resp:
            if resp.status_code in (200, 404):
                resp.success()
            else:
                resp.failure(f"Unexpected {resp.status_code}: {extract_error_detail(resp)}")
