"""Orders service load testing: Locust entry point.

Discovers all user classes from the scenarios package.
Run specific scenarios with Locust's class selection.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py --host http://localhost:8080

    # Order lifecycle journeys only:
    locust -f loadtests/locustfile.py OrderingUser

    # Contention on a few hot orders:
    locust -f loadtests/locustfile.py HotOrderUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py OrderingUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

import requests
from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.ordering import OrderingUser, RejectedOrderUser  # noqa: F401
from loadtests.scenarios.stress import HotOrderUser, OrderFloodUser, SpikeUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Extracts the API error body so the log shows "items: Order must contain
    at least one item" instead of just "400".
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Log a marker when load test begins and check the target is up."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    if environment.host:
        try:
            resp = requests.get(f"{environment.host.rstrip('/')}/health", timeout=5)
            print(f"[LOADTEST] Health check: {resp.status_code} {resp.text}")
        except requests.RequestException as e:
            print(f"[LOADTEST] Health check failed: {e}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Print how many orders the service holds when the test ends."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    if not environment.host:
        return
    try:
        resp = requests.get(f"{environment.host.rstrip('/')}/orders", timeout=30)
        orders = resp.json()
        by_status: dict[str, int] = {}
        for order in orders:
            by_status[order["status"]] = by_status.get(order["status"], 0) + 1
        print(f"[LOADTEST] Orders stored: {len(orders)}")
        for status, count in sorted(by_status.items()):
            print(f"  {status}: {count}")
        print()
    except (requests.RequestException, ValueError) as e:
        print(f"[LOADTEST] Could not fetch order summary: {e}\n")
