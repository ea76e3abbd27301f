"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps its own state. Nothing is shared between
users; the state only remembers ids returned by POST /orders so that the
follow-up requests can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class OrderState:
    """Tracks state for a single order lifecycle."""

    order_id: str | None = None
    current_status: str = "PENDING"
    total_amount: str | None = None
    status_history: list[str] = field(default_factory=list)


@dataclass
class BrowsingState:
    """Order ids a read-heavy user has seen so far."""

    known_order_ids: list[str] = field(default_factory=list)
