"""Configurable fake notification gateway for development and testing.

Records every call in memory. It can be told to report failure, to raise,
or to stall for a while, which is how the ordering tests exercise the
failure isolation around notifications.
"""

import threading
import time
from uuid import uuid4

from notifications.gateway.port import NotificationFailure, NotificationGateway, NotificationResult


class FakeNotificationGateway(NotificationGateway):
    """Notification gateway that records messages for test assertions."""

    def __init__(self) -> None:
        self.calls: list[dict] = []
        self._lock = threading.Lock()
        self.reset()

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Notification delivery failed",
        raise_error: bool = False,
        delay: float = 0.0,
    ) -> None:
        """Configure gateway behavior at runtime.

        Args:
            should_succeed: Return a successful result when True.
            failure_reason: Reason reported (or raised) on failure.
            raise_error: Raise ``NotificationFailure`` instead of returning a failed result.
            delay: Seconds to block before answering, to simulate a slow remote.
        """
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.raise_error = raise_error
        self.delay = delay

    def confirm(self, order) -> NotificationResult:
        return self._record(
            {
                "method": "confirm",
                "order_id": order.order_id,
                "recipient": order.customer_email,
            }
        )

    def status_changed(self, order, new_status) -> NotificationResult:
        return self._record(
            {
                "method": "status_changed",
                "order_id": order.order_id,
                "recipient": order.customer_email,
                "status": getattr(new_status, "value", new_status),
            }
        )

    def calls_for(self, method: str) -> list[dict]:
        with self._lock:
            return [call for call in self.calls if call["method"] == method]

    def _record(self, call: dict) -> NotificationResult:
        if self.delay:
            time.sleep(self.delay)

        with self._lock:
            self.calls.append(call)

        if self.raise_error:
            raise NotificationFailure(self.failure_reason)
        if not self.should_succeed:
            return NotificationResult(success=False, status="failed", failure_reason=self.failure_reason)
        return NotificationResult(
            success=True,
            notification_id=f"fake_ntf_{uuid4().hex[:12]}",
            status="sent",
        )

    def reset(self) -> None:
        """Clear recorded calls and restore default behavior."""
        with self._lock:
            self.calls.clear()
        self.configure()
