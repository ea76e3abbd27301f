"""Notification gateway port (abstract interface).

The ordering domain tells customers about lifecycle events through this
contract only. Adapters decide how the message actually travels; the
in-process fake and the legacy notifications API adapter both implement it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class NotificationFailure(Exception):
    """The gateway could not deliver a notification (transport, timeout or remote error)."""


@dataclass(frozen=True)
class NotificationResult:
    """Result of a notification attempt."""

    success: bool
    notification_id: str | None = None
    status: str | None = None
    failure_reason: str | None = None


class NotificationGateway(ABC):
    """Abstract customer-messaging gateway."""

    @abstractmethod
    def confirm(self, order) -> NotificationResult:
        """Tell the customer that their order was received and confirmed."""
        ...

    @abstractmethod
    def status_changed(self, order, new_status) -> NotificationResult:
        """Tell the customer that their order moved to ``new_status``."""
        ...
