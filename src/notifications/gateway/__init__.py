"""Notification gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- LegacyNotificationsGateway for the legacy notifications API (default)
- FakeNotificationGateway for development and testing

The adapter is chosen by the NOTIFICATION_GATEWAY environment variable.
"""

from notifications.gateway.port import NotificationGateway

_current_gateway: NotificationGateway | None = None


def get_gateway() -> NotificationGateway:
    """Return the current notification gateway (singleton)."""
    global _current_gateway
    if _current_gateway is None:
        from ordering.config import get_settings

        settings = get_settings()
        if settings.notification_gateway == "legacy":
            from notifications.gateway.legacy_adapter import LegacyNotificationsGateway

            _current_gateway = LegacyNotificationsGateway(settings.notifications_base_url)
        elif settings.notification_gateway == "fake":
            from notifications.gateway.fake_adapter import FakeNotificationGateway

            _current_gateway = FakeNotificationGateway()
        else:
            raise ValueError(f"Unknown notification gateway: {settings.notification_gateway}")
    return _current_gateway


def set_gateway(gateway: NotificationGateway) -> None:
    """Override the active notification gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to the configured gateway."""
    global _current_gateway
    _current_gateway = None
