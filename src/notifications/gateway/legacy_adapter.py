"""Legacy notifications API adapter.

Speaks the request format of the legacy notifications service
(``POST {base_url}/v1/notifications`` with ``recipient``, ``message`` and
``type``). The outbound call itself is simulated: the adapter renders the
payload, logs request and response, and reports the message as sent.
"""

import time
from datetime import UTC, datetime

import structlog

from notifications.gateway.port import NotificationGateway, NotificationResult
from notifications.templates import render

logger = structlog.get_logger(__name__)

NOTIFICATIONS_PATH = "/v1/notifications"


class LegacyNotificationsGateway(NotificationGateway):
    """Adapter for the legacy notifications API (simulated transport)."""

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("/")

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{NOTIFICATIONS_PATH}"

    def confirm(self, order) -> NotificationResult:
        return self._send("OrderConfirmation", order, {"order_id": order.order_id})

    def status_changed(self, order, new_status) -> NotificationResult:
        status = getattr(new_status, "value", new_status)
        return self._send("OrderStatusUpdate", order, {"order_id": order.order_id, "status": status})

    def build_payload(self, notification_type: str, recipient: str, context: dict) -> dict:
        message = render(notification_type, context)
        return {
            "recipient": recipient,
            "message": message["body"],
            "type": message["channel"],
        }

    def _send(self, notification_type: str, order, context: dict) -> NotificationResult:
        payload = self.build_payload(notification_type, order.customer_email, context)
        logger.info(
            "legacy_notification_request",
            method="POST",
            url=self.endpoint,
            notification_type=notification_type,
            payload=payload,
        )

        notification_id = f"mock-notification-id-{int(time.time() * 1000)}"
        response = {
            "id": notification_id,
            **payload,
            "status": "sent",
            "createdAt": datetime.now(UTC).isoformat(),
        }
        logger.info(
            "legacy_notification_response",
            notification_type=notification_type,
            order_id=order.order_id,
            response=response,
        )

        return NotificationResult(success=True, notification_id=notification_id, status=response["status"])
