"""Customer-facing message templates, keyed by notification type.

A template is a class with a ``notification_type``, the channels it goes
out on, and a ``render(context)`` that returns ``subject`` and ``body``.
Context values come from the order (``order_id``, ``status``).
"""

from notifications.templates.order_confirmation import OrderConfirmationTemplate
from notifications.templates.order_status_update import OrderStatusUpdateTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    template.notification_type: template for template in (OrderConfirmationTemplate, OrderStatusUpdateTemplate)
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    try:
        return TEMPLATE_REGISTRY[notification_type]
    except KeyError:
        raise ValueError(f"No template registered for notification type: {notification_type}") from None


def render(notification_type: str, context: dict) -> dict:
    """Render a message: ``subject``, ``body`` and the ``channel`` it is sent on."""
    template = get_template(notification_type)
    return {**template.render(context), "channel": template.default_channels[0]}
