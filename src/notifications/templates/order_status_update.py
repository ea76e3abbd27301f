"""Order status update template: sent whenever an order changes status."""

from notifications.templates.channels import EMAIL


class OrderStatusUpdateTemplate:
    notification_type = "OrderStatusUpdate"
    default_channels = [EMAIL]

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        status = context.get("status", "UNKNOWN")
        return {
            "subject": f"Order #{order_id} Update",
            "body": f"Order {order_id} status update: {status}",
        }
