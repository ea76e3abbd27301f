"""Order confirmation template: sent when an order is created."""

from notifications.templates.channels import EMAIL


class OrderConfirmationTemplate:
    notification_type = "OrderConfirmation"
    default_channels = [EMAIL]

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        return {
            "subject": f"Order #{order_id} Confirmed",
            "body": (
                f"Your order {order_id} has been confirmed and is being processed. "
                "You will receive updates as your order progresses."
            ),
        }
