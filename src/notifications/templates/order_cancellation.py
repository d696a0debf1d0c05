"""Order cancellation template — sent when an order is cancelled."""

from notifications.notification.notification import NotificationType


class OrderCancellationTemplate:
    notification_type = NotificationType.ORDER_CANCELLATION.value

    @staticmethod
    def render(context: dict) -> dict:
        order_number = context.get("order_number", "N/A")
        reason = context.get("reason") or "as requested"
        return {
            "subject": f"Order {order_number} Cancelled",
            "body": (
                f"Dear {context.get('customer_name', 'Customer')},\n\n"
                f"Your order {order_number} has been cancelled.\n\n"
                f"Reason: {reason}\n\n"
                "If payment was captured, our support team will contact you "
                "about the refund."
            ),
        }
