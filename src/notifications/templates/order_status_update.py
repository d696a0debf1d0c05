"""Order status update template — sent when an admin moves an order along."""

from notifications.notification.notification import NotificationType

_STATUS_MESSAGES = {
    "Confirmed": "Your order has been confirmed and will be packed shortly.",
    "Shipped": "Your order is on its way.",
    "Delivered": "Your order has been delivered. We hope you enjoy it!",
    "Processing": "Your order is being processed.",
}


class OrderStatusUpdateTemplate:
    notification_type = NotificationType.ORDER_STATUS_UPDATE.value

    @staticmethod
    def render(context: dict) -> dict:
        order_number = context.get("order_number", "N/A")
        new_status = context.get("new_status", "")
        tracking = context.get("tracking_number")
        return {
            "subject": f"Order {order_number}: {new_status}",
            "body": (
                f"Dear {context.get('customer_name', 'Customer')},\n\n"
                f"The status of order {order_number} changed from "
                f"{context.get('old_status', '')} to {new_status}.\n\n"
                f"{_STATUS_MESSAGES.get(new_status, '')}\n"
                + (f"Tracking number: {tracking}\n" if tracking else "")
            ),
        }
