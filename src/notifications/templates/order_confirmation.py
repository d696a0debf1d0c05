"""Order confirmation template — sent when an order is placed."""

from notifications.notification.notification import NotificationType


class OrderConfirmationTemplate:
    notification_type = NotificationType.ORDER_CONFIRMATION.value

    @staticmethod
    def render(context: dict) -> dict:
        order_number = context.get("order_number", "N/A")
        lines = "\n".join(
            f"  - {item['name']}"
            + (f" (Size: {item['size']})" if item.get("size") else "")
            + (f" (Color: {item['color']})" if item.get("color") else "")
            + f" x {item['quantity']}: {item['price'] * item['quantity']:.2f}"
            for item in context.get("items", [])
        )
        return {
            "subject": f"Order {order_number} Confirmed",
            "body": (
                f"Dear {context.get('customer_name', 'Customer')},\n\n"
                f"Thank you for your order! Order {order_number} has been received "
                "and is being processed.\n\n"
                f"{lines}\n\n"
                f"Subtotal: {context.get('subtotal', 0):.2f}\n"
                f"Tax (GST 18%): {context.get('tax', 0):.2f}\n"
                f"Shipping: {context.get('shipping_charge', 0):.2f}\n"
                f"Total: {context.get('total_amount', 0):.2f}\n\n"
                f"Payment: {context.get('payment_method', '')} ({context.get('payment_status', '')})\n\n"
                "We'll notify you once your order ships."
            ),
        }
