"""Template registry — maps NotificationType to template classes.

Each template renders a subject and body from an order context dict.
"""

from notifications.notification.notification import NotificationType
from notifications.templates.order_cancellation import OrderCancellationTemplate
from notifications.templates.order_confirmation import OrderConfirmationTemplate
from notifications.templates.order_status_update import OrderStatusUpdateTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    NotificationType.ORDER_CONFIRMATION.value: OrderConfirmationTemplate,
    NotificationType.ORDER_STATUS_UPDATE.value: OrderStatusUpdateTemplate,
    NotificationType.ORDER_CANCELLATION.value: OrderCancellationTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls
