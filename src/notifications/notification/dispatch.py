"""Notification dispatcher — renders order notifications and sends them by email.

Dispatch is fire-and-forget from the order lifecycle's point of view: callers
wrap every call in ``notify_best_effort`` so a failing channel is logged and
never changes the outcome of the request.
"""

import structlog

from notifications.channel import get_email_channel
from notifications.notification.notification import Notification, NotificationType
from notifications.templates import get_template
from shared.errors import NotificationError

logger = structlog.get_logger(__name__)


def order_context(order) -> dict:
    """Flatten an order into the context dict templates render from."""
    return {
        "order_id": order.id,
        "order_number": order.order_number,
        "customer_name": order.shipping_address.full_name,
        "items": [item.to_dict() for item in order.items],
        "subtotal": order.subtotal,
        "tax": order.tax,
        "shipping_charge": order.shipping_charge,
        "total_amount": order.total_amount,
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "tracking_number": order.tracking_number,
        "reason": order.cancellation_reason,
    }


class NotificationDispatcher:
    def __init__(self, channel=None):
        self.channel = channel

    def _send(self, notification_type: NotificationType, order, **extra) -> Notification:
        rendered = get_template(notification_type.value).render({**order_context(order), **extra})
        notification = Notification(
            notification_type=notification_type,
            recipient=order.shipping_address.email,
            subject=rendered["subject"],
            body=rendered["body"],
        )

        channel = self.channel or get_email_channel()
        result = channel.send(to=notification.recipient, subject=notification.subject, body=notification.body)
        if result.get("status") != "sent":
            raise NotificationError(result.get("error") or "Unknown dispatch error")

        logger.info(
            "notification_sent",
            notification_type=notification_type.value,
            order_number=order.order_number,
            message_id=result.get("message_id"),
        )
        return notification

    def notify_order_created(self, order) -> Notification:
        return self._send(NotificationType.ORDER_CONFIRMATION, order)

    def notify_status_changed(self, order, old_status, new_status) -> Notification:
        old_value = getattr(old_status, "value", old_status)
        new_value = getattr(new_status, "value", new_status)
        if new_value == "Cancelled":
            return self._send(NotificationType.ORDER_CANCELLATION, order, old_status=old_value)
        return self._send(NotificationType.ORDER_STATUS_UPDATE, order, old_status=old_value, new_status=new_value)


def notify_best_effort(send, *args, **kwargs) -> bool:
    """Invoke a dispatcher method, logging and swallowing any failure.

    Returns True when the notification went out.
    """
    try:
        send(*args, **kwargs)
    except Exception as exc:  # noqa: BLE001
        logger.exception("notification_failed", notifier=getattr(send, "__name__", repr(send)), error=str(exc))
        return False
    return True
