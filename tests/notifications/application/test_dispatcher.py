"""Tests for the notification dispatcher, templates and channel selection."""

import pytest
from inventory.stock.reservation import ReservedLine
from notifications.channel import get_email_channel, reset_channels
from notifications.channel.fake_email import FakeEmailAdapter
from notifications.channel.smtp_email import SmtpEmailAdapter
from notifications.notification.dispatch import NotificationDispatcher, notify_best_effort
from notifications.notification.notification import NotificationType
from ordering.order.order import Order, OrderStatus
from shared.errors import NotificationError


@pytest.fixture()
def order(shipping_address):
    return Order.create(
        user_id="u1",
        lines=[ReservedLine(product_id="p1", name="Shirt", quantity=2, size="M", unit_price=100.0)],
        shipping_address=shipping_address,
        payment_method="UPI",
    )


@pytest.fixture()
def channel():
    return FakeEmailAdapter()


def test_order_confirmation(order, channel):
    notification = NotificationDispatcher(channel).notify_order_created(order)

    assert notification.notification_type == NotificationType.ORDER_CONFIRMATION
    sent = channel.sent_emails[0]
    assert sent["to"] == "asha@example.com"
    assert sent["subject"] == f"Order {order.order_number} Confirmed"
    assert "Shirt (Size: M) x 2: 200.00" in sent["body"]
    assert "Total: 236.00" in sent["body"]


def test_status_update(order, channel):
    order.change_status(OrderStatus.SHIPPED, tracking_number="TRK-42")
    NotificationDispatcher(channel).notify_status_changed(order, OrderStatus.PROCESSING, OrderStatus.SHIPPED)

    body = channel.sent_emails[0]["body"]
    assert "from Processing to Shipped" in body
    assert "TRK-42" in body


def test_cancellation_uses_cancellation_template(order, channel):
    order.cancel("Changed my mind")
    NotificationDispatcher(channel).notify_status_changed(order, "Processing", "Cancelled")

    sent = channel.sent_emails[0]
    assert sent["subject"].endswith("Cancelled")
    assert "Reason: Changed my mind" in sent["body"]


def test_failed_delivery_raises(order, channel):
    channel.configure(should_succeed=False, failure_reason="mailbox full")
    with pytest.raises(NotificationError) as exc:
        NotificationDispatcher(channel).notify_order_created(order)
    assert "mailbox full" in str(exc.value)


def test_best_effort_swallows_failures(order, channel):
    channel.configure(raise_error=RuntimeError("boom"))
    assert notify_best_effort(NotificationDispatcher(channel).notify_order_created, order) is False


def test_best_effort_reports_success(order, channel):
    assert notify_best_effort(NotificationDispatcher(channel).notify_order_created, order) is True


def test_default_channel_is_fake():
    assert isinstance(get_email_channel(), FakeEmailAdapter)
    assert get_email_channel() is get_email_channel()


def test_smtp_channel_selected_by_environment(monkeypatch):
    from shared.config import reset_settings

    monkeypatch.setenv("EMAIL_ADAPTER", "smtp")
    reset_settings()
    reset_channels()
    assert isinstance(get_email_channel(), SmtpEmailAdapter)


def test_unknown_channel(monkeypatch):
    from shared.config import reset_settings

    monkeypatch.setenv("EMAIL_ADAPTER", "pigeon")
    reset_settings()
    reset_channels()
    with pytest.raises(ValueError):
        get_email_channel()
