"""Customer cancellation of their own order."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from inventory.stock.reservation import InventoryReservationEngine
from notifications.notification.dispatch import NotificationDispatcher, notify_best_effort
from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus
from ordering.order.stock import release_order_stock

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    reason = String(max_length=500, sanitize=False)


@ordering.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        orders = current_domain.repository_for(Order)
        order = orders.get_for_user(command.order_id, command.user_id)
        previous = order.cancel(command.reason)
        orders.save_transition(order, expected_status=previous.value)
        release_order_stock(InventoryReservationEngine(), order)

        logger.info(
            "order_cancelled",
            order_id=order.id,
            order_number=order.order_number,
            previous_status=previous.value,
            reason=order.cancellation_reason,
        )
        notify_best_effort(NotificationDispatcher().notify_status_changed, order, previous, OrderStatus.CANCELLED)
        return order
