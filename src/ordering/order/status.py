"""Admin status updates.

The transition is checked against the state machine on the aggregate, then
persisted compare-and-set on the status that was read. Stock is returned
only on the move into Cancelled, so a lost race never releases twice.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from inventory.stock.reservation import InventoryReservationEngine
from notifications.notification.dispatch import NotificationDispatcher, notify_best_effort
from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus, parse_status
from ordering.order.stock import release_order_stock
from shared.errors import ValidationError

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(max_length=20)
    notes = Text(sanitize=False)
    tracking_number = String(max_length=100, sanitize=False)


@ordering.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        if not command.status:
            raise ValidationError("Status is required", {"status": ["This field is required"]})
        target = parse_status(command.status)

        orders = current_domain.repository_for(Order)
        order = orders.get(command.order_id)
        previous = order.change_status(target, notes=command.notes, tracking_number=command.tracking_number)
        orders.save_transition(order, expected_status=previous.value)

        if target == OrderStatus.CANCELLED and previous != OrderStatus.CANCELLED:
            release_order_stock(InventoryReservationEngine(), order)

        if target != previous:
            logger.info(
                "order_status_updated",
                order_id=order.id,
                order_number=order.order_number,
                old_status=previous.value,
                new_status=target.value,
            )
            notify_best_effort(NotificationDispatcher().notify_status_changed, order, previous, target)
        else:
            logger.info("order_annotated", order_id=order.id, status=target.value)

        return order
