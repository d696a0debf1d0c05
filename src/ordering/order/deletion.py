"""Admin deletion of orders.

Hard delete removes the record; soft delete marks the order Cancelled with
the reason "Deleted by admin". Either way the order's stock comes back once,
unless the order was already Cancelled (its stock went back then).
"""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier
from protean.utils.globals import current_domain

from inventory.stock.reservation import InventoryReservationEngine
from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus
from ordering.order.stock import release_order_stock
from shared.config import get_settings
from shared.errors import ForbiddenError

logger = structlog.get_logger(__name__)

SOFT_DELETE_REASON = "Deleted by admin"

# Orders that have left the warehouse cannot be erased
UNDELETABLE_STATES = frozenset({OrderStatus.SHIPPED, OrderStatus.DELIVERED})


@ordering.command(part_of="Order")
class DeleteOrder:
    order_id = Identifier(required=True)
    hard_delete = Boolean(default=False)


@ordering.command_handler(part_of=Order)
class DeleteOrderHandler:
    @handle(DeleteOrder)
    def delete_order(self, command):
        """Returns the withdrawn order for a soft delete, None for a hard delete."""
        order = current_domain.repository_for(Order).get(command.order_id)
        if command.hard_delete:
            self._hard_delete(order)
            return None
        return self._soft_delete(order, strict=get_settings().soft_delete_strict)

    def _hard_delete(self, order: Order) -> None:
        status = order.status
        if status in UNDELETABLE_STATES:
            raise ForbiddenError(
                "Cannot permanently delete delivered or shipped orders",
                {"order": [f"Order is {status.value}"]},
            )

        current_domain.repository_for(Order).delete_transition(order)
        if status != OrderStatus.CANCELLED:
            release_order_stock(InventoryReservationEngine(), order)
        logger.info("order_deleted", order_id=order.id, order_number=order.order_number, status=status.value)

    def _soft_delete(self, order: Order, strict: bool) -> Order:
        if strict and order.status in UNDELETABLE_STATES:
            raise ForbiddenError(
                "Cannot delete delivered or shipped orders",
                {"order": [f"Order is {order.status.value}"]},
            )

        previous = order.withdraw(SOFT_DELETE_REASON)
        current_domain.repository_for(Order).save_transition(order, expected_status=previous.value)
        if previous != OrderStatus.CANCELLED:
            release_order_stock(InventoryReservationEngine(), order)

        logger.info(
            "order_soft_deleted",
            order_id=order.id,
            order_number=order.order_number,
            previous_status=previous.value,
        )
        return order
