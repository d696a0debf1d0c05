"""Order placement: command and handler.

Placement converts the user's cart into an order:

1. Reserve stock for every cart line (all-or-nothing).
2. Build the order from the reserved snapshots and persist it. If that
   fails, the reservation is released before the error propagates.
3. Empty the cart.
4. Send the confirmation email, best effort.
"""

import structlog
from protean import handle
from protean.fields import Dict, Identifier, String, Text
from protean.utils.globals import current_domain
from pymongo.errors import DuplicateKeyError, PyMongoError

from inventory.stock.reservation import InventoryReservationEngine, StockRelease
from notifications.notification.dispatch import NotificationDispatcher, notify_best_effort
from ordering.cart.cart import Cart
from ordering.cart.repository import CartEditor
from ordering.domain import ordering
from ordering.order.order import Order, PaymentMethod, ShippingAddress, generate_order_number
from ordering.order.stock import reservation_requests
from shared.errors import EmptyCartError, InternalError, StorefrontError

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    shipping_address = Dict(required=True)
    payment_method = String(choices=PaymentMethod, required=True)
    notes = Text(sanitize=False)


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    order_number_attempts = 3

    @handle(PlaceOrder)
    def place_order(self, command):
        cart = current_domain.repository_for(Cart).find_for_user(command.user_id)
        if cart is None or cart.is_empty:
            raise EmptyCartError("Cart is empty", {"cart": ["Add items to your cart before checking out"]})
        address = ShippingAddress(**command.shipping_address)

        inventory = InventoryReservationEngine()
        lines = inventory.reserve(reservation_requests(cart))

        try:
            order = Order.create(
                user_id=command.user_id,
                lines=lines,
                shipping_address=address,
                payment_method=command.payment_method,
                notes=command.notes,
            )
            self._persist(order)
        except Exception as exc:
            logger.error("order_persist_failed", user_id=command.user_id, error=str(exc))
            inventory.release([StockRelease(product_id=line.product_id, quantity=line.quantity) for line in lines])
            if isinstance(exc, StorefrontError):
                raise
            raise InternalError("Could not place order", debug=str(exc)) from exc

        logger.info(
            "order_created",
            order_id=order.id,
            order_number=order.order_number,
            user_id=order.user_id,
            total_amount=order.total_amount,
        )

        try:
            editor = CartEditor(command.user_id)
            editor.cart.clear()
            editor.commit()
        except PyMongoError as exc:
            logger.error("cart_clear_failed", user_id=command.user_id, order_id=order.id, error=str(exc))

        notify_best_effort(NotificationDispatcher().notify_order_created, order)
        return order

    def _persist(self, order: Order) -> None:
        orders = current_domain.repository_for(Order)
        for attempt in range(1, self.order_number_attempts + 1):
            try:
                orders.add(order)
                return
            except DuplicateKeyError:
                if attempt == self.order_number_attempts:
                    raise
                order.order_number = generate_order_number()
