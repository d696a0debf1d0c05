"""Order aggregate: the core of the ordering domain.

An order is created once from a cart. Its lines, address and financial
totals are snapshots taken at creation time and never change afterwards;
only status, payment status, tracking number and the note log evolve.

State Machine:
    PROCESSING → CONFIRMED → SHIPPED → DELIVERED
    PROCESSING | CONFIRMED | SHIPPED → CANCELLED
    DELIVERED and CANCELLED are terminal.

Forward skips (e.g. PROCESSING → SHIPPED) are allowed. Re-applying the
current status to a non-terminal order is an annotation: it records notes or
a tracking number and triggers no status side effects.
"""

import secrets
import time
from enum import Enum

from protean.fields import DateTime, Float, Identifier, Integer, List, String, Text, ValueObject

from ordering.domain import ordering
from shared.errors import InvalidStatusError, InvalidTransition
from shared.model import utcnow
from shared.money import as_number, line_total, tax_for, to_decimal


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PROCESSING = "Processing"
    CONFIRMED = "Confirmed"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class PaymentMethod(Enum):
    COD = "COD"
    CARD = "Card"
    UPI = "UPI"
    NET_BANKING = "NetBanking"


class PaymentStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"
    FAILED = "Failed"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PROCESSING: {
        OrderStatus.PROCESSING,
        OrderStatus.CONFIRMED,
        OrderStatus.SHIPPED,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.CONFIRMED: {
        OrderStatus.CONFIRMED,
        OrderStatus.SHIPPED,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.SHIPPED: {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

TERMINAL_STATES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

# States from which a customer may cancel
CANCELLABLE_STATES = frozenset({OrderStatus.PROCESSING, OrderStatus.CONFIRMED, OrderStatus.SHIPPED})

SHIPPING_CHARGE = to_decimal("0")
DEFAULT_CANCELLATION_REASON = "Cancelled by user"


def parse_status(value) -> OrderStatus:
    """Map a client-supplied status string onto ``OrderStatus``."""
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidStatusError(
            f"Invalid status. Must be one of: {', '.join(s.value for s in OrderStatus)}",
            {"status": [f"Unknown status {value!r}"]},
        ) from None


def generate_order_number() -> str:
    """Human-readable correlation id: ``ORD`` + epoch millis + 4 hex digits."""
    return f"ORD{int(time.time() * 1000)}{secrets.token_hex(2).upper()}"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Postal and contact details captured at checkout.

    Once recorded on an Order the address never changes, regardless of later
    edits to the customer's address book.
    """

    full_name = String(required=True, min_length=1, max_length=200, sanitize=False)
    phone = String(required=True, min_length=1, max_length=30)
    email = String(required=True, min_length=3, max_length=254)
    address_line1 = String(required=True, min_length=1, max_length=255, sanitize=False)
    address_line2 = String(max_length=255, sanitize=False)
    city = String(required=True, min_length=1, max_length=100, sanitize=False)
    state = String(required=True, min_length=1, max_length=100, sanitize=False)
    pincode = String(required=True, min_length=1, max_length=20)
    country = String(default="India", max_length=100, sanitize=False)


@ordering.value_object(part_of="Order")
class OrderLine:
    """A line item frozen at creation: later product edits never reach it."""

    product_id = String(required=True, max_length=36)
    name = String(required=True, max_length=200, sanitize=False)
    quantity = Integer(required=True, min_value=1)
    size = String(max_length=10)
    color = String(max_length=50, sanitize=False)
    price = Float(required=True, min_value=0)
    image = String(max_length=500, sanitize=False)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_number = String(max_length=40, default=generate_order_number)
    user_id = Identifier(required=True)
    items = List(content_type=ValueObject(OrderLine))
    shipping_address = ValueObject(ShippingAddress, required=True)
    payment_method = String(choices=PaymentMethod, required=True)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    order_status = String(choices=OrderStatus, default=OrderStatus.PROCESSING.value)
    subtotal = Float(required=True, min_value=0)
    tax = Float(required=True, min_value=0)
    shipping_charge = Float(default=0.0, min_value=0)
    total_amount = Float(required=True, min_value=0)
    tracking_number = String(max_length=100, sanitize=False)
    order_notes = Text(sanitize=False)
    delivered_at = DateTime()
    cancelled_at = DateTime()
    cancellation_reason = String(max_length=500, sanitize=False)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id, lines, shipping_address, payment_method, notes=None):
        """Create an order from reserved lines.

        Args:
            user_id: The customer placing the order.
            lines: Snapshots with product_id, name, quantity, size, color,
                   unit_price and image.
            shipping_address: ``ShippingAddress`` or dict.
            payment_method: One of ``PaymentMethod`` values.
            notes: Optional customer note, the first entry of the note log.
        """
        subtotal = sum((line_total(line.unit_price, line.quantity) for line in lines), to_decimal(0))
        tax = tax_for(subtotal)
        total = subtotal + tax + SHIPPING_CHARGE
        method = PaymentMethod(payment_method)
        now = utcnow()

        return cls(
            user_id=str(user_id),
            items=[
                OrderLine(
                    product_id=line.product_id,
                    name=line.name,
                    quantity=line.quantity,
                    size=line.size,
                    color=line.color,
                    price=line.unit_price,
                    image=line.image,
                )
                for line in lines
            ],
            shipping_address=shipping_address,
            payment_method=method.value,
            payment_status=(PaymentStatus.PENDING if method == PaymentMethod.COD else PaymentStatus.PAID).value,
            subtotal=as_number(subtotal),
            tax=as_number(tax),
            shipping_charge=as_number(SHIPPING_CHARGE),
            total_amount=as_number(total),
            order_notes=notes or None,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # State helpers
    # -------------------------------------------------------------------
    @property
    def status(self) -> OrderStatus:
        return OrderStatus(self.order_status)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    def _assert_can_transition(self, target: OrderStatus):
        current = self.status
        if target not in _VALID_TRANSITIONS[current]:
            raise InvalidTransition(
                f"Cannot change order status from {current.value} to {target.value}",
                {"status": [f"Cannot transition from {current.value} to {target.value}"]},
            )

    def append_note(self, text, label="Admin Update"):
        """Append a timestamped entry to the note log; earlier entries are kept."""
        entry = f"[{label} - {utcnow().strftime('%Y-%m-%d %H:%M:%S')} UTC]: {text}"
        self.order_notes = f"{self.order_notes}\n{entry}" if self.order_notes else entry

    def stock_lines(self) -> list[tuple[str, int]]:
        """(product_id, quantity) pairs to give back when the order is withdrawn."""
        return [(line.product_id, line.quantity) for line in self.items]

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def change_status(self, target: OrderStatus, notes=None, tracking_number=None) -> OrderStatus:
        """Admin status update. Returns the previous status."""
        previous = self.status
        self._assert_can_transition(target)
        now = utcnow()

        self.order_status = target.value
        if tracking_number:
            self.tracking_number = tracking_number
        if notes:
            self.append_note(notes)

        if target != previous:
            if target == OrderStatus.DELIVERED:
                self.delivered_at = now
                self.payment_status = PaymentStatus.PAID.value
            elif target == OrderStatus.CANCELLED:
                self.cancelled_at = now
                if notes:
                    self.cancellation_reason = notes

        self.updated_at = now
        return previous

    def cancel(self, reason=None) -> OrderStatus:
        """Customer cancellation. Returns the previous status."""
        previous = self.status
        if previous not in CANCELLABLE_STATES:
            raise InvalidTransition(
                f"Cannot cancel order with status: {previous.value}",
                {"status": [f"Cancellation is not allowed from {previous.value}"]},
            )
        self._mark_cancelled(reason or DEFAULT_CANCELLATION_REASON)
        return previous

    def withdraw(self, reason) -> OrderStatus:
        """Admin soft delete: mark cancelled from any status. Returns the previous status.

        An order that is already cancelled keeps its original ``cancelled_at``;
        only the reason is re-stamped.
        """
        previous = self.status
        if previous == OrderStatus.CANCELLED:
            self.cancellation_reason = reason
            self.updated_at = utcnow()
        else:
            self._mark_cancelled(reason)
        return previous

    def _mark_cancelled(self, reason):
        now = utcnow()
        self.order_status = OrderStatus.CANCELLED.value
        self.cancelled_at = now
        self.cancellation_reason = reason
        self.updated_at = now
