"""Shopping Cart aggregate: one per user, converted into an Order at checkout.

Totals are stored on the document but never recalculated implicitly: every
structural mutation must be followed by ``recompute_totals()`` before the
cart is persisted. Application code goes through ``CartEditor.commit()``,
which does exactly that; ``CartRepository.save`` persists whatever it is
given.
"""

from protean.fields import DateTime, Float, Identifier, Integer, List, String, ValueObject

from ordering.domain import ordering
from shared.errors import ValidationError
from shared.model import new_id, utcnow
from shared.money import as_number, line_total, to_decimal


@ordering.value_object(part_of="Cart")
class CartLine:
    """A selected product with quantity, optional size/color and a unit price snapshot."""

    id = String(default=new_id, max_length=36)
    product_id = String(required=True, max_length=36)
    quantity = Integer(required=True, min_value=1)
    size = String(max_length=10)
    color = String(max_length=50, sanitize=False)
    price = Float(required=True, min_value=0)

    def matches(self, product_id, size=None, color=None) -> bool:
        return str(self.product_id) == str(product_id) and self.size == size and self.color == color


@ordering.aggregate
class Cart:
    user_id = Identifier(required=True)
    items = List(content_type=ValueObject(CartLine))
    total_items = Integer(default=0)
    total_price = Float(default=0.0)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id):
        now = utcnow()
        return cls(user_id=str(user_id), created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------
    def recompute_totals(self):
        self.total_items = sum(line.quantity for line in self.items)
        self.total_price = as_number(sum((line_total(line.price, line.quantity) for line in self.items), to_decimal(0)))

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def find_line(self, product_id, size=None, color=None) -> CartLine | None:
        return next((line for line in self.items if line.matches(product_id, size, color)), None)

    def quantity_of(self, product_id) -> int:
        """Units of a product across all of its size/color lines."""
        return sum(line.quantity for line in self.items if str(line.product_id) == str(product_id))

    def add_item(self, product_id, quantity, price, size=None, color=None) -> CartLine:
        """Add a line, or grow the existing line for the same product, size and color."""
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1", {"quantity": ["Quantity must be at least 1"]})

        existing = self.find_line(product_id, size, color)
        if existing:
            line = existing.replace(quantity=existing.quantity + quantity)
            self._replace_line(existing, line)
        else:
            line = CartLine(product_id=str(product_id), quantity=quantity, size=size, color=color, price=price)
            self.items = [*self.items, line]

        self.updated_at = utcnow()
        return line

    def update_item_quantity(self, line_id, quantity) -> CartLine:
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1", {"quantity": ["Quantity must be at least 1"]})

        current = self.get_line(line_id)
        line = current.replace(quantity=quantity)
        self._replace_line(current, line)
        self.updated_at = utcnow()
        return line

    def get_line(self, line_id) -> CartLine:
        line = next((line for line in self.items if line.id == str(line_id)), None)
        if line is None:
            raise ValidationError("Item not found in cart", {"item_id": ["Item not found in cart"]})
        return line

    def _replace_line(self, current: CartLine, line: CartLine):
        self.items = [line if item.id == current.id else item for item in self.items]

    def remove_item(self, product_id, size=None, color=None):
        self.items = [line for line in self.items if not line.matches(product_id, size, color)]
        self.updated_at = utcnow()

    def clear(self):
        self.items = []
        self.updated_at = utcnow()

    @property
    def is_empty(self) -> bool:
        return not self.items
