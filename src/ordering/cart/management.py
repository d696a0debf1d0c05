"""Cart management: retrieval and clearing."""

from protean import handle
from protean.fields import Identifier

from ordering.cart.cart import Cart
from ordering.cart.repository import CartEditor
from ordering.domain import ordering


@ordering.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)


@ordering.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(ClearCart)
    def clear_cart(self, command):
        editor = CartEditor(command.user_id)
        editor.cart.clear()
        return editor.commit()


def get_cart(user_id) -> Cart:
    """Return the user's cart, creating an empty one on first access."""
    return ordering.repository_for(Cart).get_or_create(user_id)
