"""Cart persistence and the editor that guarantees totals are recomputed."""

from pymongo.errors import DuplicateKeyError

from ordering.cart.cart import Cart
from ordering.domain import ordering
from shared.database import CARTS, get_database
from shared.model import from_document, to_document


@ordering.repository(part_of=Cart)
class CartRepository:
    @property
    def collection(self):
        return get_database()[CARTS]

    def find_for_user(self, user_id) -> Cart | None:
        document = self.collection.find_one({"user_id": str(user_id)})
        return from_document(Cart, document) if document else None

    def get_or_create(self, user_id) -> Cart:
        cart = self.find_for_user(user_id)
        if cart is None:
            cart = Cart.create(user_id)
            try:
                self.save(cart)
            except DuplicateKeyError:
                # Another request created the cart first
                cart = self.find_for_user(user_id)
        return cart

    def save(self, cart: Cart) -> Cart:
        """Persist the cart as-is. Totals are NOT recomputed here."""
        self.collection.replace_one({"_id": cart.id}, to_document(cart), upsert=True)
        return cart


class CartEditor:
    """Unit of work over one user's cart.

    Mutate ``editor.cart``, then ``commit()``: totals are recomputed and the
    cart is saved in one step, so a committed cart never carries stale totals.
    """

    def __init__(self, user_id):
        self.repository = ordering.repository_for(Cart)
        self.cart = self.repository.get_or_create(user_id)

    def commit(self) -> Cart:
        self.cart.recompute_totals()
        return self.repository.save(self.cart)
