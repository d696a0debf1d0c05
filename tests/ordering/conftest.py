import pytest
from ordering.cart.items import AddToCart
from ordering.domain import ordering
from ordering.order.creation import PlaceOrder


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield


@pytest.fixture()
def fill_cart():
    """Add ``(product, quantity, size)`` selections to a user's cart."""

    def _fill(user_id, *selections):
        cart = None
        for product, quantity, size in selections:
            command = AddToCart(user_id=user_id, product_id=product.id, quantity=quantity, size=size)
            cart = ordering.process(command, asynchronous=False)
        return cart

    return _fill


@pytest.fixture()
def place_order(fill_cart, shipping_address):
    """Fill the cart with the given selections and check out."""

    def _place(user_id, *selections, payment_method="COD", notes=None):
        fill_cart(user_id, *selections)
        command = PlaceOrder(
            user_id=user_id,
            shipping_address=shipping_address,
            payment_method=payment_method,
            notes=notes,
        )
        return ordering.process(command, asynchronous=False)

    return _place
