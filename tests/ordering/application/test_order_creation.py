"""Application tests for order placement."""

import pytest
from catalogue.domain import catalogue
from catalogue.product.product import Product
from ordering.cart.cart import Cart
from ordering.cart.repository import CartRepository
from ordering.domain import ordering
from ordering.order.creation import PlaceOrder
from ordering.order.order import Order
from ordering.order.repository import OrderRepository
from protean.exceptions import ValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError
from shared.errors import EmptyCartError, InternalError, StockError


def _orders():
    return ordering.repository_for(Order)


def _carts():
    return ordering.repository_for(Cart)


def _products():
    return catalogue.repository_for(Product)


class TestPlaceOrder:
    def test_two_line_scenario(self, place_order, make_product):
        shirt = make_product(price=100, stock=10)
        cap = make_product(name="Cap", category="Accessories", price=50, stock=10)
        order = place_order("u1", (shirt, 2, "M"), (cap, 1, "S"))

        assert order.subtotal == 250.0
        assert order.tax == 45.0
        assert order.total_amount == 295.0
        assert _orders().find(order.id) is not None

    def test_stock_is_reserved(self, place_order, make_product, stock_of):
        product = make_product(stock=10)
        place_order("u1", (product, 3, "M"))
        assert stock_of(product.id) == 7

    def test_cart_is_emptied(self, place_order, make_product):
        product = make_product()
        place_order("u1", (product, 1, "M"))
        cart = _carts().find_for_user("u1")
        assert cart.is_empty
        assert cart.total_items == 0

    def test_lines_are_snapshots(self, place_order, make_product):
        product = make_product(price=100)
        order = place_order("u1", (product, 1, "M"))

        _products().collection.update_one({"_id": product.id}, {"$set": {"price": 999, "name": "Renamed"}})

        stored = _orders().get(order.id)
        assert stored.items[0].price == 100.0
        assert stored.items[0].name == "Linen Shirt"

    def test_timestamps_survive_the_store_as_aware_datetimes(self, place_order, make_product):
        product = make_product()
        order = place_order("u1", (product, 1, "M"))

        stored = _orders().get(order.id)
        assert stored.created_at.tzinfo is not None
        assert stored.created_at == order.created_at
        assert stored.updated_at == order.updated_at

    def test_confirmation_email_is_sent(self, place_order, make_product, email_channel):
        product = make_product()
        order = place_order("u1", (product, 1, "M"))
        assert len(email_channel.sent_emails) == 1
        sent = email_channel.sent_emails[0]
        assert sent["to"] == "asha@example.com"
        assert order.order_number in sent["subject"]


class TestFailures:
    def test_empty_cart(self, shipping_address):
        command = PlaceOrder(user_id="u1", shipping_address=shipping_address, payment_method="COD")
        with pytest.raises(EmptyCartError):
            ordering.process(command, asynchronous=False)

    def test_invalid_address_reserves_nothing(self, fill_cart, make_product, shipping_address, stock_of):
        product = make_product(stock=10)
        fill_cart("u1", (product, 2, "M"))
        command = PlaceOrder(
            user_id="u1",
            shipping_address={**shipping_address, "city": ""},
            payment_method="COD",
        )

        with pytest.raises(ValidationError):
            ordering.process(command, asynchronous=False)

        assert stock_of(product.id) == 10
        assert _orders().list_for_user("u1") == []

    def test_failing_line_changes_nothing(self, place_order, make_product, fill_cart, stock_of):
        plenty = make_product(stock=10)
        scarce = make_product(stock=2)
        fill_cart("u1", (scarce, 2, "M"))
        # Someone else buys the scarce product first
        place_order("u2", (scarce, 1, "M"))

        with pytest.raises(StockError):
            place_order("u1", (plenty, 2, "M"))

        assert stock_of(plenty.id) == 10
        assert stock_of(scarce.id) == 1
        assert _orders().list_for_user("u1") == []
        assert len(_carts().find_for_user("u1").items) == 2

    def test_concurrent_checkouts_never_oversell(self, place_order, make_product, stock_of):
        product = make_product(stock=5)
        place_order("u1", (product, 3, "M"))
        with pytest.raises(StockError):
            place_order("u2", (product, 3, "M"))
        assert stock_of(product.id) == 2

    def test_persist_failure_releases_stock(self, place_order, make_product, stock_of, monkeypatch):
        product = make_product(stock=10)

        def broken_add(self, order):
            raise PyMongoError("write failed")

        monkeypatch.setattr(OrderRepository, "add", broken_add)

        with pytest.raises(InternalError):
            place_order("u1", (product, 3, "M"))

        monkeypatch.undo()
        assert stock_of(product.id) == 10
        assert len(_carts().find_for_user("u1").items) == 1
        assert _orders().list_for_user("u1") == []

    def test_duplicate_order_number_is_regenerated(self, place_order, make_product, monkeypatch):
        product = make_product(stock=10)
        original_add = OrderRepository.add
        attempts = []

        def flaky_add(self, order):
            attempts.append(order.order_number)
            if len(attempts) == 1:
                raise DuplicateKeyError("duplicate order_number")
            return original_add(self, order)

        monkeypatch.setattr(OrderRepository, "add", flaky_add)
        order = place_order("u1", (product, 1, "M"))

        assert len(attempts) == 2
        assert _orders().find(order.id).order_number == order.order_number

    def test_notification_failure_does_not_fail_order(self, place_order, make_product, email_channel, stock_of):
        email_channel.configure(should_succeed=False)
        product = make_product(stock=10)
        order = place_order("u1", (product, 1, "M"))
        assert _orders().find(order.id) is not None
        assert stock_of(product.id) == 9

    def test_channel_exception_does_not_fail_order(self, place_order, make_product, email_channel):
        email_channel.configure(raise_error=ConnectionError("relay down"))
        product = make_product()
        order = place_order("u1", (product, 1, "M"))
        assert _orders().find(order.id) is not None

    def test_cart_clear_failure_is_not_fatal(self, place_order, make_product, monkeypatch):
        product = make_product()
        original_save = CartRepository.save

        def save(self, cart):
            if cart.is_empty:
                raise PyMongoError("write failed")
            return original_save(self, cart)

        monkeypatch.setattr(CartRepository, "save", save)
        order = place_order("u1", (product, 1, "M"))
        assert _orders().find(order.id) is not None
