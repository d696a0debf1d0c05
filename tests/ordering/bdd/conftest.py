"""Shared BDD fixtures and step definitions for order scenarios."""

import pytest
from ordering.cart.items import AddToCart
from ordering.domain import ordering
from ordering.order.cancellation import CancelOrder
from ordering.order.creation import PlaceOrder
from ordering.order.order import Order, OrderStatus
from ordering.order.status import UpdateOrderStatus
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------
@pytest.fixture()
def products():
    """Products created by Given steps, keyed by name."""
    return {}


@pytest.fixture()
def checkouts():
    """Outcome of each user's checkout: the order, or the error it raised."""
    return {}


@pytest.fixture()
def error():
    """Container for the error raised by the last When step."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:g} with stock {stock:d}'))
def _(products, make_product, name, price, stock):
    products[name] = make_product(name=name, price=price, stock=stock)


@given(parsers.cfparse('"{user_id}" has {quantity:d} of "{name}" in the cart'))
def _(products, user_id, quantity, name):
    command = AddToCart(user_id=user_id, product_id=products[name].id, quantity=quantity, size="M")
    ordering.process(command, asynchronous=False)


@given(parsers.cfparse('"{user_id}" has placed an order for {quantity:d} of "{name}"'), target_fixture="order")
def _(products, shipping_address, user_id, quantity, name):
    ordering.process(
        AddToCart(user_id=user_id, product_id=products[name].id, quantity=quantity, size="M"),
        asynchronous=False,
    )
    return ordering.process(
        PlaceOrder(user_id=user_id, shipping_address=shipping_address, payment_method="COD"),
        asynchronous=False,
    )


@given(parsers.cfparse('the order was moved to "{status}"'), target_fixture="order")
def _(order, status):
    if status == OrderStatus.PROCESSING.value:
        return order
    return ordering.process(UpdateOrderStatus(order_id=order.id, status=status), asynchronous=False)


@given("the order was cancelled by its customer", target_fixture="order")
def _(order):
    return ordering.process(CancelOrder(order_id=order.id, user_id=order.user_id), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def _(products, stock_of, name, stock):
    assert stock_of(products[name].id) == stock


@then(parsers.cfparse('the order status is "{status}"'))
def _(order, status):
    assert ordering.repository_for(Order).get(order.id).order_status == status


@then(parsers.cfparse('the action fails with "{kind}"'))
def _(error, kind):
    assert error["exc"] is not None, "Expected the action to fail but it succeeded"
    assert error["exc"].kind == kind
