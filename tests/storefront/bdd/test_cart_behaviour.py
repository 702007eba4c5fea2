"""BDD tests for the shopping cart."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when
from storefront.cart.items import RemoveFromCart, UpdateCartQuantity
from storefront.cart.management import ClearCart
from storefront.cart.persistence import load_cart

scenarios("features/cart.feature")


def _key(session_id):
    return f"storefront-cart:{session_id}"


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the stored cart holds {quantity:d} of product "{product_id}" priced {price:f}'))
def stored_cart(store, session_id, quantity, product_id, price):
    line = {"product_id": product_id, "name": f"Product {product_id}", "unit_price": price, "quantity": quantity}
    store.set(_key(session_id), json.dumps([line]))


@given("the stored cart is corrupted")
def corrupted_cart(store, session_id):
    store.set(_key(session_id), "{not json")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('product "{product_id}" priced {price:f} is added to the cart'))
def add_to_cart(add_product, product_id, price):
    add_product(product_id, price)


@when(parsers.cfparse('out of stock product "{product_id}" priced {price:f} is added to the cart'))
def add_out_of_stock(add_product, product_id, price, error):
    try:
        add_product(product_id, price, in_stock=False)
    except ValidationError as exc:
        error["exc"] = exc


@when(parsers.cfparse('the quantity of "{product_id}" is set to {quantity:d}'))
def set_quantity(session_id, product_id, quantity):
    current_domain.process(
        UpdateCartQuantity(session_id=session_id, product_id=product_id, quantity=quantity),
        asynchronous=False,
    )


@when(parsers.cfparse('product "{product_id}" is removed from the cart'))
def remove_from_cart(session_id, product_id):
    current_domain.process(RemoveFromCart(session_id=session_id, product_id=product_id), asynchronous=False)


@when("the cart is cleared")
def clear_cart(session_id):
    current_domain.process(ClearCart(session_id=session_id), asynchronous=False)


@when("the visitor returns")
def visitor_returns(session_id):
    load_cart(session_id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the line for "{product_id}" has quantity {quantity:d}'))
def line_quantity(session_id, product_id, quantity):
    line = next(item for item in load_cart(session_id).items if item.product_id == product_id)
    assert line.quantity == quantity


@then(parsers.cfparse("the cart subtotal is {amount:f}"))
def cart_subtotal(session_id, amount):
    assert load_cart(session_id).subtotal == pytest.approx(amount)


@then(parsers.cfparse("the cart shipping fee is {amount:f}"))
def cart_shipping_fee(session_id, amount):
    assert load_cart(session_id).shipping_fee == pytest.approx(amount)


@then(parsers.cfparse("the cart tax is {amount:f}"))
def cart_tax(session_id, amount):
    assert load_cart(session_id).tax == pytest.approx(amount)


@then(parsers.cfparse("the cart total is {amount:f}"))
def cart_total(session_id, amount):
    assert load_cart(session_id).total == pytest.approx(amount)


@then("nothing is stored for the cart")
def nothing_stored(store, session_id):
    assert store.get(_key(session_id)) is None
