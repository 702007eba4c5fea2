"""Shared BDD fixtures and step definitions for the Storefront domain."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from storefront.cart.items import AddToCart
from storefront.cart.persistence import load_cart


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def session_id():
    return "sess-bdd-001"


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def add_product(session_id):
    """Add one unit of a product to the scenario's cart through the command."""

    def _add(product_id, price, in_stock=True):
        current_domain.process(
            AddToCart(
                session_id=session_id,
                product_id=product_id,
                name=f"Product {product_id}",
                unit_price=price,
                in_stock=in_stock,
            ),
            asynchronous=False,
        )

    return _add


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an empty cart")
def empty_cart(store, session_id):
    assert store.get(f"storefront-cart:{session_id}") is None


@given(parsers.cfparse('product "{product_id}" priced {price:f} is in the cart'))
def product_in_cart(add_product, product_id, price):
    add_product(product_id, price)


@given(parsers.cfparse('a cart holding product "{product_id}" priced {price:f}'))
def cart_holding_product(add_product, product_id, price):
    add_product(product_id, price)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart has {count:d} line"))
def cart_has_n_lines_singular(session_id, count):
    assert len(load_cart(session_id).items) == count


@then(parsers.cfparse("the cart has {count:d} lines"))
def cart_has_n_lines(session_id, count):
    assert len(load_cart(session_id).items) == count


@then("the cart action fails with a validation error")
def cart_action_fails(error):
    assert isinstance(error["exc"], ValidationError)


@then("the order action fails with a validation error")
def order_action_fails(error):
    assert isinstance(error["exc"], ValidationError)
