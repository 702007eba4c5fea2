"""Application tests for cart commands and their write-through storage."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.cart.cart import ShoppingCart
from storefront.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from storefront.cart.management import ClearCart, CloseCart, OpenCart, ToggleCart
from storefront.cart.persistence import CartStorage, load_cart

SESSION = "sess-cart-001"


def _add(product_id="p1", unit_price=20.0, **overrides):
    fields = {
        "session_id": SESSION,
        "product_id": product_id,
        "name": f"Product {product_id}",
        "unit_price": unit_price,
    }
    fields.update(overrides)
    current_domain.process(AddToCart(**fields), asynchronous=False)


def _stored(store):
    return json.loads(store.get(f"storefront-cart:{SESSION}"))


def _cart():
    return current_domain.repository_for(ShoppingCart).get(SESSION)


class TestAddToCartCommand:
    def test_add_item_persists(self):
        _add()
        cart = _cart()
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 1

    def test_add_twice_increments(self):
        _add()
        _add()
        cart = _cart()
        assert cart.items[0].quantity == 2
        assert cart.total == pytest.approx(43.20)

    def test_writes_item_list_through(self, store):
        _add("p1")
        _add("p2", unit_price=5.0, seller="Acme")
        stored = _stored(store)
        assert [(line["product_id"], line["quantity"]) for line in stored] == [("p1", 1), ("p2", 1)]
        assert stored[1]["seller"] == "Acme"

    def test_out_of_stock_is_rejected(self, store):
        with pytest.raises(ValidationError):
            _add(in_stock=False)
        assert store.get(f"storefront-cart:{SESSION}") is None


class TestUpdateCartQuantityCommand:
    def test_update_quantity_persists(self, store):
        _add()
        current_domain.process(
            UpdateCartQuantity(session_id=SESSION, product_id="p1", quantity=4),
            asynchronous=False,
        )
        assert _cart().items[0].quantity == 4
        assert _stored(store)[0]["quantity"] == 4

    def test_zero_quantity_removes_line(self, store):
        _add()
        current_domain.process(
            UpdateCartQuantity(session_id=SESSION, product_id="p1", quantity=0),
            asynchronous=False,
        )
        assert len(_cart().items) == 0
        assert _stored(store) == []


class TestRemoveFromCartCommand:
    def test_remove_item_persists(self, store):
        _add("p1")
        _add("p2")
        current_domain.process(RemoveFromCart(session_id=SESSION, product_id="p1"), asynchronous=False)
        assert [item.product_id for item in _cart().items] == ["p2"]
        assert [line["product_id"] for line in _stored(store)] == ["p2"]


class TestCartManagementCommands:
    def test_clear_cart(self, store):
        _add("p1")
        _add("p2")
        current_domain.process(ClearCart(session_id=SESSION), asynchronous=False)
        assert len(_cart().items) == 0
        assert _stored(store) == []

    def test_visibility_commands(self):
        current_domain.process(ToggleCart(session_id=SESSION), asynchronous=False)
        assert _cart().is_open is True
        current_domain.process(CloseCart(session_id=SESSION), asynchronous=False)
        assert _cart().is_open is False
        current_domain.process(OpenCart(session_id=SESSION), asynchronous=False)
        assert _cart().is_open is True


class TestRehydration:
    def test_cart_restored_from_storage_when_not_live(self, store):
        store.set(
            f"storefront-cart:{SESSION}",
            json.dumps(
                [
                    {"product_id": "p1", "name": "One", "unit_price": 20.0, "quantity": 2},
                    {"product_id": "p2", "name": "Two", "unit_price": 5.0, "quantity": 1},
                ]
            ),
        )
        cart = load_cart(SESSION)
        assert [(i.product_id, i.quantity) for i in cart.items] == [("p1", 2), ("p2", 1)]
        assert cart.subtotal == pytest.approx(45.0)

    def test_commands_continue_from_restored_cart(self, store):
        CartStorage(SESSION, store).save([{"product_id": "p1", "name": "One", "unit_price": 20.0, "quantity": 1}])
        _add("p1")
        assert _cart().items[0].quantity == 2

    def test_live_cart_wins_over_storage(self, store):
        _add("p1")
        store.set(f"storefront-cart:{SESSION}", json.dumps([]))
        assert len(load_cart(SESSION).items) == 1


class TestCorruptedStorage:
    @pytest.mark.parametrize("raw", ["{not json", json.dumps({"items": []}), json.dumps([1, 2])])
    def test_unreadable_value_falls_back_to_empty_cart(self, store, raw):
        store.set(f"storefront-cart:{SESSION}", raw)
        cart = load_cart(SESSION)
        assert len(cart.items) == 0
        assert store.get(f"storefront-cart:{SESSION}") is None

    def test_line_missing_fields_falls_back_to_empty_cart(self, store):
        store.set(f"storefront-cart:{SESSION}", json.dumps([{"name": "No id"}]))
        cart = load_cart(SESSION)
        assert len(cart.items) == 0
        assert store.get(f"storefront-cart:{SESSION}") is None

    def test_duplicate_product_lines_fall_back_to_empty_cart(self, store):
        line = {"product_id": "p1", "name": "One", "unit_price": 20.0, "quantity": 1}
        store.set(f"storefront-cart:{SESSION}", json.dumps([line, line]))
        cart = load_cart(SESSION)
        assert len(cart.items) == 0
        assert store.get(f"storefront-cart:{SESSION}") is None

    def test_adding_after_corruption_starts_fresh(self, store):
        store.set(f"storefront-cart:{SESSION}", "corrupted")
        _add("p1")
        assert [line["product_id"] for line in _stored(store)] == ["p1"]
