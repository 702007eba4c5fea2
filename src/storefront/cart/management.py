"""Cart management — clearing the cart and its open/closed flag."""

from protean import handle
from protean.fields import Identifier

from storefront.cart.cart import ShoppingCart
from storefront.cart.persistence import load_cart, save_cart
from storefront.domain import storefront


@storefront.command(part_of="ShoppingCart")
class ClearCart:
    """Remove every line from the session's cart."""

    session_id = Identifier(required=True)


@storefront.command(part_of="ShoppingCart")
class ToggleCart:
    session_id = Identifier(required=True)


@storefront.command(part_of="ShoppingCart")
class OpenCart:
    session_id = Identifier(required=True)


@storefront.command(part_of="ShoppingCart")
class CloseCart:
    session_id = Identifier(required=True)


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartHandler:
    @handle(ClearCart)
    def clear_cart(self, command):
        cart = load_cart(command.session_id)
        cart.clear_cart()
        save_cart(cart)

    @handle(ToggleCart)
    def toggle_cart(self, command):
        cart = load_cart(command.session_id)
        cart.toggle_visibility()
        save_cart(cart)

    @handle(OpenCart)
    def open_cart(self, command):
        cart = load_cart(command.session_id)
        cart.open_cart()
        save_cart(cart)

    @handle(CloseCart)
    def close_cart(self, command):
        cart = load_cart(command.session_id)
        cart.close_cart()
        save_cart(cart)
