"""Cart item management — commands and handler."""

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String

from storefront.cart.cart import ShoppingCart
from storefront.cart.persistence import load_cart, save_cart
from storefront.domain import storefront


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    session_id = Identifier(required=True)
    product_id = String(required=True, max_length=100)
    name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    original_price = Float(min_value=0.0)
    image = String(max_length=500)
    in_stock = Boolean(default=True)
    is_prime_eligible = Boolean(default=False)
    seller = String(max_length=255)


@storefront.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    session_id = Identifier(required=True)
    product_id = String(required=True, max_length=100)
    quantity = Integer(required=True)


@storefront.command(part_of="ShoppingCart")
class RemoveFromCart:
    session_id = Identifier(required=True)
    product_id = String(required=True, max_length=100)


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        cart = load_cart(command.session_id)
        cart.add_item(
            product_id=command.product_id,
            name=command.name,
            unit_price=command.unit_price,
            image=command.image or "",
            original_price=command.original_price,
            in_stock=command.in_stock,
            is_prime_eligible=command.is_prime_eligible,
            seller=command.seller,
        )
        save_cart(cart)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        cart = load_cart(command.session_id)
        cart.update_quantity(
            product_id=command.product_id,
            quantity=command.quantity,
        )
        save_cart(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = load_cart(command.session_id)
        cart.remove_item(product_id=command.product_id)
        save_cart(cart)
