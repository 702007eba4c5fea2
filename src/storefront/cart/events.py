"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product was added to the cart, or its line grew by one."""

    __version__ = 1

    session_id = Identifier(required=True)
    product_id = String(required=True)
    quantity = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    """The quantity of a cart line was set to a new positive value."""

    __version__ = 1

    session_id = Identifier(required=True)
    product_id = String(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartItemRemoved:
    """A line was removed, explicitly or by setting its quantity to zero."""

    __version__ = 1

    session_id = Identifier(required=True)
    product_id = String(required=True)


@storefront.event(part_of="ShoppingCart")
class CartCleared:
    """Every line was removed from the cart."""

    __version__ = 1

    session_id = Identifier(required=True)
    removed_count = Integer(required=True)


@storefront.event(part_of="ShoppingCart")
class CartRestored:
    """The cart was rehydrated from persisted storage."""

    __version__ = 1

    session_id = Identifier(required=True)
    item_count = Integer(required=True)
