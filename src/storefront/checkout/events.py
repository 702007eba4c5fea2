"""Domain events for the CheckoutSession aggregate."""

from protean.fields import Float, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="CheckoutSession")
class ShippingAddressProvided:
    __version__ = 1

    session_id = Identifier(required=True)
    city = String(required=True)
    country = String(required=True)


@storefront.event(part_of="CheckoutSession")
class PaymentMethodSelected:
    __version__ = 1

    session_id = Identifier(required=True)
    method_id = String(required=True)
    method_type = String(required=True)
    last4 = String()


@storefront.event(part_of="CheckoutSession")
class CheckoutStepChanged:
    """The wizard moved to another step, forwards or backwards."""

    __version__ = 1

    session_id = Identifier(required=True)
    from_step = String(required=True)
    to_step = String(required=True)


@storefront.event(part_of="CheckoutSession")
class OrderPlaced:
    __version__ = 1

    session_id = Identifier(required=True)
    order_id = Identifier(required=True)
    order_number = String(required=True)
    total = Float(required=True)


@storefront.event(part_of="CheckoutSession")
class OrderPlacementFailed:
    """The order service rejected the order; the session stays on review."""

    __version__ = 1

    session_id = Identifier(required=True)
    reason = String(required=True)


@storefront.event(part_of="CheckoutSession")
class CheckoutReset:
    __version__ = 1

    session_id = Identifier(required=True)
