"""Order placement — command and handler.

Placing an order prices the review against the live cart and hands the
snapshot to the order service. A failure never escapes the handler: it is
recorded on the checkout session, which stays on review so the visitor can
retry. On success the session moves to confirmation and the cart is emptied.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Text

from storefront.cart.persistence import load_cart, save_cart
from storefront.checkout.checkout import CheckoutSession
from storefront.checkout.persistence import load_checkout, save_checkout
from storefront.domain import storefront
from storefront.order.service import OrderServiceError, get_order_service

logger = structlog.get_logger(__name__)

EMPTY_CART_ERROR = "Your cart is empty"


@storefront.command(part_of="CheckoutSession")
class PlaceOrder:
    session_id = Identifier(required=True)
    notes = Text()


@storefront.command_handler(part_of=CheckoutSession)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        checkout = load_checkout(command.session_id)
        cart = load_cart(command.session_id)
        checkout.begin_placement(cart.totals)

        if not cart.items:
            checkout.record_order_failure(EMPTY_CART_ERROR)
            save_checkout(checkout)
            return None

        order_data = {
            "session_id": str(command.session_id),
            "items": [
                {
                    "product_id": item.product_id,
                    "name": item.name,
                    "unit_price": item.unit_price,
                    "quantity": item.quantity,
                    "image": item.image,
                    "seller": item.seller,
                }
                for item in cart.items
            ],
            "pricing": checkout.order_summary.to_dict(),
            "shipping_address": checkout.shipping_address.to_dict(),
            "billing_address": checkout.billing_address.to_dict() if checkout.billing_address else None,
            "payment_method": checkout.payment_method.label,
            "notes": command.notes,
        }

        try:
            order = get_order_service().create_order(order_data)
        except OrderServiceError as exc:
            logger.warning("Order placement failed", session_id=str(command.session_id), reason=str(exc))
            checkout.record_order_failure(str(exc))
            save_checkout(checkout)
            return None

        checkout.record_order_placed(order.id, order.order_number)
        save_checkout(checkout)

        cart.clear_cart()
        save_cart(cart)
        return str(order.id)
