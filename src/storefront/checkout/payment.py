"""Payment step — command and handler.

The visitor either picks one of the saved methods or submits a new card.
A new card is validated field by field and reduced to its masked form before
it reaches the aggregate.
"""

import json
import re
from uuid import uuid4

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text

from storefront.cart.persistence import load_cart
from storefront.checkout.checkout import CheckoutSession
from storefront.checkout.payment_methods import find_saved_method
from storefront.checkout.persistence import load_checkout, save_checkout
from storefront.checkout.validation import validate_new_card
from storefront.domain import storefront


@storefront.command(part_of="CheckoutSession")
class SetPaymentMethod:
    session_id = Identifier(required=True)
    saved_method_id = String(max_length=50)
    card = Text()  # JSON: new card form


def mask_card(card: dict) -> dict:
    """Reduce a validated card form to the fields a ``PaymentMethod`` keeps."""
    digits = re.sub(r"\s", "", str(card["card_number"]))
    last4 = digits[-4:]
    return {
        "method_id": f"card-{uuid4().hex[:8]}",
        "method_type": "credit_card",
        "card_number_masked": f"•••• •••• •••• {last4}",
        "last4": last4,
        "expiry_month": str(card["expiry_month"]).strip().zfill(2),
        "expiry_year": str(card["expiry_year"]).strip(),
        "cvv": "•••",
        "cardholder_name": str(card["cardholder_name"]).strip(),
        "is_default": False,
    }


def resolve_payment_method(saved_method_id=None, card=None) -> dict:
    if saved_method_id:
        method = find_saved_method(saved_method_id)
        if method is None:
            raise ValidationError({"saved_method_id": [f"Unknown payment method: {saved_method_id}"]})
        return method

    if card:
        errors = validate_new_card(card)
        if errors:
            raise ValidationError(errors)
        return mask_card(card)

    raise ValidationError({"payment_method": ["Select a saved payment method or enter a new card"]})


@storefront.command_handler(part_of=CheckoutSession)
class CheckoutPaymentHandler:
    @handle(SetPaymentMethod)
    def set_payment_method(self, command):
        card = json.loads(command.card) if isinstance(command.card, str) else command.card
        method = resolve_payment_method(command.saved_method_id, card)

        checkout = load_checkout(command.session_id)
        checkout.set_payment_method(method, load_cart(command.session_id).totals)
        save_checkout(checkout)
