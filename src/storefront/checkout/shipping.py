"""Checkout addresses — commands and handler."""

import json

from protean import handle
from protean.fields import Boolean, Identifier, Text

from storefront.checkout.checkout import CheckoutSession
from storefront.checkout.persistence import load_checkout, save_checkout
from storefront.domain import storefront


def _address(value):
    return json.loads(value) if isinstance(value, str) else value


@storefront.command(part_of="CheckoutSession")
class SetShippingAddress:
    session_id = Identifier(required=True)
    address = Text(required=True)  # JSON: address dict


@storefront.command(part_of="CheckoutSession")
class SetBillingAddress:
    session_id = Identifier(required=True)
    address = Text(required=True)  # JSON: address dict


@storefront.command(part_of="CheckoutSession")
class SetUseSameAddress:
    session_id = Identifier(required=True)
    use_same = Boolean(required=True)


@storefront.command_handler(part_of=CheckoutSession)
class CheckoutAddressHandler:
    @handle(SetShippingAddress)
    def set_shipping_address(self, command):
        checkout = load_checkout(command.session_id)
        checkout.set_shipping_address(_address(command.address))
        save_checkout(checkout)

    @handle(SetBillingAddress)
    def set_billing_address(self, command):
        checkout = load_checkout(command.session_id)
        checkout.set_billing_address(_address(command.address))
        save_checkout(checkout)

    @handle(SetUseSameAddress)
    def set_use_same_address(self, command):
        checkout = load_checkout(command.session_id)
        checkout.set_use_same_address(command.use_same)
        save_checkout(checkout)
