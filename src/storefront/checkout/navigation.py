"""Checkout navigation — moving between steps and starting over."""

from protean import handle
from protean.fields import Identifier, String

from storefront.checkout.checkout import CheckoutSession, CheckoutStep
from storefront.checkout.persistence import load_checkout, save_checkout
from storefront.domain import storefront


@storefront.command(part_of="CheckoutSession")
class GoToStep:
    session_id = Identifier(required=True)
    step = String(required=True, choices=CheckoutStep)


@storefront.command(part_of="CheckoutSession")
class ResetCheckout:
    session_id = Identifier(required=True)


@storefront.command_handler(part_of=CheckoutSession)
class CheckoutNavigationHandler:
    @handle(GoToStep)
    def go_to_step(self, command):
        checkout = load_checkout(command.session_id)
        checkout.go_to_step(command.step)
        save_checkout(checkout)

    @handle(ResetCheckout)
    def reset_checkout(self, command):
        checkout = load_checkout(command.session_id)
        checkout.reset()
        save_checkout(checkout)
