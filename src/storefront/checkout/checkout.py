"""CheckoutSession aggregate — the four-step checkout wizard.

Steps: SHIPPING → PAYMENT → REVIEW → CONFIRMATION

A step is only reachable once the steps before it are complete: PAYMENT needs
a shipping address, REVIEW also a payment method, CONFIRMATION also a placed
order. While ``use_same_address_for_billing`` is set the billing address is a
copy of the shipping address. Both rules are enforced as post-invariants, so
every multi-field change happens inside ``atomic_change``.
"""

from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, String, ValueObject

from storefront.checkout.events import (
    CheckoutReset,
    CheckoutStepChanged,
    OrderPlaced,
    OrderPlacementFailed,
    PaymentMethodSelected,
    ShippingAddressProvided,
)
from storefront.checkout.validation import validate_shipping_address
from storefront.domain import storefront


class CheckoutStep(Enum):
    SHIPPING = "shipping"
    PAYMENT = "payment"
    REVIEW = "review"
    CONFIRMATION = "confirmation"


_STEP_ORDER = [
    CheckoutStep.SHIPPING,
    CheckoutStep.PAYMENT,
    CheckoutStep.REVIEW,
    CheckoutStep.CONFIRMATION,
]


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="CheckoutSession")
class ShippingAddress:
    first_name = String(required=True, max_length=100)
    last_name = String(required=True, max_length=100)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    zip_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)
    phone = String(max_length=30)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@storefront.value_object(part_of="CheckoutSession")
class PaymentMethod:
    """The payment method chosen for the order.

    Only masked card data is ever held; the full number and CVV of a new card
    never leave the command that submitted them.
    """

    method_id = String(required=True, max_length=50)
    method_type = String(max_length=50, default="credit_card")
    card_number_masked = String(required=True, max_length=50)
    last4 = String(max_length=4)
    expiry_month = String(max_length=2)
    expiry_year = String(max_length=4)
    cvv = String(max_length=10, default="•••")
    cardholder_name = String(max_length=255)
    is_default = Boolean(default=False)

    @property
    def label(self) -> str:
        return f"Card ending in {self.last4}" if self.last4 else self.method_type


@storefront.value_object(part_of="CheckoutSession")
class OrderSummary:
    subtotal = Float(default=0.0)
    shipping = Float(default=0.0)
    tax = Float(default=0.0)
    discount = Float(default=0.0)
    total = Float(default=0.0)

    @classmethod
    def from_totals(cls, totals):
        """Build a summary from the cart's derived totals."""
        return cls(
            subtotal=totals.subtotal,
            shipping=totals.shipping_fee,
            tax=totals.tax,
            discount=0.0,
            total=totals.total,
        )


def _same_address(first, second) -> bool:
    if first is None or second is None:
        return first is None and second is None
    return first.to_dict() == second.to_dict()


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class CheckoutSession:
    session_id = Identifier(identifier=True, required=True)
    current_step = String(choices=CheckoutStep, default=CheckoutStep.SHIPPING.value)
    shipping_address = ValueObject(ShippingAddress)
    billing_address = ValueObject(ShippingAddress)
    use_same_address_for_billing = Boolean(default=True)
    payment_method = ValueObject(PaymentMethod)
    order_summary = ValueObject(OrderSummary)
    is_processing = Boolean(default=False)
    error = String(max_length=500)
    order_id = Identifier()
    order_number = String(max_length=50)

    @invariant.post
    def steps_require_their_prerequisites(self):
        missing = self._missing_prerequisite(CheckoutStep(self.current_step))
        if missing:
            raise ValidationError({"current_step": [missing]})

    @invariant.post
    def billing_mirrors_shipping_when_shared(self):
        if self.use_same_address_for_billing and not _same_address(self.billing_address, self.shipping_address):
            raise ValidationError({"billing_address": ["Billing address must match the shipping address"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, session_id):
        return cls(
            session_id=session_id,
            current_step=CheckoutStep.SHIPPING.value,
            use_same_address_for_billing=True,
            is_processing=False,
        )

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _assert_step(self, step, action):
        if CheckoutStep(self.current_step) != step:
            raise ValidationError(
                {"current_step": [f"Cannot {action} during the {self.current_step} step"]},
            )

    def _missing_prerequisite(self, step):
        reached = _STEP_ORDER.index(step)
        if reached >= 1 and self.shipping_address is None:
            return "A shipping address is required before payment"
        if reached >= 2 and self.payment_method is None:
            return "A payment method is required before review"
        if reached >= 3 and not self.order_id:
            return "An order must be placed before confirmation"
        return None

    def _move_to(self, step):
        """Set the step and record the change. Call inside ``atomic_change``."""
        previous = self.current_step
        self.current_step = step.value
        if previous != step.value:
            self.raise_(
                CheckoutStepChanged(
                    session_id=str(self.session_id),
                    from_step=previous,
                    to_step=step.value,
                )
            )

    @staticmethod
    def _build_address(data):
        errors = validate_shipping_address(data)
        if errors:
            raise ValidationError(errors)

        return ShippingAddress(
            first_name=data["first_name"].strip(),
            last_name=data["last_name"].strip(),
            street=data["street"].strip(),
            city=data["city"].strip(),
            state=data["state"].strip(),
            zip_code=data["zip_code"].strip(),
            country=data["country"].strip(),
            phone=(data.get("phone") or "").strip() or None,
        )

    # -------------------------------------------------------------------
    # Addresses
    # -------------------------------------------------------------------
    def set_shipping_address(self, address):
        """Record the shipping address and advance to the payment step.

        Args:
            address: Dict with first_name, last_name, street, city, state,
                     zip_code, country and an optional phone.
        """
        self._assert_step(CheckoutStep.SHIPPING, "set the shipping address")
        shipping = self._build_address(address)

        with atomic_change(self):
            self.shipping_address = shipping
            if self.use_same_address_for_billing:
                self.billing_address = shipping
            self._move_to(CheckoutStep.PAYMENT)

        self.raise_(
            ShippingAddressProvided(
                session_id=str(self.session_id),
                city=shipping.city,
                country=shipping.country,
            )
        )

    def set_billing_address(self, address):
        """Use a separate billing address. Stops mirroring the shipping address."""
        if CheckoutStep(self.current_step) == CheckoutStep.CONFIRMATION:
            raise ValidationError({"current_step": ["Checkout is already complete"]})
        billing = self._build_address(address)

        with atomic_change(self):
            self.use_same_address_for_billing = False
            self.billing_address = billing

    def set_use_same_address(self, use_same):
        with atomic_change(self):
            self.use_same_address_for_billing = use_same
            if use_same:
                self.billing_address = self.shipping_address

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def set_payment_method(self, method, totals):
        """Record the payment method, price the order and advance to review.

        Args:
            method: Dict of masked ``PaymentMethod`` fields.
            totals: The cart's current ``CartTotals``.
        """
        self._assert_step(CheckoutStep.PAYMENT, "choose a payment method")
        payment_method = PaymentMethod(**method)

        with atomic_change(self):
            self.payment_method = payment_method
            self.order_summary = OrderSummary.from_totals(totals)
            self._move_to(CheckoutStep.REVIEW)

        self.raise_(
            PaymentMethodSelected(
                session_id=str(self.session_id),
                method_id=payment_method.method_id,
                method_type=payment_method.method_type,
                last4=payment_method.last4,
            )
        )

    def refresh_summary(self, totals):
        self.order_summary = OrderSummary.from_totals(totals)

    # -------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------
    def go_to_step(self, step):
        """Jump to another step; clears any placement error.

        Going back is always allowed. Going forward is allowed only when the
        target step's prerequisites are already in place. Confirmation is only
        reached by placing an order.
        """
        try:
            target = CheckoutStep(step)
        except ValueError:
            raise ValidationError({"step": [f"Unknown checkout step: {step}"]}) from None

        if target == CheckoutStep.CONFIRMATION:
            raise ValidationError({"step": ["Confirmation is reached by placing an order"]})
        if CheckoutStep(self.current_step) == CheckoutStep.CONFIRMATION:
            raise ValidationError({"current_step": ["Checkout is already complete"]})
        if self.is_processing:
            raise ValidationError({"current_step": ["An order is being placed"]})
        missing = self._missing_prerequisite(target)
        if missing:
            raise ValidationError({"step": [missing]})

        with atomic_change(self):
            self._move_to(target)
            self.error = None

    # -------------------------------------------------------------------
    # Order placement
    # -------------------------------------------------------------------
    def begin_placement(self, totals):
        """Mark the session as processing and re-price against the cart."""
        self._assert_step(CheckoutStep.REVIEW, "place an order")
        if self.is_processing:
            raise ValidationError({"is_processing": ["An order is already being placed"]})

        with atomic_change(self):
            self.is_processing = True
            self.error = None
            self.order_summary = OrderSummary.from_totals(totals)

    def record_order_placed(self, order_id, order_number):
        with atomic_change(self):
            self.order_id = str(order_id)
            self.order_number = order_number
            self.is_processing = False
            self._move_to(CheckoutStep.CONFIRMATION)

        self.raise_(
            OrderPlaced(
                session_id=str(self.session_id),
                order_id=str(order_id),
                order_number=order_number,
                total=self.order_summary.total if self.order_summary else 0.0,
            )
        )

    def record_order_failure(self, reason):
        """Stay on review with the failure surfaced as the session error."""
        with atomic_change(self):
            self.error = reason
            self.is_processing = False

        self.raise_(
            OrderPlacementFailed(
                session_id=str(self.session_id),
                reason=reason,
            )
        )

    def reset(self):
        """Return to the initial state: shipping step, nothing recorded."""
        with atomic_change(self):
            self.current_step = CheckoutStep.SHIPPING.value
            self.shipping_address = None
            self.billing_address = None
            self.use_same_address_for_billing = True
            self.payment_method = None
            self.order_summary = None
            self.is_processing = False
            self.error = None
            self.order_id = None
            self.order_number = None

        self.raise_(CheckoutReset(session_id=str(self.session_id)))
