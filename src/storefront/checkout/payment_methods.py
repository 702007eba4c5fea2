"""Saved payment methods offered at the payment step.

The storefront has no payment integration; these are the demo methods every
visitor can pick from.
"""

SAVED_PAYMENT_METHODS = [
    {
        "method_id": "1",
        "method_type": "credit_card",
        "card_number_masked": "•••• •••• •••• 1234",
        "last4": "1234",
        "expiry_month": "12",
        "expiry_year": "2026",
        "cvv": "•••",
        "cardholder_name": "John Doe",
        "is_default": True,
    },
    {
        "method_id": "2",
        "method_type": "credit_card",
        "card_number_masked": "•••• •••• •••• 5678",
        "last4": "5678",
        "expiry_month": "08",
        "expiry_year": "2027",
        "cvv": "•••",
        "cardholder_name": "John Doe",
        "is_default": False,
    },
]


def list_saved_methods() -> list[dict]:
    return [dict(method) for method in SAVED_PAYMENT_METHODS]


def find_saved_method(method_id) -> dict | None:
    return next(
        (dict(method) for method in SAVED_PAYMENT_METHODS if method["method_id"] == str(method_id)),
        None,
    )
