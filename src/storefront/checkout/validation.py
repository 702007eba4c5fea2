"""Field validation for the checkout forms.

Each validator returns a ``{field: [message]}`` mapping, empty when the input
is acceptable, so callers can raise it directly as a ``ValidationError``.
"""

import re
from datetime import date

PHONE_PATTERN = re.compile(r"^\+?[\d\s\-()]{10,}$")
CARD_NUMBER_PATTERN = re.compile(r"^\d{13,}$")
CVV_PATTERN = re.compile(r"^\d{3,4}$")

_ADDRESS_REQUIRED = {
    "first_name": "First name is required",
    "last_name": "Last name is required",
    "street": "Street address is required",
    "city": "City is required",
    "state": "State is required",
    "zip_code": "ZIP code is required",
    "country": "Country is required",
}


def _blank(value) -> bool:
    return value is None or not str(value).strip()


def validate_shipping_address(data: dict) -> dict:
    """Check the required address fields and, when present, the phone shape."""
    errors = {}
    for field, message in _ADDRESS_REQUIRED.items():
        if _blank(data.get(field)):
            errors[field] = [message]

    phone = data.get("phone")
    if not _blank(phone) and not PHONE_PATTERN.match(str(phone)):
        errors["phone"] = ["Please enter a valid phone number"]

    return errors


def _as_int(value):
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def validate_new_card(data: dict, today: date | None = None) -> dict:
    """Validate a new-card form.

    Args:
        data: Dict with card_number, expiry_month, expiry_year, cvv and
              cardholder_name.
        today: Reference date for the expiry check; defaults to today.
    """
    today = today or date.today()
    errors = {}

    card_number = data.get("card_number")
    if _blank(card_number):
        errors["card_number"] = ["Card number is required"]
    elif not CARD_NUMBER_PATTERN.match(re.sub(r"\s", "", str(card_number))):
        errors["card_number"] = ["Please enter a valid card number"]

    month = data.get("expiry_month")
    if _blank(month):
        errors["expiry_month"] = ["Month is required"]
    else:
        month_value = _as_int(month)
        if month_value is None or not 1 <= month_value <= 12:
            errors["expiry_month"] = ["Invalid month"]

    year = data.get("expiry_year")
    if _blank(year):
        errors["expiry_year"] = ["Year is required"]
    else:
        year_value = _as_int(year)
        if year_value is None or year_value < today.year:
            errors["expiry_year"] = ["Card has expired"]

    cvv = data.get("cvv")
    if _blank(cvv):
        errors["cvv"] = ["CVV is required"]
    elif not CVV_PATTERN.match(str(cvv).strip()):
        errors["cvv"] = ["Invalid CVV"]

    if _blank(data.get("cardholder_name")):
        errors["cardholder_name"] = ["Cardholder name is required"]

    return errors
