"""Tests for checkout form validation."""

from datetime import date

import pytest
from storefront.checkout.validation import validate_new_card, validate_shipping_address

VALID_ADDRESS = {
    "first_name": "Jane",
    "last_name": "Doe",
    "street": "123 Main St",
    "city": "Seattle",
    "state": "WA",
    "zip_code": "98101",
    "country": "United States",
}

VALID_CARD = {
    "card_number": "4111 1111 1111 1111",
    "expiry_month": "09",
    "expiry_year": "2030",
    "cvv": "123",
    "cardholder_name": "Jane Doe",
}

TODAY = date(2026, 10, 19)


class TestShippingAddress:
    def test_valid_address_has_no_errors(self):
        assert validate_shipping_address(VALID_ADDRESS) == {}

    @pytest.mark.parametrize(
        "field,message",
        [
            ("first_name", "First name is required"),
            ("last_name", "Last name is required"),
            ("street", "Street address is required"),
            ("city", "City is required"),
            ("state", "State is required"),
            ("zip_code", "ZIP code is required"),
            ("country", "Country is required"),
        ],
    )
    def test_blank_required_field(self, field, message):
        errors = validate_shipping_address({**VALID_ADDRESS, field: "   "})
        assert errors == {field: [message]}

    def test_missing_fields_are_all_reported(self):
        errors = validate_shipping_address({})
        assert len(errors) == 7

    def test_phone_is_optional(self):
        assert validate_shipping_address({**VALID_ADDRESS, "phone": ""}) == {}

    def test_well_formed_phone(self):
        assert validate_shipping_address({**VALID_ADDRESS, "phone": "+1 (206) 555-0100"}) == {}

    @pytest.mark.parametrize("phone", ["555-0100", "call me maybe", "+1 206 555 01x0"])
    def test_malformed_phone(self, phone):
        errors = validate_shipping_address({**VALID_ADDRESS, "phone": phone})
        assert errors == {"phone": ["Please enter a valid phone number"]}


class TestNewCard:
    def test_valid_card_has_no_errors(self):
        assert validate_new_card(VALID_CARD, today=TODAY) == {}

    def test_eight_digit_card_number(self):
        errors = validate_new_card({**VALID_CARD, "card_number": "4111 1111"}, today=TODAY)
        assert errors == {"card_number": ["Please enter a valid card number"]}

    def test_thirteen_digits_is_enough(self):
        assert validate_new_card({**VALID_CARD, "card_number": "4222222222222"}, today=TODAY) == {}

    def test_required_fields(self):
        errors = validate_new_card({}, today=TODAY)
        assert errors == {
            "card_number": ["Card number is required"],
            "expiry_month": ["Month is required"],
            "expiry_year": ["Year is required"],
            "cvv": ["CVV is required"],
            "cardholder_name": ["Cardholder name is required"],
        }

    @pytest.mark.parametrize("month", ["0", "13", "ab"])
    def test_invalid_month(self, month):
        errors = validate_new_card({**VALID_CARD, "expiry_month": month}, today=TODAY)
        assert errors == {"expiry_month": ["Invalid month"]}

    def test_past_year_has_expired(self):
        errors = validate_new_card({**VALID_CARD, "expiry_year": "2025"}, today=TODAY)
        assert errors == {"expiry_year": ["Card has expired"]}

    def test_current_year_is_accepted(self):
        assert validate_new_card({**VALID_CARD, "expiry_year": "2026"}, today=TODAY) == {}

    def test_short_cvv(self):
        errors = validate_new_card({**VALID_CARD, "cvv": "12"}, today=TODAY)
        assert errors == {"cvv": ["Invalid CVV"]}

    def test_letters_are_not_a_card_number(self):
        errors = validate_new_card({**VALID_CARD, "card_number": "abcdefghijklm"}, today=TODAY)
        assert errors == {"card_number": ["Please enter a valid card number"]}

    def test_card_number_with_dashes_is_rejected(self):
        errors = validate_new_card({**VALID_CARD, "card_number": "4111-1111-1111-1111"}, today=TODAY)
        assert errors == {"card_number": ["Please enter a valid card number"]}

    @pytest.mark.parametrize("cvv", ["abc", "12a", "12345"])
    def test_non_numeric_or_long_cvv(self, cvv):
        errors = validate_new_card({**VALID_CARD, "cvv": cvv}, today=TODAY)
        assert errors == {"cvv": ["Invalid CVV"]}
