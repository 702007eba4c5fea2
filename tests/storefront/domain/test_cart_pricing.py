"""Tests for the cart pricing rules."""

import pytest
from storefront.cart.pricing import (
    FLAT_SHIPPING_FEE,
    FREE_SHIPPING_THRESHOLD,
    TAX_RATE,
    calculate_totals,
    shipping_fee_for,
)


class TestConstants:
    def test_threshold_fee_and_rate(self):
        assert FREE_SHIPPING_THRESHOLD == 35
        assert FLAT_SHIPPING_FEE == 5.99
        assert TAX_RATE == 0.08


class TestShippingFee:
    def test_free_above_threshold(self):
        assert shipping_fee_for(35.01, 1) == 0.0

    def test_flat_fee_at_threshold(self):
        assert shipping_fee_for(35.0, 1) == 5.99

    def test_flat_fee_below_threshold(self):
        assert shipping_fee_for(10.0, 1) == 5.99

    def test_no_fee_for_empty_cart(self):
        assert shipping_fee_for(0.0, 0) == 0.0


class TestCalculateTotals:
    def test_forty_dollar_cart(self):
        totals = calculate_totals([(20.0, 2)])
        assert totals["item_count"] == 2
        assert totals["subtotal"] == pytest.approx(40.0)
        assert totals["shipping_fee"] == 0.0
        assert totals["tax"] == pytest.approx(3.20)
        assert totals["total"] == pytest.approx(43.20)

    def test_thirty_dollar_cart(self):
        totals = calculate_totals([(30.0, 1)])
        assert totals["shipping_fee"] == 5.99
        assert totals["tax"] == pytest.approx(2.40)
        assert totals["total"] == pytest.approx(38.39)

    def test_total_is_exact_formula(self):
        totals = calculate_totals([(12.49, 3), (0.99, 2)])
        subtotal = 12.49 * 3 + 0.99 * 2
        assert totals["subtotal"] == subtotal
        assert totals["tax"] == subtotal * 0.08
        assert totals["total"] == subtotal + totals["shipping_fee"] + subtotal * 0.08

    def test_empty_lines(self):
        totals = calculate_totals([])
        assert totals == {
            "item_count": 0,
            "subtotal": 0.0,
            "shipping_fee": 0.0,
            "tax": 0.0,
            "total": 0.0,
        }
