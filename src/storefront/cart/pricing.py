"""Cart pricing rules shared by the cart, the checkout summary and orders.

Amounts are plain floats computed with the exact formula below; rounding is a
presentation concern.
"""

FREE_SHIPPING_THRESHOLD = 35
FLAT_SHIPPING_FEE = 5.99
TAX_RATE = 0.08


def shipping_fee_for(subtotal: float, item_count: int) -> float:
    """Flat fee below the threshold; nothing to ship means no fee."""
    if item_count == 0:
        return 0.0
    return 0.0 if subtotal > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING_FEE


def calculate_totals(lines) -> dict:
    """Derive cart totals from ``(unit_price, quantity)`` pairs."""
    item_count = 0
    subtotal = 0.0
    for unit_price, quantity in lines:
        item_count += quantity
        subtotal += unit_price * quantity

    shipping_fee = shipping_fee_for(subtotal, item_count)
    tax = subtotal * TAX_RATE
    return {
        "item_count": item_count,
        "subtotal": subtotal,
        "shipping_fee": shipping_fee,
        "tax": tax,
        "total": subtotal + shipping_fee + tax,
    }
