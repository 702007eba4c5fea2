"""Generators for customer-facing order and tracking numbers."""

import random
import string
import time

ORDER_NUMBER_PREFIX = "SF"
TRACKING_NUMBER_PREFIX = "TRK"

_ALPHABET = string.ascii_uppercase + string.digits


def _random_suffix(length: int) -> str:
    return "".join(random.choices(_ALPHABET, k=length))


def _timestamp_ms() -> str:
    return str(time.time_ns() // 1_000_000)


def generate_order_number() -> str:
    """``SF`` + last six digits of the millisecond clock + six random characters."""
    return f"{ORDER_NUMBER_PREFIX}{_timestamp_ms()[-6:]}{_random_suffix(6)}"


def generate_tracking_number() -> str:
    return f"{TRACKING_NUMBER_PREFIX}{_random_suffix(6)}{_timestamp_ms()[-4:]}"
