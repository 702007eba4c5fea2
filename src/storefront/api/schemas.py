"""Pydantic request/response schemas for the Storefront API.

Every response is wrapped in the same envelope: ``success``, ``data``,
``message`` and ``timestamp``. Paginated listings add ``pagination``.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Response envelopes
# ---------------------------------------------------------------------------
class ApiResponse(BaseModel):
    success: bool = True
    data: Any = None
    message: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class PaginatedResponse(ApiResponse):
    pagination: Pagination


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "echo-dot-5",
                    "name": "Echo Dot (5th Gen)",
                    "unit_price": 49.99,
                    "original_price": 59.99,
                    "image": "https://cdn.example.com/echo-dot.jpg",
                    "in_stock": True,
                    "is_prime_eligible": True,
                    "seller": "Storefront",
                }
            ]
        }
    }

    product_id: str = Field(..., max_length=100)
    name: str = Field(..., max_length=255)
    unit_price: float = Field(ge=0)
    original_price: float | None = Field(None, ge=0)
    image: str = Field("", max_length=500)
    in_stock: bool = True
    is_prime_eligible: bool = False
    seller: str | None = Field(None, max_length=255)


class UpdateQuantityRequest(BaseModel):
    quantity: int


# ---------------------------------------------------------------------------
# Checkout Request Schemas
# ---------------------------------------------------------------------------
class AddressRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "first_name": "Jane",
                    "last_name": "Doe",
                    "street": "123 Main St",
                    "city": "Seattle",
                    "state": "WA",
                    "zip_code": "98101",
                    "country": "United States",
                    "phone": "+1 (206) 555-0100",
                }
            ]
        }
    }

    first_name: str = ""
    last_name: str = ""
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""
    phone: str | None = None


class UseSameAddressRequest(BaseModel):
    use_same: bool


class CardRequest(BaseModel):
    card_number: str = ""
    expiry_month: str = ""
    expiry_year: str = ""
    cvv: str = ""
    cardholder_name: str = ""


class PaymentMethodRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {"saved_method_id": "1"},
                {
                    "card": {
                        "card_number": "4111 1111 1111 1111",
                        "expiry_month": "09",
                        "expiry_year": "2030",
                        "cvv": "123",
                        "cardholder_name": "Jane Doe",
                    }
                },
            ]
        }
    }

    saved_method_id: str | None = None
    card: CardRequest | None = None


class GoToStepRequest(BaseModel):
    step: str


class PlaceOrderRequest(BaseModel):
    notes: str | None = Field(None, max_length=1000)


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class UpdateOrderStatusRequest(BaseModel):
    status: str


class ConfigureOrderServiceRequest(BaseModel):
    should_succeed: bool = True
    failure_reason: str = "Failed to create order. Please try again."


class OrderServiceConfigResponse(BaseModel):
    service: str
    should_succeed: bool
    failure_reason: str
