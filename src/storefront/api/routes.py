"""FastAPI routes for the Storefront bounded context.

Each route translates between Pydantic schemas (external contract) and
Protean commands (internal domain concepts), then reads the resulting state
back for the response envelope.
"""

import json
import math
import os

from fastapi import APIRouter, HTTPException, Query
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    AddToCartRequest,
    AddressRequest,
    ApiResponse,
    ConfigureOrderServiceRequest,
    GoToStepRequest,
    OrderServiceConfigResponse,
    PaginatedResponse,
    Pagination,
    PaymentMethodRequest,
    PlaceOrderRequest,
    UpdateOrderStatusRequest,
    UpdateQuantityRequest,
    UseSameAddressRequest,
)
from storefront.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from storefront.cart.management import ClearCart, CloseCart, OpenCart, ToggleCart
from storefront.cart.persistence import load_cart
from storefront.checkout.navigation import GoToStep, ResetCheckout
from storefront.checkout.payment import SetPaymentMethod
from storefront.checkout.payment_methods import list_saved_methods
from storefront.checkout.persistence import load_checkout
from storefront.checkout.placement import PlaceOrder
from storefront.checkout.shipping import SetBillingAddress, SetShippingAddress, SetUseSameAddress
from storefront.order.service import get_order_service
from storefront.order.service.fake_adapter import FakeOrderService
from storefront.order.status import CancelOrder, UpdateOrderStatus


# ---------------------------------------------------------------------------
# Response data
# ---------------------------------------------------------------------------
def cart_data(cart) -> dict:
    totals = cart.totals
    return {
        "session_id": str(cart.session_id),
        "items": cart.snapshot_items(),
        "item_count": totals.item_count,
        "subtotal": totals.subtotal,
        "shipping_fee": totals.shipping_fee,
        "tax": totals.tax,
        "total": totals.total,
        "is_open": cart.is_open,
    }


def checkout_data(checkout) -> dict:
    payment_method = None
    if checkout.payment_method:
        payment_method = {**checkout.payment_method.to_dict(), "label": checkout.payment_method.label}

    return {
        "session_id": str(checkout.session_id),
        "current_step": checkout.current_step,
        "shipping_address": checkout.shipping_address.to_dict() if checkout.shipping_address else None,
        "billing_address": checkout.billing_address.to_dict() if checkout.billing_address else None,
        "use_same_address_for_billing": checkout.use_same_address_for_billing,
        "payment_method": payment_method,
        "order_summary": checkout.order_summary.to_dict() if checkout.order_summary else None,
        "is_processing": checkout.is_processing,
        "error": checkout.error,
        "order_id": str(checkout.order_id) if checkout.order_id else None,
        "order_number": checkout.order_number,
    }


def _order_not_found(order_id):
    return HTTPException(status_code=404, detail=f"Order {order_id} not found")


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


def _cart_response(session_id: str, message: str | None = None) -> ApiResponse:
    return ApiResponse(data=cart_data(load_cart(session_id)), message=message)


@cart_router.get("/{session_id}", response_model=ApiResponse)
async def get_cart(session_id: str) -> ApiResponse:
    """Return the session's cart with its derived totals."""
    return _cart_response(session_id)


@cart_router.post("/{session_id}/items", status_code=201, response_model=ApiResponse)
async def add_to_cart(session_id: str, body: AddToCartRequest) -> ApiResponse:
    """Add one unit of a product to the cart."""
    command = AddToCart(
        session_id=session_id,
        product_id=body.product_id,
        name=body.name,
        unit_price=body.unit_price,
        original_price=body.original_price,
        image=body.image,
        in_stock=body.in_stock,
        is_prime_eligible=body.is_prime_eligible,
        seller=body.seller,
    )
    current_domain.process(command, asynchronous=False)
    return _cart_response(session_id, message=f"{body.name} added to cart")


@cart_router.put("/{session_id}/items/{product_id}", response_model=ApiResponse)
async def update_cart_quantity(session_id: str, product_id: str, body: UpdateQuantityRequest) -> ApiResponse:
    """Set a line's quantity. Zero or less removes the line."""
    command = UpdateCartQuantity(
        session_id=session_id,
        product_id=product_id,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return _cart_response(session_id)


@cart_router.delete("/{session_id}/items/{product_id}", response_model=ApiResponse)
async def remove_from_cart(session_id: str, product_id: str) -> ApiResponse:
    current_domain.process(RemoveFromCart(session_id=session_id, product_id=product_id), asynchronous=False)
    return _cart_response(session_id)


@cart_router.delete("/{session_id}", response_model=ApiResponse)
async def clear_cart(session_id: str) -> ApiResponse:
    current_domain.process(ClearCart(session_id=session_id), asynchronous=False)
    return _cart_response(session_id, message="Cart cleared")


@cart_router.put("/{session_id}/toggle", response_model=ApiResponse)
async def toggle_cart(session_id: str) -> ApiResponse:
    current_domain.process(ToggleCart(session_id=session_id), asynchronous=False)
    return _cart_response(session_id)


@cart_router.put("/{session_id}/open", response_model=ApiResponse)
async def open_cart(session_id: str) -> ApiResponse:
    current_domain.process(OpenCart(session_id=session_id), asynchronous=False)
    return _cart_response(session_id)


@cart_router.put("/{session_id}/close", response_model=ApiResponse)
async def close_cart(session_id: str) -> ApiResponse:
    current_domain.process(CloseCart(session_id=session_id), asynchronous=False)
    return _cart_response(session_id)


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkouts", tags=["checkouts"])


def _checkout_response(session_id: str, message: str | None = None) -> ApiResponse:
    return ApiResponse(data=checkout_data(load_checkout(session_id)), message=message)


@checkout_router.get("/{session_id}", response_model=ApiResponse)
async def get_checkout(session_id: str) -> ApiResponse:
    return _checkout_response(session_id)


@checkout_router.put("/{session_id}/shipping-address", response_model=ApiResponse)
async def set_shipping_address(session_id: str, body: AddressRequest) -> ApiResponse:
    """Record the shipping address and move on to payment."""
    command = SetShippingAddress(session_id=session_id, address=json.dumps(body.model_dump()))
    current_domain.process(command, asynchronous=False)
    return _checkout_response(session_id)


@checkout_router.put("/{session_id}/billing-address", response_model=ApiResponse)
async def set_billing_address(session_id: str, body: AddressRequest) -> ApiResponse:
    command = SetBillingAddress(session_id=session_id, address=json.dumps(body.model_dump()))
    current_domain.process(command, asynchronous=False)
    return _checkout_response(session_id)


@checkout_router.put("/{session_id}/use-same-address", response_model=ApiResponse)
async def set_use_same_address(session_id: str, body: UseSameAddressRequest) -> ApiResponse:
    current_domain.process(SetUseSameAddress(session_id=session_id, use_same=body.use_same), asynchronous=False)
    return _checkout_response(session_id)


@checkout_router.put("/{session_id}/payment-method", response_model=ApiResponse)
async def set_payment_method(session_id: str, body: PaymentMethodRequest) -> ApiResponse:
    """Choose a saved method or submit a new card, then move on to review."""
    command = SetPaymentMethod(
        session_id=session_id,
        saved_method_id=body.saved_method_id,
        card=json.dumps(body.card.model_dump()) if body.card else None,
    )
    current_domain.process(command, asynchronous=False)
    return _checkout_response(session_id)


@checkout_router.put("/{session_id}/step", response_model=ApiResponse)
async def go_to_step(session_id: str, body: GoToStepRequest) -> ApiResponse:
    current_domain.process(GoToStep(session_id=session_id, step=body.step), asynchronous=False)
    return _checkout_response(session_id)


@checkout_router.post("/{session_id}/orders", response_model=ApiResponse)
async def place_order(session_id: str, body: PlaceOrderRequest | None = None) -> ApiResponse:
    """Place the order under review.

    A rejected order is not an HTTP error: the checkout stays on review with
    the reason in ``error`` and can be retried.
    """
    command = PlaceOrder(session_id=session_id, notes=body.notes if body else None)
    current_domain.process(command, asynchronous=False)

    data = checkout_data(load_checkout(session_id))
    if data["error"]:
        return ApiResponse(success=False, data=data, message=data["error"])
    return ApiResponse(data=data, message=f"Order {data['order_number']} placed")


@checkout_router.delete("/{session_id}", response_model=ApiResponse)
async def reset_checkout(session_id: str) -> ApiResponse:
    current_domain.process(ResetCheckout(session_id=session_id), asynchronous=False)
    return _checkout_response(session_id, message="Checkout reset")


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=PaginatedResponse)
async def list_orders(
    session_id: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> PaginatedResponse:
    """List the order history, newest first."""
    orders = get_order_service().list_orders(session_id=session_id)
    start = (page - 1) * limit
    return PaginatedResponse(
        data=[order.to_snapshot() for order in orders[start : start + limit]],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=len(orders),
            total_pages=math.ceil(len(orders) / limit),
        ),
    )


@order_router.get("/track/{order_number}", response_model=ApiResponse)
async def track_order(order_number: str) -> ApiResponse:
    order = get_order_service().track_order(order_number)
    if order is None:
        raise HTTPException(status_code=404, detail=f"No order with number {order_number}")
    return ApiResponse(data=order.to_snapshot())


@order_router.get("/current/{session_id}", response_model=ApiResponse)
async def current_order(session_id: str) -> ApiResponse:
    order = get_order_service().current_order(session_id)
    if order is None:
        raise HTTPException(status_code=404, detail="No current order for this session")
    return ApiResponse(data=order.to_snapshot())


@order_router.post("/service/configure", response_model=OrderServiceConfigResponse)
async def configure_order_service(body: ConfigureOrderServiceRequest) -> OrderServiceConfigResponse:
    """Configure the FakeOrderService behavior (non-production only)."""
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Order service configuration not available in production")

    service = get_order_service()
    if not isinstance(service, FakeOrderService):
        raise HTTPException(status_code=400, detail="Order service configuration only available for FakeOrderService")

    service.configure(
        should_succeed=body.should_succeed,
        failure_reason=body.failure_reason,
    )
    return OrderServiceConfigResponse(
        service=type(service).__name__,
        should_succeed=service.should_succeed,
        failure_reason=service.failure_reason,
    )


@order_router.get("/{order_id}", response_model=ApiResponse)
async def get_order(order_id: str) -> ApiResponse:
    try:
        order = get_order_service().get_order(order_id)
    except ObjectNotFoundError as exc:
        raise _order_not_found(order_id) from exc
    return ApiResponse(data=order.to_snapshot())


@order_router.put("/{order_id}/status", response_model=ApiResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> ApiResponse:
    try:
        order = current_domain.process(UpdateOrderStatus(order_id=order_id, status=body.status), asynchronous=False)
    except ObjectNotFoundError as exc:
        raise _order_not_found(order_id) from exc
    return ApiResponse(data=order.to_snapshot(), message=f"Order is now {order.status}")


@order_router.put("/{order_id}/cancel", response_model=ApiResponse)
async def cancel_order(order_id: str) -> ApiResponse:
    try:
        order = current_domain.process(CancelOrder(order_id=order_id), asynchronous=False)
    except ObjectNotFoundError as exc:
        raise _order_not_found(order_id) from exc
    return ApiResponse(data=order.to_snapshot(), message="Order cancelled")


# ---------------------------------------------------------------------------
# Payment Method Router
# ---------------------------------------------------------------------------
payment_method_router = APIRouter(prefix="/payment-methods", tags=["payment-methods"])


@payment_method_router.get("", response_model=ApiResponse)
async def list_payment_methods() -> ApiResponse:
    return ApiResponse(data=list_saved_methods())
