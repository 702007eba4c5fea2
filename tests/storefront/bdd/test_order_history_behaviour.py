"""BDD tests for the order history and order lifecycle."""

from datetime import timedelta

from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when
from storefront.order.service import get_order_service
from storefront.order.status import CancelOrder, UpdateOrderStatus

scenarios("features/order_history.feature")


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an order has been placed", target_fixture="order_id")
def order_placed(session_id):
    order = get_order_service().create_order(
        {
            "session_id": session_id,
            "items": [{"product_id": "p1", "name": "Echo Dot", "unit_price": 20.0, "quantity": 2}],
            "pricing": {"subtotal": 40.0, "shipping": 0.0, "tax": 3.2, "discount": 0.0, "total": 43.2},
            "shipping_address": {
                "first_name": "Jane",
                "last_name": "Doe",
                "street": "123 Main St",
                "city": "Seattle",
                "state": "WA",
                "zip_code": "98101",
                "country": "United States",
            },
            "payment_method": "Card ending in 1234",
        }
    )
    return str(order.id)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the order status changes to "{status}"'))
def change_status(order_id, status, error):
    try:
        current_domain.process(UpdateOrderStatus(order_id=order_id, status=status), asynchronous=False)
    except ValidationError as exc:
        error["exc"] = exc


@when("the order is cancelled")
def cancel_order(order_id, error):
    try:
        current_domain.process(CancelOrder(order_id=order_id), asynchronous=False)
    except ValidationError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the order can be tracked by its order number")
def order_trackable(order_id):
    service = get_order_service()
    order = service.get_order(order_id)
    assert str(service.track_order(order.order_number).id) == order_id


@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order_id, status):
    assert get_order_service().get_order(order_id).status == status


@then("the order is expected within 7 days")
def order_expected_within_a_week(order_id):
    order = get_order_service().get_order(order_id)
    assert order.estimated_delivery - order.created_at == timedelta(days=7)


@then("the order has a tracking number")
def order_has_tracking_number(order_id):
    assert get_order_service().get_order(order_id).tracking_number.startswith("TRK")
