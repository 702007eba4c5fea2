"""Order aggregate — the immutable record of a placed checkout.

State Machine:
    PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED
    CANCELLED (from PENDING, CONFIRMED, PROCESSING)

Items, pricing and addresses are a snapshot of the cart and checkout at the
moment of placement and never change afterwards. Orders live in the order
service's history rather than a repository, so the aggregate knows how to
turn itself into a plain snapshot and back. For the same reason the
OrderCreated, OrderStatusChanged and OrderCancelled events it raises stay on
the instance: no unit of work commits an order, so nothing publishes them.
They remain on ``_events`` for inspection.
"""

from datetime import UTC, datetime, timedelta
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from storefront.domain import storefront
from storefront.order.events import OrderCancelled, OrderCreated, OrderStatusChanged
from storefront.order.numbers import generate_tracking_number

DELIVERY_WINDOW = timedelta(days=7)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class DeliveryAddress:
    """Where the order ships to, frozen at placement."""

    first_name = String(required=True, max_length=100)
    last_name = String(required=True, max_length=100)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    zip_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)
    phone = String(max_length=30)


@storefront.value_object(part_of="Order")
class OrderPricing:
    subtotal = Float(default=0.0)
    shipping = Float(default=0.0)
    tax = Float(default=0.0)
    discount = Float(default=0.0)
    total = Float(default=0.0)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    product_id = String(required=True, max_length=100)
    name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    image = String(max_length=500)
    seller = String(max_length=255)

    def to_snapshot(self) -> dict:
        return {
            "id": str(self.id),
            "product_id": self.product_id,
            "name": self.name,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "image": self.image,
            "seller": self.seller,
        }


def _parse_datetime(value):
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _format_datetime(value):
    return value.isoformat() if value else None


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=50)
    session_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    items = HasMany(OrderItem)
    pricing = ValueObject(OrderPricing)
    shipping_address = ValueObject(DeliveryAddress)
    billing_address = ValueObject(DeliveryAddress)
    payment_method = String(max_length=100)
    tracking_number = String(max_length=50)
    notes = String(max_length=1000)
    created_at = DateTime()
    updated_at = DateTime()
    estimated_delivery = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        session_id,
        order_number,
        items_data,
        pricing,
        shipping_address,
        payment_method,
        billing_address=None,
        notes=None,
    ):
        """Create a pending order from checkout data.

        Args:
            session_id: The checkout session placing the order.
            order_number: Customer-facing number, unique in the history.
            items_data: List of dicts with product_id, name, unit_price,
                        quantity and optional image and seller.
            pricing: Dict with subtotal, shipping, tax, discount, total.
            shipping_address: Dict of ``DeliveryAddress`` fields.
            payment_method: Human label of the payment method.
            billing_address: Optional dict of ``DeliveryAddress`` fields.
            notes: Optional order notes.
        """
        now = datetime.now(UTC)
        order = cls(
            order_number=order_number,
            session_id=str(session_id),
            status=OrderStatus.PENDING.value,
            pricing=OrderPricing(**pricing),
            shipping_address=DeliveryAddress(**shipping_address),
            billing_address=DeliveryAddress(**billing_address) if billing_address else None,
            payment_method=payment_method,
            notes=notes,
            created_at=now,
            updated_at=now,
            estimated_delivery=now + DELIVERY_WINDOW,
        )
        for item in items_data:
            order.add_items(
                OrderItem(
                    product_id=str(item["product_id"]),
                    name=item["name"],
                    unit_price=item["unit_price"],
                    quantity=item["quantity"],
                    image=item.get("image"),
                    seller=item.get("seller"),
                )
            )

        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                order_number=order_number,
                session_id=str(session_id),
                item_count=sum(item.quantity for item in order.items),
                total=order.pricing.total,
                created_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------
    def to_snapshot(self) -> dict:
        return {
            "id": str(self.id),
            "order_number": self.order_number,
            "session_id": str(self.session_id),
            "status": self.status,
            "items": [item.to_snapshot() for item in self.items],
            "pricing": self.pricing.to_dict() if self.pricing else None,
            "shipping_address": self.shipping_address.to_dict() if self.shipping_address else None,
            "billing_address": self.billing_address.to_dict() if self.billing_address else None,
            "payment_method": self.payment_method,
            "tracking_number": self.tracking_number,
            "notes": self.notes,
            "created_at": _format_datetime(self.created_at),
            "updated_at": _format_datetime(self.updated_at),
            "estimated_delivery": _format_datetime(self.estimated_delivery),
        }

    @classmethod
    def from_snapshot(cls, data: dict):
        """Rebuild an order from ``to_snapshot()`` output without raising events."""
        order = cls(
            id=data["id"],
            order_number=data["order_number"],
            session_id=data["session_id"],
            status=data["status"],
            pricing=OrderPricing(**data["pricing"]) if data.get("pricing") else None,
            shipping_address=DeliveryAddress(**data["shipping_address"]) if data.get("shipping_address") else None,
            billing_address=DeliveryAddress(**data["billing_address"]) if data.get("billing_address") else None,
            payment_method=data.get("payment_method"),
            tracking_number=data.get("tracking_number"),
            notes=data.get("notes"),
            created_at=_parse_datetime(data.get("created_at")),
            updated_at=_parse_datetime(data.get("updated_at")),
            estimated_delivery=_parse_datetime(data.get("estimated_delivery")),
        )
        for item in data.get("items", []):
            order.add_items(
                OrderItem(
                    id=item["id"],
                    product_id=item["product_id"],
                    name=item["name"],
                    unit_price=item["unit_price"],
                    quantity=item["quantity"],
                    image=item.get("image"),
                    seller=item.get("seller"),
                )
            )
        return order

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def update_status(self, status):
        """Move the order along its lifecycle.

        Shipping assigns a tracking number unless one is already present.
        """
        try:
            target = OrderStatus(status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status: {status}"]}) from None

        if target == OrderStatus.CANCELLED:
            self.cancel()
            return

        self._assert_can_transition(target)
        previous = self.status
        self.status = target.value
        if target == OrderStatus.SHIPPED and not self.tracking_number:
            self.tracking_number = generate_tracking_number()
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous,
                new_status=target.value,
                tracking_number=self.tracking_number,
            )
        )

    def cancel(self):
        self._assert_can_transition(OrderStatus.CANCELLED)
        previous = self.status
        self.status = OrderStatus.CANCELLED.value
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                previous_status=previous,
            )
        )
