"""In-process order service for development and testing.

Keeps the order history and each session's current order as JSON snapshots
in the key-value store. It can be configured at runtime to fail, and can
simulate network latency with a fixed delay before creating an order.
"""

import json
import time

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.config import order_latency
from storefront.order.numbers import generate_order_number
from storefront.order.order import Order
from storefront.order.service.port import OrderService, OrderServiceError
from storefront.storage import get_store
from storefront.storage.port import KeyValueStore

logger = structlog.get_logger(__name__)

ORDERS_KEY = "storefront-orders"
CURRENT_ORDER_KEY_PREFIX = "storefront-current-order"


class FakeOrderService(OrderService):
    """Configurable fake order service."""

    def __init__(self, store: KeyValueStore | None = None, latency: float | None = None) -> None:
        self.store = store if store is not None else get_store()
        self.latency: float = order_latency() if latency is None else latency
        self.should_succeed: bool = True
        self.failure_reason: str = "Failed to create order. Please try again."
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Failed to create order. Please try again.") -> None:
        """Configure service behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    # -------------------------------------------------------------------
    # Snapshot storage
    # -------------------------------------------------------------------
    def _discard(self, key, reason) -> None:
        logger.warning("Discarding unreadable stored orders", key=key, reason=reason)
        self.store.delete(key)

    def _read_json(self, key):
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            self._discard(key, reason=str(exc))
            return None

    def _orders(self) -> list[Order]:
        """Return the order history, newest first.

        A history that is not a list of well-formed order snapshots is
        discarded as a whole and an empty history is used instead.
        """
        snapshots = self._read_json(ORDERS_KEY)
        if snapshots is None:
            return []
        if not isinstance(snapshots, list):
            self._discard(ORDERS_KEY, reason="Stored orders are not a list")
            return []

        try:
            return [Order.from_snapshot(entry) for entry in snapshots]
        except (AttributeError, KeyError, TypeError, ValueError, ValidationError) as exc:
            self._discard(ORDERS_KEY, reason=str(exc))
            return []

    def _save_orders(self, orders: list[Order]) -> None:
        self.store.set(ORDERS_KEY, json.dumps([order.to_snapshot() for order in orders]))

    @staticmethod
    def _current_key(session_id) -> str:
        return f"{CURRENT_ORDER_KEY_PREFIX}:{session_id}"

    def _store_order(self, order: Order) -> None:
        """Replace an order in the history and in its session's current order."""
        self._save_orders([order if existing.id == order.id else existing for existing in self._orders()])

        current = self.current_order(order.session_id)
        if current is not None and current.id == order.id:
            self.store.set(self._current_key(order.session_id), json.dumps(order.to_snapshot()))

    # -------------------------------------------------------------------
    # OrderService
    # -------------------------------------------------------------------
    def create_order(self, data: dict) -> Order:
        self.calls.append({"method": "create_order", "data": data})

        if self.latency:
            time.sleep(self.latency)

        if not self.should_succeed:
            logger.warning("Order creation failed", session_id=data.get("session_id"), reason=self.failure_reason)
            raise OrderServiceError(self.failure_reason)

        history = self._orders()
        taken = {existing.order_number for existing in history}
        order_number = generate_order_number()
        while order_number in taken:
            order_number = generate_order_number()

        order = Order.place(
            session_id=data["session_id"],
            order_number=order_number,
            items_data=data["items"],
            pricing=data["pricing"],
            shipping_address=data["shipping_address"],
            billing_address=data.get("billing_address"),
            payment_method=data["payment_method"],
            notes=data.get("notes"),
        )

        self._save_orders([order, *history])
        self.store.set(self._current_key(order.session_id), json.dumps(order.to_snapshot()))

        logger.info(
            "Order created",
            order_id=str(order.id),
            order_number=order_number,
            session_id=str(order.session_id),
            total=order.pricing.total,
        )
        return order

    def track_order(self, order_number: str) -> Order | None:
        self.calls.append({"method": "track_order", "order_number": order_number})
        return next((order for order in self._orders() if order.order_number == order_number), None)

    def get_order(self, order_id: str) -> Order:
        order = next((order for order in self._orders() if str(order.id) == str(order_id)), None)
        if order is None:
            raise ObjectNotFoundError({"order_id": [f"Order {order_id} does not exist"]})
        return order

    def list_orders(self, session_id: str | None = None) -> list[Order]:
        return [
            order for order in self._orders() if session_id is None or str(order.session_id) == str(session_id)
        ]

    def current_order(self, session_id: str) -> Order | None:
        key = self._current_key(session_id)
        snapshot = self._read_json(key)
        if snapshot is None:
            return None
        try:
            return Order.from_snapshot(snapshot)
        except (AttributeError, KeyError, TypeError, ValueError, ValidationError) as exc:
            self._discard(key, reason=str(exc))
            return None

    def update_order_status(self, order_id: str, status: str) -> Order:
        self.calls.append({"method": "update_order_status", "order_id": str(order_id), "status": status})
        order = self.get_order(order_id)
        order.update_status(status)
        self._store_order(order)
        logger.info("Order status updated", order_id=str(order_id), status=order.status)
        return order

    def cancel_order(self, order_id: str) -> Order:
        self.calls.append({"method": "cancel_order", "order_id": str(order_id)})
        order = self.get_order(order_id)
        order.cancel()
        self._store_order(order)
        logger.info("Order cancelled", order_id=str(order_id))
        return order
