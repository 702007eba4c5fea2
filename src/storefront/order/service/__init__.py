"""Order service factory.

Provides get_order_service() / set_order_service() to swap implementations.
Defaults to FakeOrderService backed by the configured key-value store.
"""

from storefront.order.service.fake_adapter import FakeOrderService
from storefront.order.service.port import OrderService, OrderServiceError

__all__ = [
    "OrderService",
    "OrderServiceError",
    "get_order_service",
    "reset_order_service",
    "set_order_service",
]

_current_service: OrderService | None = None


def get_order_service() -> OrderService:
    """Return the current order service. Defaults to FakeOrderService."""
    global _current_service
    if _current_service is None:
        _current_service = FakeOrderService()
    return _current_service


def set_order_service(service: OrderService) -> None:
    """Override the active order service (useful for tests)."""
    global _current_service
    _current_service = service


def reset_order_service() -> None:
    """Reset to the default order service."""
    global _current_service
    _current_service = None
