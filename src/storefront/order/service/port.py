"""Order service port (abstract interface).

The checkout talks to orders only through this contract, so the fake
in-process service can be replaced by a real order backend without touching
the domain or application code.
"""

from abc import ABC, abstractmethod

from storefront.order.order import Order


class OrderServiceError(Exception):
    """The order service could not create the order."""


class OrderService(ABC):
    """Abstract order service interface."""

    @abstractmethod
    def create_order(self, data: dict) -> Order:
        """Create an order from checkout data and record it in the history.

        Raises:
            OrderServiceError: when the order could not be created.
        """
        ...

    @abstractmethod
    def track_order(self, order_number: str) -> Order | None:
        """Look up an order by its customer-facing number."""
        ...

    @abstractmethod
    def get_order(self, order_id: str) -> Order:
        """Return an order by id. Raises ``ObjectNotFoundError`` when unknown."""
        ...

    @abstractmethod
    def list_orders(self, session_id: str | None = None) -> list[Order]:
        """Return the order history, newest first."""
        ...

    @abstractmethod
    def current_order(self, session_id: str) -> Order | None:
        """Return the most recent order placed by a session."""
        ...

    @abstractmethod
    def update_order_status(self, order_id: str, status: str) -> Order:
        ...

    @abstractmethod
    def cancel_order(self, order_id: str) -> Order:
        ...
