"""Key-value storage port (abstract interface).

The storefront keeps two independent documents in this store: the cart item
list of each session and the order history with the per-session current
order. Values are serialized JSON strings; the store itself never parses
them.
"""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Abstract key-value store interface."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``. Removing an absent key is not an error."""
        ...
