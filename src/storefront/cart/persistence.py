"""Cart persistence — live carts in the repository, item lists in storage.

The repository holds the live cart of each session. Every handled cart
command also writes the full item list through to the key-value store, and a
session without a live cart is rehydrated from that list in a single batch.
"""

import json

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.storage import get_store

logger = structlog.get_logger(__name__)

CART_KEY_PREFIX = "storefront-cart"


class CartStorage:
    """Reads and writes one session's cart item list."""

    def __init__(self, session_id, store=None):
        self.session_id = str(session_id)
        self.store = store if store is not None else get_store()

    @property
    def key(self) -> str:
        return f"{CART_KEY_PREFIX}:{self.session_id}"

    def load(self) -> list[dict]:
        """Return the persisted item list, or an empty list.

        A value that is not valid JSON, or not a list of item objects, is
        discarded and the empty state is used instead.
        """
        raw = self.store.get(self.key)
        if raw is None:
            return []

        try:
            lines = json.loads(raw)
        except json.JSONDecodeError as exc:
            self._discard(reason=str(exc))
            return []

        if not isinstance(lines, list) or not all(isinstance(line, dict) for line in lines):
            self._discard(reason="Stored cart is not a list of items")
            return []

        return lines

    def save(self, lines: list[dict]) -> None:
        self.store.set(self.key, json.dumps(lines))

    def _discard(self, reason):
        logger.warning(
            "Discarding unreadable stored cart",
            session_id=self.session_id,
            key=self.key,
            reason=reason,
        )
        self.store.delete(self.key)


def load_cart(session_id) -> ShoppingCart:
    """Return the live cart of a session, restoring it from storage if needed."""
    repo = current_domain.repository_for(ShoppingCart)
    try:
        return repo.get(str(session_id))
    except ObjectNotFoundError:
        pass

    storage = CartStorage(session_id)
    cart = ShoppingCart.create(session_id=str(session_id))
    lines = storage.load()
    if lines:
        try:
            cart.hydrate(lines)
        except (KeyError, TypeError, ValidationError) as exc:
            storage._discard(reason=str(exc))
            cart = ShoppingCart.create(session_id=str(session_id))
        else:
            logger.info("Restored cart from storage", session_id=str(session_id), item_count=cart.item_count)

    repo.add(cart)
    return cart


def save_cart(cart: ShoppingCart) -> None:
    """Persist the live cart and write its item list through to storage."""
    current_domain.repository_for(ShoppingCart).add(cart)
    CartStorage(cart.session_id).save(cart.snapshot_items())
