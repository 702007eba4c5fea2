"""Shopping Cart aggregate — the session cart and its derived totals.

The cart is held per session (``session_id`` is its identity). Lines are
unique by product; every total is derived from the lines on read and is never
stored, so the totals cannot drift from the items.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String

from storefront.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
    CartRestored,
)
from storefront.cart.pricing import calculate_totals
from storefront.domain import storefront


@storefront.value_object(part_of="ShoppingCart")
class CartTotals:
    """Read-only snapshot of the amounts derived from the cart lines."""

    item_count = Integer(default=0)
    subtotal = Float(default=0.0)
    shipping_fee = Float(default=0.0)
    tax = Float(default=0.0)
    total = Float(default=0.0)


@storefront.entity(part_of="ShoppingCart")
class CartItem:
    """One product line of the cart."""

    product_id = String(required=True, max_length=100)
    name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    original_price = Float(min_value=0.0)
    image = String(max_length=500, default="")
    quantity = Integer(required=True, min_value=1)
    in_stock = Boolean(default=True)
    is_prime_eligible = Boolean(default=False)
    seller = String(max_length=255)

    def to_snapshot(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "unit_price": self.unit_price,
            "original_price": self.original_price,
            "image": self.image,
            "quantity": self.quantity,
            "in_stock": self.in_stock,
            "is_prime_eligible": self.is_prime_eligible,
            "seller": self.seller,
        }


@storefront.aggregate
class ShoppingCart:
    session_id = Identifier(identifier=True, required=True)
    items = HasMany(CartItem)
    is_open = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, session_id):
        now = datetime.now(UTC)
        return cls(
            session_id=session_id,
            is_open=False,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Derived totals
    # -------------------------------------------------------------------
    @property
    def totals(self) -> CartTotals:
        return CartTotals(**calculate_totals((item.unit_price, item.quantity) for item in self.items))

    @property
    def item_count(self) -> int:
        return self.totals.item_count

    @property
    def subtotal(self) -> float:
        return self.totals.subtotal

    @property
    def shipping_fee(self) -> float:
        return self.totals.shipping_fee

    @property
    def tax(self) -> float:
        return self.totals.tax

    @property
    def total(self) -> float:
        return self.totals.total

    def _find_line(self, product_id):
        return next((i for i in self.items if i.product_id == str(product_id)), None)

    def _touch(self):
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(
        self,
        product_id,
        name,
        unit_price,
        image="",
        original_price=None,
        in_stock=True,
        is_prime_eligible=False,
        seller=None,
    ):
        """Add one unit of a product, growing its line if already present."""
        if not in_stock:
            raise ValidationError({"in_stock": [f"{name} is out of stock"]})

        existing = self._find_line(product_id)
        if existing:
            existing.quantity += 1
            quantity = existing.quantity
        else:
            self.add_items(
                CartItem(
                    product_id=str(product_id),
                    name=name,
                    unit_price=unit_price,
                    original_price=original_price,
                    image=image or "",
                    quantity=1,
                    in_stock=in_stock,
                    is_prime_eligible=is_prime_eligible,
                    seller=seller,
                )
            )
            quantity = 1

        self._touch()
        self.raise_(
            CartItemAdded(
                session_id=str(self.session_id),
                product_id=str(product_id),
                quantity=quantity,
            )
        )

    def remove_item(self, product_id):
        """Remove a product's line. Unknown products are ignored."""
        item = self._find_line(product_id)
        if item is None:
            return

        self.remove_items(item)
        self._touch()
        self.raise_(
            CartItemRemoved(
                session_id=str(self.session_id),
                product_id=str(product_id),
            )
        )

    def update_quantity(self, product_id, quantity):
        """Set a line's quantity; zero or less removes the line."""
        item = self._find_line(product_id)
        if item is None:
            return

        if quantity <= 0:
            self.remove_item(product_id)
            return

        previous_quantity = item.quantity
        item.quantity = quantity
        self._touch()
        self.raise_(
            CartQuantityUpdated(
                session_id=str(self.session_id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def clear_cart(self):
        """Remove every line."""
        removed_count = len(self.items)
        for item in list(self.items):
            self.remove_items(item)

        self._touch()
        self.raise_(
            CartCleared(
                session_id=str(self.session_id),
                removed_count=removed_count,
            )
        )

    def hydrate(self, lines):
        """Replace the lines with a persisted item list in one batch.

        Args:
            lines: List of dicts as produced by ``CartItem.to_snapshot()``.
        """
        # Build every line first so a bad entry leaves the cart untouched
        restored = [
            CartItem(
                product_id=str(line["product_id"]),
                name=line["name"],
                unit_price=line["unit_price"],
                original_price=line.get("original_price"),
                image=line.get("image") or "",
                quantity=line["quantity"],
                in_stock=line.get("in_stock", True),
                is_prime_eligible=line.get("is_prime_eligible", False),
                seller=line.get("seller"),
            )
            for line in lines
        ]
        product_ids = [item.product_id for item in restored]
        if len(set(product_ids)) != len(product_ids):
            raise ValidationError({"items": ["Persisted cart holds the same product more than once"]})

        for item in list(self.items):
            self.remove_items(item)
        for item in restored:
            self.add_items(item)

        self._touch()
        self.raise_(
            CartRestored(
                session_id=str(self.session_id),
                item_count=self.item_count,
            )
        )

    def snapshot_items(self) -> list[dict]:
        return [item.to_snapshot() for item in self.items]

    # -------------------------------------------------------------------
    # Visibility (UI flag only)
    # -------------------------------------------------------------------
    def toggle_visibility(self):
        self.is_open = not self.is_open

    def open_cart(self):
        self.is_open = True

    def close_cart(self):
        self.is_open = False
