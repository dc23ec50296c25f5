"""Cart aggregate (CQRS): one mutable cart per shopper.

Each line carries a snapshot of the product's name, image and effective
price taken when the line was last set. Totals are always derived from the
lines with ``recompute_totals`` and never accepted from callers. A cart is
never deleted: checkout empties it.
"""

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import NamedTuple
from uuid import NAMESPACE_URL, uuid5

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from ordering.cart.events import CartCleared, CartItemRemoved, CartItemSet
from ordering.domain import ordering


def cart_id_for(owner_id) -> str:
    """Each owner has exactly one cart, so its identity is derived from the owner."""
    return str(uuid5(NAMESPACE_URL, f"storefront:cart:{owner_id}"))


class CartTotals(NamedTuple):
    item_count: int
    amount: float


def recompute_totals(items: Iterable) -> CartTotals:
    """Derive the item count and amount from cart lines."""
    count = 0
    amount = 0.0
    for item in items:
        count += item.quantity
        amount += item.quantity * item.unit_price
    return CartTotals(item_count=count, amount=round(amount, 2))


@ordering.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    name = String(required=True, max_length=255)
    image = String(max_length=1024)

    @property
    def line_total(self) -> float:
        return round(self.quantity * self.unit_price, 2)


@ordering.aggregate
class Cart:
    owner_id = Identifier(required=True, unique=True)
    items = HasMany(CartItem)
    total_item_count = Integer(default=0)
    total_amount = Float(default=0.0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def totals_must_match_items(self):
        totals = recompute_totals(self.items)
        if self.total_item_count != totals.item_count or abs(self.total_amount - totals.amount) > 0.005:
            raise ValidationError({"totals": ["Cart totals do not match its items"]})

    @invariant.post
    def products_must_be_unique(self):
        product_ids = [str(item.product_id) for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product may appear only once in a cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, owner_id):
        now = datetime.now(UTC)
        return cls(
            id=cart_id_for(owner_id),
            owner_id=owner_id,
            total_item_count=0,
            total_amount=0.0,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_empty(self) -> bool:
        return not self.items

    def item_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def set_item(self, product_id, quantity, unit_price, name, image=None):
        """Upsert a line with a fresh snapshot. A quantity below one removes the line."""
        if quantity < 1:
            self.remove_item(product_id)
            return

        with atomic_change(self):
            existing = self.item_for(product_id)
            if existing:
                existing.quantity = quantity
                existing.unit_price = unit_price
                existing.name = name
                existing.image = image
            else:
                self.add_items(
                    CartItem(
                        product_id=product_id,
                        quantity=quantity,
                        unit_price=unit_price,
                        name=name,
                        image=image,
                    )
                )
            self._refresh_totals()

        self.raise_(
            CartItemSet(
                cart_id=str(self.id),
                owner_id=str(self.owner_id),
                product_id=str(product_id),
                quantity=quantity,
                unit_price=unit_price,
                total_item_count=self.total_item_count,
                total_amount=self.total_amount,
            )
        )

    def remove_item(self, product_id):
        """Remove a line. Removing a product that is not in the cart is a no-op."""
        item = self.item_for(product_id)
        if item is None:
            return

        with atomic_change(self):
            self.remove_items(item)
            self._refresh_totals()

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                owner_id=str(self.owner_id),
                product_id=str(product_id),
                total_item_count=self.total_item_count,
                total_amount=self.total_amount,
            )
        )

    def clear(self, reason="checkout"):
        """Empty the cart and zero its totals."""
        with atomic_change(self):
            for item in list(self.items):
                self.remove_items(item)
            self._refresh_totals()

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                owner_id=str(self.owner_id),
                reason=reason,
            )
        )

    def _refresh_totals(self):
        totals = recompute_totals(self.items)
        self.total_item_count = totals.item_count
        self.total_amount = totals.amount
        self.updated_at = datetime.now(UTC)
