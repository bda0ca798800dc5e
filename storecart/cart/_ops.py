"""
Cart mutations — immutable values with a pure ``apply``.

The controller applies a mutation to its in-memory list first, then hands the
same value to the authoritative repository. The local repository calls
``apply`` again on its own copy, so the fallback path runs the exact merge
logic of the optimistic path.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from storecart._types import ProductId
from storecart.cart._identity import identity_of, key_of
from storecart.cart._types import LineItem, Product, WeightVariant

type Items = tuple[LineItem, ...]


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ═══════════════════════════════════════════════════════════════════════════════
# AddLine — merge or append
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class AddLine:
    product: Product
    quantity: int = 1
    variant: WeightVariant | None = None
    added_at: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError(f"quantity must be at least 1, got {self.quantity}")

    @property
    def product_id(self) -> ProductId:
        return self.product.id

    def new_line(self) -> LineItem:
        price = self.variant.price if self.variant is not None else self.product.price
        return LineItem(
            product=self.product,
            quantity=self.quantity,
            price=price,
            variant=self.variant,
            added_at=self.added_at,
        )

    def apply(self, items: Items) -> Items:
        key = identity_of(self.product.id, self.variant)
        for i, item in enumerate(items):
            if key_of(item) == key:
                merged = replace(item, quantity=item.quantity + self.quantity)
                return (*items[:i], merged, *items[i + 1:])
        return (*items, self.new_line())


# ═══════════════════════════════════════════════════════════════════════════════
# RemoveLine — exact identity only
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class RemoveLine:
    product_id: ProductId
    variant: WeightVariant | None = None

    def apply(self, items: Items) -> Items:
        key = identity_of(self.product_id, self.variant)
        return tuple(item for item in items if key_of(item) != key)


# ═══════════════════════════════════════════════════════════════════════════════
# SetQuantity — sets, never increments; <= 0 removes
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class SetQuantity:
    product_id: ProductId
    quantity: int
    variant: WeightVariant | None = None

    @property
    def removes(self) -> bool:
        return self.quantity <= 0

    def apply(self, items: Items) -> Items:
        if self.removes:
            return RemoveLine(self.product_id, self.variant).apply(items)

        key = identity_of(self.product_id, self.variant)
        return tuple(
            replace(item, quantity=self.quantity)
            if key_of(item) == key
            else item
            for item in items
        )


# ═══════════════════════════════════════════════════════════════════════════════
# ClearLines
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class ClearLines:
    def apply(self, items: Items) -> Items:
        return ()


type Mutation = AddLine | RemoveLine | SetQuantity | ClearLines


__all__ = (
    "Items",
    "AddLine",
    "RemoveLine",
    "SetQuantity",
    "ClearLines",
    "Mutation",
)
