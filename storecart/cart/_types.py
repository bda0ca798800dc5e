"""
Cart types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto

from storecart._types import Money, ProductId, ZERO

# ═══════════════════════════════════════════════════════════════════════════════
# Catalog Snapshot — read-only to the cart
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class InventoryRecord:
    track_quantity: bool
    quantity: int


@dataclass(frozen=True, slots=True)
class WeightVariant:
    """Alternate priced unit of a product, e.g. 500g."""
    label: str
    grams: int
    price: Money


@dataclass(frozen=True, slots=True)
class Product:
    id: ProductId
    name: str
    price: Money
    is_active: bool = True
    inventory: InventoryRecord | None = None
    weight_options: tuple[WeightVariant, ...] = ()
    category: str | None = None
    tags: tuple[str, ...] = ()
    image: str | None = None

    def __post_init__(self) -> None:
        # lines are hashed for the totals cache
        object.__setattr__(self, "weight_options", tuple(self.weight_options))
        object.__setattr__(self, "tags", tuple(self.tags))

    def variant(self, grams: int) -> WeightVariant | None:
        for option in self.weight_options:
            if option.grams == grams:
                return option
        return None


# ═══════════════════════════════════════════════════════════════════════════════
# Line Items
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class IdentityKey:
    """
    Line identity: product id + variant grams (None for "no variant").

    Two mutations land on the same line iff their keys are equal.
    """
    product_id: ProductId
    grams: int | None = None


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class LineItem:
    """
    One cart line.

    ``price`` is the unit price captured when the line was created; later
    catalog changes never touch it. ``variant`` is a snapshot as well.
    """
    product: Product
    quantity: int
    price: Money | None = None
    variant: WeightVariant | None = None
    added_at: datetime = field(default_factory=_now)

    @property
    def product_id(self) -> ProductId:
        return self.product.id

    @property
    def unit_price(self) -> Money:
        """Captured price, then variant price, then product price, then 0."""
        if self.price:
            return self.price
        if self.variant is not None and self.variant.price:
            return self.variant.price
        if self.product.price:
            return self.product.price
        return ZERO

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


# ═══════════════════════════════════════════════════════════════════════════════
# Totals — derived, never stored
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class Totals:
    item_count: int
    subtotal: Money
    tax: Money
    shipping: Money
    total: Money


# ═══════════════════════════════════════════════════════════════════════════════
# Session State
# ═══════════════════════════════════════════════════════════════════════════════

class CartMode(Enum):
    """Which repository is authoritative for the session."""
    LOCAL = auto()
    REMOTE = auto()


class CartState(Enum):
    UNINITIALIZED = auto()
    LOADING = auto()
    READY = auto()


class NoticeKind(Enum):
    ADDED = auto()
    REMOVED = auto()
    UPDATED = auto()
    CLEARED = auto()


@dataclass(frozen=True, slots=True)
class Notice:
    """User-visible confirmation signal (toast)."""
    kind: NoticeKind
    message: str
    item: LineItem | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Summaries
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class SummaryLine:
    product_id: ProductId
    name: str
    price: Money
    quantity: int
    image: str | None
    weight_option: WeightVariant | None


@dataclass(frozen=True, slots=True)
class CartSummary:
    """Checkout payload: lines + pricing block."""
    lines: tuple[SummaryLine, ...]
    items_price: Money
    tax_price: Money
    shipping_price: Money
    total_price: Money


@dataclass(frozen=True, slots=True)
class Recommendations:
    """What the cart says about the shopper: categories, tags, value."""
    categories: tuple[str, ...]
    tags: tuple[str, ...]
    total_value: Money


__all__ = (
    "InventoryRecord",
    "WeightVariant",
    "Product",
    "IdentityKey",
    "LineItem",
    "Totals",
    "CartMode",
    "CartState",
    "NoticeKind",
    "Notice",
    "SummaryLine",
    "CartSummary",
    "Recommendations",
)
