"""
Totals — pure, memoized derivation from the item list.

    totals = compute_totals(items)
    totals.total   # round2(subtotal + tax + shipping)
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal, ROUND_HALF_UP
from functools import lru_cache

from storecart._types import CENTS, Money, ZERO
from storecart.cart._types import LineItem, Totals

FREE_SHIPPING_THRESHOLD = Decimal("100")
FLAT_SHIPPING_FEE = Decimal("10")
TAX = ZERO


def round2(amount: Money) -> Money:
    """Half-up to two decimal places."""
    return Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)


def estimate_shipping(
    subtotal: Money,
    threshold: Money = FREE_SHIPPING_THRESHOLD,
    fee: Money = FLAT_SHIPPING_FEE,
) -> Money:
    return ZERO if subtotal >= threshold else fee


@lru_cache(maxsize=256)
def _totals(items: tuple[LineItem, ...], threshold: Money, fee: Money) -> Totals:
    item_count = sum(item.quantity for item in items)
    subtotal = sum((item.line_total for item in items), ZERO)
    shipping = estimate_shipping(subtotal, threshold, fee)
    return Totals(
        item_count=item_count,
        subtotal=subtotal,
        tax=TAX,
        shipping=shipping,
        total=round2(subtotal + TAX + shipping),
    )


def compute_totals(
    items: Iterable[LineItem],
    *,
    free_shipping_threshold: Money = FREE_SHIPPING_THRESHOLD,
    flat_fee: Money = FLAT_SHIPPING_FEE,
) -> Totals:
    """
    Derive {item_count, subtotal, tax, shipping, total} from line items.

    - item_count: sum of quantities, not distinct lines
    - subtotal: sum of unit price x quantity (see ``LineItem.unit_price``)
    - shipping: 0 at or above the threshold, else the flat fee
    - total: rounded half-up to cents; subtotal is left as computed
    """
    return _totals(tuple(items), Decimal(free_shipping_threshold), Decimal(flat_fee))


__all__ = (
    "compute_totals",
    "estimate_shipping",
    "round2",
    "FREE_SHIPPING_THRESHOLD",
    "FLAT_SHIPPING_FEE",
)
