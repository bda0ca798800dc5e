"""
Line identity — product id + variant grams.
"""

from __future__ import annotations

from storecart._types import ProductId
from storecart.cart._types import IdentityKey, LineItem, WeightVariant


def identity_of(product_id: ProductId, variant: WeightVariant | None = None) -> IdentityKey:
    """
    Identity of a would-be line.

    Only ``grams`` takes part: a variant with a different label or price but
    the same weight is the same line.
    """
    return IdentityKey(product_id, None if variant is None else variant.grams)


def key_of(item: LineItem) -> IdentityKey:
    return identity_of(item.product.id, item.variant)


def same_line(item: LineItem, product_id: ProductId, variant: WeightVariant | None = None) -> bool:
    return key_of(item) == identity_of(product_id, variant)


__all__ = ("identity_of", "key_of", "same_line")
