"""
Catalog — product lookup and weight-variant pricing.
"""

from __future__ import annotations

from storecart.catalog._lookup import CatalogLookup, InMemoryCatalog
from storecart.catalog._weights import (
    BASE_GRAMS,
    STANDARD_WEIGHTS,
    proportional_price,
    weight_options,
    check_weight_options,
    fix_weight_options,
)

__all__ = (
    "CatalogLookup",
    "InMemoryCatalog",
    "BASE_GRAMS",
    "STANDARD_WEIGHTS",
    "proportional_price",
    "weight_options",
    "check_weight_options",
    "fix_weight_options",
)
