"""
Core types for storecart.

Re-exports from kungfu + money and id aliases shared by every
subpackage.
"""

from __future__ import annotations

from decimal import Decimal

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type Money = Decimal
"""Currency amount. Single currency, two decimal places when reported."""

type ProductId = str
"""Catalog identifier (the document id the catalog hands out)."""

ZERO: Money = Decimal("0")
CENTS = Decimal("0.01")

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Aliases
    "Money",
    "ProductId",
    "ZERO",
    "CENTS",
)
