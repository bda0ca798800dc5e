"""
Cart — line items, identity, totals and the session controller.

    from storecart import cart as K

    controller = K.CartController(local, remote, authenticated=True)
    await controller.start()
    await controller.add_item(product, 2)
    controller.totals.total
"""

from __future__ import annotations

from storecart.cart._types import (
    InventoryRecord,
    WeightVariant,
    Product,
    IdentityKey,
    LineItem,
    Totals,
    CartMode,
    CartState,
    NoticeKind,
    Notice,
    SummaryLine,
    CartSummary,
    Recommendations,
)
from storecart.cart._identity import identity_of, key_of, same_line
from storecart.cart._totals import (
    compute_totals,
    estimate_shipping,
    round2,
    FREE_SHIPPING_THRESHOLD,
    FLAT_SHIPPING_FEE,
)
from storecart.cart._ops import (
    Items,
    AddLine,
    RemoveLine,
    SetQuantity,
    ClearLines,
    Mutation,
)
from storecart.cart._validate import (
    ProblemKind,
    ValidationProblem,
    ValidationReport,
    validate,
    validate_against,
)
from storecart.cart._controller import CartController, Notify

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
    "identity_of",
    "key_of",
    "same_line",
    "compute_totals",
    "estimate_shipping",
    "round2",
    "FREE_SHIPPING_THRESHOLD",
    "FLAT_SHIPPING_FEE",
    "Items",
    "AddLine",
    "RemoveLine",
    "SetQuantity",
    "ClearLines",
    "Mutation",
    "ProblemKind",
    "ValidationProblem",
    "ValidationReport",
    "validate",
    "validate_against",
    "CartController",
    "Notify",
)
