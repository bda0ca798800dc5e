"""
storecart — storefront cart and pricing/consistency engine.

    from storecart import cart as K       # Line items, totals, controller
    from storecart import store as S      # Local / remote persistence
    from storecart import checkout as CO  # Shipping zones, order placement
    from storecart import catalog         # Product lookup, weight pricing
"""

from storecart import cart
from storecart import store
from storecart import checkout
from storecart import catalog
from storecart._types import (
    Result,
    Ok,
    Error,
    Money,
    ProductId,
)
from storecart._logging import configure_logging
from storecart.config import CartSettings

__version__ = "0.1.0"

__all__ = (
    "cart",
    "store",
    "checkout",
    "catalog",
    "Result",
    "Ok",
    "Error",
    "Money",
    "ProductId",
    "configure_logging",
    "CartSettings",
)
