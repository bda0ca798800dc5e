"""
Settings — every tunable number of the cart core in one frozen value.

    settings = CartSettings.from_env()          # STORECART_* + .env
    controller = CartController(local, remote, settings=settings)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "STORECART_"


def _env(key: str) -> str | None:
    value = os.getenv(ENV_PREFIX + key)
    if value is None or value.strip() == "":
        return None
    return value.strip()


# ═══════════════════════════════════════════════════════════════════════════════
# CartSettings
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class CartSettings:
    """
    Cart and checkout configuration.

    The in-cart estimate (threshold + flat fee) and the checkout zone table
    (discounted cities vs standard fee) are two independent policies
    and may disagree for the same cart.
    """

    # In-cart estimate
    free_shipping_threshold: Decimal = Decimal("100")
    flat_shipping_fee: Decimal = Decimal("10")

    # Remote cart API
    api_base_url: str = "http://localhost:5000/api"
    request_timeout: float = 10.0

    # Local store
    local_db_url: str = "sqlite+aiosqlite:///cart.db"
    storage_key: str = "cart_items"

    # Checkout zone table
    discounted_cities: tuple[str, ...] = field(default=("cairo", "giza"))
    discounted_fee: Decimal = Decimal("70")
    standard_fee: Decimal = Decimal("100")

    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv_path: str | Path | None = None) -> CartSettings:
        """Build settings from STORECART_* variables, falling back to defaults."""
        load_dotenv(dotenv_path=dotenv_path)
        base = cls()
        overrides: dict[str, object] = {}

        if (v := _env("FREE_SHIPPING_THRESHOLD")) is not None:
            overrides["free_shipping_threshold"] = Decimal(v)
        if (v := _env("FLAT_SHIPPING_FEE")) is not None:
            overrides["flat_shipping_fee"] = Decimal(v)
        if (v := _env("API_BASE_URL")) is not None:
            overrides["api_base_url"] = v.rstrip("/")
        if (v := _env("REQUEST_TIMEOUT")) is not None:
            overrides["request_timeout"] = float(v)
        if (v := _env("LOCAL_DB_URL")) is not None:
            overrides["local_db_url"] = v
        if (v := _env("STORAGE_KEY")) is not None:
            overrides["storage_key"] = v
        if (v := _env("DISCOUNTED_CITIES")) is not None:
            overrides["discounted_cities"] = tuple(
                c.strip().lower() for c in v.split(",") if c.strip()
            )
        if (v := _env("DISCOUNTED_FEE")) is not None:
            overrides["discounted_fee"] = Decimal(v)
        if (v := _env("STANDARD_FEE")) is not None:
            overrides["standard_fee"] = Decimal(v)
        if (v := _env("LOG_LEVEL")) is not None:
            overrides["log_level"] = v.upper()

        return replace(base, **overrides)  # type: ignore[arg-type]


DEFAULT_SETTINGS = CartSettings()


__all__ = ("CartSettings", "DEFAULT_SETTINGS", "ENV_PREFIX")
