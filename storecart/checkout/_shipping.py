"""
Checkout shipping — destination-city zone table.

Evaluated only when an order is placed and independent of the in-cart
estimate (``Totals.shipping``); the two may show different numbers for the
same cart.

    shipping_fee("Cairo")    # 70
    shipping_fee("Aswan")    # 100
    shipping_fee("")         # 0 -> quote unavailable, not free
"""

from __future__ import annotations

from dataclasses import dataclass

from storecart._types import Money, ZERO
from storecart.config import CartSettings, DEFAULT_SETTINGS


@dataclass(frozen=True, slots=True)
class ShippingQuote:
    city: str
    fee: Money

    @property
    def available(self) -> bool:
        """False when no city was chosen; ``fee`` is then 0 and meaningless."""
        return bool(self.city)


def _normalize(city: str | None) -> str:
    return (city or "").strip().lower()


def shipping_fee(city: str | None, *, settings: CartSettings = DEFAULT_SETTINGS) -> Money:
    normalized = _normalize(city)
    if not normalized:
        return ZERO
    if normalized in settings.discounted_cities:
        return settings.discounted_fee
    return settings.standard_fee


def quote(city: str | None, *, settings: CartSettings = DEFAULT_SETTINGS) -> ShippingQuote:
    return ShippingQuote(city=(city or "").strip(), fee=shipping_fee(city, settings=settings))


__all__ = ("ShippingQuote", "shipping_fee", "quote")
