"""
Proportional weight pricing.

    1kg  = base price
    500g = base / 2
    250g = base / 4

Prices round half-up to whole currency units.
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal, ROUND_HALF_UP

from storecart._types import Money
from storecart.cart._types import WeightVariant

BASE_GRAMS = 1000
STANDARD_WEIGHTS: tuple[tuple[str, int], ...] = (("250g", 250), ("500g", 500), ("1kg", 1000))


def proportional_price(base_price_per_kg: Money, grams: int) -> Money:
    """Price of ``grams`` at a per-kilogram base, rounded to a whole unit."""
    base = Decimal(base_price_per_kg)
    if base <= 0:
        raise ValueError("Base price must be a positive number")
    if grams <= 0:
        raise ValueError("Grams must be a positive number")

    return (Decimal(grams) / BASE_GRAMS * base).quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def weight_options(base_price_per_kg: Money) -> tuple[WeightVariant, ...]:
    return tuple(
        WeightVariant(label=label, grams=grams, price=proportional_price(base_price_per_kg, grams))
        for label, grams in STANDARD_WEIGHTS
    )


def check_weight_options(
    options: tuple[WeightVariant, ...],
    tolerance: Money = Decimal("1"),
) -> list[str]:
    """
    Inconsistencies against the 1kg option's price. Empty list means the
    options follow proportional pricing (or there are none).
    """
    if not options:
        return []

    base = next((o for o in options if o.grams == BASE_GRAMS), None)
    if base is None:
        return ["No 1kg (1000g) base option found"]

    errors = []
    for index, option in enumerate(options):
        expected = proportional_price(base.price, option.grams)
        difference = abs(expected - option.price)
        if difference > tolerance:
            errors.append(
                f"Weight option {index} ({option.label}, {option.grams}g): "
                f"Expected price {expected}, but got {option.price} "
                f"(difference: {difference})"
            )
    return errors


def fix_weight_options(options: tuple[WeightVariant, ...]) -> tuple[WeightVariant, ...]:
    """Reprice every option from the 1kg price, or from the heaviest option."""
    if not options:
        return options

    base = next((o for o in options if o.grams == BASE_GRAMS), None)
    if base is not None:
        per_kg = base.price
    else:
        heaviest = max(options, key=lambda o: o.grams)
        per_kg = (heaviest.price / heaviest.grams * BASE_GRAMS).quantize(
            Decimal("1"), rounding=ROUND_HALF_UP
        )

    return tuple(replace(o, price=proportional_price(per_kg, o.grams)) for o in options)


__all__ = (
    "BASE_GRAMS",
    "STANDARD_WEIGHTS",
    "proportional_price",
    "weight_options",
    "check_weight_options",
    "fix_weight_options",
)
