"""
Cart validation — pre-checkout availability and stock check.

Reports, never repairs: the item list passed in is not touched, and the caller
decides whether to block checkout or let the shopper adjust quantities.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from enum import Enum, auto

from storecart._types import ProductId
from storecart.cart._types import LineItem, Product


class ProblemKind(Enum):
    INACTIVE = auto()
    INSUFFICIENT_STOCK = auto()


@dataclass(frozen=True, slots=True)
class ValidationProblem:
    item: LineItem
    reason: str
    kind: ProblemKind


@dataclass(frozen=True, slots=True)
class ValidationReport:
    problems: tuple[ValidationProblem, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.problems

    @property
    def reasons(self) -> tuple[str, ...]:
        return tuple(p.reason for p in self.problems)


def check_line(item: LineItem) -> list[ValidationProblem]:
    problems: list[ValidationProblem] = []
    product = item.product

    if not product.is_active:
        problems.append(
            ValidationProblem(item, "Product is no longer available", ProblemKind.INACTIVE)
        )

    inventory = product.inventory
    if inventory is not None and inventory.track_quantity and item.quantity > inventory.quantity:
        problems.append(
            ValidationProblem(
                item,
                f"Only {inventory.quantity} items available",
                ProblemKind.INSUFFICIENT_STOCK,
            )
        )

    return problems


def validate(items: Sequence[LineItem]) -> ValidationReport:
    """Check every line against the product snapshot it carries."""
    return ValidationReport(tuple(p for item in items for p in check_line(item)))


def validate_against(
    items: Sequence[LineItem],
    lookup: Callable[[ProductId], Product | None],
) -> ValidationReport:
    """
    Check every line against a fresh catalog snapshot.

    A product the catalog no longer knows is reported as unavailable. No stock
    is reserved: the snapshot can go stale before the order is placed.
    """
    problems: list[ValidationProblem] = []
    for item in items:
        current = lookup(item.product.id)
        if current is None:
            problems.append(
                ValidationProblem(item, "Product is no longer available", ProblemKind.INACTIVE)
            )
            continue
        # report against the caller's line, judge against the fresh product
        for problem in check_line(replace(item, product=current)):
            problems.append(replace(problem, item=item))
    return ValidationReport(tuple(problems))


__all__ = (
    "ProblemKind",
    "ValidationProblem",
    "ValidationReport",
    "check_line",
    "validate",
    "validate_against",
)
