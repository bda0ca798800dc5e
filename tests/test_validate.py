"""Tests for pre-checkout cart validation."""

from dataclasses import replace
from decimal import Decimal

from storecart.cart import (
    AddLine,
    InventoryRecord,
    ProblemKind,
    validate,
    validate_against,
)
from storecart.catalog import InMemoryCatalog


class TestValidate:
    """Checks against the product snapshot carried by each line."""

    def test_clean_cart_is_valid(self, honey, dates):
        items = AddLine(dates, 3).apply(AddLine(honey, 10).apply(()))
        report = validate(items)
        assert report.is_valid
        assert report.reasons == ()

    def test_empty_cart_is_valid(self):
        assert validate(()).is_valid

    def test_inactive_product(self, retired, honey):
        items = AddLine(honey, 1).apply(AddLine(retired, 1).apply(()))
        report = validate(items)

        assert not report.is_valid
        (problem,) = report.problems
        assert problem.kind is ProblemKind.INACTIVE
        assert problem.reason == "Product is no longer available"
        assert problem.item.product.id == "p-retired"

    def test_insufficient_stock(self, dates):
        report = validate(AddLine(dates, 4).apply(()))

        assert report.reasons == ("Only 3 items available",)
        assert report.problems[0].kind is ProblemKind.INSUFFICIENT_STOCK

    def test_untracked_inventory_is_never_short(self, honey):
        untracked = replace(honey, inventory=InventoryRecord(track_quantity=False, quantity=0))
        assert validate(AddLine(untracked, 50).apply(())).is_valid

    def test_inactive_and_short_reports_both(self, dates):
        gone = replace(dates, is_active=False)
        report = validate(AddLine(gone, 9).apply(()))
        assert {p.kind for p in report.problems} == {ProblemKind.INACTIVE, ProblemKind.INSUFFICIENT_STOCK}

    def test_items_are_not_modified(self, dates, retired):
        """Validation reports; it never repairs quantities or drops lines."""
        items = AddLine(retired, 1).apply(AddLine(dates, 8).apply(()))
        snapshot = list(items)

        validate(items)

        assert list(items) == snapshot
        assert items[0].quantity == 8


class TestValidateAgainstCatalog:
    """Checks against a fresh catalog lookup instead of the snapshot."""

    def test_fresh_stock_wins_over_snapshot(self, dates):
        items = AddLine(dates, 2).apply(())
        catalog = InMemoryCatalog([replace(dates, inventory=InventoryRecord(True, 1))])

        report = validate_against(items, catalog.get_product)

        assert report.reasons == ("Only 1 items available",)
        assert report.problems[0].item is items[0]

    def test_reactivated_product_passes(self, retired):
        items = AddLine(retired, 1).apply(())
        catalog = InMemoryCatalog([replace(retired, is_active=True)])
        assert validate_against(items, catalog.get_product).is_valid

    def test_missing_product_is_unavailable(self, honey):
        items = AddLine(honey, 1).apply(())
        catalog = InMemoryCatalog()

        report = validate_against(items, catalog.get_product)

        assert report.problems[0].kind is ProblemKind.INACTIVE
        assert report.reasons == ("Product is no longer available",)

    def test_catalog_edits(self, honey):
        catalog = InMemoryCatalog([honey])
        catalog.put(replace(honey, price=Decimal("30")))
        assert catalog.get_product(honey.id).price == Decimal("30")

        catalog.remove(honey.id)
        catalog.remove(honey.id)
        assert catalog.products() == ()
