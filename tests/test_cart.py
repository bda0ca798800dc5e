"""Tests for line identity, cart mutations and the totals calculator."""

from decimal import Decimal

import pytest

from storecart.cart import (
    AddLine,
    ClearLines,
    IdentityKey,
    LineItem,
    Product,
    RemoveLine,
    SetQuantity,
    WeightVariant,
    compute_totals,
    identity_of,
    round2,
)
from storecart.store import decode_items, encode_items


class TestIdentity:
    """Which mutations land on the same line."""

    def test_no_variant_identity(self):
        assert identity_of("p1") == IdentityKey("p1", None)
        assert identity_of("p1") == identity_of("p1", None)

    def test_same_grams_same_line_despite_label_and_price(self):
        """Only the weight matters for variant identity."""
        a = WeightVariant(label="500g", grams=500, price=Decimal("200"))
        b = WeightVariant(label="half kilo", grams=500, price=Decimal("210"))
        assert identity_of("p1", a) == identity_of("p1", b)

    def test_different_grams_or_missing_variant_differ(self, variants):
        v250, v500, _ = variants
        assert identity_of("p1", v250) != identity_of("p1", v500)
        assert identity_of("p1", v500) != identity_of("p1")

    def test_different_products_differ(self, variants):
        _, v500, _ = variants
        assert identity_of("p1", v500) != identity_of("p2", v500)


class TestMutations:
    """Pure apply() of each mutation."""

    def test_add_same_product_twice_merges(self, honey):
        items = AddLine(honey, 2).apply(())
        items = AddLine(honey, 3).apply(items)
        assert len(items) == 1
        assert items[0].quantity == 5

    def test_add_same_variant_twice_merges(self, almonds, variants):
        _, v500, _ = variants
        items = AddLine(almonds, 1, v500).apply(())
        items = AddLine(almonds, 4, v500).apply(items)
        assert len(items) == 1
        assert items[0].quantity == 5

    def test_add_different_variants_makes_two_lines(self, almonds, variants):
        v250, v500, _ = variants
        items = AddLine(almonds, 1, v250).apply(())
        items = AddLine(almonds, 1, v500).apply(items)
        assert len(items) == 2
        assert {item.variant.grams for item in items} == {250, 500}

    def test_new_line_captures_variant_price(self, almonds, variants):
        _, v500, _ = variants
        (line,) = AddLine(almonds, 1, v500).apply(())
        assert line.price == Decimal("200")

    def test_new_line_captures_base_price_without_variant(self, honey):
        (line,) = AddLine(honey, 1).apply(())
        assert line.price == Decimal("25.00")

    def test_merge_keeps_original_captured_price(self, honey):
        """A later price change in the catalog does not reprice the line."""
        items = AddLine(honey, 1).apply(())
        repriced = Product(id=honey.id, name=honey.name, price=Decimal("30.00"))
        items = AddLine(repriced, 1).apply(items)
        assert items[0].price == Decimal("25.00")
        assert items[0].quantity == 2

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_add_rejects_non_positive_quantity(self, honey, quantity):
        with pytest.raises(ValueError):
            AddLine(honey, quantity)

    def test_remove_without_variant_keeps_variant_line(self, almonds, variants):
        _, v500, _ = variants
        items = AddLine(almonds, 2, v500).apply(())
        items = AddLine(almonds, 1).apply(items)

        items = RemoveLine(almonds.id).apply(items)

        assert len(items) == 1
        assert items[0].variant == v500
        assert items[0].quantity == 2

    def test_remove_missing_line_is_noop(self, honey):
        items = AddLine(honey, 1).apply(())
        assert RemoveLine("nope").apply(items) == items

    def test_set_quantity_sets_not_increments(self, honey):
        items = AddLine(honey, 4).apply(())
        items = SetQuantity(honey.id, 2).apply(items)
        assert items[0].quantity == 2

    @pytest.mark.parametrize("quantity", [0, -5])
    def test_set_quantity_floor_removes_line(self, honey, quantity):
        items = AddLine(honey, 4).apply(())
        assert SetQuantity(honey.id, quantity).apply(items) == ()

    def test_clear(self, honey, dates):
        items = AddLine(dates, 1).apply(AddLine(honey, 1).apply(()))
        assert ClearLines().apply(items) == ()


def _line(price, quantity=1, *, variant=None, captured=None):
    product = Product(id=f"p-{price}-{quantity}", name="Item", price=Decimal(price))
    return LineItem(
        product=product,
        quantity=quantity,
        price=Decimal(captured) if captured is not None else None,
        variant=variant,
    )


class TestTotals:
    """Derived totals: counts, subtotal, threshold shipping, rounding."""

    def test_empty_cart(self):
        totals = compute_totals(())
        assert totals.item_count == 0
        assert totals.subtotal == Decimal("0")
        assert totals.shipping == Decimal("10")
        assert totals.total == Decimal("10.00")

    def test_item_count_sums_quantities(self):
        totals = compute_totals([_line("5", 2), _line("7", 3)])
        assert totals.item_count == 5
        assert totals.subtotal == Decimal("31")

    def test_just_below_threshold_pays_flat_fee(self):
        totals = compute_totals([_line("99.99")])
        assert totals.subtotal == Decimal("99.99")
        assert totals.shipping == Decimal("10")
        assert totals.total == Decimal("109.99")

    def test_at_threshold_ships_free(self):
        totals = compute_totals([_line("50.00", 2)])
        assert totals.subtotal == Decimal("100.00")
        assert totals.shipping == Decimal("0")
        assert totals.total == Decimal("100.00")

    def test_tax_is_zero(self):
        assert compute_totals([_line("12.50")]).tax == Decimal("0")

    def test_unit_price_fallback_order(self):
        """Captured price, then variant price, then product price, then 0."""
        variant = WeightVariant("250g", 250, Decimal("3"))
        assert _line("1", captured="2", variant=variant).unit_price == Decimal("2")
        assert _line("1", variant=variant).unit_price == Decimal("3")
        assert _line("1").unit_price == Decimal("1")
        assert _line("0").unit_price == Decimal("0")

    def test_total_rounds_half_up(self):
        assert round2(Decimal("10.005")) == Decimal("10.01")
        assert round2(Decimal("10.004")) == Decimal("10.00")
        totals = compute_totals([_line("33.335")])
        assert totals.total == Decimal("43.34")

    def test_custom_policy(self):
        totals = compute_totals(
            [_line("60")],
            free_shipping_threshold=Decimal("50"),
            flat_fee=Decimal("15"),
        )
        assert totals.shipping == Decimal("0")

    def test_totals_survive_serialization(self, almonds, variants, dates, honey):
        """Recomputing from a decoded list gives identical totals."""
        _, v500, _ = variants
        items = AddLine(almonds, 2, v500).apply(())
        items = AddLine(dates, 1).apply(items)
        items = AddLine(honey, 3).apply(items)

        restored = decode_items(encode_items(items))

        assert compute_totals(restored) == compute_totals(items)
        assert [i.quantity for i in restored] == [i.quantity for i in items]

    def test_list_fields_are_stored_as_tuples(self):
        """Products built with lists still hash for the totals cache."""
        variant = WeightVariant("500g", 500, Decimal("20"))
        product = Product(
            id="p-list",
            name="Pecans",
            price=Decimal("40"),
            weight_options=[variant],
            tags=["raw"],
        )
        assert product.weight_options == (variant,)
        assert product.tags == ("raw",)

        totals = compute_totals(AddLine(product, 2, variant).apply(()))
        assert totals.subtotal == Decimal("40")
