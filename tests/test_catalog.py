"""Tests for proportional weight pricing."""

from decimal import Decimal

import pytest

from storecart.cart import WeightVariant
from storecart.catalog import (
    check_weight_options,
    fix_weight_options,
    proportional_price,
    weight_options,
)


class TestProportionalPrice:
    def test_standard_fractions(self):
        assert proportional_price(Decimal("400"), 1000) == Decimal("400")
        assert proportional_price(Decimal("400"), 500) == Decimal("200")
        assert proportional_price(Decimal("400"), 250) == Decimal("100")

    def test_rounds_half_up_to_whole_unit(self):
        assert proportional_price(Decimal("150"), 250) == Decimal("38")
        assert proportional_price(Decimal("99"), 500) == Decimal("50")

    @pytest.mark.parametrize(("base", "grams"), [(Decimal("0"), 500), (Decimal("-1"), 500), (Decimal("100"), 0)])
    def test_rejects_non_positive_inputs(self, base, grams):
        with pytest.raises(ValueError):
            proportional_price(base, grams)


class TestWeightOptions:
    def test_generated_options(self):
        options = weight_options(Decimal("320"))
        assert [(o.label, o.grams, o.price) for o in options] == [
            ("250g", 250, Decimal("80")),
            ("500g", 500, Decimal("160")),
            ("1kg", 1000, Decimal("320")),
        ]

    def test_generated_options_are_consistent(self):
        assert check_weight_options(weight_options(Decimal("275"))) == []

    def test_no_options_is_consistent(self):
        assert check_weight_options(()) == []

    def test_missing_base_option(self):
        options = (WeightVariant("500g", 500, Decimal("100")),)
        assert check_weight_options(options) == ["No 1kg (1000g) base option found"]

    def test_reports_mispriced_option(self):
        options = (
            WeightVariant("250g", 250, Decimal("90")),
            WeightVariant("1kg", 1000, Decimal("200")),
        )
        (error,) = check_weight_options(options)
        assert "Weight option 0 (250g, 250g)" in error
        assert "Expected price 50" in error

    def test_within_tolerance_is_accepted(self):
        options = (
            WeightVariant("250g", 250, Decimal("51")),
            WeightVariant("1kg", 1000, Decimal("200")),
        )
        assert check_weight_options(options) == []

    def test_fix_from_base_option(self):
        options = (
            WeightVariant("250g", 250, Decimal("90")),
            WeightVariant("1kg", 1000, Decimal("200")),
        )
        fixed = fix_weight_options(options)
        assert [o.price for o in fixed] == [Decimal("50"), Decimal("200")]
        assert [o.label for o in fixed] == ["250g", "1kg"]

    def test_fix_from_heaviest_option(self):
        options = (
            WeightVariant("250g", 250, Decimal("10")),
            WeightVariant("500g", 500, Decimal("150")),
        )
        fixed = fix_weight_options(options)
        assert [o.price for o in fixed] == [Decimal("75"), Decimal("150")]
        assert check_weight_options(fixed + (WeightVariant("1kg", 1000, Decimal("300")),)) == []
