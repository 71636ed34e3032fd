"""Tests for Decimal normalisation and the settlement band."""

from decimal import Decimal

import pytest

from khata_kernel.domain.amounts import (
    SETTLEMENT_TOLERANCE,
    ZERO,
    is_settled,
    to_amount,
)


class TestToAmount:
    """Tests for to_amount()."""

    def test_none_is_zero(self):
        assert to_amount(None) == ZERO

    def test_decimal_passes_through(self):
        value = Decimal("123.456789")
        assert to_amount(value) is value

    def test_int_and_string(self):
        assert to_amount(10000) == Decimal("10000")
        assert to_amount(" 250.50 ") == Decimal("250.50")

    def test_float_goes_through_str(self):
        """0.1 keeps its written form rather than the binary expansion."""
        assert to_amount(0.1) == Decimal("0.1")

    def test_no_rounding(self):
        assert to_amount("0.0049") == Decimal("0.0049")

    @pytest.mark.parametrize("bad", ["abc", "", "1,000"])
    def test_unparsable_raises(self, bad):
        with pytest.raises(ValueError):
            to_amount(bad)

    @pytest.mark.parametrize("bad", ["NaN", "Infinity", float("inf")])
    def test_non_finite_raises(self, bad):
        with pytest.raises(ValueError):
            to_amount(bad)

    def test_bool_rejected(self):
        with pytest.raises(ValueError):
            to_amount(True)


class TestIsSettled:
    """The settlement band is closed at +/- tolerance."""

    def test_default_tolerance(self):
        assert SETTLEMENT_TOLERANCE == Decimal("0.01")

    @pytest.mark.parametrize("balance", ["0", "0.01", "-0.01", "0.005"])
    def test_inside_band(self, balance):
        assert is_settled(Decimal(balance))

    @pytest.mark.parametrize("balance", ["0.02", "-0.02", "0.011"])
    def test_outside_band(self, balance):
        assert not is_settled(Decimal(balance))

    def test_custom_tolerance(self):
        assert is_settled(Decimal("0.9"), tolerance=Decimal("1"))
        assert not is_settled(Decimal("1.5"), tolerance=Decimal("1"))
