"""
Unit Tests for the Gross-Up Adjuster
"""

from decimal import Decimal

import pytest

from engine.calculators.gross_up import gross_up, normalize_gross_up_rate
from engine.exceptions import InvalidInputError


class TestNormalization:
    """Rates arrive either as fractions or as percentage points."""

    def test_fraction_kept(self):
        assert normalize_gross_up_rate(Decimal("0.1215")) == Decimal("0.1215")

    def test_percentage_points_divided(self):
        assert normalize_gross_up_rate(Decimal("12.15")) == Decimal("0.1215")

    def test_one_is_a_fraction(self):
        assert normalize_gross_up_rate(Decimal("1")) == Decimal("1")

    def test_negative_rejected(self):
        with pytest.raises(InvalidInputError):
            normalize_gross_up_rate(Decimal("-0.1"))


class TestGrossUp:
    """gross = net / (1 - rate)"""

    def test_zero_rate_is_identity(self):
        assert gross_up(Decimal("1000"), Decimal("0")) == Decimal("1000")

    def test_fraction_rate(self):
        """878.50 / (1 - 0.1215) = 1,000.00"""
        assert gross_up(Decimal("878.50"), Decimal("0.1215")) == Decimal("1000")

    def test_percentage_rate(self):
        """Same as above with the rate sent as 12.15"""
        assert gross_up(Decimal("878.50"), Decimal("12.15")) == Decimal("1000")

    @pytest.mark.parametrize("rate", ["1", "100", "150"])
    def test_degenerate_rate_is_identity(self, rate):
        assert gross_up(Decimal("500"), Decimal(rate)) == Decimal("500")

    @pytest.mark.parametrize("rate", ["0", "0.05", "0.1215", "0.5", "0.99"])
    def test_round_trip(self, rate):
        net = Decimal("12345.67")
        r = Decimal(rate)
        assert abs(gross_up(net, r) * (1 - r) - net) < Decimal("1e-18")

    def test_negative_net_rejected(self):
        with pytest.raises(InvalidInputError):
            gross_up(Decimal("-1"), Decimal("0.1"))
