"""
Unit Tests for the Cost Aggregator
"""

from decimal import Decimal

import pytest

from engine.calculators.aggregator import CostAggregator
from engine.calculators.variable import CUSTODY_ROLE, REGISTRATION_ROLE
from engine.models import FeeLineItem, FeeOrigin, PricingMode, Recurrence, Tranche


def item(upfront=0, recurring=0, recurrence=Recurrence.NONE, role="Agente Fiduciário", details=None) -> FeeLineItem:
    upfront = Decimal(str(upfront))
    recurring = Decimal(str(recurring))
    return FeeLineItem(
        role=role,
        pricing_mode=PricingMode.FLAT,
        origin=FeeOrigin.CATALOG_FIXED,
        upfront_net=upfront,
        upfront_gross=upfront,
        recurring_net=recurring,
        recurring_gross=recurring,
        recurrence=recurrence,
        details=details or {},
    )


class TestAggregate:
    """Bucketing and derived totals."""

    @pytest.fixture
    def aggregator(self):
        return CostAggregator()

    def test_buckets_and_totals(self, aggregator):
        """
        upfront 1,000; annual 500; monthly 100
        first year = 1,000 + 500 + 100 × 12 = 2,700
        subsequent years = 500 + 1,200 = 1,700
        """
        fixed = [item(upfront=1000), item(recurring=500, recurrence=Recurrence.ANNUAL)]
        variable = [item(recurring=100, recurrence=Recurrence.MONTHLY)]

        summary = aggregator.aggregate(fixed, variable, Decimal("1000000"))

        assert summary.total_upfront == Decimal("1000")
        assert summary.total_annual == Decimal("500")
        assert summary.total_monthly == Decimal("100")
        assert summary.total_first_year == Decimal("2700")
        assert summary.total_subsequent_years == Decimal("1700")
        assert summary.percent_of_volume == Decimal("0.27")

    def test_uses_gross_amounts(self, aggregator):
        grossed = FeeLineItem(
            role="Securitizadora",
            pricing_mode=PricingMode.FLAT,
            origin=FeeOrigin.CATALOG_FIXED,
            upfront_net=Decimal("800"),
            upfront_gross=Decimal("1000"),
            gross_up_rate=Decimal("0.2"),
        )
        summary = aggregator.aggregate([grossed], [], Decimal("1000000"))
        assert summary.total_upfront == Decimal("1000")

    def test_recurring_without_period_is_annual(self, aggregator):
        summary = aggregator.aggregate([item(recurring=300)], [], Decimal("1000"))

        assert summary.total_annual == Decimal("300")
        assert summary.total_monthly == Decimal("0")

    def test_no_items(self, aggregator):
        summary = aggregator.aggregate([], [], Decimal("1000000"))

        assert summary.total_first_year == Decimal("0")
        assert summary.total_subsequent_years == Decimal("0")
        assert summary.percent_of_volume == Decimal("0")

    def test_zero_volume_percent_is_zero(self, aggregator):
        summary = aggregator.aggregate([item(upfront=100)], [], Decimal("0"))
        assert summary.percent_of_volume == Decimal("0")

    def test_deterministic(self, aggregator):
        lines = [item(upfront="1234.5678"), item(recurring="0.3333", recurrence=Recurrence.MONTHLY)]
        assert aggregator.aggregate(lines, [], Decimal("777")) == aggregator.aggregate(lines, [], Decimal("777"))


class TestAllocateSeries:
    """B3 costs attributed to each series."""

    @pytest.fixture
    def aggregator(self):
        return CostAggregator()

    def test_registration_kept_per_series_and_custody_pro_rata(self, aggregator):
        registration = item(
            upfront=4000,
            role=REGISTRATION_ROLE,
            details={"series": [{"serie": 1, "valor": Decimal("3000")}, {"serie": 2, "valor": Decimal("1000")}]},
        )
        custody = item(recurring=1000, recurrence=Recurrence.MONTHLY, role=CUSTODY_ROLE)
        tranches = [
            Tranche(number=1, face_value=Decimal("75000000")),
            Tranche(number=2, face_value=Decimal("25000000")),
        ]

        series = aggregator.allocate_series([registration, custody], tranches)

        assert [s.number for s in series] == [1, 2]
        assert series[0].registration == Decimal("3000")
        assert series[1].registration == Decimal("1000")
        assert series[0].custody == Decimal("750")
        assert series[1].custody == Decimal("250")

    def test_no_b3_costs(self, aggregator):
        series = aggregator.allocate_series([], [Tranche(number=1, face_value=Decimal("10"))])

        assert series[0].registration == Decimal("0")
        assert series[0].custody == Decimal("0")
