"""
Unit Tests for the Fixed/Percentage Fee Resolver
"""

from decimal import Decimal

import pytest

from engine.calculators.catalog import CatalogFeeResolver
from engine.models import CatalogRow, FeeOrigin, PricingMode, Recurrence


def row(**kwargs) -> CatalogRow:
    data = {"papel": "Agente Fiduciário", "tipo_preco": "fixo"}
    data.update(kwargs)
    return CatalogRow.from_dict(data)


class TestCatalogFeeResolver:
    """Catalog rows become upfront and recurring line items."""

    @pytest.fixture
    def resolver(self):
        return CatalogFeeResolver()

    def test_flat_row_with_both_components(self, resolver):
        rows = [row(preco_upfront=8000, preco_recorrente=15000, periodicidade="anual")]
        items = resolver.resolve(rows, Decimal("50000000"))

        assert len(items) == 2
        upfront, recurring = items

        assert upfront.upfront_net == Decimal("8000")
        assert upfront.recurring_net == Decimal("0")
        assert upfront.recurrence is Recurrence.NONE

        assert recurring.recurring_net == Decimal("15000")
        assert recurring.upfront_net == Decimal("0")
        assert recurring.recurrence is Recurrence.ANNUAL

        assert all(i.origin is FeeOrigin.CATALOG_FIXED for i in items)

    def test_percentage_row_uses_volume(self, resolver):
        """0.5% of 50MM = 250,000; 0.01% monthly = 5,000"""
        rows = [row(tipo_preco="percentual", preco_upfront=0.5, preco_recorrente=0.01, periodicidade="mensal")]
        items = resolver.resolve(rows, Decimal("50000000"))

        assert items[0].pricing_mode is PricingMode.PERCENTAGE
        assert items[0].upfront_net == Decimal("250000")
        assert items[1].recurring_net == Decimal("5000")
        assert items[1].recurrence is Recurrence.MONTHLY

    def test_recurring_only_row(self, resolver):
        rows = [row(papel="Auditoria", preco_recorrente=12000, periodicidade="anual")]
        items = resolver.resolve(rows, Decimal("1000000"))

        assert len(items) == 1
        assert items[0].role == "Auditoria"
        assert items[0].recurring_net == Decimal("12000")

    def test_zero_priced_row_contributes_nothing(self, resolver):
        assert resolver.resolve([row(preco_upfront=0, preco_recorrente=0)], Decimal("1000000")) == []

    def test_inactive_row_skipped(self, resolver):
        assert resolver.resolve([row(preco_upfront=1000, ativo=False)], Decimal("1000000")) == []

    def test_recurring_without_period_billed_annually(self, resolver):
        items = resolver.resolve([row(preco_recorrente=1000, periodicidade=None)], Decimal("1000000"))
        assert items[0].recurrence is Recurrence.ANNUAL

    def test_gross_up_applied_to_each_component(self, resolver):
        """A 20% gross-up turns 800 into 1,000"""
        rows = [row(preco_upfront=800, preco_recorrente=400, periodicidade="mensal", gross_up=0.2)]
        upfront, recurring = resolver.resolve(rows, Decimal("1000000"))

        assert upfront.gross_up_rate == Decimal("0.2")
        assert upfront.upfront_gross == Decimal("1000")
        assert recurring.recurring_gross == Decimal("500")

    def test_gross_up_in_percentage_points(self, resolver):
        rows = [row(preco_upfront=800, gross_up=20)]
        (item,) = resolver.resolve(rows, Decimal("1000000"))

        assert item.gross_up_rate == Decimal("0.2")
        assert item.upfront_gross == Decimal("1000")

    def test_empty_catalog(self, resolver):
        assert resolver.resolve([], Decimal("1000000")) == []

    def test_provider_carried_through(self, resolver):
        (item,) = resolver.resolve([row(preco_upfront=100, prestador="Pentágono")], Decimal("1"))
        assert item.provider == "Pentágono"
