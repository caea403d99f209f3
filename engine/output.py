"""
Output Builder

Constructs the final API response from processing context.
"""

from decimal import Decimal, ROUND_HALF_UP
from enum import Enum

from .models import CostResult, CostSummary, FeeLineItem, ProcessingContext, SeriesCost


def quantize_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places using ROUND_HALF_UP."""
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def to_money(value: Decimal) -> float:
    """Convert Decimal to float with 2 decimal places."""
    return float(quantize_money(value))


def to_plain(value):
    """Recursively turn Decimals and enums inside breakdown details into JSON types."""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


class OutputBuilder:
    """Builds the final output response."""

    def build(self, ctx: ProcessingContext) -> CostResult:
        """Construct the complete cost result from processing context."""
        combination = ctx.combination
        return CostResult(
            custos=[self.line_item(item) for item in [*ctx.fixed_lines, *ctx.variable_lines]],
            totais=self._build_totals(ctx.summary),
            tabela_origem=combination.fixed_catalog_key if combination else None,
            custos_series=[self._build_series_cost(s) for s in ctx.series_costs],
        )

    def line_item(self, item: FeeLineItem) -> dict:
        """Serialize one line item with net and gross amounts for both components."""
        has_recurring = item.recurring_net > 0
        return {
            "papel": item.role,
            "prestador_nome": item.provider,
            "tipo_preco": item.pricing_mode.value,
            "origem": item.origin.value,
            "periodicidade": item.recurrence.value if has_recurring else "upfront",
            "gross_up": float(item.gross_up_rate),
            "valor_upfront_liquido": to_money(item.upfront_net),
            "valor_recorrente_liquido": to_money(item.recurring_net),
            "valor_upfront_bruto": to_money(item.upfront_gross),
            "valor_recorrente_bruto": to_money(item.recurring_gross),
            "formula": item.formula,
            "detalhes": to_plain(item.details),
        }

    def _build_totals(self, summary: CostSummary) -> dict:
        return {
            "total_upfront": to_money(summary.total_upfront),
            "total_anual": to_money(summary.total_annual),
            "total_mensal": to_money(summary.total_monthly),
            "total_recorrente": to_money(summary.total_subsequent_years),
            "total_primeiro_ano": to_money(summary.total_first_year),
            "total_anos_subsequentes": to_money(summary.total_subsequent_years),
            "percentual_volume": to_money(summary.percent_of_volume),
        }

    def _build_series_cost(self, series: SeriesCost) -> dict:
        return {
            "numero": series.number,
            "registro_b3": to_money(series.registration),
            "custodia_b3": to_money(series.custody),
        }
