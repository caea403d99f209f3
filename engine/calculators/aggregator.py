"""
Cost Aggregator

Buckets priced line items into upfront, annual and monthly totals and
derives the first-year and subsequent-year cost of the issuance.
"""

from decimal import Decimal
from typing import Iterable, Sequence

from ..models import CostSummary, FeeLineItem, Recurrence, SeriesCost, Tranche
from .variable import CUSTODY_ROLE, REGISTRATION_ROLE

ZERO = Decimal("0")
MONTHS_PER_YEAR = Decimal("12")
HUNDRED = Decimal("100")


class CostAggregator:
    """Combines catalog and formulaic fees into a CostSummary."""

    def aggregate(
        self,
        fixed_lines: Iterable[FeeLineItem],
        variable_lines: Iterable[FeeLineItem],
        volume: Decimal,
    ) -> CostSummary:
        """
        Sum gross amounts by bucket.

        Upfront amounts always land in the upfront bucket; recurring amounts
        go to the monthly or annual bucket of their recurrence.
        """
        total_upfront = ZERO
        total_annual = ZERO
        total_monthly = ZERO

        for item in [*fixed_lines, *variable_lines]:
            total_upfront += item.upfront_gross
            if item.recurring_gross > 0:
                if item.recurrence is Recurrence.MONTHLY:
                    total_monthly += item.recurring_gross
                else:
                    total_annual += item.recurring_gross

        subsequent = total_annual + total_monthly * MONTHS_PER_YEAR
        first_year = total_upfront + subsequent

        if volume > 0:
            percent = first_year / volume * HUNDRED
        else:
            percent = ZERO

        return CostSummary(
            total_upfront=total_upfront,
            total_annual=total_annual,
            total_monthly=total_monthly,
            total_first_year=first_year,
            total_subsequent_years=subsequent,
            percent_of_volume=percent,
        )

    def allocate_series(self, lines: Sequence[FeeLineItem], tranches: Sequence[Tranche]) -> list[SeriesCost]:
        """
        Attribute B3 costs to each series.

        Registration is priced per series, so each series keeps its own value.
        Custody is priced on the whole volume and is split pro rata by face
        value.
        """
        registration_by_series = {}
        custody_total = ZERO

        for item in lines:
            if item.role == REGISTRATION_ROLE:
                for entry in item.details.get("series", []):
                    number = entry["serie"]
                    registration_by_series[number] = registration_by_series.get(number, ZERO) + entry["valor"]
            elif item.role == CUSTODY_ROLE:
                custody_total += item.recurring_gross

        face_total = sum((t.face_value for t in tranches), ZERO)

        allocations = []
        for tranche in tranches:
            share = tranche.face_value / face_total if face_total > 0 else ZERO
            allocations.append(
                SeriesCost(
                    number=tranche.number,
                    registration=registration_by_series.get(tranche.number, ZERO),
                    custody=custody_total * share,
                )
            )
        return allocations
