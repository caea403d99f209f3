"""
Fixed/Percentage Fee Resolver

Prices the rows of a configured cost catalog (fiduciary agent, securitizer,
bookkeeper, legal counsel, ...) against the issuance volume.
"""

from decimal import Decimal
from typing import Iterable

from ..models import CatalogRow, FeeLineItem, FeeOrigin, PricingMode, Recurrence
from .gross_up import gross_up, normalize_gross_up_rate

HUNDRED = Decimal("100")


class CatalogFeeResolver:
    """Turns catalog rows into upfront and recurring FeeLineItems."""

    def resolve(self, rows: Iterable[CatalogRow], volume: Decimal) -> list[FeeLineItem]:
        """
        Price every active row.

        A row yields an upfront item when its upfront amount is positive and a
        recurring item when its recurring amount is positive, so one row can
        contribute both. An empty catalog yields an empty list.
        """
        items = []
        for row in rows:
            if not row.active:
                continue

            upfront, recurring = self._price(row, volume)
            fraction = normalize_gross_up_rate(row.gross_up)

            if upfront > 0:
                items.append(
                    FeeLineItem(
                        role=row.role,
                        provider=row.provider,
                        pricing_mode=row.pricing_mode,
                        origin=FeeOrigin.CATALOG_FIXED,
                        upfront_net=upfront,
                        recurrence=Recurrence.NONE,
                        gross_up_rate=fraction,
                        upfront_gross=gross_up(upfront, fraction),
                        formula=self._describe(row, row.upfront_price),
                    )
                )

            if recurring > 0:
                # Recurring charges without a configured period are billed annually
                recurrence = row.recurrence if row.recurrence is not Recurrence.NONE else Recurrence.ANNUAL
                items.append(
                    FeeLineItem(
                        role=row.role,
                        provider=row.provider,
                        pricing_mode=row.pricing_mode,
                        origin=FeeOrigin.CATALOG_FIXED,
                        recurring_net=recurring,
                        recurrence=recurrence,
                        gross_up_rate=fraction,
                        recurring_gross=gross_up(recurring, fraction),
                        formula=self._describe(row, row.recurring_price),
                    )
                )

        return items

    def _price(self, row: CatalogRow, volume: Decimal) -> tuple[Decimal, Decimal]:
        """Net upfront and recurring amounts. Percentage prices are in percentage points."""
        if row.pricing_mode is PricingMode.PERCENTAGE:
            return (
                row.upfront_price * volume / HUNDRED,
                row.recurring_price * volume / HUNDRED,
            )
        return row.upfront_price, row.recurring_price

    @staticmethod
    def _describe(row: CatalogRow, price: Decimal) -> str:
        if row.pricing_mode is PricingMode.PERCENTAGE:
            return f"{price}% of volume"
        return "Flat amount"
