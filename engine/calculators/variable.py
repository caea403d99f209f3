"""
Variable Fee Calculator

Formulaic market-infrastructure fees: B3 custody and registration, the CVM
oversight fee and the ANBIMA market-association fee. Which of them apply is
decided by the FormulaSet selected for the issuance.
"""

from decimal import Decimal
from typing import Sequence

from .. import rate_tables
from ..exceptions import ValidationError
from ..models import (
    Category,
    FeeLineItem,
    FeeOrigin,
    FormulaSet,
    OfferClass,
    PricingMode,
    Recurrence,
    Tranche,
)
from .capped import compute_capped
from .tiered import breakdown_tiered

ZERO = Decimal("0")
ONE = Decimal("1")

CUSTODY_ROLE = "Custódia B3"
REGISTRATION_ROLE = "Registro B3"
CVM_ROLE = "Taxa CVM"
ANBIMA_ROLE = "Taxa ANBIMA"

STANDALONE_FEES = ("custody", "registration", "cvm_fee", "market_association")


def resolve_tenor(tranche: Tranche, default_tenor: Decimal | None) -> Decimal:
    """Series tenor, else the request tenor, else one year. Zero counts as missing."""
    return tranche.tenor_years or default_tenor or ONE


def _brackets_detail(allocations) -> list[dict]:
    return [
        {
            "limite_inferior": a.lower_bound,
            "limite_superior": a.upper_bound,
            "aliquota": a.rate,
            "volume_na_faixa": a.taxed_amount,
            "valor": a.value,
        }
        for a in allocations
    ]


def _upfront(role: str, amount: Decimal, formula: str, details: dict) -> FeeLineItem:
    return FeeLineItem(
        role=role,
        pricing_mode=PricingMode.PERCENTAGE,
        origin=FeeOrigin.FORMULAIC_VARIABLE,
        upfront_net=amount,
        upfront_gross=amount,
        recurrence=Recurrence.NONE,
        formula=formula,
        details=details,
    )


def _monthly(role: str, amount: Decimal, formula: str, details: dict) -> FeeLineItem:
    return FeeLineItem(
        role=role,
        pricing_mode=PricingMode.PERCENTAGE,
        origin=FeeOrigin.FORMULAIC_VARIABLE,
        recurring_net=amount,
        recurring_gross=amount,
        recurrence=Recurrence.MONTHLY,
        formula=formula,
        details=details,
    )


class VariableFeeCalculator:
    """Computes the formulaic fees of a formula set."""

    def calculate(
        self,
        formula_set: FormulaSet,
        volume: Decimal,
        tranches: Sequence[Tranche],
        default_tenor: Decimal | None = None,
    ) -> list[FeeLineItem]:
        if formula_set is FormulaSet.NONE:
            return []

        if formula_set is FormulaSet.DEB_PUBLIC:
            return [
                self.deb_custody(volume),
                self.deb_registration(tranches, default_tenor, public=True),
                self.cvm_fee(volume),
                self.market_association(volume),
            ]

        if formula_set is FormulaSet.DEB_PRIVATE_REGISTERED:
            return [
                self.deb_custody(volume),
                self.deb_registration(tranches, default_tenor, public=False),
            ]

        if formula_set is FormulaSet.CR_PUBLIC:
            return [
                self.cr_custody(volume),
                self.cr_registration(tranches),
                self.cvm_fee(volume),
                self.market_association(volume),
            ]

        if formula_set is FormulaSet.CR_PRIVATE_REGISTERED:
            return [
                self.cr_custody(volume),
                self.cr_registration(tranches),
            ]

        if formula_set is FormulaSet.CRI:
            return [
                self.cr_custody(volume),
                self.market_association(volume, cri=True),
                self.cr_registration(tranches),
                self.cvm_fee(volume),
            ]

        if formula_set is FormulaSet.CRA:
            return [
                self.cra_custody(volume),
                self.market_association(volume),
                self.cr_registration(tranches),
                self.cvm_fee(volume),
            ]

        # Server fault, reported as 500 rather than a validation error
        raise NotImplementedError(f"Unhandled formula set: {formula_set}")

    def calculate_single(
        self,
        fee: str,
        category: Category,
        offer_class: OfferClass,
        volume: Decimal,
        tranches: Sequence[Tranche],
        default_tenor: Decimal | None = None,
    ) -> FeeLineItem:
        """One named fee for a category, outside any formula set."""
        is_debenture = category in (Category.DEBENTURE, Category.NOTE_COMMERCIAL)

        if fee == "custody":
            if is_debenture:
                return self.deb_custody(volume)
            if category is Category.AGRIBUSINESS_CERT:
                return self.cra_custody(volume)
            return self.cr_custody(volume)

        if fee == "registration":
            if is_debenture:
                public = offer_class is not OfferClass.PRIVATE_REGISTERED
                return self.deb_registration(tranches, default_tenor, public=public)
            return self.cr_registration(tranches)

        if fee == "cvm_fee":
            return self.cvm_fee(volume)

        if fee == "market_association":
            return self.market_association(volume, cri=category is Category.RECEIVABLES_CERT_RE)

        raise ValidationError(f"Unknown fee: {fee!r}. Must be one of {', '.join(STANDALONE_FEES)}")

    # -------------------------------------------------------------------------
    # Custody
    # -------------------------------------------------------------------------

    def cr_custody(self, volume: Decimal) -> FeeLineItem:
        """CR/CRI custody: 0.000800% of volume per month."""
        rate = rate_tables.CR_CUSTODY_RATE
        return _monthly(
            CUSTODY_ROLE,
            volume * rate,
            "0.000800% of volume (monthly)",
            {"volume": volume, "aliquota": rate},
        )

    def cra_custody(self, volume: Decimal) -> FeeLineItem:
        """CRA custody: 0.000300% of volume per month."""
        rate = rate_tables.CRA_CUSTODY_RATE
        return _monthly(
            CUSTODY_ROLE,
            volume * rate,
            "0.000300% of volume (monthly)",
            {"volume": volume, "aliquota": rate},
        )

    def deb_custody(self, volume: Decimal) -> FeeLineItem:
        """Debenture custody: progressive table over the whole volume, per month."""
        allocations = breakdown_tiered(volume, rate_tables.DEB_CUSTODY_BRACKETS)
        total = sum((a.value for a in allocations), ZERO)
        return _monthly(
            CUSTODY_ROLE,
            total,
            "Progressive table by volume bracket (monthly)",
            {"volume": volume, "faixas": _brackets_detail(allocations)},
        )

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def cr_registration(self, tranches: Sequence[Tranche]) -> FeeLineItem:
        """CR/CRI/CRA registration: progressive table applied to each series."""
        total = ZERO
        series_detail = []

        for tranche in tranches:
            allocations = breakdown_tiered(tranche.face_value, rate_tables.CR_REGISTRATION_BRACKETS)
            value = sum((a.value for a in allocations), ZERO)
            total += value
            series_detail.append({
                "serie": tranche.number,
                "volume": tranche.face_value,
                "valor": value,
                "faixas": _brackets_detail(allocations),
            })

        return _upfront(
            REGISTRATION_ROLE,
            total,
            "Progressive table per series",
            {"quantidade_series": len(series_detail), "series": series_detail},
        )

    def deb_registration(
        self,
        tranches: Sequence[Tranche],
        default_tenor: Decimal | None,
        public: bool,
    ) -> FeeLineItem:
        """
        Debenture/commercial note registration: progressive table per series,
        multiplied by the series tenor in years. Registered private offers
        pay half the public rates.
        """
        brackets = (
            rate_tables.DEB_PUBLIC_REGISTRATION_BRACKETS
            if public
            else rate_tables.DEB_PRIVATE_REGISTRATION_BRACKETS
        )
        total = ZERO
        series_detail = []

        for tranche in tranches:
            tenor = resolve_tenor(tranche, default_tenor)
            allocations = breakdown_tiered(tranche.face_value, brackets)
            base = sum((a.value for a in allocations), ZERO)
            value = base * tenor
            total += value
            series_detail.append({
                "serie": tranche.number,
                "volume": tranche.face_value,
                "prazo": tenor,
                "valor_base": base,
                "valor": value,
                "faixas": _brackets_detail(allocations),
            })

        offer = "public" if public else "registered private (50% of public rates)"
        return _upfront(
            REGISTRATION_ROLE,
            total,
            f"Progressive table per series x tenor in years, {offer}",
            {"quantidade_series": len(series_detail), "series": series_detail},
        )

    # -------------------------------------------------------------------------
    # Offer fees
    # -------------------------------------------------------------------------

    def cvm_fee(self, volume: Decimal) -> FeeLineItem:
        """CVM oversight fee: 0.03% of the offer volume."""
        rate = rate_tables.CVM_FEE_RATE
        return _upfront(
            CVM_ROLE,
            volume * rate,
            "0.03% of offer volume",
            {"volume": volume, "aliquota": rate},
        )

    def market_association(self, volume: Decimal, cri: bool = False) -> FeeLineItem:
        """ANBIMA fee: capped percentage of volume, with a CRI-specific table."""
        table = rate_tables.ANBIMA_CRI if cri else rate_tables.ANBIMA_GENERIC
        result = compute_capped(volume, table.rate, table.minimum, table.maximum)
        label = "0.003968%" if cri else "0.002778%"
        return _upfront(
            ANBIMA_ROLE,
            result.amount,
            f"{label} of volume, min {table.minimum:,.2f}, max {table.maximum:,.2f}",
            {
                "volume": volume,
                "aliquota": table.rate,
                "valor_calculado": volume * table.rate,
                "valor_minimo": table.minimum,
                "valor_maximo": table.maximum,
                "aplicou_minimo": result.applied_min,
                "aplicou_maximo": result.applied_max,
            },
        )
