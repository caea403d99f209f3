"""
Combination Resolver

Maps an issuance's (category, offer type, vehicle, collateral origin) onto
the fixed-cost catalogs and the variable formula set that apply to it.
"""

import logging

from .models import Category, CollateralOrigin, Combination, FormulaSet, OfferClass, Vehicle

logger = logging.getLogger(__name__)

# Categories priced by offer type. CRI and CRA are priced by collateral origin.
OFFER_BASED_CATEGORIES = (Category.DEBENTURE, Category.NOTE_COMMERCIAL, Category.RECEIVABLES_CERT_OTHER)

# Vehicle surcharge catalogs only exist for offer-based categories.
VEHICLE_CATALOGS = {
    Vehicle.EXCLUSIVE_VEHICLE: "vehicle_exclusive_vehicle",
    Vehicle.SEGREGATED_ESTATE: "vehicle_segregated_estate",
    Vehicle.NONE: None,
}

OFFER_FORMULAS = {
    (Category.DEBENTURE, OfferClass.PUBLIC): FormulaSet.DEB_PUBLIC,
    (Category.DEBENTURE, OfferClass.PRIVATE_REGISTERED): FormulaSet.DEB_PRIVATE_REGISTERED,
    (Category.DEBENTURE, OfferClass.PRIVATE_PURE): FormulaSet.NONE,
    (Category.NOTE_COMMERCIAL, OfferClass.PUBLIC): FormulaSet.DEB_PUBLIC,
    (Category.NOTE_COMMERCIAL, OfferClass.PRIVATE_REGISTERED): FormulaSet.DEB_PRIVATE_REGISTERED,
    (Category.NOTE_COMMERCIAL, OfferClass.PRIVATE_PURE): FormulaSet.NONE,
    (Category.RECEIVABLES_CERT_OTHER, OfferClass.PUBLIC): FormulaSet.CR_PUBLIC,
    (Category.RECEIVABLES_CERT_OTHER, OfferClass.PRIVATE_REGISTERED): FormulaSet.CR_PRIVATE_REGISTERED,
    (Category.RECEIVABLES_CERT_OTHER, OfferClass.PRIVATE_PURE): FormulaSet.NONE,
}

ORIGIN_FORMULAS = {
    Category.RECEIVABLES_CERT_RE: FormulaSet.CRI,
    Category.AGRIBUSINESS_CERT: FormulaSet.CRA,
}

LOOKUP_MISS = Combination(fixed_catalog_key=None, formula_set=FormulaSet.NONE)


class CombinationResolver:
    """Pure lookup from an issuance combination to catalogs and formulas."""

    def resolve(
        self,
        category: Category,
        offer_class: OfferClass,
        vehicle: Vehicle = Vehicle.NONE,
        collateral_origin: CollateralOrigin | None = None,
    ) -> Combination:
        if category in ORIGIN_FORMULAS:
            # Without a collateral origin the catalog for "origem" is used
            origin = collateral_origin or CollateralOrigin.ORIGINATION
            return Combination(
                fixed_catalog_key=f"{category.value}_{origin.value}",
                formula_set=ORIGIN_FORMULAS[category],
            )

        if category in OFFER_BASED_CATEGORIES:
            formula_set = OFFER_FORMULAS.get((category, offer_class))
            if formula_set is None:
                logger.warning(f"No cost table for {category.value} with offer class {offer_class.value}")
                return Combination(
                    fixed_catalog_key=None,
                    formula_set=FormulaSet.NONE,
                    vehicle_catalog_key=VEHICLE_CATALOGS[vehicle],
                )
            return Combination(
                fixed_catalog_key=f"{category.value}_{offer_class.value}",
                formula_set=formula_set,
                vehicle_catalog_key=VEHICLE_CATALOGS[vehicle],
            )

        logger.warning(f"No cost table for category {category.value}")
        return LOOKUP_MISS
