"""
Rate Table Registry

Statutory market-infrastructure rates (B3 custody and registration, CVM
oversight fee, ANBIMA market-association fee) and the immutable snapshot of
configured fixed-cost catalogs.

Percent constants are written the way B3/ANBIMA publish them (in percentage
points) and converted to fractions with `pct`.
"""

import json
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from .models import CatalogRow, RateBracket

logger = logging.getLogger(__name__)

MILLION = Decimal("1000000")
BILLION = Decimal("1000000000")


def pct(value: str) -> Decimal:
    """Convert a rate quoted in percentage points into a fraction."""
    return Decimal(value) / Decimal("100")


# =============================================================================
# CUSTODY (B3) - charged monthly
# =============================================================================

CR_CUSTODY_RATE = pct("0.000800")  # CR and CRI
CRA_CUSTODY_RATE = pct("0.000300")

DEB_CUSTODY_BRACKETS = (
    RateBracket(upper_bound=100 * MILLION, rate=pct("0.000167")),
    RateBracket(upper_bound=500 * MILLION, rate=pct("0.000100")),
    RateBracket(upper_bound=1 * BILLION, rate=pct("0.000067")),
    RateBracket(upper_bound=None, rate=pct("0.000033")),
)

# =============================================================================
# REGISTRATION (B3) - upfront, per series
# =============================================================================

CR_REGISTRATION_BRACKETS = (
    RateBracket(upper_bound=500 * MILLION, rate=pct("0.0030")),
    RateBracket(upper_bound=1 * BILLION, rate=pct("0.0020")),
    RateBracket(upper_bound=5 * BILLION, rate=pct("0.0010")),
    RateBracket(upper_bound=None, rate=pct("0.0005")),
)

# Multiplied by the series tenor in years.
DEB_PUBLIC_REGISTRATION_BRACKETS = (
    RateBracket(upper_bound=100 * MILLION, rate=pct("0.0020")),
    RateBracket(upper_bound=500 * MILLION, rate=pct("0.0015")),
    RateBracket(upper_bound=1 * BILLION, rate=pct("0.0010")),
    RateBracket(upper_bound=None, rate=pct("0.0005")),
)

REGISTERED_PRIVATE_DISCOUNT = Decimal("0.5")

DEB_PRIVATE_REGISTRATION_BRACKETS = tuple(
    RateBracket(upper_bound=b.upper_bound, rate=b.rate * REGISTERED_PRIVATE_DISCOUNT)
    for b in DEB_PUBLIC_REGISTRATION_BRACKETS
)

# =============================================================================
# OFFER FEES - upfront
# =============================================================================

CVM_FEE_RATE = pct("0.03")


@dataclass(frozen=True)
class CappedRate:
    rate: Decimal
    minimum: Decimal
    maximum: Decimal


ANBIMA_GENERIC = CappedRate(rate=pct("0.002778"), minimum=Decimal("9919.00"), maximum=Decimal("69436.00"))
ANBIMA_CRI = CappedRate(rate=pct("0.003968"), minimum=Decimal("1416.00"), maximum=Decimal("2830.00"))

ALL_BRACKET_TABLES = {
    "deb_custody": DEB_CUSTODY_BRACKETS,
    "cr_registration": CR_REGISTRATION_BRACKETS,
    "deb_public_registration": DEB_PUBLIC_REGISTRATION_BRACKETS,
    "deb_private_registration": DEB_PRIVATE_REGISTRATION_BRACKETS,
}


# =============================================================================
# FIXED-COST CATALOGS
# =============================================================================


@dataclass(frozen=True)
class RateTableSnapshot:
    """
    Read-only view of the configured catalogs, keyed by combination key
    (e.g. "DEB_public", "CRI_origem", "vehicle_exclusive_vehicle").

    A snapshot is passed into every calculation; nothing in the engine
    mutates it, so concurrent calculations can share one safely.
    """

    tables: Mapping[str, tuple[CatalogRow, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def rows(self, key: str | None) -> tuple[CatalogRow, ...]:
        """Rows for a catalog key. Missing keys yield an empty tuple."""
        if key is None:
            return ()
        return self.tables.get(key, ())

    def __contains__(self, key: str) -> bool:
        return key in self.tables

    @classmethod
    def from_dict(cls, data: dict) -> "RateTableSnapshot":
        tables = {
            key: tuple(CatalogRow.from_dict(row) for row in rows)
            for key, rows in data.items()
        }
        return cls(tables=MappingProxyType(tables))

    @classmethod
    def empty(cls) -> "RateTableSnapshot":
        return cls()


def load_rate_tables(path: str | Path | None) -> RateTableSnapshot:
    """Load a catalog snapshot from a JSON file. No path means an empty snapshot."""
    if not path:
        return RateTableSnapshot.empty()

    path = Path(path)
    if not path.exists():
        logger.warning(f"Rate table file not found: {path}, using empty catalogs")
        return RateTableSnapshot.empty()

    with path.open(encoding="utf-8") as fh:
        data = json.load(fh)

    snapshot = RateTableSnapshot.from_dict(data)
    logger.info(f"Loaded {len(snapshot.tables)} cost catalogs from {path}")
    return snapshot
