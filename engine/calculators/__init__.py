"""
Calculators Package

Provides all calculation components for issuance cost processing.
"""

from .aggregator import CostAggregator
from .capped import compute_capped
from .catalog import CatalogFeeResolver
from .gross_up import gross_up, normalize_gross_up_rate
from .tiered import TieredRateCalculator, breakdown_tiered, compute_tiered, validate_brackets
from .variable import VariableFeeCalculator

__all__ = [
    "CatalogFeeResolver",
    "VariableFeeCalculator",
    "CostAggregator",
    "TieredRateCalculator",
    "compute_tiered",
    "breakdown_tiered",
    "validate_brackets",
    "compute_capped",
    "gross_up",
    "normalize_gross_up_rate",
]
