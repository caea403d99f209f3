"""
Gross-Up Adjuster

Converts a net fee into the gross amount whose net-of-tax equals the
original: gross = net / (1 - rate).
"""

import logging
from decimal import Decimal

from ..exceptions import InvalidInputError

logger = logging.getLogger(__name__)

ONE = Decimal("1")
HUNDRED = Decimal("100")


def normalize_gross_up_rate(rate: Decimal) -> Decimal:
    """
    Return the gross-up rate as a fraction.

    Catalog rows carry the rate either as a fraction (0.1215) or in
    percentage points (12.15): values up to 1 are fractions, anything larger
    is divided by 100.
    """
    if rate < 0:
        raise InvalidInputError(f"gross_up cannot be negative, got: {rate}")
    if rate <= ONE:
        logger.debug(f"gross_up {rate} read as a fraction")
        return rate
    logger.debug(f"gross_up {rate} read as percentage points -> {rate / HUNDRED}")
    return rate / HUNDRED


def gross_up(net: Decimal, rate: Decimal) -> Decimal:
    """Gross amount for `net`. A rate of 100% or more leaves the amount unchanged."""
    if net < 0:
        raise InvalidInputError(f"net amount cannot be negative, got: {net}")

    fraction = normalize_gross_up_rate(rate)
    if fraction >= ONE:
        return net
    return net / (ONE - fraction)
