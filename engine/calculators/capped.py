"""
Capped Rate Calculator

Percentage-of-volume fee bounded by an absolute minimum and maximum.
"""

from decimal import Decimal

from ..exceptions import InvalidInputError
from ..models import CappedResult


def compute_capped(volume: Decimal, rate: Decimal, minimum: Decimal, maximum: Decimal) -> CappedResult:
    """
    Clamp volume × rate into [minimum, maximum].

    applied_min / applied_max report which bound replaced the raw value;
    neither is set when the raw value already lies inside the range.
    """
    if volume < 0:
        raise InvalidInputError(f"volume cannot be negative, got: {volume}")
    if minimum > maximum:
        raise InvalidInputError(f"minimum ({minimum}) cannot exceed maximum ({maximum})")

    raw = volume * rate
    amount = max(minimum, min(maximum, raw))

    return CappedResult(
        amount=amount,
        applied_min=raw < minimum,
        applied_max=raw > maximum,
    )
