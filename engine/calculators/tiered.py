"""
Tiered Rate Calculator

Progressive bracket calculation: each bracket taxes only the slice of the
amount that falls inside it.
"""

from decimal import Decimal
from typing import Sequence

from ..exceptions import InvalidBracketConfiguration, InvalidInputError
from ..models import BracketAllocation, RateBracket

ZERO = Decimal("0")


def validate_brackets(brackets: Sequence[RateBracket]) -> None:
    """
    Raise InvalidBracketConfiguration unless the brackets cover [0, inf)
    contiguously: strictly ascending finite bounds, last bound unbounded,
    non-negative rates.
    """
    if not brackets:
        raise InvalidBracketConfiguration("Bracket table is empty")

    previous = ZERO
    for i, bracket in enumerate(brackets):
        if bracket.rate < 0:
            raise InvalidBracketConfiguration(f"Bracket {i} rate cannot be negative, got: {bracket.rate}")

        is_last = i == len(brackets) - 1
        if bracket.upper_bound is None:
            if not is_last:
                raise InvalidBracketConfiguration(f"Only the last bracket may be unbounded (bracket {i})")
            continue

        if is_last:
            raise InvalidBracketConfiguration("Last bracket must be unbounded (upper_bound=None)")
        if bracket.upper_bound <= previous:
            raise InvalidBracketConfiguration(
                f"Bracket {i} upper_bound {bracket.upper_bound} must exceed previous bound {previous}"
            )
        previous = bracket.upper_bound


def breakdown_tiered(amount: Decimal, brackets: Sequence[RateBracket]) -> list[BracketAllocation]:
    """
    Split an amount across progressive brackets.

    Bracket width is upper_bound - previous upper_bound; an amount sitting
    exactly on a boundary is fully consumed by the lower bracket.
    """
    if amount < 0:
        raise InvalidInputError(f"amount cannot be negative, got: {amount}")
    validate_brackets(brackets)

    remaining = amount
    lower = ZERO
    allocations = []

    for bracket in brackets:
        if remaining <= 0:
            break

        if bracket.upper_bound is None:
            # Infinite bracket - allocate all remaining
            taxed = remaining
        else:
            taxed = min(remaining, bracket.upper_bound - lower)

        allocations.append(
            BracketAllocation(
                lower_bound=lower,
                upper_bound=bracket.upper_bound,
                rate=bracket.rate,
                taxed_amount=taxed,
                value=taxed * bracket.rate,
            )
        )

        remaining -= taxed
        if bracket.upper_bound is not None:
            lower = bracket.upper_bound

    return allocations


def compute_tiered(
    amount: Decimal,
    brackets: Sequence[RateBracket],
    tenor: Decimal | None = None,
) -> Decimal:
    """Progressive fee over `amount`, optionally multiplied by a tenor in years."""
    total = sum((a.value for a in breakdown_tiered(amount, brackets)), ZERO)
    if tenor is not None:
        if tenor < 0:
            raise InvalidInputError(f"tenor cannot be negative, got: {tenor}")
        total *= tenor
    return total


class TieredRateCalculator:
    """Binds a bracket table to the progressive calculation."""

    def __init__(self, brackets: Sequence[RateBracket]):
        validate_brackets(brackets)
        self.brackets = tuple(brackets)

    def calculate(self, amount: Decimal, tenor: Decimal | None = None) -> Decimal:
        return compute_tiered(amount, self.brackets, tenor)

    def breakdown(self, amount: Decimal) -> list[BracketAllocation]:
        return breakdown_tiered(amount, self.brackets)
