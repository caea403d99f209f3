"""
Error Taxonomy for the Issuance Cost Engine

All engine errors derive from ValueError so the HTTP entry points can treat
any of them as a client error (HTTP 400).
"""


class CostEngineError(ValueError):
    """Base class for all engine errors."""


class ValidationError(CostEngineError):
    """A required request field is missing or invalid."""


class InvalidInputError(CostEngineError):
    """A calculator received a negative amount or an impossible range."""


class InvalidBracketConfiguration(CostEngineError):
    """A bracket table is not ascending, not contiguous or not unbounded at the top."""
