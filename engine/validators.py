"""
Input Validation for the Issuance Cost Engine

Validates all input data before processing begins.
Raises ValidationError with clear messages for any constraint violations.
"""

import logging

from .exceptions import ValidationError
from .models import IssuanceRequest, Tranche

logger = logging.getLogger(__name__)


class InputValidator:
    """Validates an issuance request according to business rules."""

    def validate(self, request: IssuanceRequest) -> None:
        """
        Run all validations. Raises ValidationError if any check fails.
        """
        self._validate_issuance(request)
        self._validate_series(request.series)
        self._check_series_total(request)

    def _validate_issuance(self, request: IssuanceRequest) -> None:
        """Validate issuance-level constraints."""
        if request.volume <= 0:
            raise ValidationError(f"volume must be positive, got: {request.volume}")

        if request.tenor_years is not None and request.tenor_years < 0:
            raise ValidationError(f"prazo cannot be negative, got: {request.tenor_years}")

    def _validate_series(self, series: tuple[Tranche, ...]) -> None:
        """Validate each series and the uniqueness of series numbers."""
        seen = set()
        for tranche in series:
            if not isinstance(tranche.number, int) or isinstance(tranche.number, bool) or tranche.number <= 0:
                raise ValidationError(f"Series numero must be a positive integer, got: {tranche.number!r}")

            if tranche.number in seen:
                raise ValidationError(f"Duplicate series numero: {tranche.number}")
            seen.add(tranche.number)

            if tranche.face_value <= 0:
                raise ValidationError(
                    f"Series {tranche.number} valor_emissao must be positive, got: {tranche.face_value}"
                )

            if tranche.tenor_years is not None and tranche.tenor_years < 0:
                raise ValidationError(f"Series {tranche.number} prazo cannot be negative, got: {tranche.tenor_years}")

    def _check_series_total(self, request: IssuanceRequest) -> None:
        # Volume is priced independently of the series, so a mismatch is tolerated.
        if not request.series:
            return
        series_total = sum(t.face_value for t in request.series)
        if series_total != request.volume:
            logger.warning(
                f"Series total {series_total} differs from volume {request.volume}; "
                f"volume-based fees use the declared volume"
            )
