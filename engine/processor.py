"""
Cost Processor - Main Orchestrator

Coordinates the cost calculation pipeline through discrete, testable steps.
"""

import json
import logging
from typing import Any, Dict

from .calculators import (
    CatalogFeeResolver,
    CostAggregator,
    VariableFeeCalculator,
)
from .combination import CombinationResolver
from .exceptions import ValidationError
from .models import (
    Category,
    CostResult,
    IssuanceRequest,
    OfferClass,
    ProcessingContext,
    Tranche,
    to_decimal,
)
from .output import OutputBuilder
from .rate_tables import RateTableSnapshot
from .validators import InputValidator

logger = logging.getLogger(__name__)


class CostProcessor:
    """
    Main orchestrator for issuance cost calculation.

    Implements a clear pipeline pattern:
    1. Validate Input
    2. Resolve Combination
    3. Price Catalog Fees (primary + vehicle surcharge)
    4. Compute Variable Fees
    5. Aggregate Totals
    6. Allocate Costs per Series
    7. Build Output

    The processor holds a default rate-table snapshot; every call may pass
    its own snapshot instead.
    """

    def __init__(self, rate_tables: RateTableSnapshot | None = None):
        self.rate_tables = rate_tables or RateTableSnapshot.empty()

        self.validator = InputValidator()
        self.resolver = CombinationResolver()
        self.catalog_resolver = CatalogFeeResolver()
        self.variable_calculator = VariableFeeCalculator()
        self.aggregator = CostAggregator()
        self.output_builder = OutputBuilder()

    def process(self, request: IssuanceRequest, rate_tables: RateTableSnapshot | None = None) -> CostResult:
        """
        Calculate all costs for an issuance.

        Args:
            request: Parsed IssuanceRequest
            rate_tables: Catalog snapshot for this call (defaults to the processor's)

        Returns:
            CostResult with line items, totals and per-series costs
        """
        tables = rate_tables or self.rate_tables

        # Step 1: Validate
        self.validator.validate(request)

        ctx = ProcessingContext(request=request)

        # Step 2: Resolve combination
        ctx.combination = self.resolver.resolve(
            request.category,
            request.offer_class,
            request.vehicle,
            request.collateral_origin,
        )
        if ctx.combination.is_lookup_miss or ctx.combination.fixed_catalog_key not in tables:
            logger.warning(
                f"No fixed-cost catalog for {request.category.value} "
                f"(offer={request.offer_type!r}, key={ctx.combination.fixed_catalog_key})"
            )

        # Step 3: Catalog fees
        fixed_rows = tables.rows(ctx.combination.fixed_catalog_key) + tables.rows(
            ctx.combination.vehicle_catalog_key
        )
        ctx.fixed_lines = self.catalog_resolver.resolve(fixed_rows, request.volume)

        # Step 4: Variable fees
        ctx.variable_lines = self.variable_calculator.calculate(
            ctx.combination.formula_set,
            request.volume,
            request.tranches,
            request.tenor_years,
        )

        # Step 5: Aggregate
        ctx.summary = self.aggregator.aggregate(ctx.fixed_lines, ctx.variable_lines, request.volume)

        # Step 6: Per-series allocation
        ctx.series_costs = self.aggregator.allocate_series(ctx.variable_lines, request.tranches)

        # Step 7: Build output
        return self.output_builder.build(ctx)

    def process_from_dict(
        self, data: Dict[str, Any], rate_tables: RateTableSnapshot | None = None
    ) -> Dict[str, Any]:
        """
        Calculate costs from raw dictionary input.

        Convenience method for API usage. Raises ValueError subclasses for
        invalid input.
        """
        request = IssuanceRequest.from_dict(data)
        logger.info(
            f"Calculating costs: categoria={request.category.value}, "
            f"oferta={request.offer_type!r}, volume={request.volume}"
        )
        result = self.process(request, rate_tables)
        return self._result_to_dict(result)

    def variable_fee_from_dict(self, fee: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Calculate a single variable fee (custody, registration, cvm_fee, market_association)."""
        category = data.get("categoria", data.get("category"))
        if not category:
            raise ValidationError("categoria is required")
        volume = to_decimal(data.get("volume") or 0, "volume")
        tenor = data.get("prazo")
        series = tuple(Tranche.from_dict(s) for s in data.get("series") or [])
        if volume == 0 and series:
            # Registration can be requested from the series alone
            volume = sum((t.face_value for t in series), volume)

        request = IssuanceRequest(
            category=Category.parse(category),
            offer_type=data.get("tipo_oferta", data.get("oferta", "")) or "",
            volume=volume,
            tenor_years=to_decimal(tenor, "prazo") if tenor is not None else None,
            series=series,
        )
        self.validator.validate(request)

        item = self.variable_calculator.calculate_single(
            fee,
            request.category,
            OfferClass.parse(request.offer_type),
            request.volume,
            request.tranches,
            request.tenor_years,
        )
        return self.output_builder.line_item(item)

    def _result_to_dict(self, result: CostResult) -> Dict[str, Any]:
        """Convert CostResult to dictionary for API response."""
        return {
            "custos": result.custos,
            "totais": result.totais,
            "tabela_origem": result.tabela_origem,
            "custos_series": result.custos_series,
        }


# =============================================================================
# BOUNDARY FUNCTIONS
# =============================================================================


def calculate_costs_from_dict(
    input_data: Dict[str, Any], rate_tables: RateTableSnapshot | None = None
) -> Dict[str, Any]:
    """
    Calculate costs and wrap the outcome in the success/error envelope.
    Never raises.
    """
    try:
        processor = CostProcessor(rate_tables)
        return {"success": True, "data": processor.process_from_dict(input_data)}

    except ValueError as e:
        return {"success": False, "error": str(e)}

    except Exception as e:
        logger.error(f"Unexpected cost calculation error: {str(e)}", exc_info=True)
        return {"success": False, "error": "An unexpected error occurred during calculation"}


def calculate_costs_from_json(json_input: str, rate_tables: RateTableSnapshot | None = None) -> str:
    """
    Calculate costs from a JSON string and return a JSON string.
    Never raises.
    """
    try:
        input_data = json.loads(json_input)
    except json.JSONDecodeError as e:
        return json.dumps({"success": False, "error": f"Invalid JSON: {str(e)}"}, indent=2)

    if not isinstance(input_data, dict):
        return json.dumps({"success": False, "error": "Request body must be a JSON object"}, indent=2)

    return json.dumps(calculate_costs_from_dict(input_data, rate_tables), indent=2)
