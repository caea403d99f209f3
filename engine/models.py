"""
Domain Models for the Issuance Cost Engine

These dataclasses provide type-safe representations of all business entities.
All monetary values use Decimal for precision.
"""

import unicodedata
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum

from .exceptions import ValidationError

ZERO = Decimal("0")


def to_decimal(value, field_name: str) -> Decimal:
    """Parse a JSON number (or numeric string) into a Decimal."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number, got: {value!r}")
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number, got: {value!r}") from None
    if not result.is_finite():
        raise ValidationError(f"{field_name} must be a finite number, got: {value!r}")
    return result


def normalize_text(value: str | None) -> str:
    """Lowercase, strip accents and collapse whitespace into underscores."""
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFKD", value.strip().lower())
    ascii_only = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return "_".join(ascii_only.replace("-", " ").split())


# =============================================================================
# ENUMERATIONS
# =============================================================================


class Category(Enum):
    """Issuance category, valued by its source code."""

    DEBENTURE = "DEB"
    AGRIBUSINESS_CERT = "CRA"
    RECEIVABLES_CERT_RE = "CRI"
    NOTE_COMMERCIAL = "NC"
    RECEIVABLES_CERT_OTHER = "CR"

    @classmethod
    def parse(cls, raw) -> "Category":
        code = str(raw or "").strip().upper()
        for member in cls:
            if member.value == code or member.name == code:
                return member
        raise ValidationError(f"Invalid categoria: {raw!r}. Must be one of DEB, CRA, CRI, NC, CR")


# Whole words of a normalized offer label
PUBLIC_TOKENS = frozenset({"publica", "publico", "public", "cvm"})
REGISTERED_TOKENS = frozenset({"cetipada", "registrada", "registered"})
PURE_TOKENS = frozenset({"pura", "pure"})
NEGATION_TOKENS = frozenset({"nao", "non", "not"})


class OfferClass(Enum):
    PUBLIC = "public"
    PRIVATE_REGISTERED = "private_registered"
    PRIVATE_PURE = "private_pure"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: str | None) -> "OfferClass":
        """
        Classify a free-text offer type.

        Accepts the Portuguese labels used by the proposal forms
        ("Oferta Pública", "oferta_privada_cetipada", "Privada Pura") as well
        as the English names of the enum values.
        """
        tokens = set(normalize_text(raw).split("_"))
        if tokens & NEGATION_TOKENS:
            return cls.UNKNOWN
        if tokens & PUBLIC_TOKENS:
            return cls.PUBLIC
        if tokens & REGISTERED_TOKENS:
            return cls.PRIVATE_REGISTERED
        if tokens & PURE_TOKENS:
            return cls.PRIVATE_PURE
        return cls.UNKNOWN


class Vehicle(Enum):
    EXCLUSIVE_VEHICLE = "exclusive_vehicle"
    SEGREGATED_ESTATE = "segregated_estate"
    NONE = "none"

    @classmethod
    def parse(cls, raw: str | None) -> "Vehicle":
        text = normalize_text(raw)
        if "exclusiv" in text:
            return cls.EXCLUSIVE_VEHICLE
        if "patrimonio" in text or "segregated" in text or "separado" in text:
            return cls.SEGREGATED_ESTATE
        return cls.NONE


class CollateralOrigin(Enum):
    ORIGINATION = "origem"
    DESTINATION = "destinacao"

    @classmethod
    def parse(cls, raw: str | None) -> "CollateralOrigin | None":
        text = normalize_text(raw)
        if not text:
            return None
        if text.startswith("orig"):
            return cls.ORIGINATION
        if text.startswith("destin"):
            return cls.DESTINATION
        raise ValidationError(f"Invalid lastro: {raw!r}. Must be 'origem' or 'destinacao'")


class PricingMode(Enum):
    FLAT = "fixo"
    PERCENTAGE = "percentual"

    @classmethod
    def parse(cls, raw: str | None) -> "PricingMode":
        text = normalize_text(raw)
        if text.startswith("percent"):
            return cls.PERCENTAGE
        return cls.FLAT


class Recurrence(Enum):
    NONE = "none"
    MONTHLY = "mensal"
    ANNUAL = "anual"

    @classmethod
    def parse(cls, raw: str | None) -> "Recurrence":
        text = normalize_text(raw)
        if text in ("mensal", "monthly"):
            return cls.MONTHLY
        if text in ("anual", "annual", "yearly"):
            return cls.ANNUAL
        return cls.NONE


class FeeOrigin(Enum):
    CATALOG_FIXED = "catalogo"
    FORMULAIC_VARIABLE = "variavel"


class FormulaSet(Enum):
    """Which formulaic market-infrastructure fees apply to an issuance."""

    NONE = "none"
    DEB_PUBLIC = "deb_public"
    DEB_PRIVATE_REGISTERED = "deb_private_registered"
    CR_PUBLIC = "cr_public"
    CR_PRIVATE_REGISTERED = "cr_private_registered"
    CRI = "cri"
    CRA = "cra"


# =============================================================================
# INPUT MODELS
# =============================================================================


@dataclass(frozen=True)
class Tranche:
    """One series of the issuance."""

    number: int
    face_value: Decimal
    tenor_years: Decimal | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Tranche":
        if not isinstance(data, dict):
            raise ValidationError(f"Each series must be an object, got: {data!r}")
        tenor = data.get("prazo", data.get("tenor_years"))
        return cls(
            number=data.get("numero", data.get("number")),
            face_value=to_decimal(data.get("valor_emissao", data.get("face_value")), "valor_emissao"),
            tenor_years=to_decimal(tenor, "prazo") if tenor is not None else None,
        )


@dataclass(frozen=True)
class IssuanceRequest:
    """Complete input for a cost calculation."""

    category: Category
    offer_type: str
    volume: Decimal
    vehicle: Vehicle = Vehicle.NONE
    collateral_origin: CollateralOrigin | None = None
    tenor_years: Decimal | None = None
    series: tuple[Tranche, ...] = ()

    @property
    def offer_class(self) -> OfferClass:
        return OfferClass.parse(self.offer_type)

    @property
    def tranches(self) -> tuple[Tranche, ...]:
        """Series to price; without explicit series the whole volume is tranche #1."""
        if self.series:
            return self.series
        return (Tranche(number=1, face_value=self.volume, tenor_years=self.tenor_years),)

    @classmethod
    def from_dict(cls, data: dict) -> "IssuanceRequest":
        # Accept both the Portuguese field names used by the proposal forms
        # and the English names.
        category = data.get("categoria", data.get("category"))
        if not category:
            raise ValidationError("categoria is required")
        volume = data.get("volume")
        if volume is None:
            raise ValidationError("volume is required")
        offer = data.get("tipo_oferta", data.get("oferta", data.get("offerType", "")))
        tenor = data.get("prazo", data.get("tenor_years"))
        raw_series = data.get("series") or []
        if not isinstance(raw_series, list):
            raise ValidationError("series must be a list")
        return cls(
            category=Category.parse(category),
            offer_type=offer or "",
            volume=to_decimal(volume, "volume"),
            vehicle=Vehicle.parse(data.get("veiculo", data.get("vehicle"))),
            collateral_origin=CollateralOrigin.parse(
                data.get("lastro", data.get("collateralOrigin"))
            ),
            tenor_years=to_decimal(tenor, "prazo") if tenor is not None else None,
            series=tuple(Tranche.from_dict(s) for s in raw_series),
        )


@dataclass(frozen=True)
class RateBracket:
    """A single bracket of a progressive table. upper_bound None = infinite."""

    upper_bound: Decimal | None
    rate: Decimal


@dataclass(frozen=True)
class CatalogRow:
    """A configured fee row of a fixed-cost catalog."""

    role: str
    pricing_mode: PricingMode
    upfront_price: Decimal = ZERO
    recurring_price: Decimal = ZERO
    recurrence: Recurrence = Recurrence.NONE
    gross_up: Decimal = ZERO
    provider: str | None = None
    active: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> "CatalogRow":
        return cls(
            role=data.get("papel") or data.get("role") or "Não especificado",
            pricing_mode=PricingMode.parse(data.get("tipo_preco")),
            upfront_price=to_decimal(data.get("preco_upfront") or 0, "preco_upfront"),
            recurring_price=to_decimal(data.get("preco_recorrente") or 0, "preco_recorrente"),
            recurrence=Recurrence.parse(data.get("periodicidade")),
            gross_up=to_decimal(data.get("gross_up") or 0, "gross_up"),
            provider=data.get("prestador_nome", data.get("prestador")),
            active=data.get("ativo", True),
        )


# =============================================================================
# OUTPUT / RESULT MODELS
# =============================================================================


@dataclass(frozen=True)
class BracketAllocation:
    """Portion of an amount taxed inside one bracket."""

    lower_bound: Decimal
    upper_bound: Decimal | None
    rate: Decimal
    taxed_amount: Decimal
    value: Decimal


@dataclass(frozen=True)
class CappedResult:
    amount: Decimal
    applied_min: bool
    applied_max: bool


@dataclass(frozen=True)
class FeeLineItem:
    """One priced cost component."""

    role: str
    pricing_mode: PricingMode
    origin: FeeOrigin
    upfront_net: Decimal = ZERO
    recurring_net: Decimal = ZERO
    recurrence: Recurrence = Recurrence.NONE
    gross_up_rate: Decimal = ZERO
    upfront_gross: Decimal = ZERO
    recurring_gross: Decimal = ZERO
    provider: str | None = None
    formula: str = ""
    details: dict = field(default_factory=dict)


@dataclass(frozen=True)
class CostSummary:
    """Aggregated totals. All values are gross."""

    total_upfront: Decimal = ZERO
    total_annual: Decimal = ZERO
    total_monthly: Decimal = ZERO
    total_first_year: Decimal = ZERO
    total_subsequent_years: Decimal = ZERO
    percent_of_volume: Decimal = ZERO


@dataclass(frozen=True)
class SeriesCost:
    """Market-infrastructure costs attributed to one tranche."""

    number: int
    registration: Decimal = ZERO
    custody: Decimal = ZERO


@dataclass(frozen=True)
class Combination:
    """
    Catalogs and formula set selected for an issuance.

    fixed_catalog_key is None when the combination has no configured catalog
    (a lookup miss); the calculation still runs with variable fees only.
    """

    fixed_catalog_key: str | None
    formula_set: FormulaSet
    vehicle_catalog_key: str | None = None

    @property
    def is_lookup_miss(self) -> bool:
        return self.fixed_catalog_key is None


@dataclass
class ProcessingContext:
    """
    Holds all intermediate state during a cost calculation.
    This is the "bag" that flows through the pipeline.
    """

    request: IssuanceRequest
    combination: Combination | None = None

    fixed_lines: list[FeeLineItem] = field(default_factory=list)
    variable_lines: list[FeeLineItem] = field(default_factory=list)

    summary: CostSummary = field(default_factory=CostSummary)
    series_costs: list[SeriesCost] = field(default_factory=list)


@dataclass
class CostResult:
    """Final output of a cost calculation."""

    custos: list
    totais: dict
    tabela_origem: str | None
    custos_series: list
