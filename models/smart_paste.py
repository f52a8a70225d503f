"""
Smart Paste models and schemas.

Parse outputs (RawPair, FieldMatch, ParseResult, ...) are frozen: a parse is
produced once and never mutated. Reviewer edits travel separately as
overrides and are merged by the apply payload builder.
"""

from datetime import datetime
from typing import Any, Optional
from enum import Enum
from pydantic import Field, field_validator, model_validator

from config.smart_paste import (
    CONFIDENCE_MODES,
    DIRECT_THRESHOLD,
    LIKELY_THRESHOLD,
    UNIT_TOKENS,
)
from models.base import BaseSchema, FrozenSchema
from utils.text_utils import unit_qualifier


# ===================
# ENUMS
# ===================

class Unit(str, Enum):
    """Units a spec field may expect."""

    MM = "mm"
    CM = "cm"
    M = "m"
    IN = "in"
    FT = "ft"
    G = "g"
    KG = "kg"
    OZ = "oz"
    LB = "lb"
    CELSIUS = "°C"
    FAHRENHEIT = "°F"


class FieldType(str, Enum):
    """Value types a spec field may expect."""

    TEXT = "text"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"


class SourceKind(str, Enum):
    """Where the raw text came from."""

    PASTE = "paste"
    FILE = "file"
    URL = "url"


class MatchTier(str, Enum):
    """Which matching strategy produced a candidate."""

    ALIAS = "alias"
    EXACT = "exact"
    SYNONYM = "synonym"
    FUZZY = "fuzzy"


class ConfidenceTier(str, Enum):
    """Reviewer-facing confidence labels."""

    DIRECT = "direct"   # >= 85
    LIKELY = "likely"   # 60-84
    FUZZY = "fuzzy"     # < 60


class ConfidenceMode(str, Enum):
    """Presentation filter presets."""

    STRICT = "strict"
    BALANCED = "balanced"
    AGGRESSIVE = "aggressive"

    @property
    def threshold(self) -> int:
        return CONFIDENCE_MODES[self.value]


def tier_for(confidence: int) -> ConfidenceTier:
    """Label a confidence score."""
    if confidence >= DIRECT_THRESHOLD:
        return ConfidenceTier.DIRECT
    if confidence >= LIKELY_THRESHOLD:
        return ConfidenceTier.LIKELY
    return ConfidenceTier.FUZZY


def _clamp_confidence(value: Any) -> Any:
    if isinstance(value, (int, float)):
        return max(0, min(100, int(round(value))))
    return value


# ===================
# CATALOG
# ===================

class SpecFieldDef(FrozenSchema):
    """
    One named attribute a category expects.

    When expected_unit is not given it is read from a trailing
    parenthesized unit in the name: "Weight (kg)" expects kg.
    """

    name: str = Field(..., min_length=1, max_length=100)
    required: bool = False
    expected_unit: Optional[Unit] = None
    expected_type: Optional[FieldType] = None

    @model_validator(mode="before")
    @classmethod
    def infer_unit_from_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("expected_unit"):
            qualifier = unit_qualifier(str(data.get("name", "")))
            unit = UNIT_TOKENS.get(qualifier.lower()) if qualifier else None
            if unit:
                data = {**data, "expected_unit": unit}
        return data


class SpecCatalog(FrozenSchema):
    """Category name -> ordered field definitions."""

    categories: dict[str, list[SpecFieldDef]] = Field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, list[Any]]) -> "SpecCatalog":
        """
        Build from plain JSON.

        Field entries may be dicts ({"name": ..., "required": ...}),
        SpecFieldDef instances or bare field names.
        """
        categories = {}
        for category, fields in data.items():
            categories[category] = [
                {"name": f} if isinstance(f, str) else f
                for f in fields
            ]
        return cls(categories=categories)

    def to_dict(self) -> dict[str, list[dict]]:
        return {
            category: [f.model_dump(mode="json", exclude_none=True) for f in fields]
            for category, fields in self.categories.items()
        }

    @property
    def category_names(self) -> list[str]:
        return list(self.categories.keys())

    def all_fields(self) -> list[SpecFieldDef]:
        """First definition of every field name, in catalog order."""
        seen = set()
        fields = []
        for category_fields in self.categories.values():
            for f in category_fields:
                if f.name not in seen:
                    seen.add(f.name)
                    fields.append(f)
        return fields

    def field(self, name: str) -> Optional[SpecFieldDef]:
        for f in self.all_fields():
            if f.name == name:
                return f
        return None

    def has_field(self, name: str) -> bool:
        return self.field(name) is not None

    def category_of(self, name: str) -> Optional[str]:
        """First category that lists this field."""
        for category, fields in self.categories.items():
            if any(f.name == name for f in fields):
                return category
        return None

    def fields_for(self, category: Optional[str]) -> list[SpecFieldDef]:
        if not category:
            return []
        return list(self.categories.get(category, []))


# ===================
# PARSE OUTPUTS
# ===================

class RawPair(FrozenSchema):
    """One extracted (key, value) candidate, in line order."""

    key: str
    value: str
    line_index: int = Field(..., ge=0, description="Index into ParseResult.source_lines")
    source_line: str = ""


class Alternative(FrozenSchema):
    """A losing or co-equal candidate for a field."""

    value: str
    confidence: int = Field(..., ge=0, le=100)
    source_key: str
    line_index: int

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, value: Any) -> Any:
        return _clamp_confidence(value)


class UnitSuggestion(FrozenSchema):
    """Converted rendering of a value carrying a unit."""

    original: str
    normalized: str
    unit: Optional[str] = None


class CoercionSuggestion(FrozenSchema):
    """Type-adjusted rendering of a value."""

    original: str
    coerced: str
    expected_type: FieldType


class FieldMatch(FrozenSchema):
    """The selected value for one spec field, with everything that lost."""

    spec_name: str
    value: str
    confidence: int = Field(..., ge=0, le=100)
    source_key: str
    line_index: int
    alternatives: list[Alternative] = Field(default_factory=list)
    has_conflict: bool = False
    merged_count: Optional[int] = None
    validation_warning: Optional[str] = None
    unit_info: Optional[UnitSuggestion] = None
    coercion: Optional[CoercionSuggestion] = None
    tier: MatchTier

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, value: Any) -> Any:
        return _clamp_confidence(value)

    @property
    def confidence_tier(self) -> ConfidenceTier:
        return tier_for(self.confidence)


class ParseResult(FrozenSchema):
    """Structured proposal for one product."""

    name: str = ""
    brand: Optional[str] = None
    category: Optional[str] = None
    purchase_price: Optional[float] = None
    price_note: Optional[str] = None
    model_number: Optional[str] = None
    serial_number: Optional[str] = None
    fields: dict[str, FieldMatch] = Field(default_factory=dict)
    raw_extracted: list[RawPair] = Field(default_factory=list)
    unmatched_pairs: list[RawPair] = Field(default_factory=list)
    source_lines: list[str] = Field(default_factory=list)

    @property
    def matched_count(self) -> int:
        return len(self.fields)

    @property
    def conflict_count(self) -> int:
        return sum(1 for m in self.fields.values() if m.has_conflict)

    def fields_above(self, threshold: int) -> dict[str, FieldMatch]:
        """Fields at or above a confidence threshold (see ConfidenceMode)."""
        return {
            name: m for name, m in self.fields.items()
            if m.confidence >= threshold
        }

    def fields_for_category(
        self,
        catalog: SpecCatalog,
        category: Optional[str] = None
    ) -> dict[str, FieldMatch]:
        """
        Presentation-time filter.

        Keeps fields the category expects plus any Direct-tier match from
        elsewhere in the catalog. Unknown or missing category keeps all.
        """
        category = category or self.category
        expected = {f.name for f in catalog.fields_for(category)}
        if not expected:
            return dict(self.fields)
        return {
            name: m for name, m in self.fields.items()
            if name in expected or m.confidence >= DIRECT_THRESHOLD
        }


class Segment(FrozenSchema):
    """
    Sub-range of input lines attributed to one product.

    start_line and end_line are inclusive indexes into the input split on
    newlines.
    """

    name: str = ""
    start_line: int = Field(..., ge=0)
    end_line: int = Field(..., ge=0)
    text: str = ""


class BatchItem(FrozenSchema):
    segment: Segment
    result: ParseResult


# ===================
# DIFF
# ===================

class DiffStatus(str, Enum):
    UNCHANGED = "unchanged"
    CHANGED = "changed"
    ADDED = "added"
    REMOVED = "removed"


class DiffEntry(FrozenSchema):
    spec_name: str
    status: DiffStatus
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    confidence: int = 0


# ===================
# ALIASES
# ===================

class AliasRecord(FrozenSchema):
    """Learned mapping from a normalized source key to a spec field."""

    source_key: str
    spec_name: str
    confirmed_at: datetime
    category: Optional[str] = None


# ===================
# APPLY
# ===================

class TopLevelOverrides(BaseSchema):
    """
    Reviewer edits to top-level attributes.

    None passes the parsed value through; an empty string clears it.
    """

    name: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    purchase_price: Optional[float] = None
    price_note: Optional[str] = None
    model_number: Optional[str] = None
    serial_number: Optional[str] = None


class ApplyPayload(FrozenSchema):
    """What a caller writes into the item record."""

    name: str = ""
    brand: Optional[str] = None
    category: Optional[str] = None
    purchase_price: Optional[float] = None
    price_note: Optional[str] = None
    model_number: Optional[str] = None
    serial_number: Optional[str] = None
    specs: dict[str, str] = Field(default_factory=dict)


# ===================
# HISTORY
# ===================

class PasteHistoryEntry(FrozenSchema):
    """Recent parse kept for the session."""

    preview: str
    full_text: str
    name: str = ""
    matched_count: int = 0
    created_at: datetime


# ===================
# API SCHEMAS
# ===================

class ParseTextRequest(BaseSchema):
    """Parse pasted text (plain and optional HTML rendering)."""

    text: str = Field("", description="Plain-text rendering")
    html: Optional[str] = Field(None, description="Structured rendering, if the clipboard had one")
    catalog: Optional[dict[str, list[SpecFieldDef]]] = Field(
        None, description="Spec catalog; the built-in one when omitted"
    )
    prefer_metric: Optional[bool] = None
    confidence_mode: Optional[ConfidenceMode] = None


class ParseUrlRequest(BaseSchema):
    url: str = Field(..., min_length=4, max_length=2048)
    catalog: Optional[dict[str, list[SpecFieldDef]]] = None
    prefer_metric: Optional[bool] = None
    confidence_mode: Optional[ConfidenceMode] = None


class BatchParseRequest(BaseSchema):
    text: str = Field("", description="Text describing one or more products")
    catalog: Optional[dict[str, list[SpecFieldDef]]] = None
    prefer_metric: Optional[bool] = None


class ParseResponse(BaseSchema):
    """Parsed preview, cached under preview_id for diff/apply."""

    preview_id: str
    result: ParseResult
    confidence_mode: ConfidenceMode
    threshold: int
    visible_fields: list[str] = Field(default_factory=list)
    matched_count: int = 0
    unmatched_count: int = 0
    conflict_count: int = 0


class BatchItemResponse(BaseSchema):
    preview_id: str
    segment: Segment
    result: ParseResult


class BatchParseResponse(BaseSchema):
    data: list[BatchItemResponse]
    total: int


class DiffRequest(BaseSchema):
    existing_specs: dict[str, Optional[str]] = Field(default_factory=dict)


class DiffResponse(BaseSchema):
    data: list[DiffEntry]
    counts: dict[str, int]


class ApplyRequest(BaseSchema):
    """Reviewer overlay merged into the preview at apply time."""

    overrides: dict[str, str] = Field(default_factory=dict)
    top_level: Optional[TopLevelOverrides] = None
    manual_mappings: dict[str, str] = Field(
        default_factory=dict, description="Spec name -> value for pairs mapped by hand"
    )
    confirmed_aliases: dict[str, str] = Field(
        default_factory=dict, description="Source key -> spec name to learn"
    )
    normalize_metric: bool = False
    apply_coercion: bool = False
    catalog: Optional[dict[str, list[SpecFieldDef]]] = Field(
        None, description="Catalog confirmed aliases must name fields of; the built-in one when omitted"
    )


class AliasCreate(BaseSchema):
    source_key: str = Field(..., min_length=1, max_length=100)
    spec_name: str = Field(..., min_length=1, max_length=100)
    category: Optional[str] = None
    catalog: Optional[dict[str, list[SpecFieldDef]]] = None


class AliasListResponse(BaseSchema):
    data: list[AliasRecord]
    total: int


class PasteHistoryResponse(BaseSchema):
    data: list[PasteHistoryEntry]
    total: int
