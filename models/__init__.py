"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
    FrozenSchema,
)
from models.smart_paste import (
    Unit,
    FieldType,
    SourceKind,
    MatchTier,
    ConfidenceTier,
    ConfidenceMode,
    tier_for,
    SpecFieldDef,
    SpecCatalog,
    RawPair,
    Alternative,
    UnitSuggestion,
    CoercionSuggestion,
    FieldMatch,
    ParseResult,
    Segment,
    BatchItem,
    DiffStatus,
    DiffEntry,
    AliasRecord,
    TopLevelOverrides,
    ApplyPayload,
    PasteHistoryEntry,
    ParseTextRequest,
    ParseUrlRequest,
    BatchParseRequest,
    ParseResponse,
    BatchItemResponse,
    BatchParseResponse,
    DiffRequest,
    DiffResponse,
    ApplyRequest,
    AliasCreate,
    AliasListResponse,
    PasteHistoryResponse,
)

__all__ = [
    "BaseSchema",
    "FrozenSchema",
    "Unit",
    "FieldType",
    "SourceKind",
    "MatchTier",
    "ConfidenceTier",
    "ConfidenceMode",
    "tier_for",
    "SpecFieldDef",
    "SpecCatalog",
    "RawPair",
    "Alternative",
    "UnitSuggestion",
    "CoercionSuggestion",
    "FieldMatch",
    "ParseResult",
    "Segment",
    "BatchItem",
    "DiffStatus",
    "DiffEntry",
    "AliasRecord",
    "TopLevelOverrides",
    "ApplyPayload",
    "PasteHistoryEntry",
    "ParseTextRequest",
    "ParseUrlRequest",
    "BatchParseRequest",
    "ParseResponse",
    "BatchItemResponse",
    "BatchParseResponse",
    "DiffRequest",
    "DiffResponse",
    "ApplyRequest",
    "AliasCreate",
    "AliasListResponse",
    "PasteHistoryResponse",
]
