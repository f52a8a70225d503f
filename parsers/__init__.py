"""
Smart Paste extraction pipeline.

Normalize, extract, match, resolve and advise; batch parsing splits
multi-product text and runs the single-product pipeline per segment.
"""

from parsers.text_normalizer import (
    normalize,
    clean_markup,
    NormalizedText,
)
from parsers.pair_extractor import (
    extract,
    ExtractionResult,
)
from parsers.field_matcher import (
    match,
    MatchOutcome,
    Candidate,
    AliasTier,
    ExactTier,
    SynonymTier,
    FuzzyTier,
)
from parsers.field_resolver import (
    resolve,
    validate_field_value,
)
from parsers.unit_normalizer import (
    normalize_units,
    coerce_field_value,
)
from parsers.smart_paste_parser import (
    parse_product_text,
    as_catalog,
)
from parsers.batch_parser import (
    detect_product_boundaries,
    parse_batch_products,
)

__all__ = [
    "normalize",
    "clean_markup",
    "NormalizedText",
    "extract",
    "ExtractionResult",
    "match",
    "MatchOutcome",
    "Candidate",
    "AliasTier",
    "ExactTier",
    "SynonymTier",
    "FuzzyTier",
    "resolve",
    "validate_field_value",
    "normalize_units",
    "coerce_field_value",
    "parse_product_text",
    "as_catalog",
    "detect_product_boundaries",
    "parse_batch_products",
]
