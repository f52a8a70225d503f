"""
Single-product Smart Paste parser.

Runs the whole pipeline synchronously:

    normalize -> extract -> detect attributes -> match -> resolve -> advise

and returns one frozen ParseResult. Nothing here touches the network,
the filesystem or the alias store; callers pass learned aliases in.
"""

from typing import Optional, Union
import structlog

from config.spec_catalog import DEFAULT_SPEC_CATALOG
from models.smart_paste import FieldMatch, ParseResult, SourceKind, SpecCatalog
from parsers.field_matcher import match
from parsers.field_resolver import resolve
from parsers.pair_extractor import extract
from parsers.product_detector import detect_product_attributes
from parsers.text_normalizer import normalize
from parsers.unit_normalizer import coerce_field_value, normalize_units

logger = structlog.get_logger(__name__)

CatalogInput = Union[SpecCatalog, dict, None]


def as_catalog(catalog: CatalogInput) -> SpecCatalog:
    """Accept a SpecCatalog, plain JSON-style dict, or None (built-in catalog)."""
    if isinstance(catalog, SpecCatalog):
        return catalog
    return SpecCatalog.from_dict(catalog if catalog is not None else DEFAULT_SPEC_CATALOG)


def attach_advice(
    fields: dict[str, FieldMatch],
    catalog: SpecCatalog,
    prefer_metric: bool = True
) -> dict[str, FieldMatch]:
    """
    Add unit and type suggestions to each match.

    The selected value itself is never changed.
    """
    advised = {}
    for spec_name, field_match in fields.items():
        definition = catalog.field(spec_name)
        target_unit = definition.expected_unit.value if definition and definition.expected_unit else None
        expected_type = definition.expected_type if definition else None

        unit_info = normalize_units(field_match.value, prefer_metric, target_unit)
        coercion = coerce_field_value(spec_name, field_match.value, expected_type)
        if unit_info or coercion:
            field_match = field_match.model_copy(update={"unit_info": unit_info, "coercion": coercion})
        advised[spec_name] = field_match
    return advised


def parse_product_text(
    text: Optional[str],
    catalog: CatalogInput = None,
    aliases: Optional[dict[str, str]] = None,
    prefer_metric: bool = True,
    html: Optional[str] = None,
    source_kind: SourceKind = SourceKind.PASTE
) -> ParseResult:
    """
    Parse one product's text into a structured proposal.

    Args:
        text: Plain-text rendering (may contain markup)
        catalog: Spec catalog (built-in gear catalog when None)
        aliases: Learned aliases, normalized source key -> spec name
        prefer_metric: Unit system for suggestions when a field names no unit
        html: Optional structured rendering from the clipboard
        source_kind: Where the text came from

    Returns:
        ParseResult

    Raises:
        EmptyInputError: No text left after cleaning
    """
    spec_catalog = as_catalog(catalog)
    normalized = normalize(text, source_kind, html)
    extraction = extract(normalized.lines)

    attributes = detect_product_attributes(
        extraction.pairs,
        extraction.detected_name,
        normalized.text,
        spec_catalog
    )

    outcome = match(extraction.pairs, spec_catalog, aliases, attributes.category)
    fields = attach_advice(resolve(outcome.grouped()), spec_catalog, prefer_metric)

    result = ParseResult(
        name=extraction.detected_name,
        brand=attributes.brand,
        category=attributes.category,
        purchase_price=attributes.purchase_price,
        price_note=attributes.price_note,
        model_number=attributes.model_number,
        serial_number=attributes.serial_number,
        fields=fields,
        raw_extracted=extraction.pairs,
        unmatched_pairs=outcome.unmatched_pairs,
        source_lines=normalized.lines,
    )

    logger.info(
        "smart_paste_parsed",
        source_kind=source_kind.value,
        lines=len(normalized.lines),
        pairs=len(extraction.pairs),
        fields=result.matched_count,
        unmatched=len(result.unmatched_pairs),
        conflicts=result.conflict_count,
        category=result.category
    )
    return result
