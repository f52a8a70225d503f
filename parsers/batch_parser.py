"""
Multi-product segmenter and batch parser.

Splits text describing several products into segments and runs the
single-product parser on each one independently. Segments share no
matching state, so a conflict in one product never bleeds into another.
"""

from dataclasses import dataclass
from typing import Optional
import re
import structlog

from exceptions import EmptyInputError
from models.smart_paste import BatchItem, Segment
from parsers.pair_extractor import split_pair
from parsers.product_detector import mentions_brand
from parsers.smart_paste_parser import CatalogInput, as_catalog, parse_product_text
from parsers.text_normalizer import clean_markup, looks_like_markup

logger = structlog.get_logger(__name__)

# Heuristic boundaries need the current segment to span this many lines
MIN_SEGMENT_LINES = 3
# Shorter segments are folded into a neighbour
MIN_SEGMENT_CHARS = 20
# Blank lines in a row that always start a new product
BLANK_RUN_BOUNDARY = 2

_RULE = re.compile(r'^[-=_]{3,}\s*$')
_HEADING = re.compile(r'^#{1,3}\s+(.+)$')
_NAME_LINE = re.compile(
    r'^(?:product\s*name|item\s*name|model\s*name|name|title)\s*(?:[:→=\t]|\s-\s)\s*(.+)$',
    re.IGNORECASE
)


@dataclass
class _Span:
    start: int
    end: int
    name: Optional[str] = None


def _segment_text(lines: list[str], span: _Span) -> str:
    # Folded spans can straddle a rule line; rules belong to no segment
    kept = [line for line in lines[span.start:span.end + 1] if not _RULE.match(line.strip())]
    return "\n".join(kept).strip()


def _fold_short(lines: list[str], spans: list[_Span]) -> list[_Span]:
    """Fold spans with too little text into the following (or last) span."""
    kept: list[_Span] = []
    pending: Optional[_Span] = None
    for span in spans:
        if pending is not None:
            span = _Span(start=pending.start, end=span.end, name=span.name or pending.name)
            pending = None
        if len(_segment_text(lines, span)) < MIN_SEGMENT_CHARS:
            pending = span
            continue
        kept.append(span)

    if pending is not None:
        if kept:
            last = kept[-1]
            kept[-1] = _Span(start=last.start, end=pending.end, name=last.name or pending.name)
        else:
            kept.append(pending)
    return kept


def detect_product_boundaries(text: Optional[str]) -> list[Segment]:
    """
    Split text into per-product segments.

    Boundaries:
    - horizontal rules (---, ===, ___); the rule line belongs to no segment
    - two or more blank lines in a row
    - markdown headings (#, ##, ###); the heading names the segment
    - a second "Product Name:"-style line in the same segment
    - a known-brand title line right after a blank line

    Headings, name lines and brand lines only split once the current
    segment spans MIN_SEGMENT_LINES lines. With no boundary at all, one
    segment spans the whole input.

    Returns:
        Segments in input order ([] for blank input)
    """
    if not text or not text.strip():
        return []

    lines = text.replace('\r\n', '\n').replace('\r', '\n').split('\n')
    spans: list[_Span] = []
    current: Optional[_Span] = None
    has_name_line = False
    boundary_found = False
    blank_run = 0

    for i, raw_line in enumerate(lines):
        line = raw_line.strip()
        if not line:
            blank_run += 1
            continue
        gap, blank_run = blank_run, 0

        if _RULE.match(line):
            if current is not None:
                spans.append(current)
            current, has_name_line = None, False
            boundary_found = True
            continue

        heading = _HEADING.match(line)
        name_line = _NAME_LINE.match(line)
        brand_line = gap > 0 and len(line) < 120 and split_pair(line) is None and mentions_brand(line)

        if current is not None:
            spans_enough = i - current.start >= MIN_SEGMENT_LINES
            if gap >= BLANK_RUN_BOUNDARY or (
                spans_enough and (heading or (name_line and has_name_line) or brand_line)
            ):
                spans.append(current)
                current, has_name_line = None, False
                boundary_found = True

        if current is None:
            current = _Span(start=i, end=i)
            if brand_line and not heading and not name_line:
                current.name = line
        current.end = i

        if heading and current.name is None:
            current.name = heading.group(1).strip()
        if name_line:
            if current.name is None:
                current.name = name_line.group(1).strip()
            has_name_line = True

    if current is not None:
        spans.append(current)

    if not boundary_found:
        name = spans[0].name if spans else None
        return [Segment(
            name=name or "Product 1",
            start_line=0,
            end_line=len(lines) - 1,
            text=text.strip()
        )]

    segments = [
        Segment(
            name=span.name or f"Product {position + 1}",
            start_line=span.start,
            end_line=span.end,
            text=_segment_text(lines, span)
        )
        for position, span in enumerate(_fold_short(lines, spans))
    ]
    logger.debug("product_boundaries_detected", segments=len(segments))
    return segments


def parse_batch_products(
    text: Optional[str],
    catalog: CatalogInput = None,
    aliases: Optional[dict[str, str]] = None,
    prefer_metric: bool = True
) -> list[BatchItem]:
    """
    Parse every product in a multi-product text.

    Each segment goes through parse_product_text on its own text, so a
    segment parses exactly as that product's text would alone.

    Raises:
        EmptyInputError: Blank input, or a segment with nothing to parse
    """
    if text and looks_like_markup(text):
        text = clean_markup(text)

    segments = detect_product_boundaries(text)
    if not segments:
        raise EmptyInputError(source="batch")

    spec_catalog = as_catalog(catalog)
    items = [
        BatchItem(
            segment=segment,
            result=parse_product_text(segment.text, spec_catalog, aliases, prefer_metric)
        )
        for segment in segments
    ]

    logger.info("batch_parsed", segments=len(items))
    return items
