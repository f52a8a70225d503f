"""
Key/value pair extractor.

Scans normalized lines for "key <separator> value" candidates. Pairs keep
the index of the line they came from so every downstream decision can be
traced back to source_lines.
"""

from dataclasses import dataclass, field
from typing import Optional
import re
import structlog

from config.smart_paste import (
    MAX_KEY_LENGTH,
    MAX_LINE_LENGTH,
    MAX_VALUE_LENGTH,
    MIN_KEY_LENGTH,
    MIN_LINE_LENGTH,
    NAME_KEY_PATTERN,
    PRODUCT_NOUNS,
)
from models.smart_paste import RawPair
from parsers.product_detector import mentions_brand

logger = structlog.get_logger(__name__)

# Priority order: first separator that yields a valid pair wins
SEPARATOR_PATTERNS = [
    ("tab", re.compile(r'^([^\t]{2,60})\t+(.+)$')),
    ("colon", re.compile(r'^([^:]{2,60}):\s+(.+)$')),
    ("arrow", re.compile(r'^([^→]{2,60})\s*→\s*(.+)$')),
    ("equals", re.compile(r'^([^=]{2,60})\s*=\s*(.+)$')),
    ("pipe", re.compile(r'^([^|]{2,60})\s*\|\s*(.+)$')),
    ("dash", re.compile(r'^([^-–—]{2,60})\s+[-–—]\s+(.+)$')),
]

# Page chrome and marketing lines (only dropped when they carry no pair)
CHROME_PATTERNS = [
    re.compile(
        r'^(home|shop|cart|login|log in|sign in|sign up|sign out|menu|search|filter by|sort by'
        r'|subscribe|newsletter|cookie|accept|privacy|terms|copyright|©|all rights)\b',
        re.IGNORECASE
    ),
    re.compile(
        r'^(add to|buy now|in stock|out of stock|free shipping|see more|learn more|read more'
        r'|show more|view all|close|back to|next|prev)\b',
        re.IGNORECASE
    ),
    re.compile(
        r'^(share|tweet|pin it|email this|print|save for|wishlist|compare|reviews?\s*\(|rating'
        r'|stars?\b|\d+ customer)',
        re.IGNORECASE
    ),
]

# Lines that are never data
NOISE_PATTERNS = [
    re.compile(r'^\d+(\.\d+)?$'),
    re.compile(r'^[A-Z0-9]{3,}$'),
    re.compile(r'^\[.*\]$'),
]

_NAME_KEY = re.compile(NAME_KEY_PATTERN, re.IGNORECASE)
_VALUE_UNIT = re.compile(
    r'\b(mm|cm|m|kg|g|lbs?|oz|W|V|Wh|mAh|Hz|kHz|dB|lux|lm|cd|fps|bit|yes|no|true|false|approx)\b'
    r'|°',
    re.IGNORECASE
)
_VALUE_PREFIX = re.compile(r'^(f/|[A-Z]{2,4}[\s-])', re.IGNORECASE)
_PRODUCT_NOUN = re.compile(r'\b(' + '|'.join(PRODUCT_NOUNS) + r')\b', re.IGNORECASE)


@dataclass
class ExtractionResult:
    """Pairs in line order plus a product-name guess."""
    pairs: list[RawPair] = field(default_factory=list)
    detected_name: str = ""
    pairs_only: bool = False

    @property
    def has_pairs(self) -> bool:
        return len(self.pairs) > 0


def _is_chrome(line: str) -> bool:
    return any(p.search(line) for p in CHROME_PATTERNS)


def _is_noise(line: str) -> bool:
    return any(p.search(line) for p in NOISE_PATTERNS)


def split_pair(line: str) -> Optional[tuple[str, str]]:
    """
    Split one line on the highest-priority separator that yields a valid pair.

    - "Weight: 1.4 lbs" → ("Weight", "1.4 lbs")
    - "Mount\tSony E" → ("Mount", "Sony E")
    - "Manual: https://..." → None (URL values are not specs)

    Returns:
        (key, value) or None
    """
    for _, pattern in SEPARATOR_PATTERNS:
        match = pattern.match(line)
        if not match:
            continue
        key = match.group(1).strip().rstrip(':').strip()
        value = match.group(2).strip()
        if not value or len(value) > MAX_VALUE_LENGTH or value.lower().startswith('http'):
            continue
        if len(key) < MIN_KEY_LENGTH or len(key) > MAX_KEY_LENGTH:
            continue
        return key, value
    return None


def _looks_like_label(line: str) -> bool:
    body = line[:-1] if line.endswith(':') else line
    return (
        3 <= len(body) <= 50
        and body[0].isalpha()
        and not re.search(r'[:|\t=→]', body)
        and not mentions_brand(body)
    )


def _looks_like_value(line: str) -> bool:
    if not line or len(line) > 150 or split_pair(line) is not None:
        return False
    return bool(
        line[0].isdigit()
        or _VALUE_UNIT.search(line)
        or _VALUE_PREFIX.match(line)
    )


def _looks_like_product_title(line: str) -> bool:
    if not 5 < len(line) < 120:
        return False
    return mentions_brand(line) or _PRODUCT_NOUN.search(line) is not None


def extract(lines: list[str]) -> ExtractionResult:
    """
    Extract key/value pairs from normalized lines.

    Separators are tried in priority order: tab, ":", "→", "=", "|", " - ".
    A short label line followed by a value-looking line becomes one pair
    attributed to the label's line.

    Args:
        lines: Trimmed, non-blank lines (NormalizedText.lines)

    Returns:
        ExtractionResult with pairs in line order
    """
    pairs: list[RawPair] = []
    detected_name = ""
    consumed = 0
    i = 0

    while i < len(lines):
        line = lines[i]

        if len(line) < MIN_LINE_LENGTH or len(line) > MAX_LINE_LENGTH or _is_noise(line):
            i += 1
            continue

        split = split_pair(line)
        if split:
            key, value = split
            pairs.append(RawPair(key=key, value=value, line_index=i, source_line=line))
            consumed += 1
            if not detected_name and _NAME_KEY.match(key):
                detected_name = value
            i += 1
            continue

        if _is_chrome(line):
            i += 1
            continue

        next_line = lines[i + 1] if i + 1 < len(lines) else ""
        if _looks_like_label(line) and _looks_like_value(next_line):
            key = line.rstrip(':').strip()
            pairs.append(RawPair(
                key=key,
                value=next_line,
                line_index=i,
                source_line=f"{line} → {next_line}"
            ))
            consumed += 2
            i += 2
            continue

        if not detected_name and _looks_like_product_title(line):
            detected_name = line
        i += 1

    pairs_only = bool(pairs) and consumed == len(lines)

    logger.debug(
        "pairs_extracted",
        lines=len(lines),
        pairs=len(pairs),
        pairs_only=pairs_only,
        detected_name=detected_name or None
    )
    return ExtractionResult(pairs=pairs, detected_name=detected_name, pairs_only=pairs_only)
