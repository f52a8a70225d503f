"""
Text utilities for comparing spec keys and values.

Used by the field matcher, alias store and diff engine so that every
component agrees on what "the same key" means.
"""

import re
import unicodedata
from typing import Optional

from config.smart_paste import ABBREVIATIONS, STOP_WORDS


def strip_accents(text: str) -> str:
    """
    Remove accent marks while keeping base characters.

    - "Décor" → "Decor"
    - "Røde" → "Røde" (ø has no decomposition)
    """
    # NFD decomposition separates base chars from accents
    normalized = unicodedata.normalize('NFD', text)
    return ''.join(c for c in normalized if unicodedata.category(c) != 'Mn')


def normalize_key(key: Optional[str]) -> str:
    """
    Normalize a spec key or field name for comparison.

    - "Weight (kg)" → "weight kg"
    - "Self-Noise" → "self noise"
    - "Approx. Wt." → "approx wt"
    - "S/N" → "s/n"

    Args:
        key: Raw key text (may be None)

    Returns:
        Lowercase ASCII-ish string with single spaces, "" for empty input
    """
    if not key:
        return ""

    text = strip_accents(key).lower()
    text = re.sub(r'[-–—_]', ' ', text)
    text = re.sub(r'[()\[\]{}]', ' ', text)
    # Dots survive only inside numbers ("2.8")
    text = re.sub(r'(?<!\d)\.|\.(?!\d)', '', text)
    text = re.sub(r'[^a-z0-9\s/%.]', '', text)
    return re.sub(r'\s+', ' ', text).strip()


def strip_unit_qualifier(name: str) -> str:
    """
    Drop a trailing parenthesized qualifier from a field name.

    - "Weight (kg)" → "Weight"
    - "Luminous Flux (lm)" → "Luminous Flux"
    """
    return re.sub(r'\s*\([^)]*\)\s*$', '', name).strip()


def unit_qualifier(name: str) -> Optional[str]:
    """Return the text inside a trailing parenthesized qualifier, if any."""
    match = re.search(r'\(([^)]*)\)\s*$', name)
    if not match:
        return None
    return match.group(1).strip() or None


def expand_abbreviations(normalized: str) -> str:
    """Expand known abbreviations in an already-normalized key."""
    return ' '.join(ABBREVIATIONS.get(word, word) for word in normalized.split(' '))


def significant_tokens(normalized: str) -> list[str]:
    """Tokens long enough and specific enough to carry a fuzzy match."""
    return [
        word for word in normalized.split(' ')
        if len(word) > 2 and word not in STOP_WORDS
    ]


def comparable_value(value: Optional[str]) -> str:
    """
    Fold a value for equality checks.

    Case and whitespace differences do not make two values different:
    "Black" == " black " and "4K  60p" == "4k 60p".
    """
    if not value:
        return ""
    return re.sub(r'\s+', ' ', value).strip().lower()


def values_equal(a: Optional[str], b: Optional[str]) -> bool:
    return comparable_value(a) == comparable_value(b)
