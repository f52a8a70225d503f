"""
Top-level product attribute detection.

Brand, category, price, model number and serial number come from labelled
pairs first and from a scan of the full text second.
"""

from dataclasses import dataclass
from typing import Optional
import re
import structlog

from config.smart_paste import (
    BRAND_KEY_PATTERN,
    CATEGORY_KEYWORDS,
    CURRENCY_NAMES,
    KNOWN_BRANDS,
    MODEL_KEY_PATTERN,
    PRICE_KEY_PRIORITY,
    SERIAL_KEY_PATTERN,
)
from models.smart_paste import RawPair, SpecCatalog

logger = structlog.get_logger(__name__)


def _brand_pattern(brand: str) -> re.Pattern:
    # Short all-caps brands ("RED", "DPA") only match as written
    flags = 0 if brand.isupper() else re.IGNORECASE
    return re.compile(r'(?<![\w])' + re.escape(brand) + r'(?![\w])', flags)


BRAND_PATTERNS = [(brand, _brand_pattern(brand)) for brand in KNOWN_BRANDS]

_BRAND_KEY = re.compile(BRAND_KEY_PATTERN, re.IGNORECASE)
_MODEL_KEY = re.compile(MODEL_KEY_PATTERN, re.IGNORECASE)
_SERIAL_KEY = re.compile(SERIAL_KEY_PATTERN, re.IGNORECASE)
_PRICE_KEY = re.compile(
    r'^(' + '|'.join(p.replace(' ', r'\s*') for p in PRICE_KEY_PRIORITY) + r')$',
    re.IGNORECASE
)
_PRICE_VALUE = re.compile(r'([$€£¥])?\s*(\d[\d,]*(?:\.\d+)?)')
_PRICE_RANGE = re.compile(
    r'([$€£¥])\s*(\d[\d,]*(?:\.\d+)?)\s*[-–—]\s*[$€£¥]?\s*(\d[\d,]*(?:\.\d+)?)'
)
_PRICE_SINGLE = re.compile(r'([$€£¥])\s*(\d[\d,]*(?:\.\d+)?)')


@dataclass
class ProductAttributes:
    """Top-level attributes detected for one product."""
    brand: Optional[str] = None
    category: Optional[str] = None
    purchase_price: Optional[float] = None
    price_note: Optional[str] = None
    model_number: Optional[str] = None
    serial_number: Optional[str] = None


def mentions_brand(text: str) -> bool:
    return any(pattern.search(text) for _, pattern in BRAND_PATTERNS)


def find_brand(text: Optional[str]) -> Optional[str]:
    """First known brand mentioned in text."""
    if not text:
        return None
    for brand, pattern in BRAND_PATTERNS:
        if pattern.search(text):
            return brand
    return None


def detect_brand(pairs: list[RawPair], name: str, text: str) -> Optional[str]:
    """
    Labelled brand first ("Brand: Canon"), then a known brand in the
    product name, then anywhere in the text.
    """
    for pair in pairs:
        if _BRAND_KEY.match(pair.key.strip()):
            return pair.value
    return find_brand(name) or find_brand(text)


def _keyword_hits(keyword: str, text_lower: str) -> bool:
    pattern = r'(?<![a-z])' + re.escape(keyword) + r'(?![a-z])'
    return re.search(pattern, text_lower) is not None


def detect_category(text: str, catalog: Optional[SpecCatalog] = None) -> Optional[str]:
    """
    Keyword scoring over the catalog's categories.

    Categories without a keyword list score on their own name. The highest
    score wins; ties go to catalog order. No hit means no category.
    """
    text_lower = text.lower()
    if catalog is not None and catalog.categories:
        names = catalog.category_names
    else:
        names = list(CATEGORY_KEYWORDS.keys())

    best_category, best_score = None, 0
    for category in names:
        keywords = CATEGORY_KEYWORDS.get(category) or [category.lower().rstrip('s')]
        score = sum(1 for keyword in keywords if _keyword_hits(keyword, text_lower))
        if score > best_score:
            best_category, best_score = category, score
    return best_category


def _to_price(number: str) -> Optional[float]:
    try:
        return float(number.replace(',', ''))
    except ValueError:
        return None


def _currency_note(symbol: Optional[str]) -> Optional[str]:
    if not symbol or symbol == '$':
        return None
    return f"Currency: {CURRENCY_NAMES.get(symbol, symbol)}"


def detect_price(pairs: list[RawPair], text: str) -> tuple[Optional[float], Optional[str]]:
    """
    Purchase price and an optional note.

    Labelled prices rank by PRICE_KEY_PRIORITY (sale price beats MSRP).
    Otherwise the first currency range ("Range: $99 - $149") or amount in
    the text is used; non-dollar currencies add "Currency: EUR".

    Returns:
        (purchase_price, price_note)
    """
    best_rank = len(PRICE_KEY_PRIORITY) + 1
    best: tuple[Optional[float], Optional[str]] = (None, None)

    for pair in pairs:
        key = re.sub(r'\s+', ' ', pair.key.strip().lower())
        if not _PRICE_KEY.match(key):
            continue
        rank = next(
            (i for i, label in enumerate(PRICE_KEY_PRIORITY) if label.replace(' ', '') == key.replace(' ', '')),
            len(PRICE_KEY_PRIORITY)
        )
        if rank >= best_rank:
            continue
        match = _PRICE_VALUE.search(pair.value)
        price = _to_price(match.group(2)) if match else None
        if price is not None:
            best_rank = rank
            best = (price, _currency_note(match.group(1)))

    if best[0] is not None:
        return best

    range_match = _PRICE_RANGE.search(text)
    if range_match:
        return _to_price(range_match.group(2)), f"Range: {range_match.group(0)}"

    single = _PRICE_SINGLE.search(text)
    if single:
        return _to_price(single.group(2)), _currency_note(single.group(1))

    return None, None


def detect_identifiers(pairs: list[RawPair]) -> tuple[Optional[str], Optional[str]]:
    """
    First labelled model number and serial number.

    Returns:
        (model_number, serial_number)
    """
    model_number, serial_number = None, None
    for pair in pairs:
        key = pair.key.strip()
        if serial_number is None and _SERIAL_KEY.match(key):
            serial_number = pair.value
        elif model_number is None and _MODEL_KEY.match(key):
            model_number = pair.value
    return model_number, serial_number


def detect_product_attributes(
    pairs: list[RawPair],
    name: str,
    text: str,
    catalog: Optional[SpecCatalog] = None
) -> ProductAttributes:
    """Run every detector over one product's pairs and text."""
    purchase_price, price_note = detect_price(pairs, text)
    model_number, serial_number = detect_identifiers(pairs)
    attributes = ProductAttributes(
        brand=detect_brand(pairs, name, text),
        category=detect_category(text, catalog),
        purchase_price=purchase_price,
        price_note=price_note,
        model_number=model_number,
        serial_number=serial_number,
    )
    logger.debug(
        "product_attributes_detected",
        brand=attributes.brand,
        category=attributes.category,
        has_price=purchase_price is not None
    )
    return attributes
