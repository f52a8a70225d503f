"""
Unit normalizer and type coercer.

Advisory only: both entry points return a suggestion or None and never
raise. The raw extracted value is left untouched; the reviewer (or the
apply payload builder, when asked) decides whether to adopt a suggestion.
"""

from dataclasses import dataclass
from typing import Optional
import re
import structlog

from config.smart_paste import (
    BOOLEAN_FIELDS,
    LENGTH_TO_MM,
    METRIC_UNITS,
    UNIT_TOKENS,
    WEIGHT_TO_G,
)
from models.smart_paste import CoercionSuggestion, FieldType, Unit, UnitSuggestion
from utils.text_utils import normalize_key, strip_unit_qualifier

logger = structlog.get_logger(__name__)

# Decimal places per output unit (trailing zeros are dropped)
OUTPUT_DECIMALS = {
    "mm": 1, "cm": 1, "m": 2, "in": 2, "ft": 2,
    "g": 0, "kg": 3, "oz": 1, "lb": 2,
    "°C": 1, "°F": 1,
}

_NUMBER = r'(?<![\d.,])(\d+(?:[.,]\d+)*)'
_LENGTH_UNIT = r'(mm|millimet(?:er|re)s?|cm|centimet(?:er|re)s?|m|met(?:er|re)s?|inch(?:es)?|in\.?|"|ft\.?|feet|foot)'
_WEIGHT_UNIT = r'(kg|kgs|kilograms?|g|grams?|lbs?\.?|pounds?|oz\.?|ounces?)'

_COMPOUND_WEIGHT = re.compile(
    _NUMBER + r'\s*(?:lbs?|pounds?)\.?\s+' + _NUMBER + r'\s*(?:oz|ounces?)\b',
    re.IGNORECASE
)
_DIMENSIONS = re.compile(
    _NUMBER + r'\s*[x×]\s*' + _NUMBER + r'(?:\s*[x×]\s*' + _NUMBER + r')?\s*'
    + r'(mm|cm|m|inch(?:es)?|in\.?|")(?![a-z])',
    re.IGNORECASE
)
_SINGLE_LENGTH = re.compile(_NUMBER + r'\s*' + _LENGTH_UNIT + r'(?![a-z])', re.IGNORECASE)
_SINGLE_WEIGHT = re.compile(_NUMBER + r'\s*' + _WEIGHT_UNIT + r'(?![a-z])', re.IGNORECASE)
_TEMPERATURE = re.compile(
    r'(?<![\d.,])(-?\d+(?:\.\d+)?)\s*(°\s*[CF]|degrees?\s*(?:celsius|fahrenheit)|celsius|fahrenheit)\b',
    re.IGNORECASE
)
_SINGLE_QUANTITY = re.compile(
    r'^\s*([$€£¥])?\s*(\d[\d,]*(?:\.\d+)?)\s*([^\d\s]*)\s*$'
)

_YES = re.compile(
    r'^(yes|y|true|included|available|built[\s-]?in|equipped|supported|✓|✔)$', re.IGNORECASE
)
_NO = re.compile(
    r'^(no|n|false|not included|none|n/a|not available|not supported|✗|✘|—|-)$', re.IGNORECASE
)
_CCT_RANGE = re.compile(r'(\d{3,5})\s*K?\s*(?:[-–—]|to)\s*(\d{3,5})\s*K?', re.IGNORECASE)
_BARE_NUMBER = re.compile(r'^-?\d+(?:\.\d+)?$')
_FIRST_NUMBER = re.compile(r'-?\d[\d,]*(?:\.\d+)?')


@dataclass
class Quantity:
    """A number with an optional unit and its physical kind."""
    amount: float
    unit: Optional[str]
    kind: str  # length, weight, temperature, currency or number


# ===================
# HELPERS
# ===================

def parse_number(text: str) -> Optional[float]:
    """
    Parse "1,299", "1.4" or "1,4" into a float.

    Returns None for anything malformed.
    """
    text = text.strip()
    if re.fullmatch(r'\d{1,3}(,\d{3})+(\.\d+)?', text):
        text = text.replace(',', '')
    elif text.count(',') == 1 and '.' not in text:
        text = text.replace(',', '.')
    try:
        return float(text)
    except ValueError:
        return None


def format_amount(amount: float, unit: str) -> str:
    """Format with the unit's precision, trailing zeros removed."""
    decimals = OUTPUT_DECIMALS.get(unit, 2)
    text = f"{amount:.{decimals}f}"
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


def canonical_unit(token: str) -> Optional[str]:
    token = re.sub(r'\s+', '', token.lower())
    if token.startswith('°'):
        return "°C" if token.endswith('c') else "°F"
    if 'celsius' in token:
        return "°C"
    if 'fahrenheit' in token:
        return "°F"
    return UNIT_TOKENS.get(token) or UNIT_TOKENS.get(token.rstrip('.'))


def unit_kind(unit: Optional[str]) -> Optional[str]:
    if unit in LENGTH_TO_MM:
        return "length"
    if unit in WEIGHT_TO_G:
        return "weight"
    if unit in ("°C", "°F"):
        return "temperature"
    return None


def convert(amount: float, from_unit: str, to_unit: str) -> float:
    """Convert between two units of the same kind."""
    if from_unit in LENGTH_TO_MM and to_unit in LENGTH_TO_MM:
        return amount * LENGTH_TO_MM[from_unit] / LENGTH_TO_MM[to_unit]
    if from_unit in WEIGHT_TO_G and to_unit in WEIGHT_TO_G:
        return amount * WEIGHT_TO_G[from_unit] / WEIGHT_TO_G[to_unit]
    if from_unit == "°F" and to_unit == "°C":
        return (amount - 32) * 5 / 9
    if from_unit == "°C" and to_unit == "°F":
        return amount * 9 / 5 + 32
    if from_unit == to_unit:
        return amount
    raise ValueError(f"Cannot convert {from_unit} to {to_unit}")


def single_quantity(value: Optional[str]) -> Optional[Quantity]:
    """
    The value is exactly one number with at most one unit or currency sign.

    - "1.4 lbs" → Quantity(1.4, "lb", "weight")
    - "$100" → Quantity(100, "$", "currency")
    - "6.5 x 4.3 in" → None
    """
    if not value:
        return None
    match = _SINGLE_QUANTITY.match(value)
    if not match:
        return None
    currency, number, unit_token = match.groups()
    amount = parse_number(number)
    if amount is None:
        return None
    if currency:
        return Quantity(amount, currency, "currency")
    if not unit_token:
        return Quantity(amount, None, "number")
    unit = canonical_unit(unit_token)
    kind = unit_kind(unit)
    return Quantity(amount, unit, kind or unit_token.lower())


def first_quantity(value: Optional[str]) -> Optional[Quantity]:
    """First length or weight in a value, else its first bare number."""
    if not value:
        return None
    for pattern in (_SINGLE_WEIGHT, _SINGLE_LENGTH):
        match = pattern.search(value)
        if match:
            amount = parse_number(match.group(1))
            unit = canonical_unit(match.group(2))
            if amount is not None and unit:
                return Quantity(amount, unit, unit_kind(unit) or "number")
    number = re.search(r'\d+(?:\.\d+)?', value.replace(',', ''))
    if number:
        return Quantity(float(number.group(0)), None, "number")
    return None


def _preferred_target(unit: str, amount: float, prefer_metric: bool) -> Optional[str]:
    """Default conversion target when the field names no unit."""
    is_metric = unit in METRIC_UNITS
    if prefer_metric == is_metric:
        return None
    kind = unit_kind(unit)
    if kind == "length":
        if prefer_metric:
            return "m" if unit == "ft" else "mm"
        return "ft" if convert(amount, unit, "in") >= 36 else "in"
    if kind == "weight":
        grams = convert(amount, unit, "g")
        if prefer_metric:
            return "kg" if grams >= 1000 else "g"
        return "lb" if grams >= WEIGHT_TO_G["lb"] else "oz"
    if kind == "temperature":
        return "°C" if prefer_metric else "°F"
    return None


def _resolve_target(
    unit: str,
    amount: float,
    prefer_metric: bool,
    target_unit: Optional[str]
) -> Optional[str]:
    if target_unit:
        if unit_kind(target_unit) != unit_kind(unit) or target_unit == unit:
            return None
        return target_unit
    return _preferred_target(unit, amount, prefer_metric)


# ===================
# UNIT NORMALIZATION
# ===================

def normalize_units(
    value: Optional[str],
    prefer_metric: bool = True,
    target_unit: Optional[str] = None
) -> Optional[UnitSuggestion]:
    """
    Suggest a converted rendering of a value carrying a unit.

    Handles compound weights ("1 lb 5 oz"), dimension pairs/triples
    ("6.5 x 4.3 x 3.1 in"), single lengths, weights and temperatures.

    Args:
        value: Raw value
        prefer_metric: Preferred system when no target unit is given
        target_unit: The field's expected unit ("kg" for "Weight (kg)")

    Returns:
        UnitSuggestion, or None when there is no unit, nothing to convert,
        or the value is malformed
    """
    if not value or not isinstance(value, str):
        return None
    if isinstance(target_unit, Unit):
        target_unit = target_unit.value

    try:
        return _normalize_units(value, prefer_metric, target_unit)
    except (ValueError, ArithmeticError) as e:
        logger.debug("unit_normalization_skipped", value=value, error=str(e))
        return None


def _normalize_units(
    value: str,
    prefer_metric: bool,
    target_unit: Optional[str]
) -> Optional[UnitSuggestion]:
    compound = _COMPOUND_WEIGHT.search(value)
    if compound:
        pounds, ounces = parse_number(compound.group(1)), parse_number(compound.group(2))
        if pounds is None or ounces is None:
            return None
        grams = pounds * WEIGHT_TO_G["lb"] + ounces * WEIGHT_TO_G["oz"]
        if target_unit:
            target = target_unit if unit_kind(target_unit) == "weight" else None
        elif prefer_metric:
            target = "kg" if grams >= 1000 else "g"
        else:
            target = None
        if not target or target in ("lb", "oz"):
            return None
        return _suggestion(value, convert(grams, "g", target), target)

    dimensions = _DIMENSIONS.search(value)
    if dimensions:
        unit = canonical_unit(dimensions.group(4))
        numbers = [parse_number(n) for n in dimensions.groups()[:3] if n]
        if not unit or any(n is None for n in numbers):
            return None
        if target_unit:
            target = _resolve_target(unit, numbers[0], prefer_metric, target_unit)
        elif prefer_metric:
            target = "mm" if unit == "in" else None
        else:
            target = "in" if unit in ("mm", "cm", "m") else None
        if not target:
            return None
        parts = [format_amount(convert(n, unit, target), target) for n in numbers]
        return UnitSuggestion(
            original=value,
            normalized=" × ".join(parts) + f" {target}",
            unit=target
        )

    temperature = _TEMPERATURE.search(value)
    if temperature:
        amount = parse_number(temperature.group(1).lstrip('-'))
        if amount is None:
            return None
        if temperature.group(1).startswith('-'):
            amount = -amount
        unit = canonical_unit(temperature.group(2))
        target = _resolve_target(unit, amount, prefer_metric, target_unit)
        if not target:
            return None
        return _suggestion(value, convert(amount, unit, target), target)

    for pattern in (_SINGLE_WEIGHT, _SINGLE_LENGTH):
        match = pattern.search(value)
        if not match:
            continue
        amount = parse_number(match.group(1))
        unit = canonical_unit(match.group(2))
        if amount is None or not unit:
            return None
        target = _resolve_target(unit, amount, prefer_metric, target_unit)
        if not target:
            return None
        return _suggestion(value, convert(amount, unit, target), target)

    return None


def _suggestion(original: str, amount: float, unit: str) -> UnitSuggestion:
    return UnitSuggestion(
        original=original,
        normalized=f"{format_amount(amount, unit)} {unit}",
        unit=unit
    )


# ===================
# TYPE COERCION
# ===================

def infer_field_type(spec_name: str) -> Optional[FieldType]:
    """Best guess at a field's type from its name alone."""
    name = normalize_key(strip_unit_qualifier(spec_name))
    if not name:
        return None
    if any(f == name or f in name for f in BOOLEAN_FIELDS):
        return FieldType.BOOLEAN
    if re.search(r'\b(price|cost|msrp)\b', name):
        return FieldType.NUMBER
    return None


def coerce_field_value(
    spec_name: str,
    value: Optional[str],
    expected_type: Optional[FieldType] = None
) -> Optional[CoercionSuggestion]:
    """
    Suggest a type-adjusted rendering when the literal would fail the
    field's expected type.

    - boolean: "Included" → "Yes", "N/A" → "No"
    - number: "$1,299.00" → "1299.00"
    - integer: "9 blades" → "9"
    - colour temperature: "2700K-6500K" → "2700–6500 K"
    - aperture: "2.8" → "f/2.8"

    Returns:
        CoercionSuggestion or None (also for malformed input)
    """
    if not value or not isinstance(value, str) or not spec_name:
        return None
    v = value.strip()
    field_type = expected_type or infer_field_type(spec_name)
    name = normalize_key(spec_name)

    try:
        coerced = None
        if field_type == FieldType.BOOLEAN:
            coerced = _coerce_boolean(v)
        elif field_type in (FieldType.NUMBER, FieldType.INTEGER):
            coerced = _coerce_number(v, integer=field_type == FieldType.INTEGER)
        elif 'color temp' in name or 'cct' in name:
            match = _CCT_RANGE.search(v)
            if match:
                coerced = f"{match.group(1)}–{match.group(2)} K"
        elif 'aperture' in name and _BARE_NUMBER.match(v):
            coerced = f"f/{v}"
    except (ValueError, ArithmeticError) as e:
        logger.debug("coercion_skipped", spec_name=spec_name, value=value, error=str(e))
        return None

    if coerced is None or coerced == v:
        return None
    return CoercionSuggestion(
        original=v,
        coerced=coerced,
        expected_type=field_type or FieldType.TEXT
    )


def _coerce_boolean(value: str) -> Optional[str]:
    if _YES.match(value):
        return "Yes"
    if _NO.match(value):
        return "No"
    return None


def _coerce_number(value: str, integer: bool = False) -> Optional[str]:
    match = _FIRST_NUMBER.search(value)
    if not match:
        return None
    text = match.group(0).replace(',', '')
    if integer:
        number = float(text)
        if not number.is_integer():
            return None
        return str(int(number))
    return text
