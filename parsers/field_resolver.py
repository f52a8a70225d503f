"""
Conflict and merge resolver.

Collapses the candidates proposed for each spec field into one FieldMatch:

- materially equal values never conflict; extras stay as alternatives
- adjacent fragments of one attribute ("Dimensions (W x H): 150 x 90 mm"
  followed by "Dimensions (D): 80 mm") merge into one value with
  merged_count
- different values in the same confidence tier set has_conflict; the
  highest-confidence (then first-seen) value stays the default
"""

from typing import Optional
import re
import structlog

from config.smart_paste import VALUE_RANGES
from models.smart_paste import Alternative, FieldMatch, tier_for
from parsers.field_matcher import Candidate
from parsers.unit_normalizer import convert, first_quantity, single_quantity
from utils.text_utils import normalize_key, strip_unit_qualifier, values_equal

logger = structlog.get_logger(__name__)

# Tokens that mark a value as one part of a multi-line value
_TRAILING_JOIN = re.compile(r'(?:\s[x×+/&]|[,+/×]|\sand)\s*$', re.IGNORECASE)
_LEADING_JOIN = re.compile(r'^\s*(?:[x×+/&,]\s|and\s|[,+/×])', re.IGNORECASE)

# Unit the range check in VALUE_RANGES is expressed in
RANGE_UNITS = {"weight": "kg", "focal length": "mm", "max height": "m"}


def _sort_key(candidate: Candidate) -> tuple:
    return (-candidate.confidence, candidate.line_index, candidate.pair_index)


def _has_joining_token(first: Candidate, second: Candidate) -> bool:
    return bool(_TRAILING_JOIN.search(first.value) or _LEADING_JOIN.search(second.value))


def is_continuation(first: Candidate, second: Candidate) -> bool:
    """
    True when second reads as the next fragment of first.

    Either value carries a joining token, or the keys name the same
    attribute with different qualifiers ("Dimensions (W x H)" then
    "Dimensions (D)") and the values are not rival measurements of the
    same kind.
    """
    if values_equal(first.value, second.value):
        return False
    if _has_joining_token(first, second):
        return True
    if first.normalized_key == second.normalized_key or first.base_key != second.base_key:
        return False
    a, b = single_quantity(first.value), single_quantity(second.value)
    if a and b and a.kind == b.kind:
        return False
    return True


def _merge_chain(selected: Candidate, candidates: list[Candidate]) -> list[Candidate]:
    """Contiguous same-tier fragments around the selected candidate, in line order."""
    tier = tier_for(selected.confidence)
    peers = sorted(
        (c for c in candidates if tier_for(c.confidence) == tier),
        key=lambda c: c.pair_index
    )
    position = peers.index(selected)

    chain = [selected]
    i = position
    while i > 0:
        before, current = peers[i - 1], peers[i]
        if current.pair_index - before.pair_index != 1 or not is_continuation(before, current):
            break
        chain.insert(0, before)
        i -= 1
    i = position
    while i + 1 < len(peers):
        current, after = peers[i], peers[i + 1]
        if after.pair_index - current.pair_index != 1 or not is_continuation(current, after):
            break
        chain.append(after)
        i += 1
    return chain


def _join_values(chain: list[Candidate]) -> str:
    value = chain[0].value
    for previous, current in zip(chain, chain[1:]):
        separator = " " if _has_joining_token(previous, current) else ", "
        value = value + separator + current.value
    return value


def _alternatives(candidates: list[Candidate], exclude: list[Candidate]) -> list[Alternative]:
    excluded = {id(c) for c in exclude}
    return [
        Alternative(
            value=c.value,
            confidence=c.confidence,
            source_key=c.source_key,
            line_index=c.line_index
        )
        for c in sorted(candidates, key=_sort_key)
        if id(c) not in excluded
    ]


def validate_field_value(spec_name: str, value: Optional[str]) -> Optional[str]:
    """
    Range check for well-known fields.

    Returns a warning string when the first number in the value falls
    outside the plausible range, else None. Never raises.
    """
    name = normalize_key(strip_unit_qualifier(spec_name))
    rule = VALUE_RANGES.get(name)
    if not rule or not value:
        return None

    quantity = first_quantity(value)
    if quantity is None:
        return None

    amount = quantity.amount
    range_unit = RANGE_UNITS.get(name)
    if range_unit and quantity.unit:
        try:
            amount = convert(amount, quantity.unit, range_unit)
        except ValueError:
            return None

    minimum, maximum, warning = rule
    if minimum is not None and amount < minimum:
        return warning
    if maximum is not None and amount > maximum:
        return warning
    return None


def resolve_field(spec_name: str, candidates: list[Candidate]) -> FieldMatch:
    """Collapse one field's candidates into a FieldMatch."""
    ordered = sorted(candidates, key=_sort_key)
    selected = ordered[0]

    chain = _merge_chain(selected, candidates)
    if len(chain) > 1:
        value = _join_values(chain)
        confidence = round(sum(c.confidence for c in chain) / len(chain))
        source_key = " + ".join(c.source_key for c in chain)
        line_index = chain[0].line_index
        merged_count = len(chain)
        chosen_values = [c.value for c in chain]
        logger.debug("field_merged", spec_name=spec_name, merged_count=merged_count)
    else:
        value = selected.value
        confidence = selected.confidence
        source_key = selected.source_key
        line_index = selected.line_index
        merged_count = None
        chosen_values = [selected.value]

    tier = tier_for(selected.confidence)
    has_conflict = any(
        tier_for(c.confidence) == tier
        and not any(values_equal(c.value, v) for v in chosen_values)
        for c in ordered
        if c not in chain
    )

    return FieldMatch(
        spec_name=spec_name,
        value=value,
        confidence=confidence,
        source_key=source_key,
        line_index=line_index,
        alternatives=_alternatives(ordered, chain),
        has_conflict=has_conflict,
        merged_count=merged_count,
        validation_warning=validate_field_value(spec_name, value),
        tier=selected.tier,
    )


def resolve(grouped: dict[str, list[Candidate]]) -> dict[str, FieldMatch]:
    """
    Resolve every field's candidates.

    Args:
        grouped: spec name -> candidates (MatchOutcome.grouped())

    Returns:
        spec name -> FieldMatch, in the same order
    """
    fields = {}
    for spec_name, candidates in grouped.items():
        if candidates:
            fields[spec_name] = resolve_field(spec_name, candidates)

    conflicts = [name for name, m in fields.items() if m.has_conflict]
    if conflicts:
        logger.debug("field_conflicts", fields=conflicts)
    return fields
