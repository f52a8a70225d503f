"""
Diff a fresh parse against an item's stored specs.
"""

from typing import Optional
import structlog

from models.smart_paste import DiffEntry, DiffStatus, FieldMatch
from utils.text_utils import values_equal

logger = structlog.get_logger(__name__)


def _present(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def diff_specs(
    existing_specs: Optional[dict[str, Optional[str]]],
    fresh_fields: Optional[dict[str, FieldMatch]]
) -> list[DiffEntry]:
    """
    Classify every field in either input.

    - unchanged: both present, equal ignoring case and surrounding whitespace
    - changed: both present, different
    - added: only the fresh parse has it
    - removed: only the stored specs have it

    Empty stored values count as absent. Order: stored field order, then
    fresh-only fields in parse order.

    Args:
        existing_specs: spec name -> stored value
        fresh_fields: ParseResult.fields

    Returns:
        List of DiffEntry
    """
    existing_specs = existing_specs or {}
    fresh_fields = fresh_fields or {}

    names = list(existing_specs.keys())
    names += [name for name in fresh_fields if name not in existing_specs]

    entries = []
    for spec_name in names:
        old_value = existing_specs.get(spec_name)
        fresh = fresh_fields.get(spec_name)
        new_value = fresh.value if fresh else None
        confidence = fresh.confidence if fresh else 0

        has_old, has_new = _present(old_value), _present(new_value)
        if has_old and has_new:
            status = DiffStatus.UNCHANGED if values_equal(old_value, new_value) else DiffStatus.CHANGED
        elif has_new:
            status = DiffStatus.ADDED
        elif has_old:
            status = DiffStatus.REMOVED
        else:
            continue

        entries.append(DiffEntry(
            spec_name=spec_name,
            status=status,
            old_value=old_value if has_old else None,
            new_value=new_value if has_new else None,
            confidence=confidence,
        ))

    logger.debug(
        "specs_diffed",
        total=len(entries),
        changed=sum(1 for e in entries if e.status == DiffStatus.CHANGED)
    )
    return entries


def diff_counts(entries: list[DiffEntry]) -> dict[str, int]:
    """Entries per status, every status present."""
    counts = {status.value: 0 for status in DiffStatus}
    for entry in entries:
        counts[entry.status.value] += 1
    return counts


def existing_specs_from_fields(fields: dict[str, FieldMatch]) -> dict[str, str]:
    """Stored-spec view of a parse, spec name -> selected value."""
    return {name: m.value for name, m in fields.items()}
