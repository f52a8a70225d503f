"""
Build the payload a caller writes into the item record.

Pure: the parse result is never modified and no state is kept, so the same
inputs always produce an equal payload.
"""

from typing import Optional

from models.smart_paste import ApplyPayload, FieldMatch, ParseResult, TopLevelOverrides

# Top-level attributes a reviewer can edit
TOP_LEVEL_FIELDS = (
    "name",
    "brand",
    "category",
    "purchase_price",
    "price_note",
    "model_number",
    "serial_number",
)


def _selected_value(
    field_match: FieldMatch,
    normalize_metric: bool,
    apply_coercion: bool
) -> str:
    value = field_match.value
    if normalize_metric and field_match.unit_info:
        value = field_match.unit_info.normalized
    # Coercion was computed against the raw value; skip it once units changed it
    if apply_coercion and field_match.coercion and value == field_match.coercion.original:
        value = field_match.coercion.coerced
    return value


def _top_level(result: ParseResult, top_level: Optional[TopLevelOverrides]) -> dict:
    values = {name: getattr(result, name) for name in TOP_LEVEL_FIELDS}
    if top_level is None:
        return values

    for name in TOP_LEVEL_FIELDS:
        override = getattr(top_level, name)
        if override is None:
            continue
        if isinstance(override, str) and not override.strip():
            # Explicitly cleared
            values[name] = "" if name == "name" else None
        else:
            values[name] = override
    return values


def build_apply_payload(
    result: ParseResult,
    overrides: Optional[dict[str, str]] = None,
    top_level: Optional[TopLevelOverrides] = None,
    manual_mappings: Optional[dict[str, str]] = None,
    normalize_metric: bool = False,
    apply_coercion: bool = False
) -> ApplyPayload:
    """
    Merge a parse result with the reviewer's edits.

    Args:
        result: Parse result (unchanged by this call)
        overrides: spec name -> chosen value; empty/whitespace drops the field
        top_level: Edits to name, brand, category, price and identifiers
        manual_mappings: spec name -> value for unmatched pairs the reviewer
            mapped by hand; only fills fields the parse did not produce
        normalize_metric: Adopt each field's unit suggestion
        apply_coercion: Adopt each field's type coercion suggestion

    Returns:
        ApplyPayload
    """
    overrides = overrides or {}
    manual_mappings = manual_mappings or {}

    specs: dict[str, str] = {}
    for spec_name, field_match in result.fields.items():
        if spec_name in overrides:
            override = overrides[spec_name]
            if override is None or not override.strip():
                continue
            specs[spec_name] = override.strip()
        else:
            specs[spec_name] = _selected_value(field_match, normalize_metric, apply_coercion)

    for spec_name, value in manual_mappings.items():
        if spec_name in result.fields or spec_name in specs:
            continue
        if value and value.strip():
            specs[spec_name] = value.strip()

    return ApplyPayload(specs=specs, **_top_level(result, top_level))
