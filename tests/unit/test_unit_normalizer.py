"""
Unit tests for unit normalization and type coercion.
"""

import pytest

from models.smart_paste import FieldType, Unit
from parsers.unit_normalizer import (
    normalize_units,
    coerce_field_value,
    infer_field_type,
    parse_number,
    format_amount,
    convert,
    single_quantity,
)


# ===================
# HELPER TESTS
# ===================

class TestHelpers:
    """Tests for number and unit helpers."""

    @pytest.mark.parametrize("text,expected", [
        ("1,299", 1299.0),
        ("1.4", 1.4),
        ("1,4", 1.4),
        ("1,299.50", 1299.5),
        ("abc", None),
    ])
    def test_parse_number(self, text, expected):
        assert parse_number(text) == expected

    def test_format_amount_drops_trailing_zeros(self):
        assert format_amount(0.63502932, "kg") == "0.635"
        assert format_amount(635.029, "g") == "635"
        assert format_amount(14.0, "°F") == "14"

    def test_convert(self):
        assert convert(1, "in", "mm") == pytest.approx(25.4)
        assert convert(1000, "g", "kg") == pytest.approx(1.0)
        assert convert(212, "°F", "°C") == pytest.approx(100.0)

    def test_convert_incompatible(self):
        with pytest.raises(ValueError):
            convert(1, "kg", "mm")

    def test_single_quantity(self):
        quantity = single_quantity("1.4 lbs")
        assert (quantity.amount, quantity.unit, quantity.kind) == (1.4, "lb", "weight")
        assert single_quantity("$100").kind == "currency"
        assert single_quantity("6.5 x 4.3 in") is None


# ===================
# UNIT NORMALIZATION TESTS
# ===================

class TestNormalizeUnits:
    """Tests for normalize_units."""

    def test_field_unit_target(self):
        """The field's unit decides the conversion."""
        suggestion = normalize_units("1.4 lbs", prefer_metric=True, target_unit="kg")
        assert suggestion.normalized == "0.635 kg"
        assert suggestion.original == "1.4 lbs"
        assert suggestion.unit == "kg"

    def test_unit_enum_target(self):
        suggestion = normalize_units("1.4 lbs", target_unit=Unit.KG)
        assert suggestion.normalized == "0.635 kg"

    def test_metric_preference(self):
        """Small imperial weights become grams."""
        assert normalize_units("1.4 lbs").normalized == "635 g"

    def test_imperial_preference(self):
        assert normalize_units("738 g", prefer_metric=False).normalized == "1.63 lb"

    def test_already_preferred_system(self):
        """Nothing to suggest when the value is already in the preferred system."""
        assert normalize_units("738 g", prefer_metric=True) is None

    def test_compound_weight(self):
        assert normalize_units("1 lb 5 oz").normalized == "595 g"

    def test_dimensions(self):
        suggestion = normalize_units("6.5 x 4.3 x 3.1 in")
        assert suggestion.normalized == "165.1 × 109.2 × 78.7 mm"
        assert suggestion.unit == "mm"

    def test_temperature(self):
        assert normalize_units("-10°C", prefer_metric=False).normalized == "14 °F"
        assert normalize_units("32°F").normalized == "0 °C"

    def test_target_of_other_kind(self):
        assert normalize_units("738 g", target_unit="mm") is None

    @pytest.mark.parametrize("value", ["Black", "", None, "4K 60p"])
    def test_no_unit(self, value):
        """Values without a unit get no suggestion."""
        assert normalize_units(value) is None


# ===================
# TYPE COERCION TESTS
# ===================

class TestCoerceFieldValue:
    """Tests for coerce_field_value."""

    def test_boolean_from_catalog_type(self):
        suggestion = coerce_field_value("Sealed", "Included", FieldType.BOOLEAN)
        assert (suggestion.original, suggestion.coerced) == ("Included", "Yes")
        assert suggestion.expected_type == FieldType.BOOLEAN

    def test_boolean_inferred_from_name(self):
        assert coerce_field_value("Weather Sealing", "N/A").coerced == "No"

    def test_boolean_already_canonical(self):
        assert coerce_field_value("Weather Sealing", "Yes") is None

    def test_number(self):
        assert coerce_field_value("Street", "$1,299.00", FieldType.NUMBER).coerced == "1299.00"

    def test_price_inferred_number(self):
        assert coerce_field_value("Price", "$100").coerced == "100"

    def test_integer(self):
        assert coerce_field_value("Diaphragm Blades", "9 blades", FieldType.INTEGER).coerced == "9"
        assert coerce_field_value("Diaphragm Blades", "9.5", FieldType.INTEGER) is None

    def test_cct_range(self):
        assert coerce_field_value("Color Temperature", "2700K-6500K").coerced == "2700–6500 K"

    def test_aperture(self):
        assert coerce_field_value("Maximum Aperture", "2.8").coerced == "f/2.8"
        assert coerce_field_value("Maximum Aperture", "f/2.8") is None

    @pytest.mark.parametrize("spec_name,value", [
        ("Sensor Type", "CMOS"),
        ("Weather Sealing", ""),
        ("", "Yes"),
        ("Weather Sealing", None),
    ])
    def test_nothing_to_coerce(self, spec_name, value):
        assert coerce_field_value(spec_name, value) is None

    def test_infer_field_type(self):
        assert infer_field_type("Weather Sealing") == FieldType.BOOLEAN
        assert infer_field_type("MSRP") == FieldType.NUMBER
        assert infer_field_type("Sensor Type") is None
