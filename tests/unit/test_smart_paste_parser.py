"""
Unit tests for the single-product parser.

Covers the end-to-end scenarios: unit advice on a unit-qualified field,
equal-value duplicates, rival prices and learned aliases.
"""

import pytest

from exceptions import EmptyInputError
from models.smart_paste import ConfidenceTier, MatchTier, SourceKind
from parsers.smart_paste_parser import parse_product_text, as_catalog
from services.alias_store_service import get_alias_store, record_alias
from tests.factories import ProductTextFactory


# ===================
# SCENARIO TESTS
# ===================

class TestScenarios:
    """End-to-end parse scenarios."""

    def test_weight_unit_advice_and_brand(self, weight_kg_catalog):
        """A lbs weight against a kg field gets a kg suggestion."""
        result = parse_product_text(
            "Brand: Canon\nModel: EOS R5\nWeight: 1.4 lbs",
            catalog=weight_kg_catalog
        )

        assert list(result.fields.keys()) == ["Weight (kg)"]
        weight = result.fields["Weight (kg)"]
        assert weight.value == "1.4 lbs"
        assert weight.unit_info is not None
        assert weight.unit_info.normalized == "0.635 kg"
        assert weight.confidence_tier in (ConfidenceTier.DIRECT, ConfidenceTier.LIKELY)
        assert result.brand == "Canon"
        assert result.model_number == "EOS R5"

    def test_equal_duplicates_do_not_conflict(self, general_catalog):
        """Color and Colour with the same value give one match and one alternative."""
        result = parse_product_text("Color: Black\nColour: Black", catalog=general_catalog)

        color = result.fields["Color"]
        assert color.value == "Black"
        assert color.has_conflict is False
        assert len(color.alternatives) == 1

    def test_rival_prices_conflict(self, general_catalog):
        """Both prices survive, one selected and one as an alternative."""
        result = parse_product_text("Price: $100\nPrice: $150", catalog=general_catalog)

        price = result.fields["Price"]
        assert price.has_conflict is True
        values = {price.value} | {a.value for a in price.alternatives}
        assert values == {"$100", "$150"}
        assert result.conflict_count == 1

    def test_learned_alias_used(self, general_catalog):
        """An alias learned earlier places the key at the alias tier."""
        before = parse_product_text("Mfr: Sony", catalog=general_catalog)
        assert "Brand" not in before.fields
        assert [p.key for p in before.unmatched_pairs] == ["Mfr"]

        record_alias("Mfr", "Brand")
        result = parse_product_text(
            "Mfr: Sony",
            catalog=general_catalog,
            aliases=get_alias_store().as_mapping()
        )

        brand = result.fields["Brand"]
        assert brand.value == "Sony"
        assert brand.confidence == 95
        assert brand.tier == MatchTier.ALIAS
        assert result.unmatched_pairs == []


# ===================
# INVARIANT TESTS
# ===================

class TestParseInvariants:
    """Properties every parse keeps."""

    TEXT = (
        "Sony a7 IV Mirrorless Camera\n"
        "Sensor Type: 33MP Full-frame Exmor R BSI CMOS\n"
        "Megapixels: 33\n"
        "Mount Type: Sony E\n"
        "Weather Sealing: Yes\n"
        "Warranty: 1 year\n"
        "Weight: 658 g\n"
        "Wt: 1.45 lb\n"
        "Price: $2,499.99"
    )

    def test_line_index_points_at_source_line(self, general_catalog):
        result = parse_product_text(self.TEXT, catalog=general_catalog)
        for pair in result.raw_extracted:
            assert result.source_lines[pair.line_index] == pair.source_line
        for field_match in result.fields.values():
            assert 0 <= field_match.line_index < len(result.source_lines)

    def test_raw_extracted_in_line_order_and_stable(self, general_catalog):
        first = parse_product_text(self.TEXT, catalog=general_catalog)
        second = parse_product_text(self.TEXT, catalog=general_catalog)

        indexes = [p.line_index for p in first.raw_extracted]
        assert indexes == sorted(indexes)
        assert first.raw_extracted == second.raw_extracted
        assert first == second

    def test_confidence_bounds_and_alternative_order(self, general_catalog):
        result = parse_product_text(self.TEXT, catalog=general_catalog)
        for field_match in result.fields.values():
            assert 0 <= field_match.confidence <= 100
            confidences = [a.confidence for a in field_match.alternatives]
            assert confidences == sorted(confidences, reverse=True)

    def test_fields_only_from_catalog(self, general_catalog):
        result = parse_product_text(self.TEXT, catalog=general_catalog)
        assert all(general_catalog.has_field(name) for name in result.fields)

    def test_every_pair_matched_or_unmatched(self, general_catalog):
        result = parse_product_text(self.TEXT, catalog=general_catalog)
        assert [p.key for p in result.unmatched_pairs] == ["Warranty"]

    def test_top_level_attributes(self, general_catalog):
        result = parse_product_text(self.TEXT, catalog=general_catalog)
        assert result.name == "Sony a7 IV Mirrorless Camera"
        assert result.brand == "Sony"
        assert result.category == "Cameras"
        assert result.purchase_price == 2499.99


# ===================
# PARSER BEHAVIOUR TESTS
# ===================

class TestParseProductText:
    """Tests for parse_product_text."""

    def test_default_catalog(self):
        """Without a catalog the built-in gear catalog is used."""
        result = parse_product_text("Sensor Type: Full-frame CMOS\nLens Mount: Canon RF")
        assert "Sensor Type" in result.fields
        assert "Lens Mount" in result.fields

    def test_plain_dict_catalog(self):
        result = parse_product_text("Polar Pattern: Cardioid", catalog={"Audio": ["Polar Pattern"]})
        assert result.fields["Polar Pattern"].value == "Cardioid"

    def test_boolean_coercion_advice(self, general_catalog):
        result = parse_product_text("Weather Sealing: Included", catalog=general_catalog)
        coercion = result.fields["Weather Sealing"].coercion
        assert coercion.coerced == "Yes"
        assert result.fields["Weather Sealing"].value == "Included"

    def test_html_rendering(self, general_catalog):
        html = (
            "<table><tr><td>Brand</td><td>Nikon</td></tr>"
            "<tr><td>Mount Type</td><td>Nikon Z</td></tr></table>"
        )
        result = parse_product_text("Brand Nikon Mount Type Nikon Z", catalog=general_catalog, html=html)
        assert result.fields["Mount Type"].value == "Nikon Z"
        assert result.source_lines == ["Brand\tNikon", "Mount Type\tNikon Z"]

    def test_empty_input(self, general_catalog):
        with pytest.raises(EmptyInputError):
            parse_product_text("   ", catalog=general_catalog, source_kind=SourceKind.URL)

    def test_text_without_pairs(self, general_catalog):
        """Free text still parses, with no fields."""
        result = parse_product_text("A lovely little camera for travel", catalog=general_catalog)
        assert result.fields == {}
        assert result.raw_extracted == []

    def test_fields_above_threshold(self, general_catalog):
        result = parse_product_text("Weight: 738 g\nFocal Lengths: 24-70mm", catalog=general_catalog)
        assert set(result.fields) == {"Weight", "Focal Length"}
        assert set(result.fields_above(60)) == {"Weight"}
        assert set(result.fields_above(40)) == {"Weight", "Focal Length"}

    def test_fields_for_category(self, general_catalog):
        """Category filter keeps the category's fields and direct matches."""
        result = parse_product_text("Brand: Canon\nFocal Lengths: 24-70mm", catalog=general_catalog)
        visible = result.fields_for_category(general_catalog, "Cameras")
        assert "Brand" in visible
        assert "Focal Length" not in visible
        assert set(result.fields_for_category(general_catalog, "Unknown")) == set(result.fields)

    def test_factory_text(self, general_catalog):
        text = ProductTextFactory.create(name="Canon EOS R5")
        result = parse_product_text(text, catalog=general_catalog)
        assert result.name == "Canon EOS R5"
        assert result.fields["Weight"].value == "738 g"

    def test_as_catalog(self, general_catalog):
        assert as_catalog(general_catalog) is general_catalog
        assert "Cameras" in as_catalog(None).categories
