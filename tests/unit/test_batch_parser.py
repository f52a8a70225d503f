"""
Unit tests for the multi-product segmenter and batch parser.
"""

import pytest

from exceptions import EmptyInputError
from parsers.batch_parser import detect_product_boundaries, parse_batch_products
from parsers.smart_paste_parser import parse_product_text


# ===================
# SEGMENTATION TESTS
# ===================

class TestDetectProductBoundaries:
    """Tests for detect_product_boundaries."""

    def test_blank_input(self):
        assert detect_product_boundaries("") == []
        assert detect_product_boundaries("  \n \n") == []
        assert detect_product_boundaries(None) == []

    def test_single_segment_default_name(self):
        segments = detect_product_boundaries("Weight: 700 g\nSensor Type: CMOS")
        assert len(segments) == 1
        assert segments[0].name == "Product 1"
        assert (segments[0].start_line, segments[0].end_line) == (0, 1)

    def test_single_segment_named_by_name_line(self):
        segments = detect_product_boundaries("Name: Solo Cam\nWeight: 700 g")
        assert [s.name for s in segments] == ["Solo Cam"]

    def test_rule_split(self):
        """A horizontal rule separates products and belongs to neither."""
        text = "Name: First Camera\nWeight: 700 g\n---\nName: Second Camera\nWeight: 650 g"
        segments = detect_product_boundaries(text)

        assert [s.name for s in segments] == ["First Camera", "Second Camera"]
        assert segments[0].text == "Name: First Camera\nWeight: 700 g"
        assert segments[1].text == "Name: Second Camera\nWeight: 650 g"
        assert (segments[1].start_line, segments[1].end_line) == (3, 4)
        assert all("---" not in s.text for s in segments)

    def test_heading_split(self):
        """Headings split once the segment spans enough lines."""
        text = (
            "# Canon R5\nSensor Type: Full-frame\nWeight: 738 g\n"
            "# Sony A1\nSensor Type: Stacked CMOS\nWeight: 737 g"
        )
        segments = detect_product_boundaries(text)

        assert [s.name for s in segments] == ["Canon R5", "Sony A1"]
        assert segments[1].start_line == 3

    def test_blank_run_split(self):
        """Two blank lines start a new product; a brand title names it."""
        text = (
            "Sony FX3 cinema camera body\nWeight: 715 g\n\n\n"
            "Canon C70 cinema camera\nWeight: 1170 g"
        )
        segments = detect_product_boundaries(text)

        assert [s.name for s in segments] == ["Product 1", "Canon C70 cinema camera"]
        assert segments[1].text == "Canon C70 cinema camera\nWeight: 1170 g"

    def test_short_segment_folded_forward(self):
        """Too-short segments join the following one."""
        text = "Name: Tiny\n---\nName: Big product\nSensor Type: Full-frame CMOS"
        segments = detect_product_boundaries(text)

        assert len(segments) == 1
        assert segments[0].name == "Big product"
        assert segments[0].start_line == 0
        assert segments[0].text == "Name: Tiny\nName: Big product\nSensor Type: Full-frame CMOS"

    def test_short_last_segment_folded_back(self):
        text = "Name: Big product\nSensor Type: Full-frame CMOS\n---\nWeight: 5 g"
        segments = detect_product_boundaries(text)

        assert len(segments) == 1
        assert segments[0].end_line == 3
        assert segments[0].text == "Name: Big product\nSensor Type: Full-frame CMOS\nWeight: 5 g"


# ===================
# BATCH PARSE TESTS
# ===================

class TestParseBatchProducts:
    """Tests for parse_batch_products."""

    FIRST = "Name: First Camera\nSensor Type: Full-frame CMOS\nWeight: 700 g"
    SECOND = "Name: Second Camera\nSensor Type: APS-C CMOS\nWeight: 650 g"

    def test_segments_parse_like_standalone_text(self, general_catalog):
        """Each segment parses exactly as its text would alone."""
        items = parse_batch_products(self.FIRST + "\n---\n" + self.SECOND, catalog=general_catalog)

        assert len(items) == 2
        assert items[0].result == parse_product_text(self.FIRST, catalog=general_catalog)
        assert items[1].result == parse_product_text(self.SECOND, catalog=general_catalog)
        assert items[1].result.fields["Weight"].value == "650 g"

    def test_conflicts_stay_in_their_segment(self, general_catalog):
        text = "Price: $100\nPrice: $150\nWeight: 738 g\n---\nPrice: $200\nWeight: 700 g"
        items = parse_batch_products(text, catalog=general_catalog)

        assert items[0].result.fields["Price"].has_conflict is True
        assert items[1].result.fields["Price"].has_conflict is False
        assert items[1].result.fields["Price"].value == "$200"

    def test_aliases_apply_to_every_segment(self, general_catalog):
        text = "Mfr: Sony\nWeight: 700 g\n---\nMfr: Canon\nWeight: 650 g"
        items = parse_batch_products(text, catalog=general_catalog, aliases={"mfr": "Brand"})
        assert [i.result.fields["Brand"].value for i in items] == ["Sony", "Canon"]

    def test_single_product(self, general_catalog):
        items = parse_batch_products(self.FIRST, catalog=general_catalog)
        assert len(items) == 1
        assert items[0].segment.name == "First Camera"

    @pytest.mark.parametrize("text", ["", "   \n  ", None])
    def test_blank_input(self, text):
        with pytest.raises(EmptyInputError):
            parse_batch_products(text)
