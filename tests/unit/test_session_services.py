"""
Unit tests for the preview cache and paste history.
"""

import pytest

from exceptions import PreviewNotFoundError
from models.smart_paste import ParseResult
from services.paste_history_service import (
    PasteHistory,
    make_preview,
    get_paste_history,
    reset_paste_history,
)
from services.preview_cache_service import (
    store_preview,
    retrieve_preview,
    get_preview,
    delete_preview,
)


# ===================
# PREVIEW CACHE TESTS
# ===================

class TestPreviewCache:
    """Tests for the preview cache."""

    def test_store_and_retrieve(self):
        result = ParseResult(name="Sony FX3")
        preview_id = store_preview(result)

        assert retrieve_preview(preview_id) == result
        assert get_preview(preview_id).name == "Sony FX3"

    def test_unknown_preview(self):
        assert retrieve_preview("missing") is None
        with pytest.raises(PreviewNotFoundError):
            get_preview("missing")

    def test_expired_preview(self):
        preview_id = store_preview(ParseResult(), ttl_minutes=-1)
        assert retrieve_preview(preview_id) is None

    def test_delete(self):
        preview_id = store_preview(ParseResult())
        assert delete_preview(preview_id) is True
        assert delete_preview(preview_id) is False
        assert retrieve_preview(preview_id) is None


# ===================
# PASTE HISTORY TESTS
# ===================

class TestMakePreview:
    def test_flattens_whitespace(self):
        assert make_preview("Weight:  738 g\nColor:\tBlack") == "Weight: 738 g Color: Black"

    def test_truncates_long_text(self):
        preview = make_preview("x" * 150)
        assert preview == "x" * 100 + "..."


class TestPasteHistory:
    """Tests for PasteHistory."""

    def test_newest_first(self):
        history = PasteHistory(max_entries=5)
        history.add("Weight: 738 g")
        history.add("Color: Black")
        assert [e.preview for e in history.entries()] == ["Color: Black", "Weight: 738 g"]

    def test_duplicate_moves_to_front(self):
        history = PasteHistory(max_entries=5)
        history.add("Weight: 738 g")
        history.add("Color: Black")
        history.add("Weight:  738 g")

        assert len(history) == 2
        assert history.entries()[0].full_text == "Weight:  738 g"

    def test_bounded(self):
        history = PasteHistory(max_entries=2)
        for text in ("one text", "two text", "three text"):
            history.add(text)
        assert [e.preview for e in history.entries()] == ["three text", "two text"]

    def test_blank_text_ignored(self):
        history = PasteHistory(max_entries=2)
        assert history.add("   ") is None
        assert len(history) == 0

    def test_result_summary_kept(self):
        history = PasteHistory(max_entries=2)
        entry = history.add("Name: Sony FX3", ParseResult(name="Sony FX3"))
        assert (entry.name, entry.matched_count) == ("Sony FX3", 0)

    def test_clear(self):
        history = PasteHistory(max_entries=2)
        history.add("Weight: 738 g")
        history.clear()
        assert history.entries() == []

    def test_session_singleton(self):
        get_paste_history().add("Weight: 738 g")
        assert len(get_paste_history()) == 1
        reset_paste_history()
        assert len(get_paste_history()) == 0
