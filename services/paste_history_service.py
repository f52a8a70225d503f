"""
Recent parses for the session.

Keeps the last N pasted texts (settings.paste_history_size) so a reviewer
can re-run one. Newest first; pasting the same text again moves it to the
front instead of adding a duplicate.
"""

from datetime import datetime, timezone
from typing import Optional
import structlog

from config import settings
from models.smart_paste import ParseResult, PasteHistoryEntry

logger = structlog.get_logger(__name__)

PREVIEW_CHARS = 100
MAX_FULL_TEXT_CHARS = 50_000


def make_preview(text: str) -> str:
    """Single-line preview of a pasted text."""
    flat = " ".join(text.split())
    if len(flat) <= PREVIEW_CHARS:
        return flat
    return flat[:PREVIEW_CHARS].rstrip() + "..."


class PasteHistory:
    """Bounded, deduplicated list of recent parses."""

    def __init__(self, max_entries: Optional[int] = None):
        self.max_entries = max_entries or settings.paste_history_size
        self._entries: list[PasteHistoryEntry] = []

    def add(self, text: str, result: Optional[ParseResult] = None) -> Optional[PasteHistoryEntry]:
        """
        Remember a parsed text.

        Returns:
            The new entry, or None for blank text
        """
        if not text or not text.strip():
            return None

        preview = make_preview(text)
        entry = PasteHistoryEntry(
            preview=preview,
            full_text=text[:MAX_FULL_TEXT_CHARS],
            name=result.name if result else "",
            matched_count=result.matched_count if result else 0,
            created_at=datetime.now(timezone.utc),
        )

        self._entries = [e for e in self._entries if e.preview != preview]
        self._entries.insert(0, entry)
        del self._entries[self.max_entries:]

        logger.debug("paste_history_added", preview=preview[:40], size=len(self._entries))
        return entry

    def entries(self) -> list[PasteHistoryEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


# Session singleton
_paste_history: Optional[PasteHistory] = None


def get_paste_history() -> PasteHistory:
    """Get or create the session PasteHistory."""
    global _paste_history
    if _paste_history is None:
        _paste_history = PasteHistory()
    return _paste_history


def reset_paste_history() -> None:
    global _paste_history
    _paste_history = None
