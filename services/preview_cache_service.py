"""
Temporary storage for parse previews.
Stores parse results in memory with TTL expiration so a caller can
diff or apply by preview_id after reviewing.
Single-server only (one reviewer per session).
"""
import uuid
from datetime import datetime, timedelta
from typing import Optional
import structlog

from config import settings
from exceptions import PreviewNotFoundError
from models.smart_paste import ParseResult

logger = structlog.get_logger(__name__)

_cache: dict[str, tuple[datetime, ParseResult]] = {}


def store_preview(data: ParseResult, ttl_minutes: Optional[int] = None) -> str:
    """Store a parse result, return preview_id."""
    ttl = ttl_minutes if ttl_minutes is not None else settings.preview_ttl_minutes
    preview_id = str(uuid.uuid4())
    expires_at = datetime.now() + timedelta(minutes=ttl)
    _cache[preview_id] = (expires_at, data)
    _cleanup_expired()
    logger.debug("preview_stored", preview_id=preview_id, ttl_minutes=ttl)
    return preview_id


def retrieve_preview(preview_id: str) -> Optional[ParseResult]:
    """Retrieve a parse result by preview_id. Returns None if expired/not found."""
    entry = _cache.get(preview_id)
    if entry is None:
        return None
    expires_at, data = entry
    if datetime.now() > expires_at:
        del _cache[preview_id]
        logger.debug("preview_expired", preview_id=preview_id)
        return None
    return data


def get_preview(preview_id: str) -> ParseResult:
    """
    Like retrieve_preview, but raises when missing.

    Raises:
        PreviewNotFoundError: Unknown or expired preview_id
    """
    data = retrieve_preview(preview_id)
    if data is None:
        raise PreviewNotFoundError(preview_id)
    return data


def delete_preview(preview_id: str) -> bool:
    """Remove preview after apply or cancel. Returns whether it existed."""
    return _cache.pop(preview_id, None) is not None


def clear_previews() -> None:
    _cache.clear()


def _cleanup_expired() -> None:
    """Remove all expired entries."""
    now = datetime.now()
    expired = [k for k, (exp, _) in _cache.items() if now > exp]
    for k in expired:
        del _cache[k]
