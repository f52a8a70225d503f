"""
Session-scoped alias learner.

Remembers which raw source key a reviewer mapped to which spec field, so
later parses in the same session hit the alias tier directly. Entries are
keyed by the normalized source key; recording the same key again
overwrites it. Nothing is persisted: a new session starts empty.

Single writer assumed (one reviewer per session).
"""

from datetime import datetime, timezone
from typing import Optional
import structlog

from exceptions import AliasNotFoundError, UnknownSpecFieldError, ValidationError
from models.smart_paste import AliasRecord, SpecCatalog
from utils.text_utils import normalize_key

logger = structlog.get_logger(__name__)


class AliasStore:
    """In-memory alias records for one session."""

    def __init__(self):
        self._records: dict[str, AliasRecord] = {}

    def record(
        self,
        source_key: str,
        spec_name: str,
        category: Optional[str] = None,
        catalog: Optional[SpecCatalog] = None
    ) -> AliasRecord:
        """
        Learn (or re-confirm) a source key -> spec field mapping.

        Recording a key again overwrites its record and timestamp.

        Args:
            source_key: Raw key as it appeared in the pasted text
            spec_name: Catalog field the reviewer chose
            category: Item category at the time, for context
            catalog: When given, spec_name must be one of its fields

        Raises:
            ValidationError: Blank source key
            UnknownSpecFieldError: spec_name is not in the catalog
        """
        key = normalize_key(source_key)
        if not key:
            raise ValidationError(
                message="Source key is empty after normalization",
                code="INVALID_SOURCE_KEY",
                details={"source_key": source_key}
            )
        if catalog is not None and not catalog.has_field(spec_name):
            raise UnknownSpecFieldError(spec_name)

        existing = self._records.get(key)
        record = AliasRecord(
            source_key=key,
            spec_name=spec_name,
            confirmed_at=datetime.now(timezone.utc),
            category=category,
        )
        self._records[key] = record

        logger.info(
            "alias_recorded",
            source_key=key,
            spec_name=spec_name,
            replaced=existing is not None and existing.spec_name != spec_name
        )
        return record

    def lookup(self, source_key: str) -> Optional[AliasRecord]:
        return self._records.get(normalize_key(source_key))

    def as_mapping(self) -> dict[str, str]:
        """Normalized source key -> spec name, for the field matcher."""
        return {key: record.spec_name for key, record in self._records.items()}

    def records(self) -> list[AliasRecord]:
        """All records, most recently confirmed first."""
        return sorted(self._records.values(), key=lambda r: r.confirmed_at, reverse=True)

    def forget(self, source_key: str) -> AliasRecord:
        """
        Remove one alias.

        Raises:
            AliasNotFoundError: Nothing learned for this key
        """
        key = normalize_key(source_key)
        record = self._records.pop(key, None)
        if record is None:
            raise AliasNotFoundError(source_key)
        logger.info("alias_forgotten", source_key=key, spec_name=record.spec_name)
        return record

    def clear(self) -> int:
        """Drop every alias. Returns how many were removed."""
        count = len(self._records)
        self._records.clear()
        if count:
            logger.info("aliases_cleared", count=count)
        return count

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, source_key: str) -> bool:
        return normalize_key(source_key) in self._records


# Session singleton
_alias_store: Optional[AliasStore] = None


def get_alias_store() -> AliasStore:
    """Get or create the session AliasStore."""
    global _alias_store
    if _alias_store is None:
        _alias_store = AliasStore()
    return _alias_store


def reset_alias_store() -> None:
    """End the session: the next get_alias_store() starts empty."""
    global _alias_store
    _alias_store = None


def record_alias(
    source_key: str,
    spec_name: str,
    category: Optional[str] = None,
    catalog: Optional[SpecCatalog] = None
) -> AliasRecord:
    """Record an alias in the session store."""
    return get_alias_store().record(source_key, spec_name, category, catalog)
