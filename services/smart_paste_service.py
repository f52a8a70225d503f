"""
Smart Paste service.

Wires the parser pipeline to its session collaborators: the alias store
feeds learned aliases into every parse, parse results are cached as
previews for later diff/apply, and each single-product parse lands in the
paste history.
"""

from typing import Optional
import structlog

from config import settings
from exceptions import UnknownSpecFieldError
from models.smart_paste import (
    AliasRecord,
    ApplyPayload,
    ApplyRequest,
    BatchItemResponse,
    ConfidenceMode,
    DiffEntry,
    ParseResponse,
    ParseResult,
    SourceKind,
    SpecCatalog,
)
from parsers.batch_parser import parse_batch_products
from parsers.smart_paste_parser import CatalogInput, as_catalog, parse_product_text
from services.alias_store_service import AliasStore, get_alias_store
from services.apply_payload_service import build_apply_payload
from services.file_reader_service import read_file
from services.page_fetch_service import fetch_product_page
from services.paste_history_service import PasteHistory, get_paste_history
from services.preview_cache_service import delete_preview, get_preview, store_preview
from services.spec_diff_service import diff_specs

logger = structlog.get_logger(__name__)


class SmartPasteService:
    """
    Smart Paste orchestration.

    Parsing is synchronous; file reading and page fetching happen first,
    then the text goes through the same pipeline as a paste.
    """

    def __init__(
        self,
        alias_store: Optional[AliasStore] = None,
        history: Optional[PasteHistory] = None
    ):
        self._alias_store = alias_store
        self._history = history

    @property
    def alias_store(self) -> AliasStore:
        """Injected store, else whatever the current session store is."""
        return self._alias_store if self._alias_store is not None else get_alias_store()

    @property
    def history(self) -> PasteHistory:
        return self._history if self._history is not None else get_paste_history()

    # ===================
    # PARSING
    # ===================

    def _prefer_metric(self, prefer_metric: Optional[bool]) -> bool:
        return settings.prefer_metric if prefer_metric is None else prefer_metric

    def parse_text(
        self,
        text: str,
        html: Optional[str] = None,
        catalog: CatalogInput = None,
        prefer_metric: Optional[bool] = None,
        source_kind: SourceKind = SourceKind.PASTE
    ) -> tuple[str, ParseResult]:
        """
        Parse one product and cache the result.

        Returns:
            (preview_id, ParseResult)

        Raises:
            EmptyInputError: Nothing to parse
        """
        result = parse_product_text(
            text,
            catalog=as_catalog(catalog),
            aliases=self.alias_store.as_mapping(),
            prefer_metric=self._prefer_metric(prefer_metric),
            html=html,
            source_kind=source_kind
        )
        preview_id = store_preview(result)
        self.history.add(text or "\n".join(result.source_lines), result)
        return preview_id, result

    def parse_file(
        self,
        content: bytes,
        filename: str,
        catalog: CatalogInput = None,
        prefer_metric: Optional[bool] = None
    ) -> tuple[str, ParseResult]:
        """
        Read an uploaded file and parse it.

        Raises:
            UnsupportedFileTypeError: Image or unknown extension
            FileReadError: Undecodable or corrupt file
            EmptyInputError: File had no text
        """
        text = read_file(content, filename)
        return self.parse_text(text, catalog=catalog, prefer_metric=prefer_metric, source_kind=SourceKind.FILE)

    def parse_url(
        self,
        url: str,
        catalog: CatalogInput = None,
        prefer_metric: Optional[bool] = None
    ) -> tuple[str, ParseResult]:
        """
        Fetch a product page and parse it.

        Raises:
            PageFetchError: Proxy missing or fetch failed
            EmptyInputError: Page had no text
        """
        page = fetch_product_page(url)
        return self.parse_text(
            page.text,
            html=page.html or None,
            catalog=catalog,
            prefer_metric=prefer_metric,
            source_kind=SourceKind.URL
        )

    def parse_batch(
        self,
        text: str,
        catalog: CatalogInput = None,
        prefer_metric: Optional[bool] = None
    ) -> list[BatchItemResponse]:
        """Parse every product in a multi-product text; each segment gets its own preview."""
        items = parse_batch_products(
            text,
            catalog=as_catalog(catalog),
            aliases=self.alias_store.as_mapping(),
            prefer_metric=self._prefer_metric(prefer_metric)
        )
        return [
            BatchItemResponse(
                preview_id=store_preview(item.result),
                segment=item.segment,
                result=item.result
            )
            for item in items
        ]

    def build_parse_response(
        self,
        preview_id: str,
        result: ParseResult,
        confidence_mode: Optional[ConfidenceMode] = None
    ) -> ParseResponse:
        """Wrap a result with the reviewer's confidence filter applied."""
        mode = confidence_mode or ConfidenceMode(settings.confidence_mode)
        visible = result.fields_above(mode.threshold)
        return ParseResponse(
            preview_id=preview_id,
            result=result,
            confidence_mode=mode,
            threshold=mode.threshold,
            visible_fields=list(visible.keys()),
            matched_count=result.matched_count,
            unmatched_count=len(result.unmatched_pairs),
            conflict_count=result.conflict_count,
        )

    # ===================
    # REVIEW
    # ===================

    def get_preview(self, preview_id: str) -> ParseResult:
        """Raises PreviewNotFoundError for unknown or expired ids."""
        return get_preview(preview_id)

    def diff_preview(
        self,
        preview_id: str,
        existing_specs: dict[str, Optional[str]]
    ) -> list[DiffEntry]:
        return diff_specs(existing_specs, get_preview(preview_id).fields)

    def apply_preview(self, preview_id: str, request: ApplyRequest) -> ApplyPayload:
        """
        Build the apply payload for a cached preview.

        Confirmed aliases are learned first, then the preview is dropped.

        Raises:
            PreviewNotFoundError: Unknown or expired preview_id
        """
        result = get_preview(preview_id)
        self.learn_aliases(request.confirmed_aliases, catalog=request.catalog, category=result.category)

        payload = build_apply_payload(
            result,
            overrides=request.overrides,
            top_level=request.top_level,
            manual_mappings=request.manual_mappings,
            normalize_metric=request.normalize_metric,
            apply_coercion=request.apply_coercion,
        )
        delete_preview(preview_id)

        logger.info(
            "smart_paste_applied",
            preview_id=preview_id,
            specs=len(payload.specs),
            aliases_learned=len(request.confirmed_aliases)
        )
        return payload

    # ===================
    # ALIASES
    # ===================

    def learn_aliases(
        self,
        aliases: dict[str, str],
        catalog: CatalogInput = None,
        category: Optional[str] = None
    ) -> list[AliasRecord]:
        """
        Record confirmed source key -> spec field mappings.

        Every spec name is checked against the catalog before any alias is
        stored, so a bad request learns nothing.

        Raises:
            UnknownSpecFieldError: A spec name is not in the catalog
            ValidationError: A source key is blank
        """
        spec_catalog = as_catalog(catalog)
        for spec_name in aliases.values():
            if not spec_catalog.has_field(spec_name):
                raise UnknownSpecFieldError(spec_name)

        store = self.alias_store
        return [
            store.record(source_key, spec_name, category=category, catalog=spec_catalog)
            for source_key, spec_name in aliases.items()
        ]

    def discard_preview(self, preview_id: str) -> bool:
        return delete_preview(preview_id)

    def catalog(self, catalog: CatalogInput = None) -> SpecCatalog:
        return as_catalog(catalog)


# Singleton instance
_smart_paste_service: Optional[SmartPasteService] = None


def get_smart_paste_service() -> SmartPasteService:
    """Get or create SmartPasteService instance."""
    global _smart_paste_service
    if _smart_paste_service is None:
        _smart_paste_service = SmartPasteService()
    return _smart_paste_service


def reset_smart_paste_service() -> None:
    global _smart_paste_service
    _smart_paste_service = None
