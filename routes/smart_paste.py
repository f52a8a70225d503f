"""
Smart Paste API routes.

Parse pasted text, uploaded spec sheets and product pages into a
reviewable proposal, then diff or apply it by preview_id.
Error responses use the AppError format ({"error": {...}}).
"""

from fastapi import APIRouter, UploadFile, File, Form
from fastapi.responses import JSONResponse
from typing import Optional
import json
import structlog

from config import settings
from models.smart_paste import (
    AliasCreate,
    AliasListResponse,
    AliasRecord,
    ApplyPayload,
    ApplyRequest,
    BatchParseRequest,
    BatchParseResponse,
    ConfidenceMode,
    DiffRequest,
    DiffResponse,
    ParseResponse,
    ParseResult,
    ParseTextRequest,
    ParseUrlRequest,
    PasteHistoryResponse,
)
from services.smart_paste_service import get_smart_paste_service
from services.spec_diff_service import diff_counts
from exceptions import AppError, ValidationError

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/smart-paste", tags=["Smart Paste"])


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    # Unexpected error
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


def _form_catalog(catalog: Optional[str]) -> Optional[dict]:
    """Catalog sent as a JSON string in multipart forms."""
    if not catalog:
        return None
    try:
        parsed = json.loads(catalog)
    except json.JSONDecodeError:
        raise ValidationError(message="catalog must be a JSON object", code="INVALID_CATALOG")
    if not isinstance(parsed, dict):
        raise ValidationError(message="catalog must be a JSON object", code="INVALID_CATALOG")
    return parsed


# ===================
# PARSING
# ===================

@router.post("/parse", response_model=ParseResponse)
async def parse_text(data: ParseTextRequest):
    """
    Parse pasted text (and its HTML rendering, if any).

    Returns the proposal plus a preview_id for diff/apply.

    Raises:
        422: Nothing to parse
    """
    try:
        service = get_smart_paste_service()
        preview_id, result = service.parse_text(
            data.text,
            html=data.html,
            catalog=data.catalog,
            prefer_metric=data.prefer_metric
        )
        return service.build_parse_response(preview_id, result, data.confidence_mode)
    except Exception as e:
        return handle_error(e)


@router.post("/parse-file", response_model=ParseResponse)
async def parse_file(
    file: UploadFile = File(..., description="Spec sheet (.txt, .csv, .md, .html, .pdf, ...)"),
    catalog: Optional[str] = Form(None, description="Spec catalog as JSON"),
    prefer_metric: Optional[bool] = Form(None),
    confidence_mode: Optional[ConfidenceMode] = Form(None)
):
    """
    Parse an uploaded spec sheet.

    PDFs are linearized with column gaps kept as tabs. Images are rejected.

    Raises:
        422: Unsupported type, unreadable file, too large, or no text
    """
    try:
        content = await file.read()
        if len(content) > settings.max_upload_bytes:
            raise ValidationError(
                message=f"File exceeds {settings.max_upload_size_mb} MB",
                code="FILE_TOO_LARGE",
                details={"filename": file.filename, "size": len(content)}
            )

        service = get_smart_paste_service()
        preview_id, result = service.parse_file(
            content,
            file.filename or "",
            catalog=_form_catalog(catalog),
            prefer_metric=prefer_metric
        )
        return service.build_parse_response(preview_id, result, confidence_mode)
    except Exception as e:
        return handle_error(e)


@router.post("/parse-url", response_model=ParseResponse)
async def parse_url(data: ParseUrlRequest):
    """
    Fetch a product page through the page proxy and parse it.

    Raises:
        503: Proxy not configured or fetch failed
        422: Page had no text
    """
    try:
        service = get_smart_paste_service()
        preview_id, result = service.parse_url(
            data.url,
            catalog=data.catalog,
            prefer_metric=data.prefer_metric
        )
        return service.build_parse_response(preview_id, result, data.confidence_mode)
    except Exception as e:
        return handle_error(e)


@router.post("/batch", response_model=BatchParseResponse)
async def parse_batch(data: BatchParseRequest):
    """
    Split text describing several products and parse each one.

    Every segment gets its own preview_id.
    """
    try:
        service = get_smart_paste_service()
        items = service.parse_batch(
            data.text,
            catalog=data.catalog,
            prefer_metric=data.prefer_metric
        )
        return BatchParseResponse(data=items, total=len(items))
    except Exception as e:
        return handle_error(e)


# ===================
# PREVIEWS
# ===================

@router.get("/previews/{preview_id}", response_model=ParseResult)
async def get_preview(preview_id: str):
    """
    Get a cached parse result.

    Raises:
        404: Unknown or expired preview
    """
    try:
        return get_smart_paste_service().get_preview(preview_id)
    except Exception as e:
        return handle_error(e)


@router.post("/previews/{preview_id}/diff", response_model=DiffResponse)
async def diff_preview(preview_id: str, data: DiffRequest):
    """Compare a cached parse with the item's stored specs."""
    try:
        entries = get_smart_paste_service().diff_preview(preview_id, data.existing_specs)
        return DiffResponse(data=entries, counts=diff_counts(entries))
    except Exception as e:
        return handle_error(e)


@router.post("/previews/{preview_id}/apply", response_model=ApplyPayload)
async def apply_preview(preview_id: str, data: ApplyRequest):
    """
    Build the payload to write into the item record.

    Confirmed aliases are learned; the preview is discarded afterwards.

    Raises:
        404: Unknown or expired preview
    """
    try:
        return get_smart_paste_service().apply_preview(preview_id, data)
    except Exception as e:
        return handle_error(e)


@router.delete("/previews/{preview_id}")
async def discard_preview(preview_id: str):
    """Drop a cached preview (cancel)."""
    try:
        deleted = get_smart_paste_service().discard_preview(preview_id)
        return {"preview_id": preview_id, "deleted": deleted}
    except Exception as e:
        return handle_error(e)


# ===================
# ALIASES
# ===================

@router.get("/aliases", response_model=AliasListResponse)
async def list_aliases():
    """Aliases learned this session, most recent first."""
    try:
        records = get_smart_paste_service().alias_store.records()
        return AliasListResponse(data=records, total=len(records))
    except Exception as e:
        return handle_error(e)


@router.post("/aliases", response_model=AliasRecord, status_code=201)
async def create_alias(data: AliasCreate):
    """
    Teach a source key -> spec field mapping.

    Raises:
        422: spec_name is not a field of the catalog (built-in when omitted)
    """
    try:
        records = get_smart_paste_service().learn_aliases(
            {data.source_key: data.spec_name},
            catalog=data.catalog,
            category=data.category
        )
        return records[0]
    except Exception as e:
        return handle_error(e)


@router.delete("/aliases/{source_key}", response_model=AliasRecord)
async def forget_alias(source_key: str):
    """
    Forget one alias.

    Raises:
        404: No alias for this key
    """
    try:
        return get_smart_paste_service().alias_store.forget(source_key)
    except Exception as e:
        return handle_error(e)


@router.delete("/aliases")
async def clear_aliases():
    """Forget every alias learned this session."""
    try:
        removed = get_smart_paste_service().alias_store.clear()
        return {"removed": removed}
    except Exception as e:
        return handle_error(e)


# ===================
# SESSION / CATALOG
# ===================

@router.get("/history", response_model=PasteHistoryResponse)
async def get_history():
    """Recent pastes, newest first."""
    try:
        entries = get_smart_paste_service().history.entries()
        return PasteHistoryResponse(data=entries, total=len(entries))
    except Exception as e:
        return handle_error(e)


@router.get("/catalog")
async def get_catalog():
    """Built-in spec catalog, category -> field definitions."""
    try:
        return get_smart_paste_service().catalog().to_dict()
    except Exception as e:
        return handle_error(e)
