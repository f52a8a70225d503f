"""
Smart Paste services.

Session collaborators (alias store, preview cache, paste history), the
external readers (file, page fetch) and the orchestration facade.
"""

from services.alias_store_service import (
    AliasStore,
    get_alias_store,
    reset_alias_store,
    record_alias,
)
from services.apply_payload_service import build_apply_payload
from services.spec_diff_service import diff_specs, diff_counts
from services.file_reader_service import read_file
from services.page_fetch_service import FetchedPage, fetch_product_page
from services.paste_history_service import PasteHistory, get_paste_history, reset_paste_history
from services.smart_paste_service import (
    SmartPasteService,
    get_smart_paste_service,
    reset_smart_paste_service,
)

__all__ = [
    "AliasStore",
    "get_alias_store",
    "reset_alias_store",
    "record_alias",
    "build_apply_payload",
    "diff_specs",
    "diff_counts",
    "read_file",
    "FetchedPage",
    "fetch_product_page",
    "PasteHistory",
    "get_paste_history",
    "reset_paste_history",
    "SmartPasteService",
    "get_smart_paste_service",
    "reset_smart_paste_service",
]
