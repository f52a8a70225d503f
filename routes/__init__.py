"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.smart_paste import router as smart_paste_router

__all__ = [
    "smart_paste_router",
]
