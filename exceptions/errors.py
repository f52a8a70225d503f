"""
Custom exception classes for the application.

Every error carries a stable code, a human-readable message and an HTTP
status so routes can return them unchanged.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "EMPTY_INPUT")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ExternalServiceError(AppError):
    """External service failure (503)."""

    def __init__(
        self,
        service: str,
        message: str,
        details: Optional[dict] = None,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{service.upper()}_ERROR",
            message=message,
            status_code=503,
            details={"service": service, **(details or {})}
        )


# ===================
# INPUT ERRORS
# ===================

class EmptyInputError(ValidationError):
    """Nothing to parse after cleaning the input."""

    def __init__(self, source: str = "paste"):
        super().__init__(
            code="EMPTY_INPUT",
            message="No text content found to parse",
            details={"source": source}
        )


class UnsupportedFileTypeError(ValidationError):
    """File extension has no text reader."""

    def __init__(self, filename: str, supported: list[str]):
        super().__init__(
            code="UNSUPPORTED_FILE_TYPE",
            message=f"Cannot read text from {filename}",
            details={"filename": filename, "supported": supported}
        )


class FileReadError(ValidationError):
    """File could not be decoded into text."""

    def __init__(
        self,
        filename: str,
        message: str = "Failed to read file",
        details: Optional[dict] = None
    ):
        super().__init__(
            code="FILE_READ_ERROR",
            message=message,
            details={"filename": filename, **(details or {})}
        )


# ===================
# COLLABORATOR ERRORS
# ===================

class PageFetchError(ExternalServiceError):
    """Product page could not be fetched through the proxy."""

    def __init__(self, url: str, message: str, details: Optional[dict] = None):
        super().__init__(
            service="page_fetch",
            code="PAGE_FETCH_ERROR",
            message=message,
            details={"url": url, **(details or {})}
        )


# ===================
# SMART PASTE ERRORS
# ===================

class UnknownSpecFieldError(ValidationError):
    """Spec field name is not part of the catalog."""

    def __init__(self, spec_name: str):
        super().__init__(
            code="UNKNOWN_SPEC_FIELD",
            message=f"Unknown spec field: {spec_name}",
            details={"spec_name": spec_name}
        )


class PreviewNotFoundError(NotFoundError):
    """Parsed preview expired or never existed."""

    def __init__(self, preview_id: str):
        super().__init__(
            resource="Preview",
            identifier=preview_id,
            code="PREVIEW_NOT_FOUND"
        )


class AliasNotFoundError(NotFoundError):
    """No learned alias for this source key."""

    def __init__(self, source_key: str):
        super().__init__(
            resource="Alias",
            identifier=source_key,
            code="ALIAS_NOT_FOUND"
        )
