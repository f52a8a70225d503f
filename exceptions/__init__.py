"""
Custom exceptions module.

Import from here rather than exceptions.errors in application code.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ExternalServiceError,

    # Input
    EmptyInputError,
    UnsupportedFileTypeError,
    FileReadError,

    # Collaborators
    PageFetchError,

    # Smart Paste
    UnknownSpecFieldError,
    PreviewNotFoundError,
    AliasNotFoundError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ExternalServiceError",

    # Input
    "EmptyInputError",
    "UnsupportedFileTypeError",
    "FileReadError",

    # Collaborators
    "PageFetchError",

    # Smart Paste
    "UnknownSpecFieldError",
    "PreviewNotFoundError",
    "AliasNotFoundError",
]
