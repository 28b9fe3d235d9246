"""
Custom exceptions package.
"""
from app.exceptions.custom_exceptions import (
    AppError,
    NotFoundError,
    ValidationError,
    DuplicateError,
    BadRequestError,
    UnsupportedMediaTypeError,
    PayloadTooLargeError,
    TooManyFilesError,
    UpstreamError,
    DatabaseError,
    StorageError,
    validate_required_fields
)

__all__ = [
    "AppError",
    "NotFoundError",
    "ValidationError",
    "DuplicateError",
    "BadRequestError",
    "UnsupportedMediaTypeError",
    "PayloadTooLargeError",
    "TooManyFilesError",
    "UpstreamError",
    "DatabaseError",
    "StorageError",
    "validate_required_fields"
]
