"""
Custom exceptions for the application.
Provides specific exception types for different error scenarios.
"""
from typing import Optional, Any, Dict, List


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error = error
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppError):
    """Resource not found error (404)."""

    def __init__(self, message: str = "Recurso no encontrado", identifier: Optional[str] = None):
        super().__init__(
            message,
            status_code=404,
            error="NOT_FOUND",
            details={"identifier": identifier} if identifier else None
        )


class ValidationError(AppError):
    """Validation error (400): missing required field or uniqueness violation."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error: str = "VALIDATION_ERROR"
    ):
        super().__init__(message, status_code=400, error=error, details=details)


class DuplicateError(ValidationError):
    """Unique field already taken by another record."""

    def __init__(self, resource: str, field: str, value: Any):
        message = f"{resource} con {field}='{value}' ya existe"
        super().__init__(
            message,
            details={"resource": resource, "field": field, "value": value},
            error="DUPLICATE_KEY"
        )


class BadRequestError(AppError):
    """Required request data missing (400)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, error="BAD_REQUEST", details=details)


class UnsupportedMediaTypeError(AppError):
    """Declared MIME type not in the allowed set (415)."""

    def __init__(self, message: str, mimetype: Optional[str] = None):
        super().__init__(
            message,
            status_code=415,
            error="INVALID_FILE_TYPE",
            details={"mimetype": mimetype} if mimetype else None
        )


class PayloadTooLargeError(AppError):
    """Uploaded file exceeds the size limit (413)."""

    def __init__(self, message: str, size: Optional[int] = None, limit: Optional[int] = None):
        super().__init__(
            message,
            status_code=413,
            error="FILE_TOO_LARGE",
            details={"size": size, "limit": limit}
        )


class TooManyFilesError(AppError):
    """Multi-file upload above the file count limit (400)."""

    def __init__(self, message: str, count: int, limit: int):
        super().__init__(
            message,
            status_code=400,
            error="LIMIT_FILE_COUNT",
            details={"count": count, "limit": limit}
        )


class UpstreamError(AppError):
    """Database or storage provider failure (500). `error` carries the internal detail."""

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message, status_code=500, error=error)


class DatabaseError(UpstreamError):
    """Database operation error."""


class StorageError(UpstreamError):
    """Storage provider (Cloudinary) error."""


# Validation helpers
def validate_required_fields(data: Dict[str, Any], required_fields: List[str]) -> None:
    """
    Validate that all required fields are present in data.

    Args:
        data: Data dictionary to validate
        required_fields: List of required field names

    Raises:
        ValidationError: If any required field is missing
    """
    missing = [
        field for field in required_fields
        if field not in data or data[field] is None or data[field] == ""
    ]
    if missing:
        raise ValidationError(
            f"Faltan campos obligatorios: {', '.join(missing)}",
            details={"missing_fields": missing}
        )
