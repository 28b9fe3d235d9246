"""
Models package.
Pydantic schemas for employee records and uploads.
"""
from .user import (
    EmployeeStatus,
    UserFields,
    DocumentRef,
    DocumentUrlsUpdate,
    REQUIRED_FIELDS,
    UNIQUE_FIELDS,
    DOCUMENT_OWNER_FIELDS
)

from .upload import (
    IncomingFile,
    StoredFile
)

__all__ = [
    "EmployeeStatus",
    "UserFields",
    "DocumentRef",
    "DocumentUrlsUpdate",
    "REQUIRED_FIELDS",
    "UNIQUE_FIELDS",
    "DOCUMENT_OWNER_FIELDS",
    "IncomingFile",
    "StoredFile",
]
