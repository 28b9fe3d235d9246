"""
Upload models.
An inbound file as the upload policy sees it, and the descriptor of a stored file.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class IncomingFile(BaseModel):
    """Uploaded payload with its declared name and MIME type."""

    filename: str
    content_type: str = "application/octet-stream"
    content: bytes = Field(repr=False)
    field_name: str = "file"

    @property
    def size(self) -> int:
        return len(self.content)


class StoredFile(BaseModel):
    """File held by the storage provider after a successful upload."""

    public_id: str
    secure_url: str
    original_name: str
    mimetype: str
    size: int
    resource_type: str
    is_pdf: bool
    format: Optional[str] = None

    def to_response(self) -> Dict[str, Any]:
        """Body shape returned by the upload endpoints."""
        return {
            "url": self.secure_url,
            "public_id": self.public_id,
            "nombre": self.original_name,
            "tipo": self.mimetype,
            "size": self.size,
            "isPDF": self.is_pdf,
            "resource_type": self.resource_type,
        }
