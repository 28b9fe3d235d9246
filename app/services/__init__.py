"""
Services package.
Business logic layer for uploads and storage.
"""
from .storage_service import CloudinaryStorage
from .upload_service import UploadService, StorageProvider

__all__ = [
    "CloudinaryStorage",
    "UploadService",
    "StorageProvider",
]
