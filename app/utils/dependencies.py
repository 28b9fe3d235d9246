"""
FastAPI dependencies for dependency injection.
Routers receive the repository and the upload service through these, never
through module globals, so tests can swap them with dependency_overrides.
"""
from typing import List, Optional

from fastapi import Depends, Request, UploadFile
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.config import Settings, get_settings
from app.database import Collections, get_database
from app.exceptions import BadRequestError, StorageError
from app.models.upload import IncomingFile
from app.services.upload_policy import MAX_FILE_SIZE, MAX_FILES, check_file_count
from app.repositories import UserRepository
from app.services.upload_service import StorageProvider, UploadService


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return getattr(request.app.state, "settings", None) or get_settings()


async def get_user_repository(
    db: AsyncIOMotorDatabase = Depends(get_database)
) -> UserRepository:
    """Repository over the users collection."""
    return UserRepository(db[Collections.USERS])


def get_storage(request: Request) -> StorageProvider:
    """
    Storage provider configured at startup (app.state.storage).

    Raises:
        StorageError: If the app started without a storage provider
    """
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise StorageError("Almacenamiento no configurado", error="app.state.storage vacío")
    return storage


def get_upload_service(
    storage: StorageProvider = Depends(get_storage),
    config: Settings = Depends(get_app_settings)
) -> UploadService:
    return UploadService(storage, config)


async def read_upload(
    upload: Optional[UploadFile],
    field_name: str,
    max_size: int = MAX_FILE_SIZE
) -> IncomingFile:
    """
    Read a multipart file into an IncomingFile.

    At most max_size + 1 bytes are read, enough for admission to reject an
    oversized file without loading all of it.

    Raises:
        BadRequestError: If no file was sent
    """
    if upload is None or not upload.filename:
        raise BadRequestError("No se ha proporcionado ningún archivo")

    content = await upload.read(max_size + 1)
    return IncomingFile(
        filename=upload.filename,
        content_type=upload.content_type or "application/octet-stream",
        content=content,
        field_name=field_name,
    )


async def read_uploads(
    uploads: Optional[List[UploadFile]],
    field_name: str,
    max_size: int = MAX_FILE_SIZE,
    max_files: int = MAX_FILES
) -> List[IncomingFile]:
    """
    Read several multipart files; the count is checked before any is read.

    Raises:
        BadRequestError: If no file was sent
        TooManyFilesError: More than max_files files
    """
    files = [upload for upload in uploads or [] if upload.filename]
    if not files:
        raise BadRequestError("No se han proporcionado archivos")
    check_file_count(len(files), max_files)
    return [await read_upload(upload, field_name, max_size) for upload in files]
