"""
Upload service.
Runs the upload policy against the storage provider: admission, naming,
classification, upload, URL derivation, deletion and lookup with the
auto-then-raw fallback.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol

from app.config import Settings
from app.exceptions import BadRequestError, NotFoundError, StorageError
from app.models.upload import IncomingFile, StoredFile
from app.services.upload_policy import (
    PDF_MIME_TYPE,
    RESOURCE_AUTO,
    RESOURCE_RAW,
    append_attachment_name,
    check_admission,
    check_file_count,
    generate_unique_filename,
    is_image_mimetype,
    is_pdf_file,
    is_pdf_mimetype,
    resource_type_for
)
from app.utils.logger import log_file_processing

logger = logging.getLogger(__name__)


class StorageProvider(Protocol):
    """What the upload service needs from an object store."""

    async def upload(
        self,
        content: bytes,
        *,
        public_id: str,
        resource_type: str,
        folder: Optional[str] = None,
        format: Optional[str] = None,
        access_mode: Optional[str] = None,
    ) -> Dict[str, Any]: ...

    async def destroy(self, public_id: str, resource_type: str) -> Dict[str, Any]: ...

    async def resource(self, public_id: str, resource_type: str) -> Dict[str, Any]: ...

    def url(self, public_id: str, resource_type: str, *, flags: Optional[str] = None) -> str: ...


class UploadService:
    """Service for document uploads stored in the provider."""

    def __init__(self, storage: StorageProvider, config: Settings):
        """
        Initialize upload service.

        Args:
            storage: Storage provider (CloudinaryStorage in production)
            config: Settings carrying folder and upload limits
        """
        self.storage = storage
        self.folder = config.UPLOAD_FOLDER
        self.max_file_size = config.MAX_FILE_SIZE
        self.max_files = config.MAX_FILES

    # ------------------------------------------------------------------
    # URLs
    # ------------------------------------------------------------------

    def generate_pdf_urls(self, public_id: str, filename: Optional[str] = None) -> Dict[str, str]:
        """
        Download and view URLs for a PDF stored as raw.

        Returns:
            {download, view, direct}; view and direct are the same URL
        """
        download_url = self.storage.url(public_id, RESOURCE_RAW, flags="attachment")
        view_url = self.storage.url(public_id, RESOURCE_RAW)
        return {
            "download": append_attachment_name(download_url, filename),
            "view": view_url,
            "direct": view_url,
        }

    def generate_download_url(
        self,
        public_id: str,
        filename: Optional[str] = None,
        resource_type: str = RESOURCE_AUTO,
        is_pdf: bool = False
    ) -> str:
        """URL that forces the browser to save the file."""
        base_url = self.storage.url(
            public_id,
            RESOURCE_RAW if is_pdf else resource_type,
            flags="attachment"
        )
        return append_attachment_name(base_url, filename)

    def generate_direct_url(
        self,
        public_id: str,
        resource_type: str = RESOURCE_AUTO,
        is_pdf: bool = False
    ) -> str:
        return self.storage.url(public_id, RESOURCE_RAW if is_pdf else resource_type)

    def url_bundle(self, stored: StoredFile) -> Dict[str, str]:
        if stored.is_pdf:
            return self.generate_pdf_urls(stored.public_id, stored.original_name)

        direct_url = self.generate_direct_url(stored.public_id, stored.resource_type)
        return {
            "download": self.generate_download_url(
                stored.public_id, stored.original_name, stored.resource_type
            ),
            "view": direct_url,
            "direct": direct_url,
        }

    def download_urls(
        self,
        public_id: str,
        filename: Optional[str] = None,
        is_pdf: bool = False,
        resource_type: str = RESOURCE_AUTO
    ) -> Dict[str, str]:
        """Body of GET /api/download/{public_id}."""
        if is_pdf:
            urls = self.generate_pdf_urls(public_id, filename)
            return {
                "downloadUrl": urls["download"],
                "viewUrl": urls["view"],
                "directUrl": urls["direct"],
            }
        return {
            "downloadUrl": self.generate_download_url(public_id, filename, resource_type),
            "directUrl": self.generate_direct_url(public_id, resource_type),
        }

    # ------------------------------------------------------------------
    # Uploads
    # ------------------------------------------------------------------

    async def _store(self, file: IncomingFile, access_mode: Optional[str] = None) -> StoredFile:
        storage_key = generate_unique_filename(file.filename, file.field_name)
        resource_type = resource_type_for(file.content_type)

        # Only images get their format appended by the provider; anything stored
        # as raw (PDFs, and office files under auto) keeps the public id verbatim
        if is_image_mimetype(file.content_type):
            public_id = storage_key.rsplit(".", 1)[0]
        else:
            public_id = storage_key

        result = await self.storage.upload(
            file.content,
            public_id=public_id,
            resource_type=resource_type,
            folder=self.folder,
            access_mode=access_mode,
        )

        return StoredFile(
            public_id=result["public_id"],
            secure_url=result["secure_url"],
            original_name=file.filename,
            mimetype=file.content_type,
            size=result.get("bytes", file.size),
            resource_type=result.get("resource_type") or resource_type,
            is_pdf=is_pdf_mimetype(file.content_type),
            format=result.get("format"),
        )

    def _response(self, stored: StoredFile) -> Dict[str, Any]:
        response = stored.to_response()
        try:
            urls = self.url_bundle(stored)
        except Exception as e:
            # The file is stored; a URL problem must not fail the upload
            logger.warning(f"No se pudieron generar URLs para {stored.public_id}: {e}", exc_info=True)
        else:
            response["pdfUrls" if stored.is_pdf else "urls"] = urls
        return response

    async def upload_file(self, file: IncomingFile) -> Dict[str, Any]:
        """
        Admit, name, classify and store one file.

        Returns:
            {url, public_id, nombre, tipo, size, isPDF, resource_type, pdfUrls?/urls?}

        Raises:
            UnsupportedMediaTypeError, PayloadTooLargeError: Admission rejected
            StorageError: Provider rejected the upload
        """
        check_admission(file, self.max_file_size)
        stored = await self._store(file)
        log_file_processing(logger, file.filename, "subido", {"public_id": stored.public_id})
        return self._response(stored)

    async def upload_pdf_direct(self, file: IncomingFile) -> Dict[str, Any]:
        """
        Store a PDF as a public raw resource, bypassing the provider's delivery
        restrictions on PDFs.

        Raises:
            BadRequestError: If the file is not a PDF
        """
        if not is_pdf_file(file.filename, file.content_type):
            raise BadRequestError("Solo se permiten archivos PDF en esta ruta")

        pdf = file.model_copy(update={"content_type": PDF_MIME_TYPE})
        check_admission(pdf, self.max_file_size)
        stored = await self._store(pdf, access_mode="public")
        log_file_processing(logger, file.filename, "subido (directo)", {"public_id": stored.public_id})

        response = self._response(stored)
        response["upload_method"] = "direct"
        return response

    async def upload_many(self, files: List[IncomingFile]) -> Dict[str, Any]:
        """
        Store several files concurrently. Every file is admitted before any is uploaded.

        The response waits for every upload to settle; if any failed, the
        first failure is raised after the others have finished.

        Returns:
            {files: [...], count}

        Raises:
            StorageError: If the provider rejected one of the uploads
        """
        if not files:
            raise BadRequestError("No se proporcionaron archivos")
        check_file_count(len(files), self.max_files)
        for file in files:
            check_admission(file, self.max_file_size)

        outcomes = await asyncio.gather(
            *(self._store(file) for file in files),
            return_exceptions=True
        )
        failures = [outcome for outcome in outcomes if isinstance(outcome, BaseException)]
        results = [outcome for outcome in outcomes if not isinstance(outcome, BaseException)]
        if failures:
            logger.error(
                f"{len(failures)} de {len(files)} archivos no se pudieron subir; "
                f"almacenados: {[stored.public_id for stored in results]}"
            )
            raise failures[0]
        logger.info(f"{len(results)} archivos subidos")
        responses = [self._response(stored) for stored in results]
        return {"files": responses, "count": len(responses)}

    # ------------------------------------------------------------------
    # Deletion and lookup
    # ------------------------------------------------------------------

    async def delete_file(self, public_id: str, resource_type: Optional[str] = None) -> Dict[str, Any]:
        """
        Delete a stored file.

        With an explicit resource type only that type is tried. Without one,
        "auto" is tried first and, if the provider reports "not found", "raw"
        once more (PDFs live there).

        Returns:
            {success, result}
        """
        if resource_type:
            result = await self.storage.destroy(public_id, resource_type)
        else:
            result = await self.storage.destroy(public_id, RESOURCE_AUTO)
            if result.get("result") == "not found":
                logger.info(f"{public_id} no encontrado como auto, reintentando como raw")
                result = await self.storage.destroy(public_id, RESOURCE_RAW)

        success = result.get("result") == "ok"
        if success:
            logger.info(f"Archivo eliminado: {public_id}")
        return {"success": success, "result": result}

    async def get_file_info(self, public_id: str, resource_type: Optional[str] = None) -> Dict[str, Any]:
        """
        Metadata of a stored file plus its PDF classification.

        Raises:
            NotFoundError: If the file is not found under any tried resource type
        """
        categories = [resource_type] if resource_type else [RESOURCE_AUTO, RESOURCE_RAW]

        for category in categories:
            try:
                info = await self.storage.resource(public_id, category)
            except (NotFoundError, StorageError) as e:
                logger.info(f"{public_id} no disponible como {category}: {e.message}")
                continue

            found_type = info.get("resource_type") or category
            return {
                "success": True,
                "info": {
                    "public_id": info.get("public_id", public_id),
                    "url": info.get("secure_url"),
                    "size": info.get("bytes"),
                    "format": info.get("format"),
                    "created_at": info.get("created_at"),
                    "width": info.get("width"),
                    "height": info.get("height"),
                },
                "resource_type": found_type,
                "isPDF": info.get("format") == "pdf" or RESOURCE_RAW in (category, found_type),
            }

        raise NotFoundError("Archivo no encontrado", identifier=public_id)

    async def validate_file_access(self, public_id: str, resource_type: Optional[str] = None) -> bool:
        try:
            await self.get_file_info(public_id, resource_type)
        except NotFoundError:
            return False
        return True
