"""
Cloudinary storage adapter.
Thin async wrapper over the Cloudinary SDK: upload, destroy, resource lookup and URL building.
"""
import asyncio
import io
import logging
from typing import Any, Dict, Optional

import cloudinary
import cloudinary.api
import cloudinary.uploader
import cloudinary.utils
from cloudinary.exceptions import Error as CloudinaryError
from cloudinary.exceptions import NotFound as CloudinaryNotFound

from app.config import Settings
from app.exceptions import NotFoundError, StorageError
from app.services.upload_policy import RESOURCE_AUTO

logger = logging.getLogger(__name__)

# Cloudinary has no "auto" delivery type; auto uploads of images end up as "image"
AUTO_DELIVERY_TYPE = "image"


class CloudinaryStorage:
    """
    Storage provider backed by one Cloudinary account.

    The SDK is synchronous; network calls run in a worker thread so a request
    only suspends while waiting on the provider. `url` is a local computation.
    """

    def __init__(self, config: Settings):
        cloudinary.config(
            cloud_name=config.CLOUD_NAME,
            api_key=config.API_KEY,
            api_secret=config.API_SECRET,
            secure=True,
        )
        self.folder = config.UPLOAD_FOLDER
        logger.info(f"Cloudinary configurado (cloud_name={config.CLOUD_NAME}, folder={self.folder})")

    @staticmethod
    def delivery_type(resource_type: str) -> str:
        """Resource type accepted by Cloudinary's admin and delivery endpoints."""
        return AUTO_DELIVERY_TYPE if resource_type == RESOURCE_AUTO else resource_type

    async def upload(
        self,
        content: bytes,
        *,
        public_id: str,
        resource_type: str,
        folder: Optional[str] = None,
        format: Optional[str] = None,
        access_mode: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Upload bytes.

        Returns:
            Provider response: public_id, secure_url, bytes, format, resource_type...

        Raises:
            StorageError: If Cloudinary rejects the upload
        """
        options: Dict[str, Any] = {
            "folder": folder or self.folder,
            "public_id": public_id,
            "resource_type": resource_type,
        }
        if format:
            options["format"] = format
        if access_mode:
            options["access_mode"] = access_mode

        try:
            return await asyncio.to_thread(cloudinary.uploader.upload, io.BytesIO(content), **options)
        except CloudinaryError as e:
            logger.error(f"Error al subir {public_id} a Cloudinary: {e}")
            raise StorageError("Error al subir archivo a Cloudinary", error=str(e)) from e

    async def destroy(self, public_id: str, resource_type: str) -> Dict[str, Any]:
        """
        Delete a resource.

        Returns:
            Provider response; {"result": "not found"} when nothing exists under
            that public id and resource type

        Raises:
            StorageError: On any other provider failure
        """
        try:
            return await asyncio.to_thread(
                cloudinary.uploader.destroy,
                public_id,
                resource_type=self.delivery_type(resource_type),
                invalidate=True,
            )
        except CloudinaryNotFound:
            return {"result": "not found"}
        except CloudinaryError as e:
            raise StorageError("Error al eliminar archivo de Cloudinary", error=str(e)) from e

    async def resource(self, public_id: str, resource_type: str) -> Dict[str, Any]:
        """
        Metadata of a stored resource.

        Raises:
            NotFoundError: If nothing exists under that public id and resource type
            StorageError: On any other provider failure
        """
        try:
            return await asyncio.to_thread(
                cloudinary.api.resource,
                public_id,
                resource_type=self.delivery_type(resource_type),
            )
        except CloudinaryNotFound as e:
            raise NotFoundError("Archivo no encontrado", identifier=public_id) from e
        except CloudinaryError as e:
            raise StorageError("Error al obtener información del archivo", error=str(e)) from e

    def url(
        self,
        public_id: str,
        resource_type: str,
        *,
        flags: Optional[str] = None,
    ) -> str:
        options: Dict[str, Any] = {
            "resource_type": self.delivery_type(resource_type),
            "type": "upload",
            "secure": True,
        }
        if flags:
            options["flags"] = flags
        url, _ = cloudinary.utils.cloudinary_url(public_id, **options)
        return url
