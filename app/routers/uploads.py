"""
Uploads router.
File upload, URL generation, deletion and lookup against Cloudinary.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Path, Query, UploadFile, status
from fastapi.responses import JSONResponse, RedirectResponse
import logging

from app.exceptions import NotFoundError, StorageError
from app.services.upload_service import UploadService
from app.utils.dependencies import get_upload_service, read_upload, read_uploads

logger = logging.getLogger(__name__)

router = APIRouter()

SINGLE_FIELD = "archivo"
MULTIPLE_FIELD = "archivos"


@router.post(
    "/upload",
    summary="Subir un archivo"
)
async def upload_file(
    archivo: Optional[UploadFile] = File(None),
    service: UploadService = Depends(get_upload_service)
) -> Dict[str, Any]:
    """
    Sube un archivo (campo `archivo`).

    **Raises:**
    - 400: no se envió archivo
    - 415: tipo no permitido
    - 413: más de 10MB
    """
    incoming = await read_upload(archivo, SINGLE_FIELD, service.max_file_size)
    return await service.upload_file(incoming)


@router.post(
    "/upload-pdf-direct",
    summary="Subir PDF como recurso raw público"
)
async def upload_pdf_direct(
    archivo: Optional[UploadFile] = File(None),
    service: UploadService = Depends(get_upload_service)
) -> Dict[str, Any]:
    incoming = await read_upload(archivo, SINGLE_FIELD, service.max_file_size)
    return await service.upload_pdf_direct(incoming)


@router.post(
    "/upload-multiple",
    summary="Subir varios archivos"
)
async def upload_multiple(
    archivos: Optional[List[UploadFile]] = File(None),
    service: UploadService = Depends(get_upload_service)
) -> Dict[str, Any]:
    """Sube hasta 10 archivos (campo `archivos`) en paralelo."""
    incoming = await read_uploads(archivos, MULTIPLE_FIELD, service.max_file_size, service.max_files)
    return await service.upload_many(incoming)


@router.get(
    "/download/{public_id:path}",
    summary="URLs de descarga"
)
async def download_urls(
    public_id: str = Path(..., description="public_id en Cloudinary"),
    filename: Optional[str] = Query(None, description="Nombre con el que se guardará el archivo"),
    is_pdf: bool = Query(False, alias="isPDF"),
    resource_type: str = Query("auto", description="auto, image, raw"),
    service: UploadService = Depends(get_upload_service)
) -> Dict[str, Any]:
    return {
        "success": True,
        **service.download_urls(public_id, filename, is_pdf=is_pdf, resource_type=resource_type),
    }


@router.delete(
    "/delete/{public_id:path}",
    summary="Eliminar archivo"
)
async def delete_file(
    public_id: str = Path(..., description="public_id en Cloudinary"),
    resource_type: Optional[str] = Query(None, description="Si se omite: auto y luego raw"),
    service: UploadService = Depends(get_upload_service)
):
    outcome = await service.delete_file(public_id, resource_type)
    if not outcome["success"]:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "success": False,
                "message": "No se pudo eliminar el archivo",
                "result": outcome["result"],
            }
        )
    return {"success": True, "message": "Archivo eliminado exitosamente", "result": outcome["result"]}


@router.get(
    "/pdf/{public_id:path}",
    summary="URLs de un PDF"
)
async def pdf_urls(
    public_id: str = Path(..., description="public_id en Cloudinary"),
    filename: Optional[str] = Query(None),
    download: bool = Query(False, description="Redirigir a la URL de descarga"),
    service: UploadService = Depends(get_upload_service)
):
    urls = service.generate_pdf_urls(public_id, filename)
    if download:
        return RedirectResponse(url=urls["download"], status_code=status.HTTP_302_FOUND)
    return {"success": True, "public_id": public_id, "pdfUrls": urls}


@router.get(
    "/file-info/{public_id:path}",
    summary="Información de un archivo"
)
async def file_info(
    public_id: str = Path(..., description="public_id en Cloudinary"),
    resource_type: Optional[str] = Query(None),
    service: UploadService = Depends(get_upload_service)
) -> Dict[str, Any]:
    try:
        return await service.get_file_info(public_id, resource_type)
    except NotFoundError as e:
        # Not found under any resource type is reported like any provider failure
        raise StorageError("Error al obtener información del archivo", error=e.message) from e
