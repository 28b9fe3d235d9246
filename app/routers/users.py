"""
Users router.
Employee records ("hojas de vida"): create, list, update, activate/deactivate, documents.
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Path, status
import logging

from app.exceptions import DatabaseError, ValidationError
from app.models.user import DocumentUrlsUpdate, EmployeeStatus, UserFields
from app.repositories import UserRepository
from app.utils.dependencies import get_user_repository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Crear usuario"
)
async def create_user(
    payload: UserFields,
    repo: UserRepository = Depends(get_user_repository)
) -> Dict[str, Any]:
    """
    Crea una hoja de vida.

    Un campo obligatorio ausente o una Identificacion / Correo repetidos se
    responden con 500, igual que cualquier otro fallo al guardar.
    """
    try:
        user = await repo.create_user(payload)
    except ValidationError as e:
        raise DatabaseError("Error al crear el usuario", error=e.message) from e

    return {"message": "Usuario creado exitosamente", "user": user}


@router.get(
    "",
    summary="Listar usuarios"
)
async def list_users(
    repo: UserRepository = Depends(get_user_repository)
) -> List[Dict[str, Any]]:
    """Todas las hojas de vida, sin filtro ni paginación."""
    return await repo.list_all()


@router.put(
    "/inactivo/{user_id}",
    summary="Desactivar usuario"
)
async def deactivate_user(
    user_id: str = Path(..., description="ID del usuario"),
    repo: UserRepository = Depends(get_user_repository)
) -> Dict[str, Any]:
    user = await repo.set_status(user_id, EmployeeStatus.INACTIVE)
    return {"message": "Usuario desactivado exitosamente", "user": user}


@router.put(
    "/activo/{user_id}",
    summary="Activar usuario"
)
async def activate_user(
    user_id: str = Path(..., description="ID del usuario"),
    repo: UserRepository = Depends(get_user_repository)
) -> Dict[str, Any]:
    user = await repo.set_status(user_id, EmployeeStatus.ACTIVE)
    return {"message": "Usuario activado exitosamente", "user": user}


@router.put(
    "/documents/{user_id}",
    summary="Actualizar documentos"
)
async def update_documents(
    payload: DocumentUrlsUpdate,
    user_id: str = Path(..., description="ID del usuario"),
    repo: UserRepository = Depends(get_user_repository)
) -> Dict[str, Any]:
    """
    Reemplaza el mapa DocumentUrls completo.

    **Raises:**
    - 400: DocumentUrls ausente o vacío
    - 404: usuario inexistente
    """
    document_urls = None
    if payload.DocumentUrls:
        document_urls = {
            slot: ref.model_dump(exclude_none=True)
            for slot, ref in payload.DocumentUrls.items()
        }

    user = await repo.replace_document_map(user_id, document_urls)
    return {"message": "Documentos actualizados exitosamente", "user": user}


@router.get(
    "/documents/{user_id}",
    summary="Obtener documentos"
)
async def get_documents(
    user_id: str = Path(..., description="ID del usuario"),
    repo: UserRepository = Depends(get_user_repository)
) -> Dict[str, Any]:
    user = await repo.get_document_map(user_id)
    return {"message": "Documentos obtenidos exitosamente", "user": user}


@router.put(
    "/{user_id}",
    summary="Actualizar usuario"
)
async def update_user(
    payload: UserFields,
    user_id: str = Path(..., description="ID del usuario"),
    repo: UserRepository = Depends(get_user_repository)
) -> Dict[str, Any]:
    """
    Sobrescribe los campos enviados de la hoja de vida.

    **Raises:**
    - 404: usuario inexistente
    - 500: Identificacion o Correo ya usados por otro usuario
    """
    try:
        user = await repo.replace_fields(user_id, payload)
    except ValidationError as e:
        raise DatabaseError("Error al actualizar el usuario", error=e.message) from e

    return {"message": "Usuario actualizado exitosamente", "user": user}
