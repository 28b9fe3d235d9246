"""
User repository.
Data access layer for employee records ("hojas de vida").
"""
from typing import Any, Dict, List, Optional
import logging

from pymongo.errors import DuplicateKeyError, PyMongoError

from .base_repository import BaseRepository
from app.exceptions import (
    BadRequestError,
    DatabaseError,
    DuplicateError,
    NotFoundError,
    validate_required_fields
)
from app.models.user import (
    DOCUMENT_OWNER_FIELDS,
    REQUIRED_FIELDS,
    UNIQUE_FIELDS,
    EmployeeStatus,
    UserFields
)
from app.utils.logger import log_database_operation

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "Usuario no encontrado"


class UserRepository(BaseRepository):
    """Repository for employee record operations."""

    async def find_duplicate(
        self,
        document: Dict[str, Any],
        exclude_id: Optional[str] = None
    ) -> Optional[str]:
        """
        Name of the first unique field whose value is already taken.

        Args:
            document: Candidate field values
            exclude_id: Record to ignore (the one being updated)

        Returns:
            Field name, or None when both values are free
        """
        for field in UNIQUE_FIELDS:
            value = document.get(field)
            if value is None:
                continue
            query: Dict[str, Any] = {field: value}
            object_id = self.to_object_id(exclude_id) if exclude_id else None
            if object_id is not None:
                query["_id"] = {"$ne": object_id}
            if await self.exists(query):
                return field
        return None

    @staticmethod
    def _duplicate_from(error: DuplicateKeyError, document: Dict[str, Any]) -> DuplicateError:
        key_value = (error.details or {}).get("keyValue") or {}
        field = next(iter(key_value), None)
        if field is None:
            field = next((f for f in UNIQUE_FIELDS if f in str(error)), UNIQUE_FIELDS[0])
        return DuplicateError("Usuario", field, key_value.get(field, document.get(field)))

    async def create_user(self, fields: UserFields) -> Dict[str, Any]:
        """
        Create an employee record.

        Args:
            fields: Writable attributes of the record

        Returns:
            Stored record with its `_id`, createdAt and updatedAt

        Raises:
            ValidationError: If a required field is missing
            DuplicateError: If Identificacion or Correo is already taken
            DatabaseError: On any other store failure
        """
        document = fields.to_document()
        validate_required_fields(document, REQUIRED_FIELDS)
        document.setdefault("Estado", int(EmployeeStatus.ACTIVE))

        logger.info(f"Creando usuario con Identificacion: {document['Identificacion']}")

        try:
            duplicate = await self.find_duplicate(document)
            if duplicate:
                raise DuplicateError("Usuario", duplicate, document[duplicate])
            user = await self.create(document)
        except DuplicateKeyError as e:
            raise self._duplicate_from(e, document) from e
        except PyMongoError as e:
            raise DatabaseError("Error al crear el usuario", error=str(e)) from e

        log_database_operation(logger, "insert", self.collection.name, user["_id"])
        return user

    async def list_all(self) -> List[Dict[str, Any]]:
        """Every employee record, no filter and no pagination."""
        try:
            return await self.find_all()
        except PyMongoError as e:
            raise DatabaseError("Error al obtener la lista de usuarios", error=str(e)) from e

    async def _update(self, user_id: str, update: Dict[str, Any], error_message: str) -> Dict[str, Any]:
        try:
            user = await self.find_by_id_and_update(user_id, update)
        except DuplicateKeyError as e:
            raise self._duplicate_from(e, update) from e
        except PyMongoError as e:
            raise DatabaseError(error_message, error=str(e)) from e

        if user is None:
            raise NotFoundError(USER_NOT_FOUND, identifier=user_id)
        log_database_operation(logger, "update", self.collection.name, user_id)
        return user

    async def replace_fields(self, user_id: str, fields: UserFields) -> Dict[str, Any]:
        """
        Overwrite the provided attributes of a record.

        Args:
            user_id: Record ID
            fields: Attributes to write (only those present in the input are set)

        Returns:
            Record after the update

        Raises:
            NotFoundError: If the id does not resolve to a record
            DuplicateError: If the new Identificacion or Correo is taken
        """
        update = fields.to_document(partial=True)
        object_id = self.to_object_id(user_id)
        try:
            if object_id is None or not await self.exists({"_id": object_id}):
                raise NotFoundError(USER_NOT_FOUND, identifier=user_id)
            duplicate = await self.find_duplicate(update, exclude_id=user_id)
        except PyMongoError as e:
            raise DatabaseError("Error al actualizar el usuario", error=str(e)) from e
        if duplicate:
            raise DuplicateError("Usuario", duplicate, update[duplicate])

        return await self._update(user_id, update, "Error al actualizar el usuario")

    async def set_status(self, user_id: str, status: EmployeeStatus) -> Dict[str, Any]:
        """
        Set Estado to active or inactive. No other field changes.

        Raises:
            NotFoundError: If the id does not resolve to a record
        """
        return await self._update(
            user_id,
            {"Estado": int(status)},
            "Error al modificar el estado del usuario"
        )

    async def replace_document_map(
        self,
        user_id: str,
        document_urls: Optional[Dict[str, Any]]
    ) -> Dict[str, Any]:
        """
        Replace the DocumentUrls map wholesale (no key-by-key merge).

        Raises:
            BadRequestError: If the map is absent or empty (nothing is written)
            NotFoundError: If the id does not resolve to a record
        """
        if not document_urls:
            raise BadRequestError("No se proporcionaron documentos para actualizar")

        return await self._update(
            user_id,
            {"DocumentUrls": document_urls},
            "Error al actualizar documentos"
        )

    async def get_document_map(self, user_id: str) -> Dict[str, Any]:
        """
        DocumentUrls of a record plus the fields that identify its owner.

        Returns:
            {_id, Nombre, Apellido, Identificacion, DocumentUrls}; DocumentUrls is
            an empty dict when the record has none

        Raises:
            NotFoundError: If the id does not resolve to a record
        """
        projection = {field: 1 for field in DOCUMENT_OWNER_FIELDS + ["DocumentUrls"]}
        try:
            user = await self.find_by_id(user_id, projection)
        except PyMongoError as e:
            raise DatabaseError("Error al obtener documentos", error=str(e)) from e

        if user is None:
            raise NotFoundError(USER_NOT_FOUND, identifier=user_id)

        return {
            "_id": user["_id"],
            **{field: user.get(field) for field in DOCUMENT_OWNER_FIELDS},
            "DocumentUrls": user.get("DocumentUrls") or {},
        }
