"""
Employee record ("Hoja de Vida") models.
Field names match the stored documents and the JSON exchanged with the frontend.
"""
from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class EmployeeStatus(IntEnum):
    """Values of the Estado field."""

    INACTIVE = 0
    ACTIVE = 1


# Attributes that must be present when a record is created
REQUIRED_FIELDS = [
    "Identificacion",
    "Nombre",
    "Apellido",
    "Correo",
    "Telefono",
    "FechaNacimiento",
    "Eps",
    "Arl",
    "Estrato",
    "Edad",
    "Hijos",
    "EstadoCivil",
    "TipoSangre",
    "TipoContrato",
    "FechaInicioContrato",
    "FechaFinContrato",
    "CajaCompensacion",
    "FondoPension",
    "PerfilProfesional",
    "UltimoPeriodoVacacional",
    "EvaluacionDesempeño",
    "Cargo",
    "Sueldo",
    "FechaIngresoEmpresa",
    "Ciudad",
    "Sede",
]

UNIQUE_FIELDS = ["Identificacion", "Correo"]

# Fields returned by the documents endpoint besides DocumentUrls
DOCUMENT_OWNER_FIELDS = ["Nombre", "Apellido", "Identificacion"]


class UserFields(BaseModel):
    """
    Writable attributes of an employee record.

    Everything is optional at the parsing layer: presence of the required
    attributes is checked by the repository, so a create with missing fields
    fails with the same error whether it came over HTTP or not. Unknown keys
    are dropped.
    """

    # Datos personales
    Identificacion: Optional[str] = None
    Nombre: Optional[str] = None
    Apellido: Optional[str] = None
    Correo: Optional[str] = None
    Telefono: Optional[str] = None
    FechaNacimiento: Optional[datetime] = None
    Edad: Optional[int] = None
    Hijos: Optional[int] = None
    EstadoCivil: Optional[str] = None
    TipoSangre: Optional[str] = None
    Ciudad: Optional[str] = None

    # Seguridad social
    Eps: Optional[str] = None
    Arl: Optional[str] = None
    Estrato: Optional[str] = None
    CajaCompensacion: Optional[str] = None
    FondoPension: Optional[str] = None

    # Contrato
    TipoContrato: Optional[str] = None
    CopiaContrato: Optional[str] = None
    FechaInicioContrato: Optional[datetime] = None
    FechaFinContrato: Optional[datetime] = None
    FechaIngresoEmpresa: Optional[datetime] = None
    Cargo: Optional[str] = None
    Sueldo: Optional[float] = None
    Sede: Optional[str] = None

    # Talento humano
    Estado: Optional[EmployeeStatus] = None
    CertificadoEstudio: Optional[str] = None
    PerfilProfesional: Optional[str] = None
    UltimoPeriodoVacacional: Optional[datetime] = None
    ControlAusentismo: Optional[str] = None
    EvaluacionDesempeno: Optional[str] = Field(None, alias="EvaluacionDesempeño")
    Sanciones: Optional[str] = None
    Observaciones: Optional[str] = None

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    def to_document(self, partial: bool = False) -> Dict[str, Any]:
        """
        Dump to the stored field names.

        Args:
            partial: Keep only the attributes present in the input (updates);
                otherwise drop the ones left empty (creates)

        Returns:
            Dict keyed by stored field names, Estado as a plain int
        """
        if partial:
            data = self.model_dump(by_alias=True, exclude_unset=True)
        else:
            data = self.model_dump(by_alias=True, exclude_none=True)
        if data.get("Estado") is not None:
            data["Estado"] = int(data["Estado"])
        return data


class DocumentRef(BaseModel):
    """Stored-file descriptor kept in a record's DocumentUrls map."""

    url: str
    public_id: Optional[str] = None

    # nombre, tipo, isPDF... whatever the frontend attached at upload time
    model_config = ConfigDict(extra="allow")


class DocumentUrlsUpdate(BaseModel):
    """Body of PUT /api/user/documents/{id}."""

    DocumentUrls: Optional[Dict[str, DocumentRef]] = None
