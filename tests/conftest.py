"""
Test configuration and fixtures for pytest.

The API runs in-process against an in-memory users collection and an
in-memory storage provider; no MongoDB or Cloudinary account is needed.
"""
import copy
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.config import Settings
from app.exceptions import NotFoundError
from app.main import create_app
from app.models.user import UNIQUE_FIELDS
from app.repositories import UserRepository
from app.services.upload_service import UploadService
from app.utils.dependencies import get_upload_service, get_user_repository


def _matches(document, query):
    for key, condition in query.items():
        value = document.get(key)
        if isinstance(condition, dict) and "$ne" in condition:
            if value == condition["$ne"]:
                return False
        elif value != condition:
            return False
    return True


def _project(document, projection):
    if not projection:
        return copy.deepcopy(document)
    projected = {key: document[key] for key in projection if key in document}
    projected["_id"] = document["_id"]
    return copy.deepcopy(projected)


class FakeCursor:
    def __init__(self, documents):
        self.documents = documents

    async def to_list(self, length=None):
        return self.documents if length is None else self.documents[:length]


class FakeCollection:
    """Subset of AsyncIOMotorCollection used by the repositories, with unique indexes."""

    def __init__(self, name, unique=()):
        self.name = name
        self.documents = []
        self.unique = set(unique)

    def _check_unique(self, document, exclude_id=None):
        for field in self.unique:
            if field not in document:
                continue
            for other in self.documents:
                if other["_id"] != exclude_id and other.get(field) == document[field]:
                    raise DuplicateKeyError(
                        f"E11000 duplicate key error collection: {self.name} index: {field}_1",
                        11000,
                        {"keyValue": {field: document[field]}},
                    )

    async def create_index(self, field, unique=False):
        if unique:
            self.unique.add(field)
        return f"{field}_1"

    async def insert_one(self, document):
        self._check_unique(document)
        document.setdefault("_id", ObjectId())
        self.documents.append(copy.deepcopy(document))
        return SimpleNamespace(inserted_id=document["_id"])

    def find(self, query=None):
        matched = [copy.deepcopy(d) for d in self.documents if _matches(d, query or {})]
        return FakeCursor(matched)

    async def find_one(self, query, projection=None):
        for document in self.documents:
            if _matches(document, query):
                return _project(document, projection)
        return None

    async def find_one_and_update(self, query, update, return_document=ReturnDocument.BEFORE):
        for index, document in enumerate(self.documents):
            if _matches(document, query):
                updated = {**document, **update.get("$set", {})}
                self._check_unique(update.get("$set", {}), exclude_id=document["_id"])
                self.documents[index] = updated
                result = updated if return_document == ReturnDocument.AFTER else document
                return copy.deepcopy(result)
        return None


class FakeStorage:
    """
    In-memory storage provider.

    Objects are kept per (public_id, category); "auto" lands in "image" the
    way Cloudinary stores auto uploads of images.
    """

    def __init__(self):
        self.objects = {}
        self.calls = []
        self.fail_urls = False

    @staticmethod
    def category(resource_type):
        return "image" if resource_type == "auto" else resource_type

    def put(self, public_id, resource_type, **info):
        category = self.category(resource_type)
        self.objects[(public_id, category)] = {
            "public_id": public_id,
            "secure_url": self._build_url(public_id, category),
            "bytes": 1024,
            "format": public_id.rsplit(".", 1)[-1] if category == "raw" else "png",
            "resource_type": category,
            "created_at": "2026-01-15T10:00:00Z",
            **info,
        }

    async def upload(self, content, *, public_id, resource_type, folder=None, format=None, access_mode=None):
        self.calls.append(("upload", public_id, resource_type, access_mode))
        full_id = f"{folder}/{public_id}" if folder else public_id
        self.put(full_id, resource_type, bytes=len(content))
        return copy.deepcopy(self.objects[(full_id, self.category(resource_type))])

    async def destroy(self, public_id, resource_type):
        self.calls.append(("destroy", public_id, resource_type))
        if self.objects.pop((public_id, self.category(resource_type)), None) is None:
            return {"result": "not found"}
        return {"result": "ok"}

    async def resource(self, public_id, resource_type):
        self.calls.append(("resource", public_id, resource_type))
        info = self.objects.get((public_id, self.category(resource_type)))
        if info is None:
            raise NotFoundError("Archivo no encontrado", identifier=public_id)
        return copy.deepcopy(info)

    def url(self, public_id, resource_type, *, flags=None):
        if self.fail_urls:
            raise RuntimeError("url builder unavailable")
        return self._build_url(public_id, resource_type, flags)

    def _build_url(self, public_id, resource_type, flags=None):
        transformation = f"fl_{flags}/" if flags else ""
        return f"https://res.cloudinary.com/demo/{self.category(resource_type)}/upload/{transformation}{public_id}"


@pytest.fixture
def app_settings():
    """Settings isolated from the developer's .env."""
    return Settings(
        _env_file=None,
        MONGO_URI="mongodb://localhost:27017/hojas_de_vida_test",
        CLOUD_NAME="demo",
        API_KEY="123456789012345",
        API_SECRET="secret",
        ENVIRONMENT="test",
        DB_CONNECT_RETRY_DELAY=2.0,
    )


@pytest.fixture
def users_collection():
    return FakeCollection("users", unique=UNIQUE_FIELDS)


@pytest.fixture
def repository(users_collection):
    return UserRepository(users_collection)


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def upload_service(storage, app_settings):
    return UploadService(storage, app_settings)


@pytest.fixture
def app(app_settings, repository, storage, upload_service):
    """Application with the database and Cloudinary swapped for in-memory fakes."""
    application = create_app(app_settings)
    application.state.storage = storage
    application.dependency_overrides[get_user_repository] = lambda: repository
    application.dependency_overrides[get_upload_service] = lambda: upload_service
    return application


@pytest.fixture
def client(app):
    """HTTP client for API testing (lifespan is not run)."""
    return TestClient(app)


@pytest.fixture
def user_payload():
    """Factory for a complete employee record payload."""

    def build(**overrides):
        payload = {
            "Identificacion": "1020304050",
            "Nombre": "Laura",
            "Apellido": "Gómez",
            "Correo": "laura.gomez@example.com",
            "Telefono": "3001234567",
            "FechaNacimiento": "1990-05-14T00:00:00",
            "Eps": "Sura",
            "Arl": "Positiva",
            "Estrato": "3",
            "Edad": 35,
            "Hijos": 1,
            "EstadoCivil": "Soltera",
            "TipoSangre": "O+",
            "TipoContrato": "Indefinido",
            "FechaInicioContrato": "2022-02-01T00:00:00",
            "FechaFinContrato": "2027-02-01T00:00:00",
            "CajaCompensacion": "Comfama",
            "FondoPension": "Protección",
            "PerfilProfesional": "Contadora pública",
            "UltimoPeriodoVacacional": "2025-12-15T00:00:00",
            "EvaluacionDesempeño": "Sobresaliente",
            "Cargo": "Analista contable",
            "Sueldo": 3500000,
            "FechaIngresoEmpresa": "2022-02-01T00:00:00",
            "Ciudad": "Medellín",
            "Sede": "Principal",
        }
        payload.update(overrides)
        return payload

    return build
