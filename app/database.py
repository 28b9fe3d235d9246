"""
MongoDB connection management.
Single process-wide Motor client, opened once at startup with a bounded retry policy.
"""
import asyncio
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import OperationFailure, PyMongoError

from app.config import Settings, get_settings
from app.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class Collections:
    """Collection names. Routers and repositories never hardcode them."""

    USERS = "users"


class Database:
    """Holder for the Motor client and the selected database."""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def connect_db(cls, config: Optional[Settings] = None) -> AsyncIOMotorDatabase:
        """
        Open the connection, retrying a fixed number of times.

        Each attempt builds a client and pings the server; a failed attempt is
        followed by a fixed delay. Runs once before the app accepts requests.

        Args:
            config: Settings (defaults to the process settings)

        Returns:
            The connected database

        Raises:
            DatabaseError: If every attempt fails
        """
        config = config or get_settings()
        if not config.MONGO_URI:
            raise DatabaseError("No se pudo conectar a MongoDB", error="MONGO_URI no configurada")

        max_retries = config.DB_CONNECT_MAX_RETRIES
        last_error: Optional[Exception] = None

        for attempt in range(1, max_retries + 1):
            client = AsyncIOMotorClient(
                config.MONGO_URI,
                serverSelectionTimeoutMS=config.DB_SERVER_SELECTION_TIMEOUT_MS,
                socketTimeoutMS=config.DB_SOCKET_TIMEOUT_MS,
            )
            try:
                await client.admin.command("ping")
            except PyMongoError as e:
                client.close()
                last_error = e
                logger.warning(f"Intento {attempt} fallido. Error: {e}")
                if attempt < max_retries:
                    await asyncio.sleep(config.DB_CONNECT_RETRY_DELAY)
                continue

            cls.client = client
            cls.db = client.get_default_database(default=config.DB_NAME)
            logger.info(f"✅ Conexión a la base de datos exitosa ({cls.db.name})")
            return cls.db

        logger.error(f"❌ Error al conectar a MongoDB después de {max_retries} intentos")
        raise DatabaseError(
            "No se pudo conectar a MongoDB",
            error=str(last_error) if last_error else None
        )

    @classmethod
    async def ensure_indexes(cls) -> None:
        """
        Create the unique indexes backing Identificacion and Correo.

        Raises:
            DatabaseError: If an index cannot be built (e.g. existing duplicates)
        """
        users = cls.get_db()[Collections.USERS]
        for field in ("Identificacion", "Correo"):
            try:
                await users.create_index(field, unique=True)
            except PyMongoError as e:
                if isinstance(e, OperationFailure) and e.code == 86:  # IndexKeySpecsConflict
                    logger.warning(f"⚠️ Índice ya existente con otra especificación, omitido: {field}")
                    continue
                raise DatabaseError(
                    f"No se pudo crear el índice único de {field}",
                    error=str(e)
                ) from e
        logger.info("Índices únicos de usuarios verificados")

    @classmethod
    async def close_db(cls) -> None:
        if cls.client is not None:
            cls.client.close()
            logger.info("Conexión a MongoDB cerrada")
        cls.client = None
        cls.db = None

    @classmethod
    def get_db(cls) -> AsyncIOMotorDatabase:
        if cls.db is None:
            raise DatabaseError("Base de datos no inicializada", error="connect_db() no ejecutado")
        return cls.db


async def get_database() -> AsyncIOMotorDatabase:
    """FastAPI dependency returning the connected database."""
    return Database.get_db()
