"""
Hojas de Vida API - FastAPI application.
Employee records in MongoDB, documents in Cloudinary.
"""
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings, get_settings, missing_required_settings
from app.database import Database
from app.exceptions import DatabaseError
from app.middleware.error_handler import add_exception_handlers
from app.routers import system, uploads, users
from app.services.storage_service import CloudinaryStorage
from app.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: logging, env check, storage client, database (bounded retry).
    A database that cannot be reached ends the process with status 1.
    """
    config: Settings = app.state.settings
    setup_logging(config)

    logger.info("🔍 Verificando variables de entorno...")
    missing = missing_required_settings(config)
    if missing:
        logger.error(f"❌ Variables de entorno faltantes: {missing}")
    else:
        logger.info("✅ Todas las variables de entorno están configuradas")

    app.state.storage = CloudinaryStorage(config)

    logger.info("🚀 Iniciando servidor...")
    try:
        await Database.connect_db(config)
        await Database.ensure_indexes()
    except DatabaseError as e:
        logger.critical(f"❌ Error al conectar a MongoDB: {e.error or e.message}")
        await Database.close_db()
        sys.exit(1)

    logger.info(f"📱 Modo: {config.ENVIRONMENT}")
    try:
        yield
    finally:
        await Database.close_db()
        logger.info("Apagando Hojas de Vida API...")


def create_app(config: Optional[Settings] = None) -> FastAPI:
    """Build the application; routers get their collaborators through dependencies."""
    config = config or get_settings()

    app = FastAPI(
        title="Hojas de Vida API",
        version=config.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    add_exception_handlers(app)

    app.include_router(system.router)
    app.include_router(users.router, prefix="/api/user", tags=["Usuarios"])
    app.include_router(uploads.router, prefix="/api", tags=["Archivos"])

    return app


app = create_app()
