"""
Error handling middleware for FastAPI.
Provides centralized exception handling and error responses.
"""
import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.exceptions import AppError

logger = logging.getLogger(__name__)

AVAILABLE_ROUTES: List[str] = [
    "GET /",
    "GET /health",
    "POST /api/user",
    "GET /api/user",
    "PUT /api/user/:id",
    "PUT /api/user/inactivo/:id",
    "PUT /api/user/activo/:id",
    "PUT /api/user/documents/:id",
    "GET /api/user/documents/:id",
    "POST /api/upload",
    "POST /api/upload-pdf-direct",
    "POST /api/upload-multiple",
    "GET /api/download/:publicId",
    "DELETE /api/delete/:publicId",
    "GET /api/pdf/:publicId",
    "GET /api/file-info/:publicId",
]


def is_production(request: Request) -> bool:
    config = getattr(request.app.state, "settings", None) or get_settings()
    return config.is_production


def error_body(exc: AppError, production: bool = False) -> Dict[str, Any]:
    """
    JSON envelope for an AppError.

    The `error` detail of a 500 is internal and is left out in production.
    """
    body: Dict[str, Any] = {"success": False, "message": exc.message}
    hide_detail = exc.status_code >= 500 and production
    if exc.error and not hide_detail:
        body["error"] = exc.error
    if exc.details and exc.status_code < 500:
        body["details"] = exc.details
    return body


def add_exception_handlers(app: FastAPI) -> None:
    """
    Add exception handlers to FastAPI application.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        """Handle custom AppError exceptions."""
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            f"{exc.__class__.__name__}: {exc.message}",
            extra={
                "status_code": exc.status_code,
                "error_detail": exc.error,
                "path": request.url.path,
                "method": request.method
            }
        )

        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder(error_body(exc, is_production(request)))
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error: {exc.errors()}",
            extra={
                "path": request.url.path,
                "method": request.method
            }
        )

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=jsonable_encoder({
                "success": False,
                "message": "Datos de la solicitud inválidos",
                "details": exc.errors()
            })
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions; unmatched routes list what is available."""
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "success": False,
                    "message": f"Ruta {request.url.path} no encontrada",
                    "availableRoutes": AVAILABLE_ROUTES
                }
            )

        logger.warning(
            f"HTTP {exc.status_code}: {exc.detail}",
            extra={
                "path": request.url.path,
                "method": request.method
            }
        )

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "message": exc.detail
            },
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all other unhandled exceptions."""
        logger.error(
            f"Error no manejado: {str(exc)}",
            exc_info=True,
            extra={
                "path": request.url.path,
                "method": request.method
            }
        )

        content: Dict[str, Any] = {
            "success": False,
            "message": "Error interno del servidor"
        }
        if not is_production(request):
            content["error"] = str(exc)

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=content
        )
