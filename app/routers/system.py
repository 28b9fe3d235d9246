"""Service info and health check."""
import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from app.config import Settings
from app.utils.dependencies import get_app_settings

router = APIRouter(tags=["Sistema"])

STARTED_AT = time.monotonic()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/", summary="Información del servicio")
async def root(config: Settings = Depends(get_app_settings)) -> Dict[str, Any]:
    return {
        "success": True,
        "message": "Servidor de Hojas de Vida API funcionando correctamente",
        "timestamp": _now(),
        "version": config.APP_VERSION,
    }


@router.get("/health", summary="Estado del servidor")
async def health(config: Settings = Depends(get_app_settings)) -> Dict[str, Any]:
    return {
        "status": "OK",
        "timestamp": _now(),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
        "env": config.ENVIRONMENT,
    }
