"""
Utilities package.
Logging helpers and FastAPI dependencies (import the latter from app.utils.dependencies).
"""
from .logger import setup_logging, get_logger

__all__ = [
    "setup_logging",
    "get_logger",
]
