"""
Repository package.
Provides data access layer for all entities.
"""
from .base_repository import BaseRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
]
