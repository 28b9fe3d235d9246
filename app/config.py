"""
Application configuration.
Reads environment variables (and an optional .env file) into a single Settings object.
"""
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

# Variables the service needs to talk to MongoDB and Cloudinary
REQUIRED_ENV_VARS = ["MONGO_URI", "CLOUD_NAME", "API_KEY", "API_SECRET"]


class Settings(BaseSettings):
    """Service settings, one attribute per environment variable."""

    # Database
    MONGO_URI: Optional[str] = Field(
        None, validation_alias=AliasChoices("MONGO_URI", "MONGO_URL")
    )
    DB_NAME: str = "hojas_de_vida"
    DB_CONNECT_MAX_RETRIES: int = 3
    DB_CONNECT_RETRY_DELAY: float = 2.0
    DB_SERVER_SELECTION_TIMEOUT_MS: int = 30000
    DB_SOCKET_TIMEOUT_MS: int = 75000

    # Cloudinary
    CLOUD_NAME: Optional[str] = None
    API_KEY: Optional[str] = None
    API_SECRET: Optional[str] = None
    UPLOAD_FOLDER: str = "uploads"

    # Upload limits
    MAX_FILE_SIZE: int = 10 * 1024 * 1024
    MAX_FILES: int = 10

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3999
    ENVIRONMENT: str = Field(
        "development", validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV")
    )
    APP_VERSION: str = "1.0.0"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"
    LOG_FILE: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


def missing_required_settings(config: Settings) -> List[str]:
    """
    Names of required environment variables that are not set.

    Args:
        config: Settings instance to inspect

    Returns:
        List of missing variable names (empty when everything is configured)
    """
    return [name for name in REQUIRED_ENV_VARS if not getattr(config, name)]


@lru_cache
def get_settings() -> Settings:
    return Settings()

