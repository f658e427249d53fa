"""Application configuration."""

import os
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from casefile.utils.logging import get_logger

LOGGER = get_logger(__name__)


def find_env_file() -> Optional[Path]:
    """Find .env file in the working directory or the project root."""
    package_dir = Path(__file__).resolve().parent

    possible_paths = [
        Path(os.getcwd()) / ".env",
        package_dir.parent / ".env",
    ]

    for path in possible_paths:
        if path.exists():
            LOGGER.info(f"Found .env file at: {path}")
            return path

    return None


ENV_FILE = find_env_file()


class DataSettings(BaseSettings):
    """Location of the CSV row sources."""

    data_dir: str = Field(default="data", validation_alias="DATA_DIR")
    client_file: str = Field(default="File+Client Name.csv", validation_alias="CLIENT_FILE")
    intake_file: str = Field(default="Intake Form.csv", validation_alias="INTAKE_FILE")
    counselor_file: str = Field(
        default="Client+Counselor Assignment.csv", validation_alias="COUNSELOR_FILE"
    )
    session_file: str = Field(default="Session History.csv", validation_alias="SESSION_FILE")

    @property
    def data_path(self) -> Path:
        """Data directory as an absolute path."""
        return Path(self.data_dir).expanduser().resolve()

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="",
    )


class MongoSettings(BaseSettings):
    """MongoDB connection settings."""

    uri: str = Field(default="mongodb://localhost:27017/filemaker", validation_alias="MONGODB_URI")
    db_name: str = Field(default="filemaker", validation_alias="DB_NAME")
    server_selection_timeout_ms: int = Field(default=3000, validation_alias="MONGODB_TIMEOUT_MS")

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="",
    )


class Settings(BaseSettings):
    """Unified application settings with nested models."""

    # Application Settings
    app_name: str = Field(default="Case File Lookup", validation_alias="APP_NAME")
    app_version: str = "0.1.0"
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    debug: bool = Field(default=False, validation_alias="DEBUG")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_match_details: bool = Field(
        default=False,
        validation_alias="LOG_MATCH_DETAILS",
        description="Emit per-record DEBUG diagnostics from name extraction and search",
    )
    cors_origins: list[str] = Field(default=["*"], validation_alias="CORS_ORIGINS")

    # API Settings
    api_v1_prefix: str = "/api/v1"
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=8000, validation_alias="PORT")

    # Backend selection default, overridden per request by header or body
    use_mongo: str = Field(default="", validation_alias="USE_MONGO")

    data: DataSettings = Field(default_factory=lambda: DataSettings())
    mongo: MongoSettings = Field(default_factory=lambda: MongoSettings())

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def get_settings() -> Settings:
    """Get application settings instance.

    Returns:
        Settings: Application settings loaded from environment
    """
    return Settings()


settings = get_settings()

LOGGER.info(f"Settings initialized with environment: {settings.environment}")
LOGGER.info(f"Data directory: {settings.data.data_path}, default backend flag: {settings.use_mongo or 'unset'}")
