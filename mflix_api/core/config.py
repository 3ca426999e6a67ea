# Settings management (reads env vars / .env)
# mflix_api/core/config.py

import logging
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ConfigurationError(RuntimeError):
    """Raised when required settings are missing or invalid."""
    pass


class Settings(BaseSettings):
    """
    Application configuration settings loaded from environment variables or .env file.
    """
    # --- Project Info ---
    PROJECT_NAME: str = Field("MFlix Movies API", validation_alias="PROJECT_NAME")
    VERSION: str = Field("0.1.0", validation_alias="APP_VERSION")

    # --- Server ---
    HOST: str = Field("0.0.0.0", validation_alias="HOST")
    PORT: int = Field(8080, validation_alias="PORT")

    # --- Logging ---
    LOG_LEVEL: str = Field("INFO", validation_alias="LOG_LEVEL")

    # --- Database (MongoDB Atlas) ---
    # Credentials are combined into the connection URI, see data_access.mongo_client
    USERNAME: str = Field(..., min_length=1, validation_alias="USERNAME")
    PASSWORD: SecretStr = Field(..., validation_alias="PASSWORD")
    CLUSTER: str = Field(..., min_length=1, validation_alias="CLUSTER")
    DATABASE_NAME: str = Field("sample_mflix", min_length=1, validation_alias="DATABASE_NAME")
    COLLECTION_NAME: str = Field("movies", min_length=1, validation_alias="COLLECTION_NAME")
    MONGODB_TIMEOUT_MS: Optional[int] = Field(
        None,
        gt=0,
        validation_alias="MONGODB_TIMEOUT_MS",
        description="Per-operation driver timeout. Unset means operations wait indefinitely."
    )
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = Field(
        30000,
        gt=0,
        validation_alias="MONGODB_SERVER_SELECTION_TIMEOUT_MS",
        description="How long the startup ping waits for a reachable server."
    )

    # --- Behaviour ---
    DISTINGUISH_NOT_FOUND: bool = Field(
        False,
        validation_alias="DISTINGUISH_NOT_FOUND",
        description="Answer 404 instead of 500 when a well-formed id matches no document."
    )

    # --- CORS ---
    # Comma-separated string in env var like "http://localhost:3000,https://*.example.com"
    BACKEND_CORS_ORIGINS: str = Field("*", validation_alias="BACKEND_CORS_ORIGINS")

    @field_validator("PASSWORD")
    @classmethod
    def password_not_empty(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            raise ValueError("PASSWORD must not be empty")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def known_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def cors_origins(self) -> List[str]:
        return [i.strip() for i in self.BACKEND_CORS_ORIGINS.split(",") if i.strip()]

    model_config = SettingsConfigDict(
        # Load .env file if it exists (useful for local development)
        env_file=".env",
        env_file_encoding='utf-8',
        case_sensitive=False,
        # "  " is not a usable USERNAME or CLUSTER
        str_strip_whitespace=True,
        extra='ignore'
    )


def load_settings(**overrides) -> Settings:
    """
    Builds a Settings instance, converting validation failures into ConfigurationError.

    Keyword overrides are passed straight to Settings (e.g. ``_env_file=None`` in tests).
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise ConfigurationError(f"Invalid or missing settings: {', '.join(missing)}") from e


@lru_cache()
def get_settings() -> Settings:
    """Returns the cached application settings instance."""
    logger.info("Attempting to load application settings...")
    settings_instance = load_settings()
    # Log some non-sensitive settings for verification
    logger.info(f"Settings loaded successfully for Project: {settings_instance.PROJECT_NAME}")
    logger.info(f"Log Level: {settings_instance.LOG_LEVEL}")
    logger.info(f"Cluster: {settings_instance.CLUSTER}")
    logger.info(f"Target collection: {settings_instance.DATABASE_NAME}.{settings_instance.COLLECTION_NAME}")
    # DO NOT log PASSWORD, it is a SecretStr for a reason
    return settings_instance
