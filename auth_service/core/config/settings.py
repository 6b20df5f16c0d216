"""
Application settings module.

This module provides configuration settings for the service: identity
provider coordinates, object storage, circuit breaker tuning, token
verification and logging.
"""

# Standard Library Imports
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Self

# Third-Party Imports
from pydantic import ConfigDict, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings using Pydantic for validation and environment variable loading."""

    # API Information
    API_TITLE: str = "Auth Service API"
    API_DESCRIPTION: str = "User management backed by an external identity provider"
    API_VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"

    # Environment
    TESTING: bool = False
    ENVIRONMENT: str = "development"  # development, staging, production, test

    # Server Settings
    SERVER_HOST: str = "127.0.0.1"
    SERVER_PORT: int = 8080

    # Identity provider (Keycloak)
    KEYCLOAK_SERVER_URL: str = "http://localhost:8180"
    KEYCLOAK_REALM: str = "auth-service"
    KEYCLOAK_CLIENT_ID: str = "auth-service-client"
    KEYCLOAK_CLIENT_SECRET: SecretStr = SecretStr("")
    KEYCLOAK_ADMIN_USERNAME: str = "admin"
    KEYCLOAK_ADMIN_PASSWORD: SecretStr = SecretStr("")
    KEYCLOAK_ADMIN_CLIENT_ID: str = "admin-cli"
    KEYCLOAK_ADMIN_REALM: str = "master"
    KEYCLOAK_TOKEN_SCOPE: str = "profile email roles openid"
    KEYCLOAK_CONNECT_ATTEMPTS: int = Field(default=5, ge=1)
    KEYCLOAK_CONNECT_DELAY_SECONDS: float = Field(default=5.0, ge=0)
    HTTP_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    # Object storage (S3)
    AWS_S3_BUCKET: str = "auth-service-profile-photos"
    AWS_S3_REGION: str = "us-east-1"
    AWS_S3_ACCESS_KEY: str | None = None
    AWS_S3_SECRET_KEY: SecretStr | None = None
    PROFILE_PHOTO_KEY_PREFIX: str = "profile-photos"
    PROFILE_PHOTO_UPLOAD_REQUIRED: bool = False

    # Persistence provider selection
    AUTH_PERSISTENCE_PROVIDER: str = "keycloak"

    # Circuit breaker
    CIRCUIT_BREAKER_SLIDING_WINDOW_SIZE: int = Field(default=5, gt=0)
    CIRCUIT_BREAKER_FAILURE_RATE_THRESHOLD: float = Field(default=100.0, gt=0, le=100)
    CIRCUIT_BREAKER_WAIT_DURATION_SECONDS: float = Field(default=10.0, ge=0)
    CIRCUIT_BREAKER_HALF_OPEN_CALLS: int = Field(default=3, gt=0)

    # Bearer token verification
    JWT_ALGORITHMS: list[str] = Field(default_factory=lambda: ["RS256"])
    JWT_AUDIENCE: str | None = None
    JWT_ISSUER: str | None = None
    JWKS_CACHE_SECONDS: int = 300

    # Public paths, not subject to bearer authentication; signup and login
    # under API_V1_STR are always added
    PUBLIC_PATHS: list[str] = Field(default_factory=lambda: [
        "/openapi.json",
        "/docs",
        "/docs/oauth2-redirect",
        "/redoc",
        "/health",
    ])

    # CORS Settings
    CORS_ORIGINS: list[str] = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list[str] = ["*"]
    CORS_ALLOW_HEADERS: list[str] = ["*"]

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = Field(default="logs/application.log")
    LOG_MAX_BYTES: int = 10 * 1024 * 1024
    LOG_BACKUP_COUNT: int = 5

    model_config = ConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="allow"
    )

    @field_validator("LOG_LEVEL")
    def validate_log_level(cls, v: str) -> str:
        """Validate that log level is one of the valid levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @field_validator("KEYCLOAK_SERVER_URL")
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @model_validator(mode="after")
    def add_auth_public_paths(self) -> Self:
        for endpoint in ("signup", "login"):
            path = f"{self.API_V1_STR}/auth/{endpoint}"
            if path not in self.PUBLIC_PATHS:
                self.PUBLIC_PATHS.append(path)
        return self

    @model_validator(mode="after")
    def ensure_log_directory(self) -> Self:
        """Create the log directory when file logging is enabled."""
        if self.LOG_FILE and not self.TESTING:
            log_dir = Path(self.LOG_FILE).parent
            if log_dir and not log_dir.is_dir():
                log_dir.mkdir(parents=True, exist_ok=True)
                logger.info(f"Created logs directory: {log_dir}")
        return self

    @property
    def keycloak_realm_url(self) -> str:
        return f"{self.KEYCLOAK_SERVER_URL}/realms/{self.KEYCLOAK_REALM}"

    @property
    def keycloak_jwks_url(self) -> str:
        return f"{self.keycloak_realm_url}/protocol/openid-connect/certs"


@lru_cache
def get_settings() -> Settings:
    """
    Factory function to get the application settings.

    This function enables dependency injection of settings in FastAPI.
    Under pytest the returned instance is switched into test mode so that
    in-memory collaborators are selected and no log files are written.

    Returns:
        The application settings instance
    """
    current_settings = Settings()
    if os.environ.get("ENVIRONMENT") == "test" or os.environ.get("PYTEST_CURRENT_TEST"):
        logger.info("Running in TEST environment")
        current_settings.TESTING = True
        current_settings.ENVIRONMENT = "test"
        current_settings.LOG_FILE = None
    return current_settings
