"""
Application Factory Module.

This module contains the factory function for creating a FastAPI application
with all necessary middleware, routers, and collaborators.
"""

# Standard Library Imports
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

# Third-Party Imports
import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Application-Specific Imports
from auth_service.application.services.user_service import UserService
from auth_service.core.config.settings import Settings, get_settings
from auth_service.core.exceptions import (
    AuthenticationError,
    NotFoundError,
    ValidationError,
)
from auth_service.core.interfaces.file_storage_interface import FileStorageInterface
from auth_service.core.interfaces.identity_backend_interface import IdentityBackendInterface
from auth_service.core.interfaces.services.user_service_interface import UserUseCaseInterface
from auth_service.core.logging_config import setup_logging
from auth_service.core.resilience import (
    CircuitBreaker,
    CircuitBreakerConfig,
    ResilienceManager,
)
from auth_service.infrastructure.aws.file_storage_provider import create_file_storage
from auth_service.infrastructure.factories.user_repository_factory import create_user_repository
from auth_service.infrastructure.identity.keycloak_admin_client import KeycloakAdminClient
from auth_service.infrastructure.security.jwt.token_verifier import TokenVerifier
from auth_service.presentation.api.v1.api_router import api_v1_router
from auth_service.presentation.api.v1.endpoints.health import router as health_router
from auth_service.presentation.exception_handlers import register_exception_handlers
from auth_service.presentation.middleware.authentication import AuthenticationMiddleware
from auth_service.presentation.middleware.logging import LoggingMiddleware
from auth_service.presentation.middleware.request_id import RequestIdMiddleware

logger = logging.getLogger(__name__)

IDENTITY_BREAKER_NAME = "keycloak"


def build_identity_circuit_breaker(settings: Settings, manager: ResilienceManager) -> CircuitBreaker:
    """Create (or fetch) the breaker guarding identity backend calls."""
    config = CircuitBreakerConfig(
        name=IDENTITY_BREAKER_NAME,
        sliding_window_size=settings.CIRCUIT_BREAKER_SLIDING_WINDOW_SIZE,
        failure_rate_threshold=settings.CIRCUIT_BREAKER_FAILURE_RATE_THRESHOLD,
        wait_duration_in_open_state=settings.CIRCUIT_BREAKER_WAIT_DURATION_SECONDS,
        permitted_calls_in_half_open_state=settings.CIRCUIT_BREAKER_HALF_OPEN_CALLS,
        # Caller mistakes say nothing about backend health
        ignored_exceptions=(ValidationError, NotFoundError, AuthenticationError),
    )
    return manager.get_or_create_circuit_breaker(IDENTITY_BREAKER_NAME, config)


def build_user_service(
    settings: Settings,
    identity_backend: IdentityBackendInterface,
    file_storage: FileStorageInterface,
    manager: ResilienceManager,
) -> UserUseCaseInterface:
    repository = create_user_repository(settings, identity_backend, file_storage)
    return UserService(repository, build_identity_circuit_breaker(settings, manager))


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Build the collaborators that were not supplied to ``create_application``
    and release them on shutdown.
    """
    state = fastapi_app.state
    settings: Settings = state.settings
    http_client: httpx.AsyncClient | None = None

    try:
        if state.user_service is None or state.token_verifier is None:
            http_client = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)

        if state.user_service is None:
            identity_backend = KeycloakAdminClient.from_settings(settings, http_client)
            if not settings.TESTING:
                await identity_backend.connect(
                    attempts=settings.KEYCLOAK_CONNECT_ATTEMPTS,
                    delay_seconds=settings.KEYCLOAK_CONNECT_DELAY_SECONDS,
                )
            state.user_service = build_user_service(
                settings, identity_backend, create_file_storage(settings), state.resilience_manager
            )
            logger.info("User service initialized")

        if state.token_verifier is None:
            state.token_verifier = TokenVerifier.from_settings(settings, http_client)
            logger.info(f"Token verifier initialized with JWKS at {settings.keycloak_jwks_url}")

        yield
    finally:
        if http_client is not None:
            await http_client.aclose()
            logger.info("HTTP client closed")


def create_application(
    settings_override: Settings | None = None,
    user_service_override: UserUseCaseInterface | None = None,
    token_verifier_override: TokenVerifier | None = None,
    configure_logging: bool = True,
) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    Args:
        settings_override: Override default settings (useful for testing)
        user_service_override: Use this user service instead of building one at startup
        token_verifier_override: Use this token verifier instead of the JWKS-backed one
        configure_logging: Apply the logging configuration derived from settings

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    current_settings = settings_override or get_settings()

    if configure_logging:
        setup_logging(current_settings)
    logger.info(f"Creating application for environment: {current_settings.ENVIRONMENT}")

    app_instance = FastAPI(
        title=current_settings.API_TITLE,
        description=current_settings.API_DESCRIPTION,
        version=current_settings.API_VERSION,
        openapi_url="/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    register_exception_handlers(app_instance)

    app_instance.state.settings = current_settings
    app_instance.state.resilience_manager = ResilienceManager()
    app_instance.state.user_service = user_service_override
    app_instance.state.token_verifier = token_verifier_override

    # Last added runs first: CORS, request id, logging, authentication
    app_instance.add_middleware(
        AuthenticationMiddleware, public_paths=set(current_settings.PUBLIC_PATHS)
    )
    app_instance.add_middleware(LoggingMiddleware)
    app_instance.add_middleware(RequestIdMiddleware)
    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=current_settings.CORS_ORIGINS,
        allow_credentials=current_settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=current_settings.CORS_ALLOW_METHODS,
        allow_headers=current_settings.CORS_ALLOW_HEADERS,
    )

    app_instance.include_router(health_router)
    app_instance.include_router(api_v1_router, prefix=current_settings.API_V1_STR)

    return app_instance
