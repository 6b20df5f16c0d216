"""
User repository factory.

Selects the repository implementation named by the
``AUTH_PERSISTENCE_PROVIDER`` setting.
"""

import logging

from auth_service.core.config.settings import Settings
from auth_service.core.exceptions import ConfigurationError
from auth_service.core.interfaces.file_storage_interface import FileStorageInterface
from auth_service.core.interfaces.identity_backend_interface import IdentityBackendInterface
from auth_service.core.interfaces.repositories.user_repository_interface import (
    UserRepositoryInterface,
)
from auth_service.infrastructure.repositories.keycloak_user_repository import (
    KeycloakUserRepository,
)

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("keycloak",)


def create_user_repository(
    settings: Settings,
    identity_backend: IdentityBackendInterface,
    file_storage: FileStorageInterface,
) -> UserRepositoryInterface:
    """
    Build the configured user repository.

    Args:
        settings: Application settings
        identity_backend: Client for the identity provider
        file_storage: Profile photo storage

    Returns:
        A UserRepositoryInterface implementation

    Raises:
        ConfigurationError: If the provider name is not supported
    """
    provider = (settings.AUTH_PERSISTENCE_PROVIDER or "").strip().lower()

    if provider == "keycloak":
        logger.info("Using Keycloak user repository")
        return KeycloakUserRepository(
            identity_backend=identity_backend,
            storage=file_storage,
            client_id=settings.KEYCLOAK_CLIENT_ID,
            client_secret=settings.KEYCLOAK_CLIENT_SECRET.get_secret_value(),
            token_scope=settings.KEYCLOAK_TOKEN_SCOPE,
            photo_key_prefix=settings.PROFILE_PHOTO_KEY_PREFIX,
            photo_upload_required=settings.PROFILE_PHOTO_UPLOAD_REQUIRED,
        )

    raise ConfigurationError(
        f"Unsupported persistence provider: {settings.AUTH_PERSISTENCE_PROVIDER}",
        detail={"supported": list(SUPPORTED_PROVIDERS)},
    )
