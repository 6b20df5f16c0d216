"""
Shared fixtures for the test suite.

Provides test settings, the in-memory collaborators, and factories for
users and uploaded photos.
"""

import pytest

from auth_service.core.config.settings import Settings
from auth_service.core.domain.entities.uploaded_file import UploadedFile
from auth_service.core.domain.entities.user import User, UserRole
from auth_service.infrastructure.aws.in_memory_file_storage import InMemoryFileStorage
from auth_service.infrastructure.repositories.keycloak_user_repository import (
    KeycloakUserRepository,
)
from auth_service.tests.mocks.fake_identity_backend import FakeIdentityBackend


@pytest.fixture
def test_settings() -> Settings:
    """Settings that never reach external services."""
    return Settings(
        ENVIRONMENT="test",
        TESTING=True,
        LOG_FILE=None,
        KEYCLOAK_SERVER_URL="http://keycloak.test",
        KEYCLOAK_REALM="test",
        KEYCLOAK_CLIENT_ID="auth-client",
        KEYCLOAK_CLIENT_SECRET="client-secret",
        AWS_S3_BUCKET="photos",
        AWS_S3_REGION="sa-east-1",
    )


@pytest.fixture
def identity_backend() -> FakeIdentityBackend:
    return FakeIdentityBackend()


@pytest.fixture
def file_storage() -> InMemoryFileStorage:
    return InMemoryFileStorage(bucket_name="photos", region_name="sa-east-1")


@pytest.fixture
def repository(identity_backend, file_storage) -> KeycloakUserRepository:
    return KeycloakUserRepository(
        identity_backend=identity_backend,
        storage=file_storage,
        client_id="auth-client",
        client_secret="client-secret",
    )


@pytest.fixture
def new_user() -> User:
    return User(
        username="alice",
        email="alice@example.com",
        password="s3cret!",
        role=UserRole.USER,
    )


@pytest.fixture
def photo() -> UploadedFile:
    return UploadedFile(content=b"\x89PNG...", content_type="image/png", filename="avatar.png")
