"""
User management use cases.

Validates input, then delegates to the user repository through the
identity backend circuit breaker. While the breaker rejects calls, every use
case fails fast with ``ServiceUnavailableError``.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar
from uuid import UUID

from auth_service.application.dtos.user_dtos import Page, UserSummary
from auth_service.core.domain.entities.uploaded_file import UploadedFile
from auth_service.core.domain.entities.user import AccessToken, User
from auth_service.core.exceptions import ServiceUnavailableError
from auth_service.core.interfaces.repositories.user_repository_interface import (
    UserRepositoryInterface,
)
from auth_service.core.interfaces.services.user_service_interface import (
    UserUseCaseInterface,
)
from auth_service.core.resilience import CallNotPermittedError, CircuitBreaker
from auth_service.core.utils.validation import (
    validate_credentials,
    validate_id,
    validate_pagination,
    validate_user_for_creation,
    validate_user_for_update,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

SERVICE_UNAVAILABLE_MESSAGE = "Service unavailable, please try again later"
AUTH_SERVICE_UNAVAILABLE_MESSAGE = "Authentication service unavailable, please try again later"


class UserService(UserUseCaseInterface):
    """Application service implementing the user use cases."""

    def __init__(self, repository: UserRepositoryInterface, circuit_breaker: CircuitBreaker):
        """
        Initialize the user service.

        Args:
            repository: Repository translating user operations to the identity backend
            circuit_breaker: Breaker guarding every repository call
        """
        self._repository = repository
        self._circuit_breaker = circuit_breaker

    async def _guarded(
        self,
        operation: str,
        func: Callable[..., Awaitable[T]],
        *args: Any,
        unavailable_message: str = SERVICE_UNAVAILABLE_MESSAGE,
    ) -> T:
        try:
            return await self._circuit_breaker.call(func, *args)
        except CallNotPermittedError as e:
            logger.warning(f"Circuit breaker rejected {operation}: {e}")
            raise ServiceUnavailableError(unavailable_message, detail=str(e)) from e

    async def create_user(self, user: User, profile_photo: UploadedFile | None) -> User:
        validate_user_for_creation(user)
        created = await self._guarded("create_user", self._repository.create, user, profile_photo)
        logger.info(f"Created user {created.id}")
        return created

    async def authenticate(self, username: str, password: str) -> AccessToken:
        validate_credentials(username, password)
        return await self._guarded(
            "authenticate",
            self._repository.authenticate,
            username,
            password,
            unavailable_message=AUTH_SERVICE_UNAVAILABLE_MESSAGE,
        )

    async def find_user_by_id(self, user_id: str | UUID) -> UserSummary:
        user_id = validate_id(user_id)
        user = await self._guarded("find_user_by_id", self._repository.find_by_id, user_id)
        return UserSummary.from_user(user)

    async def find_all_users(self, page: int, size: int) -> Page[UserSummary]:
        """
        Return one page of users.

        The window and the total are fetched in two separate backend calls,
        so the total may not match the window under concurrent writes.

        Raises:
            ValidationError: If page is negative or size is not positive
        """
        validate_pagination(page, size)
        users = await self._guarded("find_all_users", self._repository.find_all, page * size, size)
        total = await self._guarded("find_all_users", self._repository.count)
        return Page[UserSummary](
            content=[UserSummary.from_user(user) for user in users],
            page=page,
            size=size,
            total_elements=total,
        )

    async def update_user(self, user_id: str | UUID, user: User) -> User:
        user_id = validate_id(user_id)
        validate_user_for_update(user)
        updated = await self._guarded("update_user", self._repository.update, user_id, user)
        logger.info(f"Updated user {user_id}")
        return updated

    async def delete_user(self, user_id: str | UUID) -> None:
        user_id = validate_id(user_id)
        await self._guarded("delete_user", self._repository.delete, user_id)
        logger.info(f"Deleted user {user_id}")
