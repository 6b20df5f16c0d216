"""
User use case interface.

Public contract consumed by the API layer.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from auth_service.application.dtos.user_dtos import Page, UserSummary
from auth_service.core.domain.entities.uploaded_file import UploadedFile
from auth_service.core.domain.entities.user import AccessToken, User


class UserUseCaseInterface(ABC):
    """Use cases for managing users."""

    @abstractmethod
    async def create_user(self, user: User, profile_photo: UploadedFile | None) -> User:
        pass

    @abstractmethod
    async def authenticate(self, username: str, password: str) -> AccessToken:
        pass

    @abstractmethod
    async def find_user_by_id(self, user_id: str | UUID) -> UserSummary:
        pass

    @abstractmethod
    async def find_all_users(self, page: int, size: int) -> Page[UserSummary]:
        pass

    @abstractmethod
    async def update_user(self, user_id: str | UUID, user: User) -> User:
        pass

    @abstractmethod
    async def delete_user(self, user_id: str | UUID) -> None:
        pass
