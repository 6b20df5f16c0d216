"""
User repository interface definition.

This module defines the contract for user data access operations following
the repository pattern. Implementations translate these domain operations
into calls against a concrete persistence backend.
"""

from abc import ABC, abstractmethod

from auth_service.core.domain.entities.uploaded_file import UploadedFile
from auth_service.core.domain.entities.user import AccessToken, User


class UserRepositoryInterface(ABC):
    """
    Abstract interface for User repositories.

    Implementations must raise only the core exception types: ValidationError,
    NotFoundError, AuthenticationError, FileStorageError or BackendError.
    """

    @abstractmethod
    async def create(self, user: User, profile_photo: UploadedFile | None) -> User:
        """
        Create a new user, storing the profile photo first when one is given.

        Args:
            user: User entity to create, including the password
            profile_photo: Optional photo to upload

        Returns:
            The created user with its backend identifier and photo URL
        """
        raise NotImplementedError

    @abstractmethod
    async def authenticate(self, username: str, password: str) -> AccessToken:
        """Exchange credentials for an access token."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, user_id: str) -> User:
        """
        Retrieve a user by id.

        Raises:
            NotFoundError: If the user doesn't exist
        """
        raise NotImplementedError

    @abstractmethod
    async def find_all(self, first: int, max_results: int) -> list[User]:
        """
        List users with offset pagination.

        Args:
            first: Zero-based index of the first user
            max_results: Maximum number of users to return
        """
        raise NotImplementedError

    @abstractmethod
    async def count(self) -> int:
        raise NotImplementedError

    @abstractmethod
    async def update(self, user_id: str, user: User) -> User:
        """
        Update username, email, role and (when trusted) the profile photo URL.

        Raises:
            NotFoundError: If the user doesn't exist
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, user_id: str) -> None:
        """
        Delete a user.

        Raises:
            NotFoundError: If the user doesn't exist
        """
        raise NotImplementedError
