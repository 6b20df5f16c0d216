"""
Base class for user repositories.

Holds the profile photo storage shared by every backend implementation.
"""

import logging

from auth_service.core.domain.entities.uploaded_file import UploadedFile
from auth_service.core.exceptions import FileStorageError
from auth_service.core.interfaces.file_storage_interface import FileStorageInterface
from auth_service.core.interfaces.repositories.user_repository_interface import (
    UserRepositoryInterface,
)

logger = logging.getLogger(__name__)


class AbstractUserRepository(UserRepositoryInterface):
    """User repository base providing profile photo upload."""

    def __init__(
        self,
        storage: FileStorageInterface,
        photo_key_prefix: str = "profile-photos",
        photo_upload_required: bool = False,
    ):
        """
        Args:
            storage: Object store receiving profile photos
            photo_key_prefix: Key namespace; the username is appended
            photo_upload_required: If True a failed upload aborts the caller,
                otherwise the failure is logged and an empty URL is used
        """
        self._storage = storage
        self._photo_key_prefix = photo_key_prefix.rstrip("/")
        self._photo_upload_required = photo_upload_required

    async def upload_profile_photo(self, username: str, photo: UploadedFile | None) -> str:
        """
        Upload ``photo`` under ``{prefix}/{username}``.

        Returns:
            The stored photo URL, or an empty string when no photo was given
            or a best-effort upload failed

        Raises:
            FileStorageError: If the upload fails and uploads are required
        """
        if photo is None or not photo.content:
            return ""
        try:
            return await self._storage.upload(photo, f"{self._photo_key_prefix}/{username}")
        except FileStorageError as e:
            logger.error(f"Profile photo upload failed for {username}: {e}")
            if self._photo_upload_required:
                raise
            return ""
