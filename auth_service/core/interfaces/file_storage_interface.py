"""
File storage interface definition.

Abstraction boundary for the object store that keeps profile photos.
"""

from abc import ABC, abstractmethod

from auth_service.core.domain.entities.uploaded_file import UploadedFile


class FileStorageInterface(ABC):
    """Interface for profile photo storage."""

    @abstractmethod
    async def upload(self, file: UploadedFile, key_prefix: str) -> str:
        """
        Store ``file`` under ``key_prefix``.

        Args:
            file: Photo bytes and metadata
            key_prefix: Key namespace, e.g. ``profile-photos/alice``

        Returns:
            A URL from which the stored object can be retrieved

        Raises:
            FileStorageError: If the upload fails
        """
        pass
