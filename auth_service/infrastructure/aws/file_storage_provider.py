"""
File storage provider.

Selects between the real S3 storage and the in-memory implementation based
on application configuration.
"""

from auth_service.core.config.settings import Settings
from auth_service.core.interfaces.file_storage_interface import FileStorageInterface
from auth_service.infrastructure.aws.in_memory_file_storage import InMemoryFileStorage
from auth_service.infrastructure.aws.s3_file_storage import S3FileStorage


def create_file_storage(settings: Settings, use_in_memory: bool | None = None) -> FileStorageInterface:
    """
    Build the profile photo storage.

    Args:
        settings: Application settings
        use_in_memory: If True, force in-memory implementation,
                       If False, force S3,
                       If None, follow ``settings.TESTING``

    Returns:
        A FileStorageInterface implementation
    """
    if use_in_memory is None:
        use_in_memory = settings.TESTING

    if use_in_memory:
        return InMemoryFileStorage(bucket_name=settings.AWS_S3_BUCKET, region_name=settings.AWS_S3_REGION)
    return S3FileStorage.from_settings(settings)
