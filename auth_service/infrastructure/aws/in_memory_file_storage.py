"""
In-memory profile photo storage for testing.

Returns URLs of the same shape as the S3 implementation so that stored
photos pass the trusted-URL check.
"""

from auth_service.core.domain.entities.uploaded_file import UploadedFile
from auth_service.core.interfaces.file_storage_interface import FileStorageInterface
from auth_service.infrastructure.aws.s3_file_storage import build_object_key, build_object_url


class InMemoryFileStorage(FileStorageInterface):
    """In-memory storage implementation for testing."""

    def __init__(self, bucket_name: str = "test-bucket", region_name: str = "us-east-1"):
        self.bucket_name = bucket_name
        self.region_name = region_name
        self.objects: dict[str, UploadedFile] = {}

    async def upload(self, file: UploadedFile, key_prefix: str) -> str:
        key = build_object_key(file, key_prefix)
        self.objects[key] = file
        return build_object_url(self.bucket_name, self.region_name, key)
