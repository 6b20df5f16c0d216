"""
S3-backed profile photo storage.

Uses boto3 for the upload; the blocking client call runs in the default
executor so the event loop is never blocked.
"""

import asyncio
import logging
import uuid
from functools import partial
from typing import Any

import boto3
import botocore.exceptions

from auth_service.core.config.settings import Settings
from auth_service.core.domain.entities.uploaded_file import UploadedFile
from auth_service.core.exceptions import FileStorageError
from auth_service.core.interfaces.file_storage_interface import FileStorageInterface

logger = logging.getLogger(__name__)


def build_object_key(file: UploadedFile, key_prefix: str) -> str:
    """Build ``{prefix}/{uuid}{ext}`` for a new object."""
    return f"{key_prefix.rstrip('/')}/{uuid.uuid4()}{file.extension}"


def build_object_url(bucket: str, region: str, key: str) -> str:
    return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"


class S3FileStorage(FileStorageInterface):
    """Real S3 storage implementation using boto3."""

    def __init__(self, bucket_name: str, region_name: str, client: Any | None = None):
        """
        Initialize the storage.

        Args:
            bucket_name: Bucket receiving the photos
            region_name: AWS region of the bucket, used in returned URLs
            client: Optional preconfigured boto3 S3 client
        """
        self.bucket_name = bucket_name
        self.region_name = region_name
        self._client = client or boto3.client("s3", region_name=region_name)

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3FileStorage":
        client_kwargs: dict[str, Any] = {"region_name": settings.AWS_S3_REGION}
        if settings.AWS_S3_ACCESS_KEY and settings.AWS_S3_SECRET_KEY:
            client_kwargs["aws_access_key_id"] = settings.AWS_S3_ACCESS_KEY
            client_kwargs["aws_secret_access_key"] = settings.AWS_S3_SECRET_KEY.get_secret_value()
        return cls(
            bucket_name=settings.AWS_S3_BUCKET,
            region_name=settings.AWS_S3_REGION,
            client=boto3.client("s3", **client_kwargs),
        )

    async def upload(self, file: UploadedFile, key_prefix: str) -> str:
        key = build_object_key(file, key_prefix)
        params: dict[str, Any] = {
            "Bucket": self.bucket_name,
            "Key": key,
            "Body": file.content,
        }
        if file.content_type:
            params["ContentType"] = file.content_type

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, partial(self._client.put_object, **params))
        except (botocore.exceptions.ClientError, botocore.exceptions.BotoCoreError) as e:
            logger.error(f"Failed to upload {key} to bucket {self.bucket_name}: {e}")
            raise FileStorageError(detail=str(e)) from e

        url = build_object_url(self.bucket_name, self.region_name, key)
        logger.info(f"Uploaded profile photo to {url}")
        return url
