"""Storage repository for S3-compatible object operations."""

import asyncio
from functools import partial
from typing import Optional
from botocore.client import BaseClient
from ..config import Settings, get_storage_client, get_bucket_name


class StorageRepository:
    """Repository for raw object operations against one bucket.

    boto3 is blocking, so every call is pushed to the default executor.
    """

    def __init__(self, client: BaseClient, bucket_name: str):
        self.client = client
        self.bucket_name = bucket_name

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "StorageRepository":
        """Build repository for the configured storage provider."""
        return cls(get_storage_client(settings), get_bucket_name(settings))

    async def _run(self, func, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, **kwargs))

    async def upload_file(
        self, file_content: bytes, key: str, content_type: str
    ) -> str:
        """
        Upload file to storage.
        Args:
            file_content: File content as bytes
            key: Storage key (path)
            content_type: MIME type
        Returns:
            Storage key
        """
        await self._run(
            self.client.put_object,
            Bucket=self.bucket_name,
            Key=key,
            Body=file_content,
            ContentType=content_type,
        )
        return key

    async def delete_file(self, key: str) -> None:
        """
        Delete file from storage.
        Raises botocore errors; callers decide whether failure matters.
        """
        await self._run(self.client.delete_object, Bucket=self.bucket_name, Key=key)

    async def head_file(self, key: str) -> dict:
        """
        Fetch object metadata.
        Returns:
            Dict with content_type and size
        """
        response = await self._run(
            self.client.head_object, Bucket=self.bucket_name, Key=key
        )
        return {
            "content_type": response.get("ContentType"),
            "size": response.get("ContentLength"),
        }
