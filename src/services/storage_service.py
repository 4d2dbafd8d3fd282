"""Storage service: validated uploads to object storage."""

import io
from typing import Optional
from PIL import Image, UnidentifiedImageError
from ..config import Settings, settings as default_settings, get_bucket_name, get_endpoint_url
from ..core.exceptions import FileTooLargeError, StorageError, UnsupportedFileTypeError
from ..repositories.storage_repo import StorageRepository
from ..schemas.upload import MediaMetadata, StoredObject, UploadItem
from ..utils.constants import MediaKind
from ..utils.helpers import format_file_size, generate_storage_key
from ..utils.logger import get_logger

logger = get_logger(__name__)


class StorageService:
    """Service for storage operations."""

    def __init__(self, storage_repo: StorageRepository, settings: Optional[Settings] = None):
        self.storage_repo = storage_repo
        self.settings = settings or default_settings

    def max_size_bytes(self, kind: MediaKind) -> int:
        """Size ceiling for a media kind."""
        if kind is MediaKind.VIDEO:
            return self.settings.max_video_size_bytes
        return self.settings.max_image_size_bytes

    def validate_file(self, item: UploadItem, kind: MediaKind) -> None:
        """
        Validate MIME type and size for the media kind.
        Raises before any network call is made.
        """
        if item.content_type not in kind.allowed_types:
            raise UnsupportedFileTypeError(
                f"File type {item.content_type} is not allowed for {kind.value} uploads. "
                f"Allowed types: {', '.join(sorted(kind.allowed_types))}"
            )

        max_size = self.max_size_bytes(kind)
        if item.size > max_size:
            raise FileTooLargeError(
                f"File size {format_file_size(item.size)} exceeds maximum allowed size "
                f"of {format_file_size(max_size)} for {kind.value} uploads"
            )

    def build_url(self, key: str) -> str:
        """Public URL of a stored object."""
        bucket = get_bucket_name(self.settings)
        endpoint = get_endpoint_url(self.settings)
        if endpoint:
            return f"{endpoint.rstrip('/')}/{bucket}/{key}"
        return f"https://{bucket}.s3.{self.settings.aws_region}.amazonaws.com/{key}"

    async def upload_file(self, item: UploadItem, kind: MediaKind) -> StoredObject:
        """Validate and upload a file under the namespace of its media kind."""
        self.validate_file(item, kind)

        key = generate_storage_key(kind.namespace, item.filename)
        try:
            await self.storage_repo.upload_file(
                file_content=item.content, key=key, content_type=item.content_type
            )
        except Exception as e:
            logger.error("Failed to upload file to storage", key=key, error=str(e))
            raise StorageError(f"Failed to upload file to storage: {e}") from e

        content_type, size = item.content_type, item.size
        if self.settings.verify_uploads:
            try:
                info = await self.storage_repo.head_file(key)
                content_type = info.get("content_type") or content_type
                size = info.get("size") if info.get("size") is not None else size
            except Exception as e:
                logger.warning("Failed to refresh object metadata", key=key, error=str(e))

        return StoredObject(
            url=self.build_url(key),
            key=key,
            content_type=content_type,
            size=size,
            metadata=self.extract_metadata(item, kind),
        )

    async def delete_file(self, key: str) -> bool:
        """Delete file from storage. Best-effort: failures are logged, not raised."""
        try:
            await self.storage_repo.delete_file(key)
            return True
        except Exception as e:
            logger.error("Failed to delete object from storage", key=key, error=str(e))
            return False

    async def get_file_info(self, key: str) -> dict:
        """Get content type and size of a stored object."""
        try:
            return await self.storage_repo.head_file(key)
        except Exception as e:
            raise StorageError(f"Failed to read object metadata: {e}") from e

    def extract_metadata(self, item: UploadItem, kind: MediaKind) -> Optional[MediaMetadata]:
        """Read image dimensions; videos get their duration from processing."""
        if kind is not MediaKind.IMAGE:
            return None
        try:
            with Image.open(io.BytesIO(item.content)) as image:
                width, height = image.size
        except (UnidentifiedImageError, OSError, ValueError):
            logger.info("Could not read image dimensions", filename=item.filename)
            return None
        return MediaMetadata(width=width, height=height)
