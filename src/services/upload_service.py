"""Upload service: orchestrates storage writes and video processing."""

from typing import List, Optional, Sequence
from ..config import Settings, settings as default_settings
from ..core.exceptions import BatchValidationError, UploadError
from ..schemas.upload import UploadData, UploadItem, UploadOutcome
from ..utils.constants import MediaKind, UploadStatus
from ..utils.logger import get_logger
from ..utils.results import Err, Ok, gather_settled
from .storage_service import StorageService
from .video_service import VideoService

logger = get_logger(__name__)


class UploadService:
    """Service for single and batch video/image uploads."""

    def __init__(
        self,
        storage_service: StorageService,
        video_service: VideoService,
        settings: Optional[Settings] = None,
    ):
        self.storage_service = storage_service
        self.video_service = video_service
        self.settings = settings or default_settings

    async def upload_video(self, item: UploadItem, title: Optional[str] = None) -> UploadOutcome:
        """
        Upload a video to storage and create its processing asset.
        If asset creation fails, the stored object is deleted before the
        error is raised.
        """
        try:
            stored = await self.storage_service.upload_file(item, MediaKind.VIDEO)
            try:
                asset = await self.video_service.create_asset(
                    stored.url, title or item.title or item.filename
                )
            except Exception as e:
                await self._discard(stored.key)
                raise UploadError(f"Video processing failed: {e}") from e

            return UploadOutcome.success(item.filename, UploadData.from_results(stored, asset))
        except UploadError as e:
            logger.error("Failed to upload video", filename=item.filename, error=str(e))
            raise
        except Exception as e:
            logger.error("Failed to upload video", filename=item.filename, error=str(e))
            raise UploadError(f"Upload failed: {e}") from e

    async def upload_image(self, item: UploadItem) -> UploadOutcome:
        """Upload an image to storage."""
        try:
            stored = await self.storage_service.upload_file(item, MediaKind.IMAGE)
            return UploadOutcome.success(item.filename, UploadData.from_results(stored))
        except UploadError as e:
            logger.error("Failed to upload image", filename=item.filename, error=str(e))
            raise
        except Exception as e:
            logger.error("Failed to upload image", filename=item.filename, error=str(e))
            raise UploadError(f"Upload failed: {e}") from e

    async def upload_videos(
        self, items: Sequence[UploadItem], titles: Optional[Sequence[Optional[str]]] = None
    ) -> List[UploadOutcome]:
        """Upload several videos; per-item failures become failed outcomes."""
        return await self._upload_batch(items, MediaKind.VIDEO, titles)

    async def upload_images(self, items: Sequence[UploadItem]) -> List[UploadOutcome]:
        """Upload several images; per-item failures become failed outcomes."""
        return await self._upload_batch(items, MediaKind.IMAGE)

    async def get_video_status(self, asset_id: str) -> str:
        """Get the processing status of a video asset."""
        return await self.video_service.get_asset_status(asset_id)

    async def create_live_stream(self):
        """Create a live stream on the processing service."""
        return await self.video_service.create_live_stream()

    def validate_batch(
        self, items: Sequence, titles: Optional[Sequence[Optional[str]]] = None
    ) -> None:
        """Reject a whole batch before any I/O. Only the counts are checked."""
        max_files = self.settings.max_files_per_request
        if len(items) > max_files:
            raise BatchValidationError(
                f"Too many files: {len(items)} supplied, at most {max_files} allowed per request"
            )
        if titles and len(titles) != len(items):
            raise BatchValidationError(
                f"Number of titles ({len(titles)}) does not match number of files ({len(items)})"
            )

    async def _upload_batch(
        self,
        items: Sequence[UploadItem],
        kind: MediaKind,
        titles: Optional[Sequence[Optional[str]]] = None,
    ) -> List[UploadOutcome]:
        self.validate_batch(items, titles)
        if not items:
            return []

        titles = list(titles) if titles else [None] * len(items)
        items = [
            item.model_copy(update={"title": title or item.title or item.filename})
            for item, title in zip(items, titles)
        ]

        logger.info("Starting batch upload", kind=kind.value, files=len(items))
        size = self.settings.max_concurrent_uploads
        outcomes: List[UploadOutcome] = []
        for start in range(0, len(items), size):
            outcomes.extend(await self._upload_chunk(items[start:start + size], kind))

        failed = sum(1 for outcome in outcomes if outcome.status == UploadStatus.FAILED)
        logger.info(
            "Finished batch upload",
            kind=kind.value,
            succeeded=len(outcomes) - failed,
            failed=failed,
        )
        return outcomes

    async def _upload_chunk(self, items: List[UploadItem], kind: MediaKind) -> List[UploadOutcome]:
        stored_results = await gather_settled(
            self.storage_service.upload_file(item, kind) for item in items
        )

        # Slots for items whose storage write succeeded
        pending = [i for i, result in enumerate(stored_results) if isinstance(result, Ok)]
        asset_results = {}
        if kind is MediaKind.VIDEO and pending:
            settled = await gather_settled(
                self.video_service.create_asset(stored_results[i].value.url, items[i].title)
                for i in pending
            )
            asset_results = dict(zip(pending, settled))

            orphaned = [i for i, result in asset_results.items() if isinstance(result, Err)]
            if orphaned:
                await gather_settled(
                    self._discard(stored_results[i].value.key) for i in orphaned
                )

        outcomes = []
        for i, item in enumerate(items):
            stored = stored_results[i]
            if isinstance(stored, Err):
                outcomes.append(UploadOutcome.failed(item.filename, stored.reason))
                continue

            asset = asset_results.get(i)
            if isinstance(asset, Err):
                outcomes.append(
                    UploadOutcome.failed(item.filename, f"Video processing failed: {asset.reason}")
                )
                continue

            data = UploadData.from_results(stored.value, asset.value if asset else None)
            outcomes.append(UploadOutcome.success(item.filename, data))
        return outcomes

    async def _discard(self, key: str) -> None:
        """Compensating delete of an object whose processing failed."""
        logger.info("Removing stored object after processing failure", key=key)
        await self.storage_service.delete_file(key)
