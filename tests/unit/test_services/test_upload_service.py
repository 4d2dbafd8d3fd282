"""Unit tests for upload service."""

import asyncio
import re
import pytest
from unittest.mock import AsyncMock, MagicMock
from src.core.exceptions import (
    BatchValidationError,
    FileTooLargeError,
    StorageError,
    UploadError,
    VideoProcessingError,
)
from src.schemas.upload import ProcessingAsset, StoredObject
from src.services.storage_service import StorageService
from src.services.upload_service import UploadService
from src.services.video_service import VideoService
from src.utils.constants import AssetStatus, MediaKind


def stored_for(item, kind):
    key = f"{kind.namespace}/{item.filename}"
    return StoredObject(
        url=f"https://test-bucket.s3.us-east-1.amazonaws.com/{key}",
        key=key,
        content_type=item.content_type,
        size=item.size,
    )


def asset_for(url, title):
    return ProcessingAsset(id=f"asset-{title}", title=title, status="preparing", s3_url=url)


@pytest.fixture
def storage():
    storage = MagicMock(spec=StorageService)

    async def upload_file(item, kind):
        return stored_for(item, kind)

    storage.upload_file = AsyncMock(side_effect=upload_file)
    storage.delete_file = AsyncMock(return_value=True)
    return storage


@pytest.fixture
def video():
    video = MagicMock(spec=VideoService)

    async def create_asset(url, title):
        return asset_for(url, title)

    video.create_asset = AsyncMock(side_effect=create_asset)
    video.get_asset_status = AsyncMock(return_value="ready")
    return video


@pytest.fixture
def service(storage, video, test_settings):
    return UploadService(storage, video, test_settings)


@pytest.mark.asyncio
async def test_upload_video_scenario(upload_service, storage_repo, make_item):
    """Test single video upload end to end through the real clients."""
    item = make_item("clip.mp4", "video/mp4", 50)

    outcome = await upload_service.upload_video(item)

    assert outcome.status == "success"
    assert outcome.file_name == "clip.mp4"
    assert outcome.data.title == "clip.mp4"
    assert outcome.data.status == AssetStatus.PREPARING
    assert re.fullmatch(r"videos/[0-9a-f\-]{36}-clip\.mp4", outcome.data.key)
    storage_repo.upload_file.assert_awaited_once()
    storage_repo.delete_file.assert_not_awaited()


@pytest.mark.asyncio
async def test_upload_video_uses_title(service, video, make_item):
    """Test caller title is passed to asset creation."""
    outcome = await service.upload_video(make_item(), "My Video")

    assert outcome.data.title == "My Video"
    assert video.create_asset.await_args.args[1] == "My Video"


@pytest.mark.asyncio
async def test_upload_video_storage_failure(service, storage, video, make_item):
    """Test storage failure raises without processing or cleanup."""
    storage.upload_file.side_effect = StorageError("Failed to upload file to storage: boom")

    with pytest.raises(StorageError):
        await service.upload_video(make_item())

    video.create_asset.assert_not_awaited()
    storage.delete_file.assert_not_awaited()


@pytest.mark.asyncio
async def test_upload_video_processing_failure_deletes_object(service, storage, video, make_item):
    """Test processing failure removes the stored object and raises."""
    video.create_asset.side_effect = VideoProcessingError("Failed to process video with Mux")

    with pytest.raises(UploadError, match="Video processing failed"):
        await service.upload_video(make_item())

    storage.delete_file.assert_awaited_once_with("videos/clip.mp4")


@pytest.mark.asyncio
async def test_upload_video_cleanup_failure_not_surfaced(service, storage, video, make_item):
    """Test a failing compensating delete does not mask the processing error."""
    video.create_asset.side_effect = VideoProcessingError("mux down")
    storage.delete_file.return_value = False

    with pytest.raises(UploadError, match="mux down"):
        await service.upload_video(make_item())

    storage.delete_file.assert_awaited_once()


@pytest.mark.asyncio
async def test_upload_video_wraps_unexpected_errors(service, storage, make_item):
    """Test unexpected errors become client upload errors."""
    storage.upload_file.side_effect = RuntimeError("socket closed")

    with pytest.raises(UploadError) as exc_info:
        await service.upload_video(make_item())

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Upload failed: socket closed"


@pytest.mark.asyncio
async def test_upload_image_too_large(upload_service, storage_repo, make_item):
    """Test 6MB image is rejected before any storage call."""
    item = make_item("photo.png", "image/png", 6 * 1024 * 1024)

    with pytest.raises(FileTooLargeError) as exc_info:
        await upload_service.upload_image(item)

    assert exc_info.value.status_code == 413
    storage_repo.upload_file.assert_not_awaited()


@pytest.mark.asyncio
async def test_upload_image_success(service, video, make_item):
    """Test image upload skips processing."""
    outcome = await service.upload_image(make_item("photo.png", "image/png", 10))

    assert outcome.status == "success"
    assert outcome.data.key == "images/photo.png"
    assert outcome.data.s3_url == outcome.data.url
    video.create_asset.assert_not_called()


@pytest.mark.asyncio
async def test_batch_preserves_input_order(service, storage, make_item):
    """Test outcomes follow input order whatever the completion order."""
    delays = {"a.mp4": 0.03, "b.mp4": 0.0, "c.mp4": 0.02, "d.mp4": 0.01, "e.mp4": 0.0}

    async def slow_upload(item, kind):
        await asyncio.sleep(delays[item.filename])
        return stored_for(item, kind)

    storage.upload_file.side_effect = slow_upload
    items = [make_item(name) for name in delays]

    outcomes = await service.upload_videos(items)

    assert len(outcomes) == len(items)
    assert [o.file_name for o in outcomes] == list(delays)
    assert all(o.status == "success" for o in outcomes)


@pytest.mark.asyncio
async def test_batch_storage_failure_skips_processing(service, storage, video, make_item):
    """Test a failed storage write never reaches asset creation."""

    async def upload(item, kind):
        if item.filename == "bad.mp4":
            raise StorageError("Failed to upload file to storage: denied")
        return stored_for(item, kind)

    storage.upload_file.side_effect = upload
    items = [make_item("ok.mp4"), make_item("bad.mp4"), make_item("fine.mp4")]

    outcomes = await service.upload_videos(items)

    assert [o.status for o in outcomes] == ["success", "failed", "success"]
    assert outcomes[1].error == "Failed to upload file to storage: denied"
    assert outcomes[1].file_name == "bad.mp4"
    urls = [call.args[0] for call in video.create_asset.await_args_list]
    assert not any(url.endswith("bad.mp4") for url in urls)
    assert video.create_asset.await_count == 2
    storage.delete_file.assert_not_awaited()


@pytest.mark.asyncio
async def test_batch_processing_failure_deletes_once(service, storage, video, make_item):
    """Test processing failure triggers exactly one delete for that item."""

    async def create_asset(url, title):
        if title == "broken.mp4":
            raise VideoProcessingError("Failed to process video with Mux")
        return asset_for(url, title)

    video.create_asset.side_effect = create_asset
    items = [make_item("one.mp4"), make_item("broken.mp4"), make_item("two.mp4")]

    outcomes = await service.upload_videos(items)

    assert [o.status for o in outcomes] == ["success", "failed", "success"]
    assert outcomes[1].error == "Video processing failed: Failed to process video with Mux"
    storage.delete_file.assert_awaited_once_with("videos/broken.mp4")


@pytest.mark.asyncio
async def test_batch_validation_failure_is_per_item(upload_service, storage_repo, make_item):
    """Test per-item MIME errors do not reject the batch."""
    items = [make_item("clip.mp4"), make_item("notes.txt", "text/plain")]

    outcomes = await upload_service.upload_videos(items)

    assert [o.status for o in outcomes] == ["success", "failed"]
    assert "text/plain" in outcomes[1].error
    assert storage_repo.upload_file.await_count == 1


@pytest.mark.asyncio
async def test_batch_too_many_files(service, storage, make_item):
    """Test 11 files against a maximum of 10 is rejected before any upload."""
    items = [make_item(f"{i}.mp4") for i in range(11)]

    with pytest.raises(BatchValidationError, match="Too many files"):
        await service.upload_videos(items)

    storage.upload_file.assert_not_called()


@pytest.mark.asyncio
async def test_batch_titles_mismatch(service, storage, make_item):
    """Test 3 files with 2 titles is rejected."""
    items = [make_item(f"{i}.mp4") for i in range(3)]

    with pytest.raises(BatchValidationError, match="does not match"):
        await service.upload_videos(items, ["first", "second"])

    storage.upload_file.assert_not_called()


@pytest.mark.asyncio
async def test_batch_title_resolution(service, video, make_item):
    """Test empty titles fall back to file names."""
    items = [make_item("a.mp4"), make_item("b.mp4")]

    outcomes = await service.upload_videos(items, ["Intro", None])

    assert [o.data.title for o in outcomes] == ["Intro", "b.mp4"]


@pytest.mark.asyncio
async def test_batch_empty(service, storage):
    """Test empty batch returns no outcomes."""
    assert await service.upload_videos([]) == []
    storage.upload_file.assert_not_called()


@pytest.mark.asyncio
async def test_batch_empty_with_titles_rejected(service, storage):
    """Test titles without files are rejected as a count mismatch."""
    with pytest.raises(BatchValidationError, match="does not match"):
        await service.upload_videos([], ["x"])

    storage.upload_file.assert_not_called()


@pytest.mark.asyncio
async def test_batch_runs_chunks_sequentially(service, storage, test_settings, make_item):
    """Test concurrency never exceeds the configured chunk size."""
    test_settings.max_concurrent_uploads = 2
    in_flight = 0
    peak = 0

    async def upload(item, kind):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return stored_for(item, kind)

    storage.upload_file.side_effect = upload
    items = [make_item(f"{i}.mp4") for i in range(5)]

    outcomes = await service.upload_videos(items)

    assert len(outcomes) == 5
    assert peak == 2


@pytest.mark.asyncio
async def test_batch_deletes_finish_before_next_chunk(service, storage, video, test_settings, make_item):
    """Test compensating deletes of a chunk complete before the next chunk starts."""
    test_settings.max_concurrent_uploads = 1
    events = []

    async def upload(item, kind):
        events.append(("upload", item.filename))
        return stored_for(item, kind)

    async def create_asset(url, title):
        raise VideoProcessingError("nope")

    async def delete(key):
        await asyncio.sleep(0.01)
        events.append(("delete", key))
        return True

    storage.upload_file.side_effect = upload
    storage.delete_file.side_effect = delete
    video.create_asset.side_effect = create_asset

    await service.upload_videos([make_item("a.mp4"), make_item("b.mp4")])

    assert events == [
        ("upload", "a.mp4"),
        ("delete", "videos/a.mp4"),
        ("upload", "b.mp4"),
        ("delete", "videos/b.mp4"),
    ]


@pytest.mark.asyncio
async def test_batch_images(service, video, make_item):
    """Test batch image upload never calls the video service."""
    items = [make_item("a.png", "image/png"), make_item("b.jpg", "image/jpeg")]

    outcomes = await service.upload_images(items)

    assert [o.data.key for o in outcomes] == ["images/a.png", "images/b.jpg"]
    video.create_asset.assert_not_called()


@pytest.mark.asyncio
async def test_get_video_status(service, video):
    """Test status lookup is passed through verbatim."""
    assert await service.get_video_status("asset_1") == "ready"
    video.get_asset_status.assert_awaited_once_with("asset_1")
