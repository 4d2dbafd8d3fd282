"""Pytest configuration and fixtures."""

import pytest
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock
import httpx
from httpx import AsyncClient, ASGITransport

from src.main import app
from src.config import Settings
from src.core.dependencies import get_upload_service
from src.middleware.rate_limit import limiter
from src.repositories.storage_repo import StorageRepository
from src.schemas.upload import UploadItem
from src.services.storage_service import StorageService
from src.services.upload_service import UploadService
from src.services.video_service import VideoService


MUX_ASSET = {
    "id": "asset_123",
    "status": "preparing",
    "playback_ids": [{"id": "play_456", "policy": "public"}],
    "created_at": "1738501603",
    "aspect_ratio": "16:9",
    "duration": None,
    "upload_id": None,
}


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the environment."""
    return Settings(
        storage_provider="s3",
        s3_bucket_name="test-bucket",
        aws_region="us-east-1",
        mux_api_url="https://api.mux.test",
        max_video_size_mb=100,
        max_image_size_mb=5,
        max_files_per_request=10,
        max_concurrent_uploads=3,
        verify_uploads=False,
    )


@pytest.fixture
def storage_repo() -> MagicMock:
    """Storage repository double; every operation succeeds."""
    repo = MagicMock(spec=StorageRepository)
    repo.upload_file = AsyncMock(side_effect=lambda file_content, key, content_type: key)
    repo.delete_file = AsyncMock(return_value=None)
    repo.head_file = AsyncMock(return_value={"content_type": "video/mp4", "size": 50})
    return repo


@pytest.fixture
def mux_requests() -> list:
    """Requests received by the fake Mux API."""
    return []


@pytest.fixture
def mux_handler(mux_requests):
    """Fake Mux API: creates assets and reports their status."""

    def handler(request: httpx.Request) -> httpx.Response:
        mux_requests.append(request)
        if request.method == "POST" and request.url.path == "/video/v1/assets":
            return httpx.Response(201, json={"data": MUX_ASSET})
        if request.method == "GET" and request.url.path.startswith("/video/v1/assets/"):
            asset_id = request.url.path.rsplit("/", 1)[-1]
            if asset_id == "missing":
                return httpx.Response(404, json={"error": {"type": "not_found"}})
            return httpx.Response(200, json={"data": {**MUX_ASSET, "id": asset_id, "status": "ready"}})
        if request.method == "POST" and request.url.path == "/video/v1/live-streams":
            return httpx.Response(
                201,
                json={
                    "data": {
                        "id": "stream_1",
                        "stream_key": "key_1",
                        "status": "idle",
                        "playback_ids": [{"id": "live_play"}],
                    }
                },
            )
        return httpx.Response(500, json={"error": {"type": "unexpected"}})

    return handler


@pytest.fixture
def video_service(mux_handler, test_settings) -> VideoService:
    """Video service talking to the fake Mux API."""
    client = httpx.AsyncClient(
        base_url=test_settings.mux_api_url,
        transport=httpx.MockTransport(mux_handler),
    )
    return VideoService(client, test_settings)


@pytest.fixture
def storage_service(storage_repo, test_settings) -> StorageService:
    return StorageService(storage_repo, test_settings)


@pytest.fixture
def upload_service(storage_service, video_service, test_settings) -> UploadService:
    return UploadService(storage_service, video_service, test_settings)


@pytest.fixture
def make_item():
    """Factory for upload items."""

    def factory(
        filename: str = "clip.mp4",
        content_type: str = "video/mp4",
        size: int = 50,
        title=None,
    ) -> UploadItem:
        content = b"x" * size
        return UploadItem(
            content=content,
            filename=filename,
            content_type=content_type,
            size=size,
            title=title,
        )

    return factory


@pytest.fixture(scope="function")
async def client(upload_service) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client."""
    app.dependency_overrides[get_upload_service] = lambda: upload_service
    limiter.enabled = False

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    limiter.enabled = True
