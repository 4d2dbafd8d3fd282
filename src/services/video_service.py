"""Video processing service backed by the Mux Video API."""

from datetime import datetime, timezone
from typing import Optional
import httpx
from ..config import Settings, settings as default_settings
from ..core.exceptions import VideoProcessingError
from ..schemas.upload import LiveStreamResponse, ProcessingAsset
from ..utils.logger import get_logger

logger = get_logger(__name__)


class VideoService:
    """Service for creating and inspecting Mux video assets."""

    def __init__(self, client: httpx.AsyncClient, settings: Optional[Settings] = None):
        self.client = client
        self.settings = settings or default_settings

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "VideoService":
        """Build service with its own HTTP client."""
        settings = settings or default_settings
        client = httpx.AsyncClient(
            base_url=settings.mux_api_url,
            auth=(settings.mux_token_id, settings.mux_token_secret),
            timeout=settings.mux_timeout_seconds,
        )
        return cls(client, settings)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> dict:
        """Send a request and return the ``data`` member of the response body."""
        response = await self.client.request(method, url, **kwargs)
        response.raise_for_status()
        body = response.json()
        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            raise ValueError("Malformed response from video service")
        return data

    def playback_url(self, playback_id: Optional[str]) -> Optional[str]:
        if not playback_id:
            return None
        return f"{self.settings.mux_video_base_url}/{playback_id}.m3u8"

    def thumbnail_url(self, playback_id: Optional[str]) -> Optional[str]:
        if not playback_id:
            return None
        return f"{self.settings.mux_thumbnail_base_url}/{playback_id}/thumbnail.png"

    async def create_asset(self, video_url: str, title: str) -> ProcessingAsset:
        """
        Create a video asset from a stored object URL.
        Processing is asynchronous on Mux; the returned status is usually
        ``preparing``.
        """
        payload = {
            "input": [{"url": video_url}],
            "playback_policy": ["public"],
            "mp4_support": "standard",
        }
        try:
            asset = await self._request("POST", "/video/v1/assets", json=payload)
            playback_id = _first_playback_id(asset)
            return ProcessingAsset(
                id=asset["id"],
                title=title,
                status=asset["status"],
                duration=asset.get("duration"),
                aspect_ratio=asset.get("aspect_ratio"),
                playback_id=playback_id,
                playback_url=self.playback_url(playback_id),
                thumbnail_url=self.thumbnail_url(playback_id),
                created_at=_parse_timestamp(asset.get("created_at")),
                upload_id=asset.get("upload_id"),
                s3_url=video_url,
            )
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error("Failed to create Mux asset", video_url=video_url, error=str(e))
            raise VideoProcessingError(f"Failed to process video with Mux: {e}") from e

    async def get_asset_status(self, asset_id: str) -> str:
        """Get the current processing status of an asset."""
        try:
            asset = await self._request("GET", f"/video/v1/assets/{asset_id}")
            return asset["status"]
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error("Failed to get asset status", asset_id=asset_id, error=str(e))
            raise VideoProcessingError(f"Failed to get video status: {e}") from e

    async def create_live_stream(self) -> LiveStreamResponse:
        """Create a live stream whose recordings become public assets."""
        payload = {
            "playback_policy": ["public"],
            "new_asset_settings": {"playback_policy": ["public"]},
        }
        try:
            stream = await self._request("POST", "/video/v1/live-streams", json=payload)
            playback_id = _first_playback_id(stream)
            return LiveStreamResponse(
                id=stream["id"],
                stream_key=stream.get("stream_key"),
                status=stream["status"],
                playback_id=playback_id,
                playback_url=self.playback_url(playback_id),
            )
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error("Failed to create live stream", error=str(e))
            raise VideoProcessingError(f"Failed to create live stream: {e}") from e


def _first_playback_id(resource: dict) -> Optional[str]:
    playback_ids = resource.get("playback_ids") or []
    if playback_ids:
        return playback_ids[0].get("id")
    return None


def _parse_timestamp(value) -> Optional[datetime]:
    """Mux sends ``created_at`` as a unix timestamp string."""
    if value in (None, ""):
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc)
