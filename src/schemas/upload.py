"""Upload request and response schemas."""

from typing import Optional, List, Literal
from datetime import datetime
from pydantic import BaseModel, Field
from ..utils.constants import UploadStatus


class UploadItem(BaseModel):
    """A file received in one request, plus its optional caller title."""

    content: bytes = Field(..., repr=False)
    filename: str
    content_type: str
    size: int = Field(..., ge=0, description="File size in bytes")
    title: Optional[str] = None


class MediaMetadata(BaseModel):
    """Media metadata discovered at upload time."""

    width: Optional[int] = Field(None, description="Image width (images only)")
    height: Optional[int] = Field(None, description="Image height (images only)")
    duration: Optional[float] = Field(None, description="Duration in seconds (videos only)")


class StoredObject(BaseModel):
    """Result of a successful storage write."""

    url: str
    key: str
    content_type: str
    size: int
    metadata: Optional[MediaMetadata] = None


class ProcessingAsset(BaseModel):
    """Video asset created on the processing service."""

    id: str
    title: str
    status: str
    duration: Optional[float] = None
    aspect_ratio: Optional[str] = None
    playback_id: Optional[str] = None
    playback_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    created_at: Optional[datetime] = None
    upload_id: Optional[str] = None
    s3_url: str


class UploadData(BaseModel):
    """Merged view of the stored object and, for videos, its asset."""

    id: Optional[str] = Field(None, description="Video asset ID (videos only)")
    title: Optional[str] = None
    url: str = Field(..., description="File URL")
    s3_url: str = Field(..., description="Storage URL")
    key: str = Field(..., description="Storage key")
    content_type: str
    size: int = Field(..., description="File size in bytes")
    status: Optional[str] = Field(None, description="Processing status (videos only)")
    duration: Optional[float] = None
    aspect_ratio: Optional[str] = None
    playback_id: Optional[str] = None
    playback_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    created_at: Optional[datetime] = None
    upload_id: Optional[str] = None
    metadata: Optional[MediaMetadata] = None

    @classmethod
    def from_results(
        cls, stored: StoredObject, asset: Optional[ProcessingAsset] = None
    ) -> "UploadData":
        """Merge a stored object with an optional processing asset."""
        data = {
            "url": stored.url,
            "s3_url": stored.url,
            "key": stored.key,
            "content_type": stored.content_type,
            "size": stored.size,
            "metadata": stored.metadata,
        }
        if asset is not None:
            data.update(asset.model_dump(exclude={"s3_url"}))
        return cls(**data)


class UploadOutcome(BaseModel):
    """Per-file upload result."""

    status: Literal["success", "failed"]
    data: Optional[UploadData] = Field(None, description="Present when status is success")
    error: Optional[str] = Field(None, description="Present when status is failed")
    file_name: str = Field(..., description="Original file name")

    @classmethod
    def success(cls, file_name: str, data: UploadData) -> "UploadOutcome":
        return cls(status=UploadStatus.SUCCESS.value, data=data, file_name=file_name)

    @classmethod
    def failed(cls, file_name: str, error: str) -> "UploadOutcome":
        return cls(status=UploadStatus.FAILED.value, error=error, file_name=file_name)


class VideoStatusResponse(BaseModel):
    """Video processing status."""

    status: str = Field(..., examples=["ready"])


class LiveStreamResponse(BaseModel):
    """Live stream created on the processing service."""

    id: str
    stream_key: Optional[str] = None
    status: str
    playback_id: Optional[str] = None
    playback_url: Optional[str] = None
