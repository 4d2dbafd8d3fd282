"""Application constants and enums."""

from enum import Enum


class MediaKind(str, Enum):
    """Kind of uploaded media; decides namespace and validation rules."""

    VIDEO = "video"
    IMAGE = "image"

    @property
    def namespace(self) -> str:
        """Storage key prefix for this kind."""
        return f"{self.value}s"

    @property
    def allowed_types(self) -> frozenset:
        """MIME allow-list for this kind."""
        if self is MediaKind.VIDEO:
            return ALLOWED_VIDEO_TYPES
        return ALLOWED_IMAGE_TYPES


class UploadStatus(str, Enum):
    """Per-item upload outcome status."""

    SUCCESS = "success"
    FAILED = "failed"


class AssetStatus(str, Enum):
    """Mux asset status vocabulary."""

    PREPARING = "preparing"
    READY = "ready"
    ERRORED = "errored"


ALLOWED_VIDEO_TYPES = frozenset(
    {
        "video/mp4",
        "video/quicktime",
        "video/x-msvideo",
        "video/x-matroska",
        "video/webm",
    }
)

ALLOWED_IMAGE_TYPES = frozenset(
    {
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
    }
)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Characters kept in caller supplied titles
TITLE_ALLOWED_PATTERN = r"[^A-Za-z0-9\-_. ]"
TITLE_MAX_LENGTH = 255
