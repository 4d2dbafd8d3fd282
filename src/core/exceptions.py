"""Upload error taxonomy.

Every error is an ``HTTPException`` so FastAPI renders it as
``{"detail": "..."}`` with a client-error status code.
"""

from fastapi import HTTPException, status


class UploadError(HTTPException):
    """Generic upload failure reported to the caller as a client error."""

    def __init__(self, detail: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=detail)

    def __str__(self) -> str:
        return str(self.detail)


class FileValidationError(UploadError):
    """Uploaded file failed validation."""


class UnsupportedFileTypeError(FileValidationError):
    """MIME type is not in the allow-list for the media kind."""

    def __init__(self, detail: str):
        super().__init__(detail, status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE)


class FileTooLargeError(FileValidationError):
    """Payload exceeds the size ceiling for the media kind."""

    def __init__(self, detail: str):
        super().__init__(detail, status_code=status.HTTP_413_CONTENT_TOO_LARGE)


class BatchValidationError(FileValidationError):
    """Batch request rejected as a whole before any upload started."""


class StorageError(UploadError):
    """Object storage operation failed."""


class VideoProcessingError(UploadError):
    """Video processing service call failed."""
