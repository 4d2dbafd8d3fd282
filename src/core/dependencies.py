"""Reusable FastAPI dependencies.

Services are built once in the application lifespan and kept on
``app.state``; routes receive them through these dependencies.
"""

from fastapi import Request
from ..config import Settings
from ..repositories.storage_repo import StorageRepository
from ..services.storage_service import StorageService
from ..services.upload_service import UploadService
from ..services.video_service import VideoService


def build_upload_service(settings: Settings) -> UploadService:
    """Construct the upload service and its clients from settings."""
    storage_service = StorageService(StorageRepository.from_settings(settings), settings)
    video_service = VideoService.from_settings(settings)
    return UploadService(storage_service, video_service, settings)


def get_upload_service(request: Request) -> UploadService:
    """Dependency to get the upload service."""
    return request.app.state.upload_service
