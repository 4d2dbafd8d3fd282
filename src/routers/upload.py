"""Video and image upload routes."""

from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from ..config import settings
from ..core.dependencies import get_upload_service
from ..middleware.rate_limit import limiter
from ..middleware.validation import sanitize_title, sanitize_titles, to_upload_item
from ..schemas.shared import ErrorResponse
from ..schemas.upload import LiveStreamResponse, UploadOutcome, VideoStatusResponse
from ..services.upload_service import UploadService

router = APIRouter(prefix="/upload", tags=["upload"])

UPLOAD_ERRORS = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "Upload failed"},
    status.HTTP_413_CONTENT_TOO_LARGE: {"model": ErrorResponse, "description": "File too large"},
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: {"model": ErrorResponse, "description": "File type not allowed"},
}


@router.post(
    "/video",
    response_model=UploadOutcome,
    status_code=status.HTTP_201_CREATED,
    responses=UPLOAD_ERRORS,
)
async def upload_video(
    video: UploadFile = File(..., description="Video file (mp4, mov, avi, mkv, webm)"),
    title: Optional[str] = Form(None, description="Title of the video"),
    upload_service: UploadService = Depends(get_upload_service),
):
    """
    Upload a video.
    The file is stored and then handed to Mux for processing.
    """
    item = await to_upload_item(video, sanitize_title(title))
    return await upload_service.upload_video(item, item.title)


@router.post(
    "/image",
    response_model=UploadOutcome,
    status_code=status.HTTP_201_CREATED,
    responses=UPLOAD_ERRORS,
)
async def upload_image(
    image: UploadFile = File(..., description="Image file (jpeg, png, gif, webp)"),
    upload_service: UploadService = Depends(get_upload_service),
):
    """Upload an image."""
    item = await to_upload_item(image)
    return await upload_service.upload_image(item)


@router.post(
    "/videos",
    response_model=List[UploadOutcome],
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
@limiter.limit(settings.batch_upload_rate_limit)
async def upload_videos(
    request: Request,
    videos: List[UploadFile] = File(..., description="Video files"),
    titles: Optional[List[str]] = Form(None, description="Titles, one per video (optional)"),
    upload_service: UploadService = Depends(get_upload_service),
):
    """
    Upload several videos.
    Returns one result per file, in upload order. Failed files do not
    fail the request.
    """
    titles = sanitize_titles(titles)
    # Reject oversized batches before reading any file
    upload_service.validate_batch(videos, titles)
    items = [await to_upload_item(video) for video in videos]
    return await upload_service.upload_videos(items, titles)


@router.post(
    "/images",
    response_model=List[UploadOutcome],
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
@limiter.limit(settings.batch_upload_rate_limit)
async def upload_images(
    request: Request,
    images: List[UploadFile] = File(..., description="Image files"),
    upload_service: UploadService = Depends(get_upload_service),
):
    """Upload several images. Returns one result per file, in upload order."""
    upload_service.validate_batch(images)
    items = [await to_upload_item(image) for image in images]
    return await upload_service.upload_images(items)


@router.get(
    "/video/{asset_id}/status",
    response_model=VideoStatusResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def get_video_status(
    asset_id: str,
    upload_service: UploadService = Depends(get_upload_service),
):
    """Get video processing status."""
    return VideoStatusResponse(status=await upload_service.get_video_status(asset_id))


@router.post(
    "/live-stream",
    response_model=LiveStreamResponse,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def create_live_stream(
    upload_service: UploadService = Depends(get_upload_service),
):
    """Create a live stream."""
    return await upload_service.create_live_stream()
