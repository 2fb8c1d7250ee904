"""
Manual thumbnail generation endpoint for the Thumbnail Service API.
"""

from fastapi import APIRouter, Depends

from thumbnail_service.api.dependencies import get_image_processing_service
from thumbnail_service.api.schemas import ThumbnailRequest, ThumbnailResult
from thumbnail_service.services.processing.image_processing_service import ImageProcessingService

router = APIRouter()


@router.post("", response_model=ThumbnailResult)
async def generate_thumbnail(
    data: ThumbnailRequest,
    image_processing_service: ImageProcessingService = Depends(get_image_processing_service)
) -> ThumbnailResult:
    """
    Run the thumbnail pipeline for a blob URL without waiting for an event.
    """
    return await image_processing_service.process_image(data.url)
