"""
API dependencies for the Thumbnail Service.
Service instances are created once at startup and kept on the application state.
"""

from fastapi import Depends, Request

from thumbnail_service.functions.thumbnail_generation import ThumbnailGenerationFunction
from thumbnail_service.services.accounts.user_directory_service import UserDirectoryService
from thumbnail_service.services.processing.image_processing_service import ImageProcessingService
from thumbnail_service.services.storage.storage_service import StorageService


def get_storage_service(request: Request) -> StorageService:
    return request.app.state.storage_service


def get_image_processing_service(request: Request) -> ImageProcessingService:
    return request.app.state.image_processing_service


def get_thumbnail_function(
    image_processing_service: ImageProcessingService = Depends(get_image_processing_service)
) -> ThumbnailGenerationFunction:
    return ThumbnailGenerationFunction(image_processing_service)


def get_user_directory_service(
    storage_service: StorageService = Depends(get_storage_service)
) -> UserDirectoryService:
    return UserDirectoryService(storage_service)
