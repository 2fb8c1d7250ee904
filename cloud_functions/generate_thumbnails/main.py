"""
Azure Function for generating image thumbnails.
Triggered by Event Grid when a blob is created in the Data Lake account.
"""

from typing import Any, Dict

import azure.functions as func

from thumbnail_service.config import get_thumbnail_config
from thumbnail_service.core.logging import logger
from thumbnail_service.functions.thumbnail_generation import ThumbnailGenerationFunction
from thumbnail_service.services.processing.image_processing_service import ImageProcessingService
from thumbnail_service.services.storage.storage_service import StorageService

# Shared across invocations handled by this worker
storage_service = StorageService()
thumbnail_function = ThumbnailGenerationFunction(
    ImageProcessingService(get_thumbnail_config(), storage_service)
)


def to_payload(event: func.EventGridEvent) -> Dict[str, Any]:
    """Convert the host's event object into the Event Grid JSON shape."""
    return {
        "id": event.id,
        "eventType": event.event_type,
        "subject": event.subject,
        "eventTime": event.event_time,
        "dataVersion": event.data_version,
        "data": event.get_json(),
    }


async def main(event: func.EventGridEvent) -> None:
    """
    Azure Function entry point for thumbnail generation.

    Failures are re-raised so the invocation is reported as failed; Event
    Grid decides whether to redeliver.
    """
    result = await thumbnail_function.run(to_payload(event))

    if result is not None:
        logger.info(f"Thumbnail written to {result.thumbnail_path} ({result.width}x{result.height})")
