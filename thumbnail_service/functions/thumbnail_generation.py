"""
Event Grid trigger adapter for thumbnail generation.
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError

from thumbnail_service.core.logging import logger
from thumbnail_service.core.exceptions import InvalidEventError
from thumbnail_service.api.schemas import EventGridEvent, EventType, ThumbnailResult
from thumbnail_service.services.processing.image_processing_service import (
    ImageProcessingService,
    THUMBNAIL_SUFFIX,
)


def parse_event(payload: Dict[str, Any]) -> EventGridEvent:
    """
    Validate a raw event payload.

    Raises:
        InvalidEventError: If the payload does not have the Event Grid shape
    """
    try:
        return EventGridEvent.model_validate(payload)
    except ValidationError as e:
        raise InvalidEventError(str(e)) from e


class ThumbnailGenerationFunction:
    """
    Receives storage events and runs the thumbnail pipeline for new blobs.
    """

    def __init__(self, image_processing_service: ImageProcessingService):
        self.image_processing_service = image_processing_service

    async def run(self, payload: Dict[str, Any]) -> Optional[ThumbnailResult]:
        """
        Handle one Event Grid event.

        Only BlobCreated events carrying a url are processed. Thumbnails
        written by the pipeline itself are skipped so they are not
        thumbnailed again.

        Args:
            payload: Event Grid event as a dictionary

        Returns:
            The thumbnail result, or None if the event was ignored

        Raises:
            InvalidEventError: If the payload is not an event
            ThumbnailServiceException: If the pipeline fails
        """
        event = parse_event(payload)

        logger.info("Processing Event Grid event")
        logger.info(f"Received event type: {event.event_type}")

        if event.event_type != EventType.BLOB_CREATED.value:
            return None

        blob_url = event.blob_url
        if blob_url is None:
            logger.info(f"Event {event.id} has no blob url, ignoring")
            return None

        if blob_url.endswith(THUMBNAIL_SUFFIX):
            logger.info(f"Skipping generated thumbnail: {blob_url}")
            return None

        logger.info(f"Processing blob URL: {blob_url}")

        try:
            return await self.image_processing_service.process_image(blob_url)
        except Exception as e:
            logger.error(f"Error processing blob event: {str(e)}")
            raise
