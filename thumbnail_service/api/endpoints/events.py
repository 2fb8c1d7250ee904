"""
Event Grid webhook endpoint for the Thumbnail Service API.
"""

from typing import Any, Dict, List, Union

from fastapi import APIRouter, Body, Depends

from thumbnail_service.api.dependencies import get_thumbnail_function
from thumbnail_service.api.schemas import EventProcessingResponse, EventType, SubscriptionValidationResponse
from thumbnail_service.core.exceptions import InvalidEventError
from thumbnail_service.core.logging import logger
from thumbnail_service.functions.thumbnail_generation import ThumbnailGenerationFunction, parse_event

router = APIRouter()


@router.post("", response_model=Union[SubscriptionValidationResponse, EventProcessingResponse])
async def receive_events(
    payload: Union[List[Dict[str, Any]], Dict[str, Any]] = Body(...),
    thumbnail_function: ThumbnailGenerationFunction = Depends(get_thumbnail_function)
):
    """
    Receive an Event Grid delivery (a single event or a batch).
    Answers the subscription validation handshake; every other event goes
    to the thumbnail trigger, one at a time. A failing event fails the whole
    delivery so Event Grid can redeliver it.
    """
    events = payload if isinstance(payload, list) else [payload]
    if not events:
        raise InvalidEventError("empty event batch")

    first = parse_event(events[0])
    if first.event_type == EventType.SUBSCRIPTION_VALIDATION.value:
        validation_code = first.data.get("validationCode")
        if not validation_code:
            raise InvalidEventError("subscription validation event without validationCode")
        logger.info(f"Answering Event Grid subscription validation for event {first.id}")
        return SubscriptionValidationResponse(validationResponse=validation_code)

    response = EventProcessingResponse(received=len(events), processed=0, ignored=0)

    for event in events:
        result = await thumbnail_function.run(event)
        if result is None:
            response.ignored += 1
        else:
            response.processed += 1
            response.results.append(result)

    return response
