import importlib.util
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from thumbnail_service.api.schemas import ThumbnailResult
from thumbnail_service.core.exceptions import InvalidEventError, InvalidMimeTypeError
from thumbnail_service.functions.thumbnail_generation import ThumbnailGenerationFunction
from thumbnail_service.services.processing.image_processing_service import ImageProcessingService

BLOB_URL = "https://acct.dfs.core.windows.net/main/alice/images/photo.jpg"

RESULT = ThumbnailResult(
    source_path="/alice/images/photo.jpg",
    thumbnail_path="users/alice/thumbnails/photo.jpg-thumb",
    width=400,
    height=200,
    resized=True,
    tagged=False,
)


def blob_created(url=BLOB_URL, event_type="Microsoft.Storage.BlobCreated"):
    return {"id": "evt-1", "eventType": event_type, "subject": "/blobServices/default", "data": {"url": url}}


@pytest.fixture
def processing_service():
    service = MagicMock(spec=ImageProcessingService)
    service.process_image = AsyncMock(return_value=RESULT)
    return service


@pytest.fixture
def thumbnail_function(processing_service):
    return ThumbnailGenerationFunction(processing_service)


@pytest.mark.asyncio
async def test_blob_created_event_is_processed(thumbnail_function, processing_service):
    result = await thumbnail_function.run(blob_created())

    assert result == RESULT
    processing_service.process_image.assert_awaited_once_with(BLOB_URL)


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    blob_created(event_type="Microsoft.Storage.BlobDeleted"),
    {"eventType": "Microsoft.Storage.BlobCreated", "data": {}},
    {"eventType": "Microsoft.Storage.BlobCreated", "data": None},
    {"eventType": "Microsoft.Storage.BlobCreated", "data": {"url": None}},
])
async def test_other_events_are_ignored(thumbnail_function, processing_service, payload):
    assert await thumbnail_function.run(payload) is None
    processing_service.process_image.assert_not_called()


@pytest.mark.asyncio
async def test_generated_thumbnails_are_skipped(thumbnail_function, processing_service):
    url = "https://acct.dfs.core.windows.net/main/users/alice/thumbnails/photo.jpg-thumb"

    assert await thumbnail_function.run(blob_created(url=url)) is None
    processing_service.process_image.assert_not_called()


@pytest.mark.asyncio
async def test_payload_without_event_type_is_invalid(thumbnail_function):
    with pytest.raises(InvalidEventError):
        await thumbnail_function.run({"data": {"url": BLOB_URL}})


@pytest.mark.asyncio
async def test_pipeline_errors_are_reraised(thumbnail_function, processing_service):
    processing_service.process_image.side_effect = InvalidMimeTypeError("application/pdf")

    with pytest.raises(InvalidMimeTypeError):
        await thumbnail_function.run(blob_created())


@pytest.mark.asyncio
async def test_azure_function_entry_point_forwards_event():
    """The Azure Functions entry point converts the host event and runs the trigger."""
    module_path = Path(__file__).resolve().parents[2] / "cloud_functions" / "generate_thumbnails" / "main.py"
    spec = importlib.util.spec_from_file_location("generate_thumbnails_main", module_path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    module.thumbnail_function.run = AsyncMock(return_value=RESULT)
    event = MagicMock()
    event.id = "evt-1"
    event.event_type = "Microsoft.Storage.BlobCreated"
    event.subject = "/blobServices/default"
    event.event_time = None
    event.data_version = "1"
    event.get_json.return_value = {"url": BLOB_URL}

    await module.main(event)

    payload = module.thumbnail_function.run.await_args.args[0]
    assert payload["eventType"] == "Microsoft.Storage.BlobCreated"
    assert payload["data"] == {"url": BLOB_URL}
