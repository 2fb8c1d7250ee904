import io
import os
import tempfile

# Settings are read on first import, so the environment must be ready first
os.environ["DEV_MODE"] = "true"
os.environ["LOCAL_STORAGE_ROOT"] = tempfile.mkdtemp(prefix="thumbnail-service-")

import pytest
from PIL import Image

from thumbnail_service.config import ThumbnailConfig
from thumbnail_service.services.processing.image_processing_service import ImageProcessingService
from thumbnail_service.services.storage.local_service import LocalService
from thumbnail_service.services.storage.storage_service import StorageService

CONTAINER = "main"


@pytest.fixture
def thumbnail_config():
    """Thumbnail settings used across the pipeline tests."""
    return ThumbnailConfig(
        max_height=200,
        jpeg_quality=80,
        allowed_mime_types=("image/jpeg", "image/png"),
        thumbnail_path_public="public/thumbnails",
        thumbnail_path_private="users/{user}/thumbnails",
    )


@pytest.fixture
def local_service(tmp_path):
    """Local filesystem backend rooted in a temporary directory."""
    return LocalService(str(tmp_path / "storage"))


@pytest.fixture
def storage_service(local_service):
    """Storage facade over the temporary local backend."""
    return StorageService(backend=local_service)


@pytest.fixture
def image_processing_service(thumbnail_config, storage_service):
    return ImageProcessingService(thumbnail_config, storage_service)


@pytest.fixture
def make_image():
    """Factory producing encoded image bytes of a given size."""
    def _make_image(width: int, height: int, image_format: str = "PNG", mode: str = "RGB") -> bytes:
        color = (200, 80, 40, 255)[:len(mode)] if mode != "L" else 128
        image = Image.new(mode, (width, height), color)
        buffer = io.BytesIO()
        image.save(buffer, format=image_format)
        return buffer.getvalue()

    return _make_image
