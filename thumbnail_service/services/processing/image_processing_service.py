"""
Thumbnail pipeline for the Thumbnail Service.
"""

from typing import BinaryIO, Dict, Optional, Tuple
from datetime import datetime, timezone
import io

from PIL import Image

from thumbnail_service.config import ThumbnailConfig
from thumbnail_service.core.logging import logger
from thumbnail_service.core.exceptions import InvalidMimeTypeError, ImageValidationError
from thumbnail_service.api.schemas import BlobData, ThumbnailResult
from thumbnail_service.services.storage.storage_service import StorageService
from thumbnail_service.services.processing.blob_url_parser import BlobUrlParser, PUBLIC_SEGMENT
from thumbnail_service.services.processing.image_validator import ImageValidator

THUMBNAIL_CONTENT_TYPE = "image/jpeg"
THUMBNAIL_SUFFIX = "-thumb"
CREATED_ON_TAG = "CreatedOn"

# Modes Pillow can write as JPEG without conversion
JPEG_MODES = ("RGB", "L", "CMYK")


class ImageProcessingService:
    """
    Service for generating image thumbnails from uploaded blobs.

    One call to process_image runs: parse URL, locate source, validate MIME
    type, download, validate image, resize, upload and tag. Steps run one
    after another with no retries.
    """

    def __init__(
        self,
        thumbnail_config: ThumbnailConfig,
        storage_service: StorageService,
        blob_url_parser: Optional[BlobUrlParser] = None,
        image_validator: Optional[ImageValidator] = None
    ):
        self.thumbnail_config = thumbnail_config
        self.storage_service = storage_service
        self.blob_url_parser = blob_url_parser or BlobUrlParser()
        self.image_validator = image_validator or ImageValidator()

    async def process_image(self, blob_uri: str) -> ThumbnailResult:
        """
        Generate and upload the thumbnail for one blob.

        Args:
            blob_uri: URL of the uploaded blob

        Returns:
            Where the thumbnail was written and its dimensions

        Raises:
            MalformedBlobPathError: If the URL cannot be parsed
            InvalidMimeTypeError: If the upload's content type is not allowed (the upload is deleted)
            ImageValidationError: If the upload is not a decodable image and validation is strict
            StorageError: If a storage operation fails
        """
        blob_data = self.blob_url_parser.parse_blob(blob_uri)

        logger.info(f"Processing image {blob_data.object_name} for user {blob_data.owner_id}")

        try:
            return await self.process_image_pipeline(blob_data)
        except Exception as e:
            logger.error(f"Error processing image pipeline: {str(e)}", exc_info=True)
            raise

    async def process_image_pipeline(self, blob_data: BlobData) -> ThumbnailResult:
        container = blob_data.container_name
        source_path = self.get_source_path(blob_data)

        logger.info("Validating MIME type...")
        await self.validate_mime_type(container, source_path)

        logger.info("Downloading file...")
        input_stream = await self.download_file_stream(container, source_path)

        logger.info("Validating image structure...")
        self.validate_image_structure(input_stream)

        logger.info("Generating thumbnail...")
        thumbnail_bytes, (width, height), resized = self.generate_thumbnail(input_stream)

        logger.info("Uploading thumbnail...")
        thumbnail_path = self.get_thumbnail_path(blob_data)
        tagged = await self.upload_thumbnail(container, thumbnail_path, thumbnail_bytes)

        logger.info("Processing completed successfully")

        return ThumbnailResult(
            source_path=source_path,
            thumbnail_path=thumbnail_path,
            width=width,
            height=height,
            resized=resized,
            tagged=tagged
        )

    def get_source_path(self, blob_data: BlobData) -> str:
        source_path = blob_data.relative_path
        logger.info(f"Source File Path: {source_path}")
        return source_path

    async def validate_mime_type(self, container: str, path: str) -> None:
        """
        Reject uploads whose content type is not in the allow-list.

        The rejected upload is deleted before the error is raised.

        Raises:
            InvalidMimeTypeError: If the content type is not allowed
        """
        properties = await self.storage_service.get_properties(container, path)
        mime_type = properties.content_type

        if mime_type not in self.thumbnail_config.allowed_mime_types:
            logger.warning(f"Invalid MIME type {mime_type} detected")
            await self.storage_service.delete_file(container, path)
            raise InvalidMimeTypeError(str(mime_type))

    async def download_file_stream(self, container: str, path: str) -> io.BytesIO:
        content = await self.storage_service.read_file(container, path)
        return io.BytesIO(content)

    def validate_image_structure(self, stream: BinaryIO) -> None:
        """
        Check the downloaded bytes decode as an image.

        With strict validation the error propagates and aborts the pipeline;
        otherwise it is logged and processing continues.
        """
        try:
            self.image_validator.validate(stream)
        except ImageValidationError as e:
            if self.thumbnail_config.strict_image_validation:
                raise
            logger.warning(f"Invalid image structure detected: {e.message}")

    def generate_thumbnail(self, input_stream: BinaryIO) -> Tuple[bytes, Tuple[int, int], bool]:
        """
        Encode the image as a JPEG no taller than the configured max height.

        Images already within the limit are re-encoded at Pillow's default
        quality; taller ones are scaled to max height (width follows the
        aspect ratio, never growing) and encoded at the configured quality.

        Args:
            input_stream: Stream holding the source image

        Returns:
            Tuple of (JPEG bytes, (width, height), whether the image was resized)
        """
        max_height = self.thumbnail_config.max_height

        input_stream.seek(0)
        with Image.open(input_stream) as image:
            width, height = image.size
            output = io.BytesIO()

            if height <= max_height:
                self._to_jpeg_mode(image).save(output, format="JPEG")
                return output.getvalue(), (width, height), False

            target_width = max(1, min(max_height * width // height, width))
            resized = image.resize((target_width, max_height), Image.BICUBIC)

            self._to_jpeg_mode(resized).save(
                output, format="JPEG", quality=self.thumbnail_config.jpeg_quality
            )
            return output.getvalue(), (target_width, max_height), True

    def _to_jpeg_mode(self, image: Image.Image) -> Image.Image:
        if image.mode in JPEG_MODES:
            return image
        return image.convert("RGB")

    def get_thumbnail_path(self, blob_data: BlobData) -> str:
        thumbnail_name = f"{blob_data.object_name}{THUMBNAIL_SUFFIX}"

        if blob_data.is_public:
            return f"{self.thumbnail_config.thumbnail_path_public}/{blob_data.owner_id}/{thumbnail_name}"

        return f"{self.thumbnail_config.private_thumbnail_dir(blob_data.owner_id)}/{thumbnail_name}"

    async def upload_thumbnail(self, container: str, thumbnail_path: str, thumbnail_bytes: bytes) -> bool:
        """
        Upload the thumbnail, set its content type and tag public thumbnails.

        Returns:
            True if the CreatedOn tag was written
        """
        await self.storage_service.upload_file(container, thumbnail_path, thumbnail_bytes, overwrite=True)
        await self.storage_service.set_content_type(container, thumbnail_path, THUMBNAIL_CONTENT_TYPE)

        logger.info(f"Thumbnail uploaded successfully with MIME type: {THUMBNAIL_CONTENT_TYPE}")

        if thumbnail_path.lower().startswith(f"{PUBLIC_SEGMENT}/"):
            await self.set_thumbnail_metadata(container, thumbnail_path)
            logger.info("Thumbnail metadata updated for public, e.g. CreatedOn")
            return True

        return False

    async def set_thumbnail_metadata(self, container: str, thumbnail_path: str) -> Dict[str, str]:
        tags = {CREATED_ON_TAG: datetime.now(timezone.utc).isoformat()}
        await self.storage_service.set_metadata(container, thumbnail_path, tags)
        return tags
