"""
Image structure validation for the Thumbnail Service.
"""

from typing import BinaryIO

from PIL import Image

from thumbnail_service.core.exceptions import ImageValidationError


class ImageValidator:
    """
    Checks that a byte stream decodes as a raster image Pillow supports.
    """

    def validate(self, stream: BinaryIO) -> None:
        """
        Fully decode the image in the stream.

        The stream position is restored afterwards.

        Raises:
            ImageValidationError: If the stream cannot be decoded
        """
        position = stream.tell()
        try:
            with Image.open(stream) as image:
                image.load()
        except Exception as e:
            raise ImageValidationError(f"Invalid image structure detected: {str(e)}") from e
        finally:
            stream.seek(position)
