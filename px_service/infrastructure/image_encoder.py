"""
Image encoding utilities for turning uploads into base64 data URLs
"""
from PIL import Image, UnidentifiedImageError
from io import BytesIO
from typing import Optional, Tuple
import asyncio
import base64
import logging

from ..config import settings
from ..domain.models import SelectedImage
from ..exceptions import ImageEncodeError

logger = logging.getLogger(__name__)


def read_as_data_url(image: SelectedImage) -> str:
    """Data URL of a file as the client sent it, used for previews"""
    content_type = image.content_type or "application/octet-stream"
    payload = base64.b64encode(image.content).decode("ascii")
    return f"data:{content_type};base64,{payload}"


class ImageEncoder:
    """Image validation and data URL encoding"""

    def __init__(self, max_file_size_mb: Optional[int] = None):
        self.max_file_size_mb = (
            max_file_size_mb if max_file_size_mb is not None else settings.MAX_FILE_SIZE_MB
        )

    @property
    def max_file_size(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    @staticmethod
    def detect_mime_type(image_bytes: bytes) -> Tuple[str, Tuple[int, int]]:
        """
        Identify an image and return its MIME type and size

        Args:
            image_bytes: Raw image bytes

        Returns:
            Tuple of (mime_type, (width, height))

        Raises:
            ImageEncodeError: If the bytes are not a readable image
        """
        try:
            with Image.open(BytesIO(image_bytes)) as img:
                img.verify()
                image_format = img.format
                size = img.size
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            SyntaxError,
            ValueError,
        ) as e:
            raise ImageEncodeError(f"Not a readable image: {e}") from e

        mime_type = Image.MIME.get(image_format or "")
        if not mime_type:
            raise ImageEncodeError(f"Unsupported image format: {image_format}")
        return mime_type, size

    def to_data_url(self, image: SelectedImage) -> str:
        """
        Encode an image as a base64 data URL

        Args:
            image: Image picked in the composer

        Returns:
            String of the form ``data:<mime>;base64,<payload>``
        """
        if not image.content:
            raise ImageEncodeError("Image is empty")

        if image.size > self.max_file_size:
            raise ImageEncodeError(
                f"Image exceeds maximum allowed size of {self.max_file_size_mb}MB"
            )

        mime_type, (width, height) = self.detect_mime_type(image.content)
        payload = base64.b64encode(image.content).decode("ascii")

        logger.debug(f"Encoded {image.filename} ({mime_type}, {width}x{height}, {image.size} bytes)")
        return f"data:{mime_type};base64,{payload}"

    async def encode(self, image: SelectedImage) -> str:
        """Encode an image for transport to the upload endpoint"""
        return await asyncio.to_thread(self.to_data_url, image)
