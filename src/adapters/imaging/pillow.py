"""
Pillow image adapter - Implements ImageProcessor protocol.

Decodes uploaded profile photos, shrinks them to fit a square bounding
box (aspect ratio preserved), and re-encodes them as JPEG.
"""

import logging
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from src.domain.exceptions import UnsupportedImage

logger = logging.getLogger(__name__)

# MPO is how Pillow reports multi-picture JPEGs written by most phone cameras
SUPPORTED_FORMATS = frozenset({"JPEG", "MPO", "PNG", "GIF", "BMP", "WEBP", "TIFF", "ICO"})


class PillowImageProcessor:
    """
    Implements ImageProcessor protocol via Pillow.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, size: int = 100) -> None:
        """
        Args:
            size: Edge length of the square the thumbnail must fit in
        """
        self._size = size

    def make_thumbnail(self, data: bytes) -> bytes:
        try:
            with Image.open(BytesIO(data)) as image:
                if image.format not in SUPPORTED_FORMATS:
                    raise UnsupportedImage()
                image.load()
                thumbnail = image.convert("RGB")
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            SyntaxError,
            ValueError,
        ) as e:
            logger.info("Rejected profile image upload: %s", e)
            raise UnsupportedImage() from e

        thumbnail.thumbnail((self._size, self._size))
        output = BytesIO()
        thumbnail.save(output, format="JPEG")
        return output.getvalue()
