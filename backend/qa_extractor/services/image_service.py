"""
QA Extractor: Image Normalization Service
============================================

What:  Re-encodes an arbitrary input image as a JPEG that fits inside a
       max_side × max_side box.
How:   Pillow decodes the bytes, Image.thumbnail() shrinks to fit (aspect
       preserved, never enlarged), then the result is saved as JPEG.
Who:   Called by ExtractionService before the model call.
When:  Once per request, inside the server's worker threadpool.

Data Flow:
    ImageBuffer (any format, any size)
        → decode (ImageDecodeError on failure)
        → convert to RGB if the mode can't be stored as JPEG
        → thumbnail((max_side, max_side))
        → NormalizedImage (JPEG bytes, width, height)
"""

import io
import logging
from dataclasses import dataclass
from typing import Optional

from PIL import Image

from qa_extractor.exceptions import ImageDecodeError

logger = logging.getLogger(__name__)

JPEG_MIME_TYPE = "image/jpeg"

# Modes the JPEG encoder accepts as-is
_JPEG_MODES = {"RGB", "L", "CMYK"}


@dataclass(frozen=True)
class ImageBuffer:
    """Raw image bytes as they arrived with the request."""
    data: bytes
    mime_type: str = "application/octet-stream"
    filename: Optional[str] = None


@dataclass(frozen=True)
class NormalizedImage:
    """JPEG bytes bounded by the normalizer's max side."""
    data: bytes
    width: int
    height: int
    mime_type: str = JPEG_MIME_TYPE


class ImageNormalizer:
    """
    Shrink-to-fit JPEG re-encoder.

    Args:
        max_side: Upper bound for both width and height, in pixels.
        quality: JPEG quality passed to Pillow (1-95).
    """

    def __init__(self, max_side: int = 1024, quality: int = 90):
        self.max_side = max_side
        self.quality = quality

    def normalize(self, image: ImageBuffer) -> NormalizedImage:
        """
        Decode, shrink and re-encode one image.

        Raises:
            ImageDecodeError: bytes are empty or not a format Pillow can read.
        """
        if not image.data:
            raise ImageDecodeError(
                message="Image data is empty",
                context={"filename": image.filename},
            )

        try:
            with Image.open(io.BytesIO(image.data)) as source:
                source.load()
                original_size = source.size
                picture = source if source.mode in _JPEG_MODES else source.convert("RGB")
                # thumbnail() only ever shrinks
                picture.thumbnail((self.max_side, self.max_side), Image.Resampling.LANCZOS)

                output = io.BytesIO()
                picture.save(output, format="JPEG", quality=self.quality)
                width, height = picture.size
        except Exception as e:
            # Pillow reports bad input through many types (UnidentifiedImageError,
            # OSError, SyntaxError, DecompressionBombError, ...)
            logger.warning(
                "Failed to decode image %s (%s, %d bytes): %s",
                image.filename or "<upload>",
                image.mime_type,
                len(image.data),
                str(e),
            )
            raise ImageDecodeError(
                message=f"Could not decode image data: {e}",
                context={"filename": image.filename, "mime_type": image.mime_type},
            ) from e

        logger.info(
            "Normalized image %dx%d -> %dx%d (%d -> %d bytes)",
            original_size[0],
            original_size[1],
            width,
            height,
            len(image.data),
            output.tell(),
        )
        return NormalizedImage(data=output.getvalue(), width=width, height=height)
