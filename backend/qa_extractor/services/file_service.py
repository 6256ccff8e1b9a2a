"""
QA Extractor: Image Source Service
=====================================

What:  Turns the two supported request inputs into an ImageBuffer.
How:   Uploads are taken as-is; filesystem paths are checked for existence
       and read with async file I/O.
Who:   Called by the /extract_qa route handler during input resolution.

Path Input Lifecycle:
    1. Path missing → ImageNotFoundError (HTTP 400 "Image file not found")
    2. Read bytes asynchronously (aiofiles); OS errors become ImageReadError
       (HTTP 500)
    3. Guess MIME type from the file extension
"""

import logging
import mimetypes
from pathlib import Path
from typing import Optional

import aiofiles

from qa_extractor.exceptions import ImageNotFoundError, ImageReadError
from qa_extractor.services.image_service import ImageBuffer

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


def guess_mime_type(filename: Optional[str]) -> str:
    if not filename:
        return DEFAULT_MIME_TYPE
    mime_type, _ = mimetypes.guess_type(filename)
    return mime_type or DEFAULT_MIME_TYPE


class FileService:
    """Loads image sources into request-local ImageBuffers."""

    def from_upload(
        self,
        content: bytes,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> ImageBuffer:
        """
        Wrap uploaded bytes. The declared content type wins over a guess
        from the filename.
        """
        mime_type = content_type or guess_mime_type(filename)
        logger.info(
            "Image received via upload: filename=%s, type=%s, size=%d bytes",
            filename or "unknown",
            mime_type,
            len(content),
        )
        return ImageBuffer(data=content, mime_type=mime_type, filename=filename)

    async def from_path(self, image_path: str) -> ImageBuffer:
        """
        Read an image from the server's filesystem.

        Raises:
            ImageNotFoundError: nothing exists at image_path.
            ImageReadError: the path exists but could not be read (e.g. a
                directory).
        """
        path = Path(image_path)
        if not path.exists():
            logger.warning("Image path does not exist: %s", image_path)
            raise ImageNotFoundError(path=image_path)

        try:
            async with aiofiles.open(path, "rb") as f:
                content = await f.read()
        except OSError as e:
            logger.warning("Image path could not be read: %s (%s)", image_path, e)
            raise ImageReadError(
                message=f"Could not read image file: {e.strerror or e}",
                path=image_path,
            ) from e

        logger.info("Image read from path: %s (%d bytes)", path.name, len(content))
        return ImageBuffer(
            data=content,
            mime_type=guess_mime_type(path.name),
            filename=path.name,
        )
