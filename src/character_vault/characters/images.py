"""
Appearance-image encoding.

Turns a user-selected image file into a ``data:`` URI that can be stored in
the character record and displayed as-is.
"""

import asyncio
import base64
import logging
import mimetypes
from pathlib import Path
from typing import Iterable, Optional

from ..core.config import ImageConfig
from ..core.exceptions import ImageEncodingError

logger = logging.getLogger(__name__)


class ImageEncoder:
    """Encodes image files as base64 data URIs."""

    def __init__(self, max_bytes: int, allowed_types: Iterable[str]):
        self.max_bytes = max_bytes
        self.allowed_types = frozenset(allowed_types)

    @classmethod
    def from_config(cls, config: ImageConfig) -> "ImageEncoder":
        return cls(config.max_bytes, config.allowed_types)

    def encode_file(self, path: Path) -> str:
        """Read ``path`` and return it as a data URI.

        Raises:
            ImageEncodingError: if the file is missing, not an allowed image
                type, or larger than ``max_bytes``
        """
        mime_type, _ = mimetypes.guess_type(path.name)
        if mime_type not in self.allowed_types:
            raise ImageEncodingError(
                f"Not a supported image file: {path.name}",
                error_code="IMAGE_UNSUPPORTED_TYPE",
                details={"path": str(path), "mime_type": mime_type},
            )

        try:
            size = path.stat().st_size
            if size > self.max_bytes:
                raise ImageEncodingError(
                    f"Image {path.name} is {size} bytes; the limit is {self.max_bytes}",
                    error_code="IMAGE_TOO_LARGE",
                    details={"path": str(path), "size": size, "limit": self.max_bytes},
                )
            payload = path.read_bytes()
        except OSError as e:
            raise ImageEncodingError(
                f"Cannot read image {path}: {e}",
                error_code="IMAGE_READ_ERROR",
                details={"path": str(path)},
            ) from e

        encoded = base64.b64encode(payload).decode("ascii")
        logger.debug(f"Encoded {path.name} ({len(payload)} bytes, {mime_type})")
        return f"data:{mime_type};base64,{encoded}"

    async def encode(self, path: Optional[Path]) -> Optional[str]:
        """Encode ``path`` off the calling thread; None when nothing was selected."""
        if path is None:
            return None
        return await asyncio.to_thread(self.encode_file, Path(path))
