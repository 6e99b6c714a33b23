"""
FormatDetector - Classifies image files by extension and header magic bytes.
"""

import logging
import os
from enum import Enum
from typing import Optional

from .errors import UnsupportedFormatError, from_os_error


class ImageFormat(str, Enum):
    """Image formats the viewer accepts."""
    JPEG = 'jpeg'
    PNG = 'png'
    WEBP = 'webp'
    GIF = 'gif'


class FormatDetector:
    """
    Decides whether a file is an image the viewer can show.

    The extension check is cheap and does no I/O. Header validation reads
    a short prefix of the file and infers the format from its magic
    number, so a renamed or corrupted file is rejected before it reaches
    the decoder.
    """

    HEADER_SIZE = 16

    EXTENSIONS = {
        '.jpg': ImageFormat.JPEG,
        '.jpeg': ImageFormat.JPEG,
        '.png': ImageFormat.PNG,
        '.webp': ImageFormat.WEBP,
        '.gif': ImageFormat.GIF,
    }

    PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'
    JPEG_SIGNATURE = b'\xff\xd8\xff'
    GIF_SIGNATURES = (b'GIF87a', b'GIF89a')

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def classify(self, path: str) -> Optional[ImageFormat]:
        """Return the format implied by the file extension, or None."""
        ext = os.path.splitext(path)[1].lower()
        return self.EXTENSIONS.get(ext)

    def is_supported(self, path: str) -> bool:
        """Check the extension only (case-insensitive)."""
        return self.classify(path) is not None

    @classmethod
    def sniff(cls, prefix: bytes) -> Optional[ImageFormat]:
        """Infer the format from leading bytes, ignoring any filename."""
        if prefix.startswith(cls.JPEG_SIGNATURE):
            return ImageFormat.JPEG
        if prefix.startswith(cls.PNG_SIGNATURE):
            return ImageFormat.PNG
        if prefix[:6] in cls.GIF_SIGNATURES:
            return ImageFormat.GIF
        if len(prefix) >= 12 and prefix[:4] == b'RIFF' and prefix[8:12] == b'WEBP':
            return ImageFormat.WEBP
        return None

    def read_header(self, path: str) -> bytes:
        """Read the fixed-size prefix used for magic-number detection."""
        try:
            with open(path, 'rb') as f:
                return f.read(self.HEADER_SIZE)
        except OSError as e:
            raise from_os_error(e, path) from e

    def validate_header(self, path: str) -> ImageFormat:
        """
        Validate that the file header matches its extension.

        Args:
            path: Path to the image file

        Returns:
            The detected format

        Raises:
            UnsupportedFormatError: extension unknown, header unrecognized,
                or header format differs from the extension
        """
        declared = self.classify(path)
        if declared is None:
            raise UnsupportedFormatError(f"Unsupported file format: {path}")

        detected = self.sniff(self.read_header(path))
        if detected is None:
            self.logger.debug(f"Unrecognized image header: {path}")
            raise UnsupportedFormatError(f"Failed to detect valid image format: {path}")

        if detected != declared:
            self.logger.debug(
                f"Header mismatch for {path}: extension says {declared.value}, "
                f"header says {detected.value}"
            )
            raise UnsupportedFormatError(
                f"File content is {detected.value} but extension says {declared.value}: {path}"
            )

        return detected
