"""
ThumbnailGenerator - Decodes, resizes and re-encodes images with Pillow.
"""

import base64
import io
import logging
import os
from typing import BinaryIO, Optional, Tuple, Union

from PIL import Image

from .errors import DecodeError, from_os_error
from .format_detector import FormatDetector, ImageFormat

# Pillow signals bad image data through several exception types
DECODE_ERRORS = (OSError, SyntaxError, ValueError, EOFError, Image.DecompressionBombError)


class ThumbnailGenerator:
    """
    Generates thumbnails and transport payloads from image files using Pillow.

    Thumbnails are always JPEG (alpha flattened onto white). Full-size
    images keep their own format, and animated sources are passed through
    byte-for-byte so the animation survives.
    """

    CONTENT_TYPES = {
        '.jpg': 'image/jpeg',
        '.jpeg': 'image/jpeg',
        '.png': 'image/png',
        '.webp': 'image/webp',
        '.gif': 'image/gif',
    }

    def __init__(
        self,
        quality: int = 85,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize thumbnail generator.

        Args:
            quality: JPEG/WebP quality for output (default: 85)
            logger: Optional logger instance
        """
        self.quality = quality
        self.logger = logger or logging.getLogger(__name__)

    def dimensions(self, path: str) -> Tuple[int, int]:
        """
        Read (width, height) from the image header without decoding pixels.

        Raises:
            DecodeError: the header cannot be parsed
        """
        with self._open_file(path) as f:
            try:
                with Image.open(f) as img:
                    return img.size
            except DECODE_ERRORS as e:
                raise DecodeError(f"Failed to get image dimensions: {e}") from e

    def decode(self, path: str) -> Image.Image:
        """Fully decode the first frame of an image."""
        img, _ = self._decode(path)
        return img

    def resize_to_box(self, img: Image.Image, box_size: int) -> Image.Image:
        """
        Box-fit resize: scale so the longer side equals ``box_size``.

        Aspect ratio is preserved and nothing is cropped. Images already
        inside the box are returned unchanged (copied), never upscaled.
        """
        if box_size <= 0:
            raise ValueError(f"Box size must be positive, got {box_size}")

        width, height = img.size
        if width <= box_size and height <= box_size:
            return img.copy()

        scale = box_size / max(width, height)
        target = (
            min(box_size, max(1, round(width * scale))),
            min(box_size, max(1, round(height * scale))),
        )
        return img.resize(target, Image.Resampling.LANCZOS)

    def encode(self, img: Image.Image, image_format: Union[ImageFormat, str]) -> bytes:
        """Encode an image in the given format and return the raw bytes."""
        output_format = ImageFormat(image_format)
        output = io.BytesIO()

        try:
            if output_format == ImageFormat.JPEG:
                if img.mode not in ('RGB', 'L', 'CMYK'):
                    img = self._convert_color_mode(img)
                img.save(output, format='JPEG', quality=self.quality, optimize=True)
            elif output_format == ImageFormat.PNG:
                img.save(output, format='PNG', optimize=True)
            elif output_format == ImageFormat.WEBP:
                if img.mode not in ('RGB', 'RGBA'):
                    img = img.convert('RGBA')
                img.save(output, format='WEBP', quality=self.quality)
            else:
                img.save(output, format='GIF')
        except DECODE_ERRORS as e:
            raise DecodeError(f"Failed to encode image as {output_format.value}: {e}") from e

        return output.getvalue()

    @staticmethod
    def to_base64(data: bytes) -> str:
        """Wrap raw bytes as base64 text."""
        return base64.b64encode(data).decode('ascii')

    def generate(self, path: str, size: int) -> str:
        """
        Generate a base64 JPEG thumbnail that fits inside ``size`` x ``size``.

        Raises:
            DecodeError, NotFoundError, PermissionDeniedError, FileIOError
        """
        thumbnail, _, _ = self.generate_with_dimensions(path, size)
        return thumbnail

    def generate_with_dimensions(self, path: str, size: int) -> Tuple[str, int, int]:
        """
        Generate a thumbnail and report the original image size.

        Returns:
            Tuple of (thumbnail_base64, original_width, original_height)
        """
        try:
            img, (width, height) = self._decode(path, draft_box=size)
            thumb = self.resize_to_box(img, size)
            data = self.encode(thumb, ImageFormat.JPEG)
        except DecodeError as e:
            self.logger.error(f"Error generating thumbnail for {path}: {e}")
            raise

        self.logger.debug(f"Thumbnail for {os.path.basename(path)}: {thumb.size} ({len(data)} bytes)")
        return self.to_base64(data), width, height

    def load_full(self, path: str) -> str:
        """
        Return the full-size image as base64.

        GIFs and other multi-frame images are sent as the original file
        bytes; everything else is decoded and re-encoded in its own format.
        """
        ext = os.path.splitext(path)[1].lower()
        if ext == '.gif' or self._is_animated(path):
            with self._open_file(path) as f:
                try:
                    return self.to_base64(f.read())
                except OSError as e:
                    raise from_os_error(e, path) from e

        img = self.decode(path)
        output_format = FormatDetector.EXTENSIONS.get(ext, ImageFormat.JPEG)
        return self.to_base64(self.encode(img, output_format))

    def get_content_type(self, extension: str) -> str:
        """Get content type for a file extension."""
        return self.CONTENT_TYPES.get(extension.lower(), 'image/jpeg')

    def _decode(
        self,
        path: str,
        draft_box: Optional[int] = None
    ) -> Tuple[Image.Image, Tuple[int, int]]:
        """Decode the first frame, returning it with the original dimensions."""
        with self._open_file(path) as f:
            try:
                with Image.open(f) as img:
                    original_size = img.size
                    if draft_box and img.format == 'JPEG':
                        # JPEG can decode at 1/2, 1/4 or 1/8 scale directly
                        img.draft(None, (draft_box * 2, draft_box * 2))
                    img.load()
                    return img.copy(), original_size
            except DECODE_ERRORS as e:
                raise DecodeError(f"Failed to decode image {path}: {e}") from e

    def _is_animated(self, path: str) -> bool:
        with self._open_file(path) as f:
            try:
                with Image.open(f) as img:
                    return bool(getattr(img, 'is_animated', False))
            except DECODE_ERRORS as e:
                raise DecodeError(f"Failed to read image {path}: {e}") from e

    @staticmethod
    def _open_file(path: str) -> BinaryIO:
        try:
            return open(path, 'rb')
        except OSError as e:
            raise from_os_error(e, path) from e

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Convert image to RGB, flattening any transparency onto white."""
        if img.mode in ('RGBA', 'LA'):
            background = Image.new('RGB', img.size, (255, 255, 255))
            if img.mode == 'LA':
                img = img.convert('RGBA')
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode == 'P':
            img = img.convert('RGBA')
            background = Image.new('RGB', img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            return background
        elif img.mode != 'RGB':
            return img.convert('RGB')
        return img
