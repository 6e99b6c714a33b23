"""
ImageService - The operations the viewer calls: listings, full images, cached thumbnails.
"""

import logging
import os
from typing import Iterable, List, Optional

from .cache_config import CacheConfig
from .cache_entry import CacheEntry
from .cache_key import derive_key
from .cache_stats import CacheStats
from .cache_store import CacheStore
from .errors import NotFoundError, ThumbcacheError, UnsupportedFormatError
from .format_detector import FormatDetector
from .image_record import ImageData, ImageInfo, ThumbnailResult
from .janitor import CacheJanitor
from .scanner import Scanner
from .thumbnail_generator import ThumbnailGenerator


class ImageService:
    """
    Entry point for the viewer.

    A thumbnail request derives the cache key, returns a fresh cached
    entry if there is one, and otherwise validates the file header,
    decodes, resizes, encodes and stores the result. Nothing is written
    to the cache when any step fails.
    """

    def __init__(
        self,
        config: CacheConfig,
        store: Optional[CacheStore] = None,
        generator: Optional[ThumbnailGenerator] = None,
        detector: Optional[FormatDetector] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the service.

        Args:
            config: Resolved cache configuration
            store: Cache store (default: one built from config)
            generator: Image pipeline (default: one built from config)
            detector: Format detector
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.store = store or CacheStore(config.cache_dir, config.expiry_seconds, logger=self.logger)
        self.generator = generator or ThumbnailGenerator(config.jpeg_quality, logger=self.logger)
        self.detector = detector or FormatDetector(self.logger)
        self.scanner = Scanner(self.detector, self.logger)
        self.janitor = CacheJanitor(self.store, self.logger)

    def get_folder_images(self, folder: str) -> List[ImageInfo]:
        """List validated images in a folder, sorted by filename."""
        return self.scanner.scan(folder)

    def load_full_image(self, path: str) -> ImageData:
        """
        Load a full-size image for display.

        Raises:
            NotFoundError, UnsupportedFormatError, DecodeError, FileIOError
        """
        self._check_file(path)
        self._check_extension(path)
        self.detector.validate_header(path)

        payload = self.generator.load_full(path)
        width, height = self.generator.dimensions(path)
        image_format = os.path.splitext(path)[1].lstrip('.').lower()

        return ImageData(path=path, base64=payload, width=width, height=height, format=image_format)

    def get_or_create_thumbnail(
        self,
        path: str,
        size: Optional[int] = None,
        force_regenerate: bool = False
    ) -> ThumbnailResult:
        """
        Return a cached thumbnail, generating and storing one on a miss.

        Args:
            path: Source image path
            size: Bounding box size (default: config.default_size)
            force_regenerate: Skip the cache lookup and always regenerate

        Raises:
            NotFoundError, UnsupportedFormatError, DecodeError, FileIOError,
            PermissionDeniedError
        """
        size = self._resolve_size(size)
        self._check_extension(path)
        key = derive_key(path, size)

        if not force_regenerate:
            entry = self.store.get(key)
            if entry is not None:
                self.logger.debug(f"Cache hit for {os.path.basename(path)} @{size}")
                return self._to_result(path, size, entry, from_cache=True)

        self._check_file(path)
        self.detector.validate_header(path)

        thumbnail, width, height = self.generator.generate_with_dimensions(path, size)
        entry = self.store.put(key, CacheEntry(thumbnail=thumbnail, width=width, height=height))

        self.logger.debug(f"Generated thumbnail: {os.path.basename(path)} @{size}")
        return self._to_result(path, size, entry, from_cache=False)

    def get_cached_thumbnail_only(self, path: str, size: Optional[int] = None) -> Optional[str]:
        """Return the cached thumbnail payload, or None. Never generates."""
        entry = self.store.get(derive_key(path, self._resolve_size(size)))
        return entry.thumbnail if entry else None

    def set_cached_thumbnail(
        self,
        path: str,
        thumbnail: str,
        size: Optional[int] = None,
        width: Optional[int] = None,
        height: Optional[int] = None
    ) -> CacheEntry:
        """Store a thumbnail produced elsewhere under the (path, size) key."""
        key = derive_key(path, self._resolve_size(size))
        return self.store.put(key, CacheEntry(thumbnail=thumbnail, width=width, height=height))

    def generate_thumbnail(self, path: str, size: Optional[int] = None) -> str:
        """Generate a thumbnail without touching the cache."""
        return self.generate_thumbnail_with_dimensions(path, size).thumbnail

    def generate_thumbnail_with_dimensions(
        self,
        path: str,
        size: Optional[int] = None
    ) -> ThumbnailResult:
        """Generate a thumbnail and the original dimensions without touching the cache."""
        size = self._resolve_size(size)
        self._check_file(path)
        self._check_extension(path)
        self.detector.validate_header(path)

        thumbnail, width, height = self.generator.generate_with_dimensions(path, size)
        return ThumbnailResult(
            path=path,
            size=size,
            thumbnail=thumbnail,
            created=self.store.now(),
            width=width,
            height=height,
        )

    def handle_dropped_file(self, path: str) -> ImageInfo:
        """Describe a single file dropped onto the viewer."""
        self._check_file(path)
        self._check_extension(path)
        return self.scanner.describe(path)

    def validate_image_file(self, path: str) -> bool:
        """True if the path is an existing file with a supported, valid header."""
        if not os.path.isfile(path) or not self.detector.is_supported(path):
            return False
        try:
            self.detector.validate_header(path)
        except ThumbcacheError as e:
            self.logger.debug(f"Invalid image file {path}: {e}")
            return False
        return True

    def get_startup_file(self, args: Iterable[str]) -> Optional[str]:
        """Pick the first launch argument that names a supported image file."""
        for arg in args:
            if os.path.isfile(arg) and self.detector.is_supported(arg):
                return arg
        return None

    def clear_expired_cache(self) -> int:
        """Sweep the cache. Returns the number of entries removed."""
        return self.janitor.sweep()

    def get_cache_stats(self) -> CacheStats:
        return self.janitor.stats()

    def _resolve_size(self, size: Optional[int]) -> int:
        if size is None:
            return self.config.default_size
        if size <= 0:
            raise ValueError(f"Thumbnail size must be positive, got {size}")
        return size

    def _check_file(self, path: str) -> None:
        if not os.path.isfile(path):
            raise NotFoundError(f"File not found: {path}")

    def _check_extension(self, path: str) -> None:
        if not self.detector.is_supported(path):
            raise UnsupportedFormatError(f"Unsupported file format: {path}")

    @staticmethod
    def _to_result(path: str, size: int, entry: CacheEntry, from_cache: bool) -> ThumbnailResult:
        return ThumbnailResult(
            path=path,
            size=size,
            thumbnail=entry.thumbnail,
            created=entry.created,
            width=entry.width,
            height=entry.height,
            from_cache=from_cache,
        )
