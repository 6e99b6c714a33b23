"""
Thumbnail generation and caching for the Spica photo viewer.

A request for (path, size) is answered from a per-entry JSON cache when a
fresh entry exists; otherwise the file header is validated, the image is
decoded, box-fit resized and JPEG encoded, and the result is stored.
Entries expire after a fixed window and are swept on demand.
"""

__version__ = "1.0.0"

from .errors import (
    ThumbcacheError,
    NotFoundError,
    UnsupportedFormatError,
    DecodeError,
    FileIOError,
    PermissionDeniedError,
    CacheCorruptError,
)
from .cache_config import CacheConfig
from .format_detector import FormatDetector, ImageFormat
from .thumbnail_generator import ThumbnailGenerator
from .cache_key import derive_key
from .cache_entry import CacheEntry
from .cache_store import CacheStore
from .cache_stats import CacheStats
from .janitor import CacheJanitor
from .image_record import ImageInfo, ImageData, ThumbnailResult
from .scanner_progress import ScannerProgress
from .scanner import Scanner
from .image_service import ImageService
from .generation_stats import GenerationStats
from .generation_progress import GenerationProgress
from .warmer import CacheWarmer
from .reporter import Reporter

__all__ = [
    "ThumbcacheError",
    "NotFoundError",
    "UnsupportedFormatError",
    "DecodeError",
    "FileIOError",
    "PermissionDeniedError",
    "CacheCorruptError",
    "CacheConfig",
    "FormatDetector",
    "ImageFormat",
    "ThumbnailGenerator",
    "derive_key",
    "CacheEntry",
    "CacheStore",
    "CacheStats",
    "CacheJanitor",
    "ImageInfo",
    "ImageData",
    "ThumbnailResult",
    "ScannerProgress",
    "Scanner",
    "ImageService",
    "GenerationStats",
    "GenerationProgress",
    "CacheWarmer",
    "Reporter",
]
