"""
CacheConfig - Settings for the thumbnail cache, resolved once at startup.
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

APP_NAME = 'SpicaPhotoViewer'

DEFAULT_EXPIRY_SECONDS = 24 * 60 * 60
DEFAULT_THUMBNAIL_SIZE = 30
DEFAULT_JPEG_QUALITY = 85

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def default_cache_dir(
    environ: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None
) -> Path:
    """
    Resolve the platform's application cache directory.

    Windows:  %APPDATA%\\SpicaPhotoViewer\\cache
    macOS:    ~/Library/Caches/SpicaPhotoViewer
    Other:    $XDG_CACHE_HOME/SpicaPhotoViewer, else ~/.cache/SpicaPhotoViewer

    Raises:
        ValueError: on Windows when APPDATA is unset, on macOS when HOME is unset
    """
    env = os.environ if environ is None else environ
    platform = platform or sys.platform

    if platform.startswith('win'):
        app_data = env.get('APPDATA')
        if not app_data:
            raise ValueError("Failed to get APPDATA directory")
        return Path(app_data) / APP_NAME / 'cache'

    if platform == 'darwin':
        home = env.get('HOME')
        if not home:
            raise ValueError("Failed to get HOME directory")
        return Path(home) / 'Library' / 'Caches' / APP_NAME

    cache_base = env.get('XDG_CACHE_HOME')
    if not cache_base:
        home = env.get('HOME')
        cache_base = os.path.join(home, '.cache') if home else '/tmp/.cache'
    return Path(cache_base) / APP_NAME


@dataclass
class CacheConfig:
    """
    Thumbnail cache configuration.

    Attributes:
        cache_dir: Directory holding one JSON file per cache entry
        expiry_seconds: Age after which an entry is stale
        default_size: Thumbnail box size used when a request gives none
        jpeg_quality: JPEG quality for encoded thumbnails
        log_level: Logging level name
    """
    cache_dir: Path
    expiry_seconds: int = DEFAULT_EXPIRY_SECONDS
    default_size: int = DEFAULT_THUMBNAIL_SIZE
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    log_level: str = 'INFO'

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        platform: Optional[str] = None
    ) -> 'CacheConfig':
        """
        Build configuration from environment variables.

        THUMBCACHE_DIR overrides the platform cache directory;
        THUMBCACHE_EXPIRY_SECONDS, THUMBCACHE_DEFAULT_SIZE,
        THUMBCACHE_JPEG_QUALITY and THUMBCACHE_LOG_LEVEL override the
        remaining defaults.
        """
        env = os.environ if environ is None else environ

        override = env.get('THUMBCACHE_DIR')
        cache_dir = Path(override) if override else default_cache_dir(env, platform)

        return cls(
            cache_dir=cache_dir,
            expiry_seconds=int(env.get('THUMBCACHE_EXPIRY_SECONDS', DEFAULT_EXPIRY_SECONDS)),
            default_size=int(env.get('THUMBCACHE_DEFAULT_SIZE', DEFAULT_THUMBNAIL_SIZE)),
            jpeg_quality=int(env.get('THUMBCACHE_JPEG_QUALITY', DEFAULT_JPEG_QUALITY)),
            log_level=env.get('THUMBCACHE_LOG_LEVEL', 'INFO').upper(),
        )

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty when valid)."""
        errors = []
        if not str(self.cache_dir):
            errors.append("Cache directory is not set")
        elif self.cache_dir.exists() and not self.cache_dir.is_dir():
            errors.append(f"Cache path is not a directory: {self.cache_dir}")
        if self.expiry_seconds <= 0:
            errors.append("Expiry window must be positive")
        if self.default_size <= 0:
            errors.append("Default thumbnail size must be positive")
        if not 1 <= self.jpeg_quality <= 100:
            errors.append("JPEG quality must be between 1 and 100")
        if self.log_level not in LOG_LEVELS:
            errors.append(f"Unknown log level: {self.log_level}")
        return errors
