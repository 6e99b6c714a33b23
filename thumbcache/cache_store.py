"""
CacheStore - One JSON file per thumbnail, addressed by cache key.
"""

import logging
import os
import tempfile
import time
from dataclasses import replace
from pathlib import Path
from typing import Callable, Iterator, Optional, Union

from .cache_entry import CacheEntry
from .errors import CacheCorruptError, FileIOError, from_os_error


class CacheStore:
    """
    Persists cache entries as independent files.

    There is no shared index: each key maps to ``<cache_dir>/<key>.json``,
    so a failed write can only affect its own entry. Reads heal the store
    by deleting entries that are corrupt or expired.
    """

    SUFFIX = '.json'

    def __init__(
        self,
        cache_dir: Union[str, Path],
        expiry_seconds: int,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize cache store.

        Args:
            cache_dir: Directory for entry files (created on first write)
            expiry_seconds: Age after which an entry counts as stale
            clock: Source of the current time in epoch seconds
            logger: Optional logger instance
        """
        self.cache_dir = Path(cache_dir)
        self.expiry_seconds = expiry_seconds
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

    def now(self) -> int:
        return int(self.clock())

    def path_for(self, key: str) -> Path:
        return self.cache_dir / f"{key}{self.SUFFIX}"

    def ensure_directory(self) -> Path:
        """Create the cache directory if it does not exist yet."""
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileIOError(f"Failed to create cache directory: {e}") from e
        return self.cache_dir

    def is_expired(self, entry: CacheEntry) -> bool:
        return entry.is_expired(self.now(), self.expiry_seconds)

    def read_entry(self, path: Path) -> CacheEntry:
        """
        Read and parse one entry file.

        Raises:
            CacheCorruptError: the file content is not a valid entry
            OSError: the file could not be read
        """
        raw = path.read_bytes()
        return CacheEntry.from_json(raw)

    def get(self, key: str) -> Optional[CacheEntry]:
        """
        Look up a fresh entry.

        Returns None when there is no entry, and also when the entry is
        corrupt or expired; in those cases the file is deleted first.

        Raises:
            FileIOError/PermissionDeniedError: the entry exists but cannot be read
        """
        path = self.path_for(key)
        try:
            entry = self.read_entry(path)
        except FileNotFoundError:
            return None
        except CacheCorruptError as e:
            self.logger.warning(f"Removing corrupt cache entry {path.name}: {e}")
            self.remove_file(path)
            return None
        except OSError as e:
            raise from_os_error(e, str(path)) from e

        if self.is_expired(entry):
            self.logger.debug(f"Removing expired cache entry {path.name}")
            self.remove_file(path)
            return None

        return entry

    def put(self, key: str, entry: CacheEntry) -> CacheEntry:
        """
        Store an entry, replacing any previous one for the key.

        The creation time is always set here; whatever the caller put in
        ``entry.created`` is ignored.

        Returns:
            The entry as written
        """
        stored = replace(entry, created=self.now())
        self.ensure_directory()
        path = self.path_for(key)

        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.cache_dir, prefix=f".{key}.", suffix='.tmp')
        except OSError as e:
            raise FileIOError(f"Failed to write cache file: {e}") from e

        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(stored.to_json())
            os.replace(tmp_name, path)
        except OSError as e:
            self._discard_temp(tmp_name)
            raise FileIOError(f"Failed to write cache file: {e}") from e

        return stored

    def delete(self, key: str) -> bool:
        """Delete the entry for a key. Returns True if a file was removed."""
        return self.remove_file(self.path_for(key))

    def entry_paths(self) -> Iterator[Path]:
        """Yield every entry file. Yields nothing if the directory is missing."""
        try:
            names = sorted(os.listdir(self.cache_dir))
        except OSError as e:
            if not isinstance(e, FileNotFoundError):
                self.logger.warning(f"Cannot list cache directory {self.cache_dir}: {e}")
            return
        for name in names:
            if name.endswith(self.SUFFIX) and not name.startswith('.'):
                yield self.cache_dir / name

    def remove_file(self, path: Path) -> bool:
        """Delete one entry file. Returns True if it was removed."""
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            self.logger.warning(f"Failed to remove cache file {path.name}: {e}")
            return False

    def _discard_temp(self, tmp_name: str) -> None:
        try:
            os.remove(tmp_name)
        except OSError as e:
            self.logger.debug(f"Could not remove temp file {tmp_name}: {e}")
