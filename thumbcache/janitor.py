"""
CacheJanitor - Removes expired and corrupt entries from the cache directory.
"""

import logging
from typing import Optional

from .cache_stats import CacheStats
from .cache_store import CacheStore
from .errors import CacheCorruptError


class CacheJanitor:
    """
    Sweeps a CacheStore on demand.

    Runs only when asked (startup, CLI, HTTP), never as a side effect of
    reads or writes. A failure on one entry is logged and the sweep moves
    on to the next.
    """

    def __init__(self, store: CacheStore, logger: Optional[logging.Logger] = None):
        self.store = store
        self.logger = logger or logging.getLogger(__name__)

    def sweep(self) -> int:
        """
        Remove every corrupt or expired entry.

        Returns:
            Number of entry files removed (0 if the directory is missing)
        """
        removed = 0
        now = self.store.now()

        for path in self.store.entry_paths():
            try:
                entry = self.store.read_entry(path)
            except CacheCorruptError as e:
                self.logger.debug(f"Corrupt cache entry {path.name}: {e}")
                if self.store.remove_file(path):
                    removed += 1
                continue
            except FileNotFoundError:
                continue
            except OSError as e:
                self.logger.warning(f"Skipping unreadable cache entry {path.name}: {e}")
                continue

            if entry.is_expired(now, self.store.expiry_seconds):
                if self.store.remove_file(path):
                    removed += 1

        self.logger.info(f"Cleaned {removed} old cache entries")
        return removed

    def stats(self) -> CacheStats:
        """Count entries without modifying the store."""
        stats = CacheStats()
        now = self.store.now()

        for path in self.store.entry_paths():
            stats.total_entries += 1
            try:
                entry = self.store.read_entry(path)
            except (CacheCorruptError, OSError):
                continue
            if not entry.is_expired(now, self.store.expiry_seconds):
                stats.valid_entries += 1

        return stats
