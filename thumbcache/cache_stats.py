"""
CacheStats - Counts of entries in the thumbnail cache.
"""

from dataclasses import dataclass, asdict


@dataclass
class CacheStats:
    """
    Statistics for the cache directory.

    Attributes:
        total_entries: Number of entry files on disk
        valid_entries: Entries that parse and are within the expiry window
    """
    total_entries: int = 0
    valid_entries: int = 0

    @property
    def stale_entries(self) -> int:
        """Entries a sweep would remove (expired or corrupt)."""
        return self.total_entries - self.valid_entries

    @property
    def valid_ratio(self) -> float:
        """Percentage of entries that are still valid."""
        if self.total_entries == 0:
            return 100.0
        return (self.valid_entries / self.total_entries) * 100

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'CacheStats':
        """Create from dictionary."""
        return cls(**data)
