"""
CacheEntry - One persisted thumbnail record.
"""

import json
from dataclasses import dataclass, asdict
from typing import Optional

from .errors import CacheCorruptError


@dataclass
class CacheEntry:
    """
    A cached thumbnail and the time it was stored.

    Attributes:
        thumbnail: Base64 text of the encoded thumbnail
        created: Epoch seconds, stamped by the store on write
        width: Width of the original image, if known
        height: Height of the original image, if known
    """
    thumbnail: str
    created: int = 0
    width: Optional[int] = None
    height: Optional[int] = None

    def age(self, now: int) -> int:
        """Seconds since the entry was stored."""
        return now - self.created

    def is_expired(self, now: int, expiry_seconds: int) -> bool:
        """True once the entry is strictly older than the expiry window."""
        return self.age(now) > expiry_seconds

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'CacheEntry':
        """
        Create from a parsed JSON object.

        Raises:
            CacheCorruptError: if a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise CacheCorruptError("Cache entry is not an object")

        thumbnail = data.get('thumbnail')
        created = data.get('created')
        if not isinstance(thumbnail, str):
            raise CacheCorruptError("Cache entry has no thumbnail text")
        if not _is_int(created):
            raise CacheCorruptError("Cache entry has no integer timestamp")

        width = data.get('width')
        height = data.get('height')
        for value in (width, height):
            if value is not None and not _is_int(value):
                raise CacheCorruptError("Cache entry dimensions must be integers")

        return cls(thumbnail=thumbnail, created=created, width=width, height=height)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, raw: bytes) -> 'CacheEntry':
        """Parse raw file bytes, raising CacheCorruptError on any defect."""
        try:
            data = json.loads(raw.decode('utf-8'))
        except (UnicodeDecodeError, ValueError) as e:
            raise CacheCorruptError(f"Failed to parse cache entry: {e}") from e
        return cls.from_dict(data)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
