"""
Records exchanged with the viewer: file descriptors, full images and thumbnails.
"""

from dataclasses import dataclass, asdict
from typing import Optional


@dataclass
class ImageInfo:
    """
    Descriptor for an image file in a folder listing.

    Only built for files whose header passed validation.

    Attributes:
        path: Full path to the file
        filename: Base filename
        size: File size in bytes
        modified: Modification time, epoch seconds
        format: Lowercased file extension (e.g. 'jpg')
    """
    path: str
    filename: str
    size: int
    modified: int
    format: str

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'ImageInfo':
        return cls(**data)

    def format_status(self) -> str:
        """
        Format a one-line summary for listings.

        Returns:
            Status string like "photo.jpg - JPG (45.2 KB)"
        """
        return f"{self.filename} - {self.format.upper()} ({self._format_bytes(self.size)})"

    @staticmethod
    def _format_bytes(bytes_val: Optional[int]) -> str:
        """Format bytes as human-readable string."""
        if bytes_val is None:
            return "unknown"
        for unit in ['B', 'KB', 'MB', 'GB']:
            if bytes_val < 1024:
                return f"{bytes_val:.1f} {unit}"
            bytes_val /= 1024
        return f"{bytes_val:.1f} TB"


@dataclass
class ImageData:
    """
    A full-size image ready for display.

    Attributes:
        path: Source path
        base64: Base64 payload (original bytes for animated images)
        width: Original width in pixels
        height: Original height in pixels
        format: Lowercased file extension
    """
    path: str
    base64: str
    width: int
    height: int
    format: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ThumbnailResult:
    """
    Result of a thumbnail request.

    Attributes:
        path: Source path
        size: Requested box size
        thumbnail: Base64 JPEG payload
        created: When the cached entry was written (epoch seconds)
        width: Original image width, if known
        height: Original image height, if known
        from_cache: True when served without decoding
    """
    path: str
    size: int
    thumbnail: str
    created: int
    width: Optional[int] = None
    height: Optional[int] = None
    from_cache: bool = False

    def to_dict(self) -> dict:
        return asdict(self)
