"""
Exceptions raised by the thumbnail cache.
"""


class ThumbcacheError(Exception):
    """Base class for all thumbnail cache failures."""
    pass


class NotFoundError(ThumbcacheError):
    """Raised when a file or folder does not exist."""
    pass


class UnsupportedFormatError(ThumbcacheError):
    """Raised when a file's extension or header is not an accepted image format."""
    pass


class DecodeError(ThumbcacheError):
    """Raised when the codec cannot decode an otherwise accepted file."""
    pass


class FileIOError(ThumbcacheError):
    """Raised when reading or writing a source file or cache entry fails."""
    pass


class PermissionDeniedError(ThumbcacheError):
    """Raised when the filesystem refuses access to a path."""
    pass


class CacheCorruptError(ThumbcacheError):
    """Raised when a stored cache entry cannot be parsed.

    Handled inside the cache store; callers never see it.
    """
    pass


def from_os_error(error: OSError, path: str) -> ThumbcacheError:
    """Translate an OSError on ``path`` into the matching cache error."""
    if isinstance(error, FileNotFoundError):
        return NotFoundError(f"File not found: {path}")
    if isinstance(error, PermissionError):
        return PermissionDeniedError(f"Permission denied: {path}")
    return FileIOError(f"I/O error on {path}: {error}")
