"""
Cache key derivation.

A key depends only on the source path and the requested size, never on
file content. An edited file keeps its old thumbnail until the entry
expires.
"""

import hashlib
import os

KEY_DIGEST_SIZE = 16


def normalize_path(source_path: str) -> str:
    """Collapse redundant separators and up-level references without touching disk."""
    return os.path.normpath(source_path)


def derive_key(source_path: str, size: int) -> str:
    """
    Derive the cache key for a thumbnail request.

    Args:
        source_path: Path of the source image
        size: Requested bounding box size in pixels

    Returns:
        32-character lowercase hex string
    """
    hasher = hashlib.blake2b(digest_size=KEY_DIGEST_SIZE)
    hasher.update(normalize_path(source_path).encode('utf-8', errors='surrogatepass'))
    hasher.update(b'\x00')
    hasher.update(str(int(size)).encode('ascii'))
    return hasher.hexdigest()
