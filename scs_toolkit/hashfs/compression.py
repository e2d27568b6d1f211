"""DEFLATE compression for data blocks."""

import zlib

from .errors import CompressionError

DEFAULT_COMPRESSION_LEVEL = 9


def compress_bound(size: int) -> int:
    """Worst-case zlib output size for size input bytes (zlib's compressBound)."""
    return size + (size >> 12) + (size >> 14) + (size >> 25) + 13


def compress(data: bytes, level: int = DEFAULT_COMPRESSION_LEVEL) -> bytes:
    """Compress data into a zlib stream."""
    try:
        result = zlib.compress(data, level)
    except zlib.error as e:
        raise CompressionError(f"zlib compression failed: {e}") from e

    bound = compress_bound(len(data))
    if len(result) > bound:
        raise CompressionError(
            f"Compressed output ({len(result)} bytes) exceeds bound of {bound} bytes"
        )
    return result
