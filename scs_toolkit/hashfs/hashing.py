"""Path hashing for HashFS lookups.

Archives identify entries by a 64-bit hash of the normalized path rather than
by name. The function below is the CityHash-derived variant readers expect
for the "CITY" hash method. Only whole 8-byte chunks are mixed in; a trailing
partial chunk contributes through the length term alone.
"""

CITY_K1 = 0x9DDFEA08EB382D69

_MASK64 = 0xFFFFFFFFFFFFFFFF


def normalize_path(path: str) -> str:
    """Normalize an archive path the way it is hashed.

    Backslashes become forward slashes, a single leading separator is
    removed and ASCII letters are lower-cased.
    """
    path = path.replace("\\", "/")
    if path.startswith("/"):
        path = path[1:]
    return path.encode("utf-8", "surrogateescape").lower().decode("utf-8", "surrogateescape")


def hash_bytes(data: bytes) -> int:
    """Hash already-normalized path bytes."""
    length = len(data)
    result = CITY_K1 ^ length

    for pos in range(0, length - length % 8, 8):
        k = int.from_bytes(data[pos : pos + 8], "little")
        k = (k * CITY_K1) & _MASK64
        k ^= k >> 47
        k = (k * CITY_K1) & _MASK64
        result ^= k
        result = (result * CITY_K1) & _MASK64

    return result


def hash_path(path: str) -> int:
    """Return the 64-bit HashFS hash of an archive path."""
    return hash_bytes(normalize_path(path).encode("utf-8", "surrogateescape"))
