"""HashFS metadata records.

Each entry owns one 20-byte record in the metadata table: a 4-byte kind
prefix followed by a 16-byte body.

    0   u32  compressed size (28 bits) | 0x10 in byte 3 when compressed
    4   u32  uncompressed size (28 bits)
    8   u32  reserved (0)
    12  u32  data offset / BLOCK_SIZE
"""

from dataclasses import dataclass

from ..utils.binary import BinaryWriter
from .errors import SizeLimitError
from .header import BLOCK_SIZE

# Record kind 128: plain file with uncompressed size
METADATA_KIND_PLAIN = 128
METADATA_PREFIX = bytes([METADATA_KIND_PLAIN, 0, 0, 0])
METADATA_RECORD_SIZE = 16
METADATA_STRIDE = len(METADATA_PREFIX) + METADATA_RECORD_SIZE

# Flag bit in the top byte of the compressed size field
METADATA_FLAG_COMPRESSED = 0x10

MAX_SIZE = 0x0FFFFFFF
MAX_BLOCK_INDEX = 0xFFFFFFFF


def _check_size(name: str, value: int) -> None:
    if value < 0:
        raise ValueError(f"{name} must not be negative: {value}")
    if value > MAX_SIZE:
        raise SizeLimitError(f"{name} {value} exceeds the 28-bit limit ({MAX_SIZE} bytes)")


def encode_metadata(
    compressed_size: int,
    uncompressed_size: int,
    data_offset: int,
    compressed: bool,
) -> bytes:
    """Encode the 16-byte metadata body (without the kind prefix)."""
    _check_size("Compressed size", compressed_size)
    _check_size("Uncompressed size", uncompressed_size)

    if data_offset < 0 or data_offset % BLOCK_SIZE:
        raise ValueError(f"Data offset {data_offset} is not aligned to {BLOCK_SIZE} bytes")

    block_index = data_offset // BLOCK_SIZE
    if block_index > MAX_BLOCK_INDEX:
        raise SizeLimitError(f"Data offset {data_offset} is beyond the addressable range")

    packed_size = compressed_size
    if compressed:
        packed_size |= METADATA_FLAG_COMPRESSED << 24

    writer = BinaryWriter()
    writer.write_u32(packed_size)
    writer.write_u32(uncompressed_size)
    writer.write_u32(0)
    writer.write_u32(block_index)
    return writer.getvalue()


@dataclass
class MetadataRecord:
    """Metadata for one packed file."""

    compressed_size: int
    uncompressed_size: int
    data_offset: int
    compressed: bool = True

    @property
    def block_index(self) -> int:
        return self.data_offset // BLOCK_SIZE

    def to_bytes(self) -> bytes:
        """Serialize with the kind prefix (METADATA_STRIDE bytes)."""
        return METADATA_PREFIX + encode_metadata(
            self.compressed_size,
            self.uncompressed_size,
            self.data_offset,
            self.compressed,
        )
