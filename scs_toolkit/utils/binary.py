"""Binary reading/writing utilities for little-endian HashFS data."""

import struct
from io import BytesIO
from typing import BinaryIO, Optional, Union


def align_up(value: int, alignment: int) -> int:
    """Round value up to the next multiple of alignment."""
    remainder = value % alignment
    if remainder:
        return value + alignment - remainder
    return value


class BinaryReader:
    """Helper for reading little-endian binary data."""

    def __init__(self, data: Union[bytes, BinaryIO]):
        if isinstance(data, (bytes, bytearray)):
            self._stream = BytesIO(data)
        else:
            self._stream = data

    @property
    def stream(self) -> BinaryIO:
        return self._stream

    def tell(self) -> int:
        return self._stream.tell()

    def seek(self, offset: int, whence: int = 0) -> int:
        return self._stream.seek(offset, whence)

    def read_bytes(self, size: int) -> bytes:
        data = self._stream.read(size)
        if len(data) < size:
            raise EOFError(f"Expected {size} bytes, got {len(data)}")
        return data

    def read_u8(self) -> int:
        return struct.unpack("<B", self.read_bytes(1))[0]

    def read_u16(self) -> int:
        return struct.unpack("<H", self.read_bytes(2))[0]

    def read_u32(self) -> int:
        return struct.unpack("<I", self.read_bytes(4))[0]

    def read_u64(self) -> int:
        return struct.unpack("<Q", self.read_bytes(8))[0]

    def skip(self, count: int) -> None:
        """Skip forward by count bytes."""
        self._stream.seek(count, 1)


class BinaryWriter:
    """Helper for writing little-endian binary data.

    Wraps either an in-memory buffer or an open binary stream. Every field
    is packed explicitly with its width and byte order.
    """

    def __init__(self, stream: Optional[BinaryIO] = None):
        self._stream = stream if stream is not None else BytesIO()

    @property
    def stream(self) -> BinaryIO:
        return self._stream

    def tell(self) -> int:
        return self._stream.tell()

    def seek(self, offset: int, whence: int = 0) -> int:
        return self._stream.seek(offset, whence)

    def getvalue(self) -> bytes:
        """Return the buffer contents (in-memory writers only)."""
        return self._stream.getvalue()

    def write_bytes(self, data: bytes) -> None:
        self._stream.write(data)

    def write_u8(self, value: int) -> None:
        self._stream.write(struct.pack("<B", value))

    def write_u16(self, value: int) -> None:
        self._stream.write(struct.pack("<H", value))

    def write_u32(self, value: int) -> None:
        self._stream.write(struct.pack("<I", value))

    def write_u64(self, value: int) -> None:
        self._stream.write(struct.pack("<Q", value))

    def write_fixed_string(self, value: bytes, length: int) -> None:
        """Write value padded with null bytes to exactly length bytes."""
        if len(value) > length:
            raise ValueError(f"{value!r} does not fit in {length} bytes")
        self._stream.write(value.ljust(length, b"\x00"))

    def pad(self, count: int) -> None:
        """Write count zero bytes."""
        if count > 0:
            self._stream.write(b"\x00" * count)

    def align(self, alignment: int) -> int:
        """Pad with zero bytes up to the given boundary; return the new position."""
        pos = self.tell()
        self.pad(align_up(pos, alignment) - pos)
        return self.tell()
