"""HashFS v2 header and entry table structures."""

from dataclasses import dataclass

from ..utils.binary import BinaryReader, BinaryWriter

# HashFS magic bytes
HASHFS_MAGIC = b"SCS#"
HASHFS_VERSION = 2
HASHFS_SALT = 0
HASH_METHOD = b"CITY"
PLATFORM_PC = 0

HEADER_SIZE = 56
ENTRY_SIZE = 16

# Data blocks and tables start on this boundary; metadata stores offsets in blocks
BLOCK_SIZE = 16

# Entry table flags
ENTRY_FLAG_COMPRESSED = 0x4


@dataclass
class HashFSHeader:
    """HashFS v2 archive header (56 bytes)."""

    num_entries: int = 0  # 4 bytes
    entry_table_length: int = 0  # 4 bytes: num_entries * ENTRY_SIZE
    num_metadata_entries: int = 0  # 4 bytes
    metadata_table_length: int = 0  # 4 bytes
    entry_table_start: int = 0  # 8 bytes
    metadata_table_start: int = 0  # 8 bytes
    security_descriptor_offset: int = 0  # 8 bytes: 0 = absent
    platform: int = PLATFORM_PC  # 4 bytes
    magic: bytes = HASHFS_MAGIC  # 4 bytes: "SCS#"
    version: int = HASHFS_VERSION  # 2 bytes
    salt: int = HASHFS_SALT  # 2 bytes
    hash_method: bytes = HASH_METHOD  # 4 bytes: "CITY"

    @property
    def is_valid(self) -> bool:
        return self.magic == HASHFS_MAGIC and self.version == HASHFS_VERSION

    def to_bytes(self) -> bytes:
        """Serialize to bytes (little-endian)."""
        writer = BinaryWriter()
        writer.write_fixed_string(self.magic, 4)
        writer.write_u16(self.version)
        writer.write_u16(self.salt)
        writer.write_fixed_string(self.hash_method, 4)
        writer.write_u32(self.num_entries)
        writer.write_u32(self.entry_table_length)
        writer.write_u32(self.num_metadata_entries)
        writer.write_u32(self.metadata_table_length)
        writer.write_u64(self.entry_table_start)
        writer.write_u64(self.metadata_table_start)
        writer.write_u64(self.security_descriptor_offset)
        writer.write_u32(self.platform)
        return writer.getvalue()

    @classmethod
    def from_bytes(cls, data: bytes) -> "HashFSHeader":
        if len(data) < HEADER_SIZE:
            raise ValueError(f"HashFS header too small: {len(data)} bytes")

        reader = BinaryReader(data)
        magic = reader.read_bytes(4)
        version = reader.read_u16()
        salt = reader.read_u16()
        hash_method = reader.read_bytes(4)

        return cls(
            magic=magic,
            version=version,
            salt=salt,
            hash_method=hash_method,
            num_entries=reader.read_u32(),
            entry_table_length=reader.read_u32(),
            num_metadata_entries=reader.read_u32(),
            metadata_table_length=reader.read_u32(),
            entry_table_start=reader.read_u64(),
            metadata_table_start=reader.read_u64(),
            security_descriptor_offset=reader.read_u64(),
            platform=reader.read_u32(),
        )


@dataclass
class EntryTableEntry:
    """HashFS entry table record (16 bytes)."""

    hash: int  # 8 bytes: hash of the normalized path
    metadata_index: int  # 4 bytes: ordinal of the first metadata record
    metadata_count: int = 1  # 2 bytes
    flags: int = ENTRY_FLAG_COMPRESSED  # 2 bytes

    @property
    def is_compressed(self) -> bool:
        return bool(self.flags & ENTRY_FLAG_COMPRESSED)

    def to_bytes(self) -> bytes:
        writer = BinaryWriter()
        writer.write_u64(self.hash)
        writer.write_u32(self.metadata_index)
        writer.write_u16(self.metadata_count)
        writer.write_u16(self.flags)
        return writer.getvalue()

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> "EntryTableEntry":
        reader = BinaryReader(data[offset : offset + ENTRY_SIZE])
        return cls(
            hash=reader.read_u64(),
            metadata_index=reader.read_u32(),
            metadata_count=reader.read_u16(),
            flags=reader.read_u16(),
        )
