"""HashFS v2 archive format."""

from .compression import compress, compress_bound
from .entry_table import build_entry_table, serialize_entry_table
from .errors import CompressionError, PackError, SizeLimitError
from .hashing import hash_path, normalize_path
from .header import BLOCK_SIZE, EntryTableEntry, HashFSHeader
from .metadata import MetadataRecord, encode_metadata
from .writer import HashFSWriter, PackResult, pack_directory

__all__ = [
    "BLOCK_SIZE",
    "CompressionError",
    "EntryTableEntry",
    "HashFSHeader",
    "HashFSWriter",
    "MetadataRecord",
    "PackError",
    "PackResult",
    "SizeLimitError",
    "build_entry_table",
    "compress",
    "compress_bound",
    "encode_metadata",
    "hash_path",
    "normalize_path",
    "pack_directory",
    "serialize_entry_table",
]
