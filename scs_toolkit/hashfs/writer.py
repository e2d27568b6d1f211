"""HashFS v2 archive writer.

Output layout:

    0               header (56 bytes, written last)
    aligned         data blocks, one per file, each on a BLOCK_SIZE boundary
    aligned         entry table (16 bytes per entry, sorted by hash)
    aligned         metadata table (20 bytes per entry, same order)
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, List, Optional, Tuple

from ..utils.binary import BinaryWriter
from .compression import DEFAULT_COMPRESSION_LEVEL, compress
from .entry_table import build_entry_table, serialize_entry_table
from .errors import SizeLimitError
from .hashing import hash_path
from .header import BLOCK_SIZE, ENTRY_SIZE, HEADER_SIZE, EntryTableEntry, HashFSHeader
from .metadata import MAX_SIZE, METADATA_STRIDE, MetadataRecord

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]

_MAX_U32 = 0xFFFFFFFF


@dataclass
class FileRecord:
    """A source file waiting to be packed."""

    source: Path
    archive_path: str  # Always starts with "/"
    hash: int


@dataclass
class PackResult:
    """Summary of a finished archive."""

    output_path: Path
    header: HashFSHeader
    entries: List[EntryTableEntry] = field(default_factory=list)
    uncompressed_total: int = 0
    compressed_total: int = 0

    @property
    def file_count(self) -> int:
        return len(self.entries)


class HashFSWriter:
    """Writer for HashFS v2 archives.

    Opening the writer creates the output file and reserves the header, so
    an unwritable destination fails before any source file is read. Files
    are registered with add_file/add_directory and everything is written by
    finalize().
    """

    def __init__(
        self,
        output_path: Path,
        compression_level: int = DEFAULT_COMPRESSION_LEVEL,
        workers: int = 1,
    ):
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.output_path = Path(output_path)
        self.compression_level = compression_level
        self.workers = workers
        self._file: Optional[BinaryIO] = None
        self._writer: Optional[BinaryWriter] = None
        self._files: List[FileRecord] = []
        self._finalized = False

    def __enter__(self) -> "HashFSWriter":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def open(self) -> None:
        """Create the output file and reserve space for the header."""
        self._file = open(self.output_path, "wb")
        self._writer = BinaryWriter(self._file)
        self._writer.pad(HEADER_SIZE)

    def close(self) -> None:
        """Close the output file."""
        if self._file:
            self._file.close()
            self._file = None
            self._writer = None

    @property
    def files(self) -> List[FileRecord]:
        return self._files

    def add_file(self, source: Path, archive_path: str) -> FileRecord:
        """Register a single file under the given archive path."""
        if self._finalized:
            raise RuntimeError("Archive already finalized")

        if not archive_path.startswith("/"):
            archive_path = "/" + archive_path
        record = FileRecord(source=Path(source), archive_path=archive_path, hash=hash_path(archive_path))
        self._files.append(record)
        return record

    def add_directory(self, root: Path) -> int:
        """Register every regular file under root. Returns the number added."""
        root = Path(root)
        if not root.is_dir():
            raise NotADirectoryError(f"Source is not a directory: {root}")

        output = self.output_path.resolve()
        count = 0
        for path in sorted(root.rglob("*")):
            # The archive itself may live inside the tree
            if not path.is_file() or path.resolve() == output:
                continue
            self.add_file(path, "/" + path.relative_to(root).as_posix())
            count += 1
        return count

    def finalize(self, progress_callback: Optional[ProgressCallback] = None) -> PackResult:
        """Write data blocks, tables and the header."""
        if not self._writer:
            raise RuntimeError("Archive not opened")
        if self._finalized:
            raise RuntimeError("Archive already finalized")

        files = sorted(self._files, key=lambda record: record.hash)
        total = len(files)
        if total * METADATA_STRIDE > _MAX_U32:
            raise SizeLimitError(f"Too many files for one archive: {total}")
        self._warn_collisions(files)

        writer = self._writer
        metadata_table = bytearray()
        pairs: List[Tuple[int, int]] = []
        uncompressed_total = 0
        compressed_total = 0

        for index, (record, raw_size, data) in enumerate(self._compressed_files(files)):
            data_offset = writer.align(BLOCK_SIZE)
            metadata = MetadataRecord(
                compressed_size=len(data),
                uncompressed_size=raw_size,
                data_offset=data_offset,
                compressed=True,
            )
            metadata_table += metadata.to_bytes()
            writer.write_bytes(data)
            pairs.append((record.hash, index))

            uncompressed_total += raw_size
            compressed_total += len(data)
            logger.debug(
                "%s: hash=%016x offset=0x%x size=%d->%d",
                record.archive_path,
                record.hash,
                data_offset,
                raw_size,
                len(data),
            )
            if progress_callback:
                progress_callback(index, total, record.archive_path)

        entries = build_entry_table(pairs)

        entry_table_start = writer.align(BLOCK_SIZE)
        writer.write_bytes(serialize_entry_table(entries))

        metadata_table_start = writer.align(BLOCK_SIZE)
        writer.write_bytes(bytes(metadata_table))

        header = HashFSHeader(
            num_entries=len(entries),
            entry_table_length=len(entries) * ENTRY_SIZE,
            num_metadata_entries=len(entries),
            metadata_table_length=len(metadata_table),
            entry_table_start=entry_table_start,
            metadata_table_start=metadata_table_start,
            security_descriptor_offset=0,
        )
        logger.debug(
            "Entry table at 0x%x, metadata table at 0x%x", entry_table_start, metadata_table_start
        )

        writer.seek(0)
        writer.write_bytes(header.to_bytes())
        self._file.flush()
        self._finalized = True

        return PackResult(
            output_path=self.output_path,
            header=header,
            entries=entries,
            uncompressed_total=uncompressed_total,
            compressed_total=compressed_total,
        )

    def _read_and_compress(self, record: FileRecord) -> Tuple[FileRecord, int, bytes]:
        raw = record.source.read_bytes()
        if len(raw) > MAX_SIZE:
            raise SizeLimitError(f"{record.archive_path}: {len(raw)} bytes exceeds the 28-bit size limit")

        data = compress(raw, self.compression_level)
        if len(data) > MAX_SIZE:
            raise SizeLimitError(
                f"{record.archive_path}: compressed size {len(data)} exceeds the 28-bit size limit"
            )
        return record, len(raw), data

    def _compressed_files(self, files: List[FileRecord]) -> Iterator[Tuple[FileRecord, int, bytes]]:
        """Yield (record, uncompressed size, compressed data) in the order of files.

        With several workers the blocks are compressed concurrently but still
        yielded in order, so offsets are assigned exactly as in a serial run.
        """
        if self.workers == 1 or len(files) < 2:
            for record in files:
                yield self._read_and_compress(record)
            return

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            yield from executor.map(self._read_and_compress, files)

    @staticmethod
    def _warn_collisions(files: List[FileRecord]) -> None:
        for previous, current in zip(files, files[1:]):
            if previous.hash == current.hash:
                logger.warning(
                    "Hash collision: %s and %s both hash to %016x",
                    previous.archive_path,
                    current.archive_path,
                    current.hash,
                )


def pack_directory(
    source_dir: Path,
    output_path: Path,
    compression_level: int = DEFAULT_COMPRESSION_LEVEL,
    workers: int = 1,
    progress_callback: Optional[ProgressCallback] = None,
) -> PackResult:
    """Pack every regular file under source_dir into a HashFS archive."""
    source_dir = Path(source_dir)
    if not source_dir.is_dir():
        raise NotADirectoryError(f"Source is not a directory: {source_dir}")

    with HashFSWriter(output_path, compression_level=compression_level, workers=workers) as writer:
        writer.add_directory(source_dir)
        return writer.finalize(progress_callback)
