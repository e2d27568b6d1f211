"""Entry table construction."""

from typing import Iterable, List, Tuple

from .header import ENTRY_FLAG_COMPRESSED, EntryTableEntry


def build_entry_table(
    pairs: Iterable[Tuple[int, int]], flags: int = ENTRY_FLAG_COMPRESSED
) -> List[EntryTableEntry]:
    """Build entry records from (hash, metadata index) pairs.

    Records are ordered by ascending hash so readers can binary search the
    table. The sort is stable: colliding hashes keep their input order and
    are all emitted.
    """
    entries = [
        EntryTableEntry(hash=path_hash, metadata_index=index, metadata_count=1, flags=flags)
        for path_hash, index in pairs
    ]
    entries.sort(key=lambda entry: entry.hash)
    return entries


def serialize_entry_table(entries: Iterable[EntryTableEntry]) -> bytes:
    return b"".join(entry.to_bytes() for entry in entries)
