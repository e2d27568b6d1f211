"""Tests for HashFS header and entry table structures."""

import pytest

from scs_toolkit.hashfs.entry_table import build_entry_table, serialize_entry_table
from scs_toolkit.hashfs.header import (
    ENTRY_FLAG_COMPRESSED,
    ENTRY_SIZE,
    HEADER_SIZE,
    EntryTableEntry,
    HashFSHeader,
)


class TestEntryTableEntry:
    """Tests for EntryTableEntry serialization."""

    def test_layout(self):
        entry = EntryTableEntry(hash=0x0102030405060708, metadata_index=3)
        data = entry.to_bytes()

        assert len(data) == ENTRY_SIZE
        assert data == (
            b"\x08\x07\x06\x05\x04\x03\x02\x01"
            b"\x03\x00\x00\x00"
            b"\x01\x00"
            b"\x04\x00"
        )
        assert entry.is_compressed

    def test_from_bytes(self):
        entry = EntryTableEntry(hash=0xFFFFFFFFFFFFFFFF, metadata_index=7, flags=0)
        parsed = EntryTableEntry.from_bytes(b"\x00" * 16 + entry.to_bytes(), offset=16)
        assert parsed == entry
        assert not parsed.is_compressed


class TestBuildEntryTable:
    """Tests for entry table ordering."""

    def test_sorted_by_hash(self):
        entries = build_entry_table([(30, 0), (10, 1), (20, 2)])

        assert [e.hash for e in entries] == [10, 20, 30]
        assert [e.metadata_index for e in entries] == [1, 2, 0]
        assert all(e.metadata_count == 1 for e in entries)
        assert all(e.flags == ENTRY_FLAG_COMPRESSED for e in entries)

    def test_collisions_keep_input_order(self):
        entries = build_entry_table([(5, 0), (1, 1), (5, 2), (5, 3)])
        assert [(e.hash, e.metadata_index) for e in entries] == [(1, 1), (5, 0), (5, 2), (5, 3)]

    def test_empty(self):
        assert build_entry_table([]) == []
        assert serialize_entry_table([]) == b""

    def test_serialize(self):
        entries = build_entry_table([(2, 1), (1, 0)])
        data = serialize_entry_table(entries)
        assert len(data) == 2 * ENTRY_SIZE
        assert data[:16] == entries[0].to_bytes()


class TestHashFSHeader:
    """Tests for HashFSHeader."""

    def test_layout(self):
        header = HashFSHeader(
            num_entries=2,
            entry_table_length=32,
            num_metadata_entries=2,
            metadata_table_length=40,
            entry_table_start=0x60,
            metadata_table_start=0x80,
        )
        data = header.to_bytes()

        assert len(data) == HEADER_SIZE
        assert data[0:4] == b"SCS#"
        assert data[4:6] == b"\x02\x00"
        assert data[6:8] == b"\x00\x00"
        assert data[8:12] == b"CITY"
        assert data[12:16] == b"\x02\x00\x00\x00"
        assert data[16:20] == b"\x20\x00\x00\x00"
        assert data[20:24] == b"\x02\x00\x00\x00"
        assert data[24:28] == b"\x28\x00\x00\x00"
        assert data[28:36] == b"\x60" + b"\x00" * 7
        assert data[36:44] == b"\x80" + b"\x00" * 7
        assert data[44:52] == b"\x00" * 8
        assert data[52:56] == b"\x00" * 4

    def test_round_trip(self):
        header = HashFSHeader(num_entries=1, entry_table_start=64)
        parsed = HashFSHeader.from_bytes(header.to_bytes())
        assert parsed == header
        assert parsed.is_valid

    def test_too_small(self):
        with pytest.raises(ValueError, match="too small"):
            HashFSHeader.from_bytes(b"SCS#")
