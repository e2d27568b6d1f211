"""Tests for binary utilities."""

import pytest

from scs_toolkit.utils.binary import BinaryReader, BinaryWriter, align_up


class TestBinaryReader:
    """Tests for BinaryReader class."""

    def test_read_u8(self):
        reader = BinaryReader(b"\x42")
        assert reader.read_u8() == 0x42

    def test_read_u16_little_endian(self):
        reader = BinaryReader(b"\x34\x12")
        assert reader.read_u16() == 0x1234

    def test_read_u32_little_endian(self):
        reader = BinaryReader(b"\x78\x56\x34\x12")
        assert reader.read_u32() == 0x12345678

    def test_read_u64_little_endian(self):
        reader = BinaryReader(b"\xF0\xDE\xBC\x9A\x78\x56\x34\x12")
        assert reader.read_u64() == 0x123456789ABCDEF0

    def test_seek_tell_and_skip(self):
        reader = BinaryReader(b"\x00\x01\x02\x03\x04\x05")
        reader.skip(4)
        assert reader.tell() == 4
        assert reader.read_u8() == 0x04
        reader.seek(1)
        assert reader.read_u8() == 0x01

    def test_eof_error(self):
        reader = BinaryReader(b"\x00\x01")
        with pytest.raises(EOFError):
            reader.read_bytes(10)


class TestBinaryWriter:
    """Tests for BinaryWriter class."""

    def test_write_integers_little_endian(self):
        writer = BinaryWriter()
        writer.write_u8(0x42)
        writer.write_u16(0x1234)
        writer.write_u32(0x12345678)
        writer.write_u64(0x123456789ABCDEF0)
        assert writer.getvalue() == (
            b"\x42" b"\x34\x12" b"\x78\x56\x34\x12" b"\xF0\xDE\xBC\x9A\x78\x56\x34\x12"
        )

    def test_write_out_of_range_fails(self):
        writer = BinaryWriter()
        with pytest.raises(Exception):
            writer.write_u16(0x10000)

    def test_write_fixed_string(self):
        writer = BinaryWriter()
        writer.write_fixed_string(b"ab", 4)
        assert writer.getvalue() == b"ab\x00\x00"

    def test_write_fixed_string_too_long(self):
        writer = BinaryWriter()
        with pytest.raises(ValueError):
            writer.write_fixed_string(b"abcde", 4)

    def test_align(self):
        writer = BinaryWriter()
        writer.write_bytes(b"\x01")
        assert writer.align(16) == 16
        assert writer.getvalue() == b"\x01" + b"\x00" * 15

        # Already aligned
        assert writer.align(16) == 16
        assert len(writer.getvalue()) == 16

    def test_align_up(self):
        assert align_up(0, 16) == 0
        assert align_up(1, 16) == 16
        assert align_up(56, 16) == 64
        assert align_up(64, 16) == 64
