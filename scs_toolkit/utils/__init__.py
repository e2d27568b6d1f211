"""Byte-level helpers."""

from .binary import BinaryReader, BinaryWriter, align_up

__all__ = ["BinaryReader", "BinaryWriter", "align_up"]
