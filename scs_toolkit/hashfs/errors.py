"""Errors raised while building a HashFS archive."""


class PackError(Exception):
    """Base class for archive packing failures."""


class SizeLimitError(PackError):
    """A value does not fit in its on-disk field."""


class CompressionError(PackError):
    """The compressor failed or exceeded its advertised output bound."""
