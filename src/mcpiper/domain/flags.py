"""Human-readable names for the memcache value flags bitfield."""

from __future__ import annotations

from enum import IntFlag


class ValueFlag(IntFlag):
    """Value flags carried on memcache records."""

    PHP_SERIALIZED = 0x1
    COMPRESSED = 0x2
    FB_SERIALIZED = 0x4
    FB_COMPACT_SERIALIZED = 0x8
    ASCII_INT_SERIALIZED = 0x10
    SIZE_SPLIT = 0x20
    ZLIB_COMPRESSED = 0x800
    QUICKLZ_COMPRESSED = 0x2000
    SNAPPY_COMPRESSED = 0x4000
    BIG_VALUE = 0x8000
    NEGATIVE_CACHE = 0x10000
    HOT_KEY = 0x20000


def describe_flags(flags: int) -> list[str]:
    """Return the names of the recognised bits set in ``flags``, lowest bit first.

    Unrecognised bits are ignored.

    Examples
    --------
    >>> describe_flags(0x803)
    ['PHP_SERIALIZED', 'COMPRESSED', 'ZLIB_COMPRESSED']
    >>> describe_flags(0x40)
    []
    """

    return [flag.name for flag in ValueFlag if flags & flag.value]


__all__ = ["ValueFlag", "describe_flags"]
