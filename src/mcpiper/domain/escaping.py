"""Backslash escaping of raw bytes for single-line display."""

from __future__ import annotations

_SHORTHAND = {
    0x0A: b"\\n",
    0x0D: b"\\r",
    0x09: b"\\t",
    0x5C: b"\\\\",
}


def backslashify(data: bytes) -> bytes:
    """Escape ``data`` so every byte outside printable ASCII becomes visible.

    Newline, carriage return, tab and backslash use their short forms; other
    non-printable bytes become ``\\xNN`` with lowercase hex digits.

    Examples
    --------
    >>> backslashify(b"foo")
    b'foo'
    >>> backslashify(b"a\\tb\\x00\\xff\\\\")
    b'a\\\\tb\\\\x00\\\\xff\\\\\\\\'
    """

    if all(0x20 <= byte <= 0x7E and byte != 0x5C for byte in data):
        return bytes(data)
    escaped = bytearray()
    for byte in data:
        shorthand = _SHORTHAND.get(byte)
        if shorthand is not None:
            escaped += shorthand
        elif 0x20 <= byte <= 0x7E:
            escaped.append(byte)
        else:
            escaped += b"\\x%02x" % byte
    return bytes(escaped)


__all__ = ["backslashify"]
