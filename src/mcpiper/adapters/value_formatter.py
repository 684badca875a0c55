"""Default value formatter: zlib decompression plus JSON pretty-printing.

Purpose
-------
Give the renderer a displayable body for raw value bytes. Values flagged as
zlib-compressed are inflated first; JSON documents are indented and coloured
key by key; anything else is shown backslash-escaped on one line.

Contents
--------
* :class:`DefaultValueFormatter` – :class:`ValueFormatterPort` implementation.

System Role
-----------
Wired by the composition root; the dispatcher embeds the returned body
verbatim after the ``value:`` label.
"""

from __future__ import annotations

import json
import logging
import zlib
from typing import Any

from mcpiper.application.ports.value_formatter import ValueFormatterPort, ValueFormattingResult
from mcpiper.domain.escaping import backslashify
from mcpiper.domain.flags import ValueFlag
from mcpiper.domain.palette import DEFAULT_FORMAT, PrettyFormat
from mcpiper.domain.styled_text import StyledText

logger = logging.getLogger(__name__)

_INDENT = "  "


class DefaultValueFormatter(ValueFormatterPort):
    """Decompress and pretty-print values for display.

    Examples
    --------
    >>> formatter = DefaultValueFormatter()
    >>> result = formatter.format(b'{"a": 1}', 0)
    >>> result.uncompressed_size
    8
    >>> print(result.body.plain_text().decode())
    {
      "a": 1
    }
    """

    def __init__(self, pretty_format: PrettyFormat = DEFAULT_FORMAT) -> None:
        self._format = pretty_format

    def format(self, value: bytes, flags: int) -> ValueFormattingResult:
        """Return the uncompressed size and styled body for ``value``."""
        data = self._uncompress(value, flags)
        body = self._format_json(data)
        if body is None:
            body = StyledText(backslashify(data), self._format.data_value_color)
        return ValueFormattingResult(uncompressed_size=len(data), body=body)

    @staticmethod
    def _uncompress(value: bytes, flags: int) -> bytes:
        if not flags & ValueFlag.ZLIB_COMPRESSED:
            return value
        try:
            return zlib.decompress(value)
        except zlib.error as exc:
            logger.debug("Value flagged as zlib-compressed failed to inflate: %s", exc)
            return value

    def _format_json(self, data: bytes) -> StyledText | None:
        stripped = data.strip()
        if not stripped or stripped[:1] not in (b"{", b"["):
            return None
        try:
            document = json.loads(stripped)
        except (UnicodeDecodeError, ValueError):
            return None
        out = StyledText()
        self._append_json(out, document, depth=0)
        return out

    def _append_json(self, out: StyledText, node: Any, *, depth: int) -> None:
        fmt = self._format
        if isinstance(node, dict):
            if not node:
                out.append("{}", fmt.data_op_color)
                return
            out.append("{\n", fmt.data_op_color)
            for index, (key, item) in enumerate(node.items()):
                out.append(_INDENT * (depth + 1))
                out.append(json.dumps(key, ensure_ascii=False), fmt.data_key_color)
                out.append(": ", fmt.data_op_color)
                self._append_json(out, item, depth=depth + 1)
                out.append(",\n" if index < len(node) - 1 else "\n", fmt.data_op_color)
            out.append(_INDENT * depth)
            out.append("}", fmt.data_op_color)
        elif isinstance(node, list):
            if not node:
                out.append("[]", fmt.data_op_color)
                return
            out.append("[\n", fmt.data_op_color)
            for index, item in enumerate(node):
                out.append(_INDENT * (depth + 1))
                self._append_json(out, item, depth=depth + 1)
                out.append(",\n" if index < len(node) - 1 else "\n", fmt.data_op_color)
            out.append(_INDENT * depth)
            out.append("]", fmt.data_op_color)
        else:
            out.append(json.dumps(node, ensure_ascii=False), fmt.data_value_color)


__all__ = ["DefaultValueFormatter"]
