"""Sink port describing where rendered blocks are written.

Purpose
-------
Keep the dispatcher independent of the terminal: it hands over finished
:class:`StyledText` blocks and asks for an immediate flush, while adapters
decide how colours are encoded.

Contents
--------
* :class:`SinkPort` – runtime-checkable protocol with ``write`` and ``flush``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from mcpiper.domain.styled_text import StyledText


@runtime_checkable
class SinkPort(Protocol):
    """Receive rendered blocks from the single dispatcher."""

    def write(self, text: StyledText) -> None:
        """Write ``text`` including its styles."""

    def flush(self) -> None:
        """Push buffered output to the underlying stream."""


__all__ = ["SinkPort"]
