"""Port for the collaborator that decompresses and pretty-prints values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from mcpiper.domain.styled_text import StyledText


@dataclass(slots=True, frozen=True)
class ValueFormattingResult:
    """Formatter answer: size after decompression plus the styled body."""

    uncompressed_size: int
    body: StyledText


@runtime_checkable
class ValueFormatterPort(Protocol):
    """Turn raw value bytes into displayable styled text."""

    def format(self, value: bytes, flags: int) -> ValueFormattingResult:
        """Return the uncompressed size and body for ``value``."""


__all__ = ["ValueFormatterPort", "ValueFormattingResult"]
