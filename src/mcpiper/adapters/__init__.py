"""Adapters connecting the trace viewer to terminals, values and sources."""

from __future__ import annotations

from .console.rich_console import RichConsoleSink, to_rich_text
from .jsonl_decoder import RecordDecodeError, decode_record_line
from .sources import FifoDirectoryReader, SourceFilter
from .value_formatter import DefaultValueFormatter

__all__ = [
    "DefaultValueFormatter",
    "FifoDirectoryReader",
    "RecordDecodeError",
    "RichConsoleSink",
    "SourceFilter",
    "decode_record_line",
    "to_rich_text",
]
