"""Protocols separating the application layer from adapters."""

from __future__ import annotations

from .flags import FlagDescriberPort
from .records import RecordHandlerPort
from .sink import SinkPort
from .value_formatter import ValueFormatterPort, ValueFormattingResult

__all__ = [
    "FlagDescriberPort",
    "RecordHandlerPort",
    "SinkPort",
    "ValueFormatterPort",
    "ValueFormattingResult",
]
