"""Application use cases: rendering a record and dispatching it to a sink."""

from __future__ import annotations

from .dispatch_record import DispatchSettings, Dispatcher, create_dispatch_record
from .render_record import RenderOptions, format_value_size, render_record, serialize_header

__all__ = [
    "DispatchSettings",
    "Dispatcher",
    "RenderOptions",
    "create_dispatch_record",
    "format_value_size",
    "render_record",
    "serialize_header",
]
