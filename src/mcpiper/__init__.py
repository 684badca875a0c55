"""Public package surface of the mcpiper trace viewer.

The core pipeline renders decoded memcache records into styled text, filters
them by a basic regular expression and writes the highlighted result to a
sink. ``import mcpiper`` exposes the pieces embedding hosts need; ``python -m
mcpiper`` runs the live viewer.
"""

from __future__ import annotations

from .application.use_cases import (
    DispatchSettings,
    Dispatcher,
    RenderOptions,
    create_dispatch_record,
    render_record,
)
from .domain import (
    Color,
    DecodedRecord,
    Operation,
    PatternError,
    PatternSpec,
    PrettyFormat,
    Result,
    StyledText,
    describe_flags,
    match_all,
)

__all__ = [
    "Color",
    "DecodedRecord",
    "DispatchSettings",
    "Dispatcher",
    "Operation",
    "PatternError",
    "PatternSpec",
    "PrettyFormat",
    "RenderOptions",
    "Result",
    "StyledText",
    "create_dispatch_record",
    "describe_flags",
    "match_all",
    "render_record",
]
