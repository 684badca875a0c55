"""Domain values and pure helpers of the trace viewer."""

from __future__ import annotations

from .colors import DEFAULT_STYLE, Color, Style
from .escaping import backslashify
from .flags import ValueFlag, describe_flags
from .palette import DEFAULT_FORMAT, PALETTE_THEMES, PrettyFormat, resolve_theme
from .patterns import PatternError, PatternSpec, match_all, translate_bre
from .records import DecodedRecord, Operation, Result
from .styled_text import Run, StyledText

__all__ = [
    "Color",
    "DEFAULT_FORMAT",
    "DEFAULT_STYLE",
    "DecodedRecord",
    "Operation",
    "PALETTE_THEMES",
    "PatternError",
    "PatternSpec",
    "PrettyFormat",
    "Result",
    "Run",
    "Style",
    "StyledText",
    "ValueFlag",
    "backslashify",
    "describe_flags",
    "match_all",
    "resolve_theme",
    "translate_bre",
]
