"""Colour palette and run styles shared by every rendered block.

Purpose
-------
Give the domain a fixed, terminal-independent colour vocabulary so rendering
and highlighting never depend on how a sink encodes colours.

Contents
--------
* :class:`Color` enum whose values double as Rich colour names.
* :class:`Style` frozen value attached to every run of styled text.

System Role
-----------
Consumed by :mod:`mcpiper.domain.styled_text` and
:mod:`mcpiper.domain.palette`; the Rich console adapter translates the enum
values into terminal escape codes.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class Color(Enum):
    """Foreground colours understood by the viewer.

    Examples
    --------
    >>> Color.DARK_GRAY.value
    'bright_black'
    >>> Color.from_name("bright-red") is Color.BRIGHT_RED
    True
    """

    DEFAULT = "default"
    BLACK = "black"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    MAGENTA = "magenta"
    CYAN = "cyan"
    WHITE = "white"
    DARK_GRAY = "bright_black"
    BRIGHT_RED = "bright_red"
    BRIGHT_GREEN = "bright_green"
    BRIGHT_YELLOW = "bright_yellow"
    BRIGHT_BLUE = "bright_blue"
    BRIGHT_MAGENTA = "bright_magenta"
    BRIGHT_CYAN = "bright_cyan"
    BRIGHT_WHITE = "bright_white"

    @classmethod
    def from_name(cls, name: str) -> "Color":
        """Return the colour matching ``name`` (case and separator insensitive)."""

        normalized = name.strip().upper().replace("-", "_").replace(" ", "_")
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown color: {name!r}") from exc


@dataclass(slots=True, frozen=True)
class Style:
    """Presentation attributes of a single run."""

    foreground: Color = Color.DEFAULT

    def with_foreground(self, color: Color) -> "Style":
        """Return a copy whose foreground is ``color``."""

        return replace(self, foreground=color)


DEFAULT_STYLE = Style()


__all__ = ["Color", "DEFAULT_STYLE", "Style"]
