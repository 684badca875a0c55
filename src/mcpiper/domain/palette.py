"""Colour assignments for the span groups of a rendered record.

Purpose
-------
Keep the palette a configuration concern: rendering only knows *which* spans
share a colour, the chosen theme decides *what* colour that is.

Contents
--------
* :class:`PrettyFormat` – frozen mapping from span group to :class:`Color`.
* :data:`PALETTE_THEMES` – built-in themes keyed by name.
* :func:`resolve_theme` – case-insensitive theme lookup.
"""

from __future__ import annotations

from dataclasses import dataclass

from .colors import Color


@dataclass(slots=True, frozen=True)
class PrettyFormat:
    """Colour per span group.

    Attributes
    ----------
    data_op_color:
        Structural braces opening and closing a block.
    header_color:
        Operation, result and key header line.
    msg_attr_color:
        Attribute labels (``reqid:``, ``flags:``, ``value size:`` ...).
    data_value_color:
        Attribute values, value sizes and plain value bodies.
    attr_color:
        Bracketed flag descriptions.
    data_key_color:
        Keys inside structured (JSON) value bodies.
    match_color:
        Foreground applied to content-pattern matches.
    """

    data_op_color: Color = Color.DARK_GRAY
    header_color: Color = Color.BRIGHT_WHITE
    msg_attr_color: Color = Color.DARK_GRAY
    data_value_color: Color = Color.CYAN
    attr_color: Color = Color.YELLOW
    data_key_color: Color = Color.BRIGHT_BLUE
    match_color: Color = Color.BRIGHT_RED


PALETTE_THEMES: dict[str, PrettyFormat] = {
    "classic": PrettyFormat(),
    "dark": PrettyFormat(
        data_op_color=Color.BLUE,
        header_color=Color.WHITE,
        msg_attr_color=Color.DARK_GRAY,
        data_value_color=Color.GREEN,
        attr_color=Color.MAGENTA,
        data_key_color=Color.BRIGHT_CYAN,
        match_color=Color.BRIGHT_YELLOW,
    ),
    "mono": PrettyFormat(
        data_op_color=Color.DEFAULT,
        header_color=Color.DEFAULT,
        msg_attr_color=Color.DEFAULT,
        data_value_color=Color.DEFAULT,
        attr_color=Color.DEFAULT,
        data_key_color=Color.DEFAULT,
        match_color=Color.RED,
    ),
}
# Themes selectable via ``--theme`` or ``MCPIPER_THEME``.

DEFAULT_FORMAT = PALETTE_THEMES["classic"]


def resolve_theme(name: str | None) -> PrettyFormat:
    """Return the palette registered as ``name`` (``None`` selects ``classic``).

    Examples
    --------
    >>> resolve_theme("DARK").match_color
    <Color.BRIGHT_YELLOW: 'bright_yellow'>
    """

    if not name:
        return DEFAULT_FORMAT
    try:
        return PALETTE_THEMES[name.strip().lower()]
    except KeyError as exc:
        known = ", ".join(sorted(PALETTE_THEMES))
        raise ValueError(f"Unknown theme: {name!r} (expected one of: {known})") from exc


__all__ = ["DEFAULT_FORMAT", "PALETTE_THEMES", "PrettyFormat", "resolve_theme"]
