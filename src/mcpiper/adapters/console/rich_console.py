"""Rich-powered console sink implementing :class:`SinkPort`.

Purpose
-------
Bridge the dispatcher with Rich so styled blocks reach the terminal with their
colours, while the domain stays free of escape-code concerns.

Contents
--------
* :func:`to_rich_text` – convert :class:`StyledText` runs into :class:`rich.text.Text`.
* :class:`RichConsoleSink` – sink constructed by the composition root.

System Role
-----------
Primary human-facing output of the live trace; honours ``--no-color`` and
``--force-color`` and flushes after every block.
"""

from __future__ import annotations

import codecs

from rich.console import Console
from rich.text import Text

from mcpiper.application.ports.sink import SinkPort
from mcpiper.domain.colors import Color
from mcpiper.domain.styled_text import StyledText


def to_rich_text(text: StyledText) -> Text:
    """Return a Rich :class:`Text` carrying one span per run.

    Bytes are decoded as UTF-8 across run boundaries, so a character split by a
    recolour stays whole; it takes the style of the run holding its last byte.
    Undecodable bytes are shown backslash-escaped.

    Examples
    --------
    >>> styled = StyledText("{\\n", Color.RED)
    >>> styled.append("x")
    >>> rich_text = to_rich_text(styled)
    >>> rich_text.plain
    '{\\nx'
    >>> [str(span.style) for span in rich_text.spans]
    ['red']
    """

    decoder = codecs.getincrementaldecoder("utf-8")(errors="backslashreplace")
    rich_text = Text(end="")
    style = ""
    for run in text:
        color = run.style.foreground
        style = "" if color is Color.DEFAULT else color.value
        rich_text.append(decoder.decode(run.text), style=style)
    rich_text.append(decoder.decode(b"", final=True), style=style)
    return rich_text


class RichConsoleSink(SinkPort):
    """Write styled blocks to a Rich console."""

    def __init__(
        self,
        *,
        console: Console | None = None,
        force_color: bool = False,
        no_color: bool = False,
    ) -> None:
        """Configure the sink with colour overrides or an injected console."""
        if console is not None:
            self._console = console
        else:
            self._console = Console(
                force_terminal=True if force_color else None,
                no_color=no_color,
                highlight=False,
                emoji=False,
                markup=False,
            )
        self._no_color = no_color

    @property
    def console(self) -> Console:
        return self._console

    def write(self, text: StyledText) -> None:
        """Print ``text`` without wrapping, highlighting, or a trailing newline.

        Examples
        --------
        >>> from io import StringIO
        >>> console = Console(file=StringIO(), record=True, width=20)
        >>> sink = RichConsoleSink(console=console)
        >>> sink.write(StyledText("{\\n  get foo\\n}\\n"))
        >>> console.export_text()
        '{\\n  get foo\\n}\\n'
        """
        rich_text = to_rich_text(text)
        if self._no_color:
            rich_text = Text(rich_text.plain, end="")
        self._console.print(rich_text, end="", soft_wrap=True, highlight=False, markup=False, emoji=False)

    def flush(self) -> None:
        """Flush the console's underlying file immediately."""
        self._console.file.flush()


__all__ = ["RichConsoleSink", "to_rich_text"]
