"""Append-only styled text with retroactive foreground recolouring.

Purpose
-------
Model a rendered block as an ordered list of ``(bytes, Style)`` runs so that
rendering can build colourised output incrementally and highlighting can later
recolour arbitrary byte ranges of the finished block.

Contents
--------
* :class:`Run` – immutable fragment of bytes sharing one style.
* :class:`StyledText` – builder with a style stack, range recolouring and a
  flat plain-text view used as the matching target.

System Role
-----------
Central value of the pipeline: produced by
:func:`mcpiper.application.use_cases.render_record.render_record`, recoloured
by the dispatcher, and consumed by sink adapters.

Invariants
----------
Runs partition the document contiguously in append order; the sum of run
lengths equals ``len(plain_text())``. Recolouring only ever splits runs, it
never reorders or rewrites their bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from .colors import DEFAULT_STYLE, Color, Style


@dataclass(slots=True, frozen=True)
class Run:
    """Contiguous bytes rendered with a single style."""

    text: bytes
    style: Style


class StyledText:
    """Sequence of styled runs supporting later per-range recolouring.

    Examples
    --------
    >>> text = StyledText()
    >>> text.append("{\\n", Color.DARK_GRAY)
    >>> text.push_style(Color.YELLOW)
    >>> text.append("get foo")
    >>> text.pop_style()
    <Color.YELLOW: 'yellow'>
    >>> text.append("\\n")
    >>> text.plain_text()
    b'{\\nget foo\\n'
    >>> text.set_foreground_range(6, 3, Color.RED)
    >>> text.style_at(6).foreground, text.style_at(5).foreground
    (<Color.RED: 'red'>, <Color.YELLOW: 'yellow'>)
    """

    __slots__ = ("_runs", "_length", "_stack")

    def __init__(self, text: bytes | str = b"", color: Color | None = None) -> None:
        self._runs: list[Run] = []
        self._length = 0
        self._stack: list[Style] = []
        if text:
            self.append(text, color)

    def append(self, text: bytes | str, color: Color | None = None) -> None:
        """Append ``text`` using ``color``, the stacked style, or the default."""

        data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
        if not data:
            return
        self._runs.append(Run(data, self._style_for(color)))
        self._length += len(data)

    def extend(self, other: "StyledText") -> None:
        """Append every run of ``other`` verbatim, keeping its styles."""

        for run in other._runs:
            self._runs.append(run)
            self._length += len(run.text)

    def push_style(self, color: Color) -> None:
        """Make ``color`` the implicit style of subsequent appends."""

        self._stack.append(Style(foreground=color))

    def pop_style(self) -> Color:
        """Restore the style that was active before the matching push."""

        if not self._stack:
            raise IndexError("pop_style() called with an empty style stack")
        return self._stack.pop().foreground

    def set_foreground_range(self, offset: int, length: int, color: Color) -> None:
        """Recolour bytes ``[offset, offset + length)`` to ``color``.

        Runs straddling either boundary are split; bytes outside the range keep
        their style. Ranges must lie within the document.
        """

        self.set_foreground_ranges(((offset, length),), color)

    def set_foreground_ranges(self, spans: Iterable[tuple[int, int]], color: Color) -> None:
        """Recolour every ``(offset, length)`` span in a single pass over the runs.

        Spans must be ordered by offset and must not overlap, which is what
        :func:`mcpiper.domain.patterns.match_all` returns. The result equals
        calling :meth:`set_foreground_range` once per span.

        Examples
        --------
        >>> text = StyledText("banana", Color.CYAN)
        >>> text.set_foreground_ranges([(1, 1), (3, 1), (5, 1)], Color.RED)
        >>> [run.text for run in text.runs()]
        [b'b', b'a', b'n', b'a', b'n', b'a']
        """

        bounds: list[tuple[int, int]] = []
        previous_end = 0
        for offset, length in spans:
            if offset < previous_end or length < 0 or offset + length > self._length:
                raise IndexError(
                    f"range offset={offset} length={length} is out of order or exceeds "
                    f"styled text of length {self._length}"
                )
            previous_end = offset + length
            if length:
                bounds.append((offset, previous_end))
        if not bounds:
            return

        updated: list[Run] = []
        index = 0
        position = 0
        for run in self._runs:
            run_start = position
            position += len(run.text)
            cursor = run_start
            while index < len(bounds) and bounds[index][0] < position:
                start, end = bounds[index]
                head = max(start, cursor)
                tail = min(end, position)
                if head > cursor:
                    updated.append(Run(run.text[cursor - run_start : head - run_start], run.style))
                updated.append(Run(run.text[head - run_start : tail - run_start], run.style.with_foreground(color)))
                cursor = tail
                if end > position:
                    # The span continues into the next run.
                    break
                index += 1
            if cursor < position:
                updated.append(Run(run.text[cursor - run_start :], run.style))
        self._runs = updated

    def plain_text(self) -> bytes:
        """Return the flattened bytes without any style information."""

        return b"".join(run.text for run in self._runs)

    def runs(self) -> tuple[Run, ...]:
        return tuple(self._runs)

    def style_at(self, offset: int) -> Style:
        """Return the style applied to the byte at ``offset``."""

        if offset < 0 or offset >= self._length:
            raise IndexError(f"offset {offset} outside styled text of length {self._length}")
        position = 0
        for run in self._runs:
            position += len(run.text)
            if offset < position:
                return run.style
        raise AssertionError("run lengths disagree with the recorded length")  # pragma: no cover

    def _style_for(self, color: Color | None) -> Style:
        if color is not None:
            return Style(foreground=color)
        if self._stack:
            return self._stack[-1]
        return DEFAULT_STYLE

    def _coalesced(self) -> Iterator[tuple[bytes, Style]]:
        """Yield runs with adjacent equal styles merged."""

        pending: list[bytes] = []
        current: Style | None = None
        for run in self._runs:
            if current is not None and run.style != current:
                yield b"".join(pending), current
                pending = []
            current = run.style
            pending.append(run.text)
        if current is not None:
            yield b"".join(pending), current

    def __len__(self) -> int:
        return self._length

    def __bool__(self) -> bool:
        return self._length > 0

    def __iter__(self) -> Iterator[Run]:
        return iter(self._runs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StyledText):
            return NotImplemented
        return list(self._coalesced()) == list(other._coalesced())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"StyledText({self.plain_text()!r}, runs={len(self._runs)})"


__all__ = ["Run", "StyledText"]
