"""Use case orchestrating render, filter, highlight and emission per record.

Purpose
-------
Tie together rendering, optional content matching, match highlighting and the
output sink. Every decision (drop or keep) is made before the sink is touched,
so dropped records never produce partial output.

Contents
--------
* :class:`DispatchSettings` – immutable configuration of the pipeline.
* :class:`Dispatcher` – :class:`RecordHandlerPort` implementation.
* :func:`create_dispatch_record` – factory freezing the collaborators.

System Role
-----------
Application-layer orchestrator invoked by the ingestion layer for every decoded
record. Calls are serialised by the caller, so the dispatcher holds no locks and
keeps no state between records.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from mcpiper.application.ports import FlagDescriberPort, RecordHandlerPort, SinkPort, ValueFormatterPort
from mcpiper.domain.palette import DEFAULT_FORMAT, PrettyFormat
from mcpiper.domain.patterns import PatternSpec, match_all
from mcpiper.domain.records import DecodedRecord
from mcpiper.domain.styled_text import StyledText

from .render_record import RenderOptions, render_record

logger = logging.getLogger(__name__)

DispatchResult = dict[str, Any]
DiagnosticHook = Callable[[str, dict[str, Any]], None] | None


@dataclass(slots=True, frozen=True)
class DispatchSettings:
    """Configuration established once before the event loop starts.

    Attributes
    ----------
    content_pattern:
        Pattern records must match to be shown; the match-everything sentinel
        disables filtering and highlighting.
    render_options:
        Presentation switches forwarded to :func:`render_record`.
    pretty_format:
        Palette used for rendering and for the match highlight colour.
    """

    content_pattern: PatternSpec = field(default_factory=PatternSpec.match_everything)
    render_options: RenderOptions = field(default_factory=RenderOptions)
    pretty_format: PrettyFormat = DEFAULT_FORMAT


@dataclass(slots=True, frozen=True)
class _DispatchToolkit:
    settings: DispatchSettings
    sink: SinkPort
    value_formatter: ValueFormatterPort
    describe_flags: FlagDescriberPort
    emit: Callable[[str, dict[str, Any]], None]


def create_dispatch_record(
    *,
    settings: DispatchSettings,
    sink: SinkPort,
    value_formatter: ValueFormatterPort,
    describe_flags: FlagDescriberPort,
    diagnostic: DiagnosticHook = None,
) -> "Dispatcher":
    """Build the dispatcher capturing the current wiring.

    Parameters
    ----------
    settings:
        Immutable :class:`DispatchSettings`.
    sink:
        Adapter implementing :class:`SinkPort`; written and flushed once per
        kept record.
    value_formatter:
        Adapter implementing :class:`ValueFormatterPort`.
    describe_flags:
        Policy naming the bits of the flags field.
    diagnostic:
        Optional callback receiving ``("dropped" | "emitted", payload)``.

    Examples
    --------
    >>> from mcpiper.domain.flags import describe_flags
    >>> from mcpiper.domain.records import Operation
    >>> class _Sink:
    ...     def __init__(self):
    ...         self.blocks = []
    ...     def write(self, text):
    ...         self.blocks.append(text.plain_text())
    ...     def flush(self):
    ...         pass
    >>> sink = _Sink()
    >>> dispatch = create_dispatch_record(
    ...     settings=DispatchSettings(content_pattern=PatternSpec.compile("foo")),
    ...     sink=sink,
    ...     value_formatter=None,
    ...     describe_flags=describe_flags,
    ... )
    >>> dispatch.on_record(1, DecodedRecord(request_id=1, operation=Operation.GET, key=b"foo"))
    {'ok': True, 'matches': 1}
    >>> dispatch.on_record(2, DecodedRecord(request_id=2, operation=Operation.GET, key=b"bar"))
    {'ok': False, 'reason': 'no_match'}
    >>> len(sink.blocks)
    1
    """

    toolkit = _DispatchToolkit(
        settings=settings,
        sink=sink,
        value_formatter=value_formatter,
        describe_flags=describe_flags,
        emit=build_diagnostic_emitter(diagnostic),
    )
    return Dispatcher(toolkit)


class Dispatcher(RecordHandlerPort):
    """Render, filter, highlight and emit records one at a time."""

    def __init__(self, toolkit: _DispatchToolkit) -> None:
        self._toolkit = toolkit

    @property
    def settings(self) -> DispatchSettings:
        return self._toolkit.settings

    def on_record(self, request_id: int, record: DecodedRecord) -> DispatchResult:
        text = _render(self._toolkit, request_id, record)
        if text is None:
            return _drop(self._toolkit, request_id, "end_marker")
        pattern = self._toolkit.settings.content_pattern
        matches = 0
        if not pattern.is_everything:
            spans = match_all(text.plain_text(), pattern)
            if not spans:
                return _drop(self._toolkit, request_id, "no_match")
            _highlight(text, spans, self._toolkit.settings.pretty_format)
            matches = len(spans)
        _write(self._toolkit, text)
        self._toolkit.emit("emitted", {"request_id": request_id, "matches": matches, "size": len(text)})
        return {"ok": True, "matches": matches}

    __call__ = on_record


def build_diagnostic_emitter(diagnostic: DiagnosticHook) -> Callable[[str, dict[str, Any]], None]:
    """Wrap ``diagnostic`` so hook failures are logged instead of aborting dispatch."""

    if diagnostic is None:

        def _noop(event: str, payload: dict[str, Any]) -> None:
            return None

        return _noop

    def _emit(event: str, payload: dict[str, Any]) -> None:
        try:
            diagnostic(event, payload)
        except Exception:  # noqa: BLE001 - diagnostics must never break the trace
            logger.exception("Diagnostic hook failed for %s", event)

    return _emit


def _render(toolkit: _DispatchToolkit, request_id: int, record: DecodedRecord) -> StyledText | None:
    if record.request_id != request_id:
        record = record.replace(request_id=request_id)
    return render_record(
        record,
        options=toolkit.settings.render_options,
        describe_flags=toolkit.describe_flags,
        value_formatter=toolkit.value_formatter,
        pretty_format=toolkit.settings.pretty_format,
    )


def _highlight(text: StyledText, spans: Sequence[tuple[int, int]], fmt: PrettyFormat) -> None:
    text.set_foreground_ranges(spans, fmt.match_color)


def _write(toolkit: _DispatchToolkit, text: StyledText) -> None:
    toolkit.sink.write(text)
    toolkit.sink.flush()


def _drop(toolkit: _DispatchToolkit, request_id: int, reason: str) -> DispatchResult:
    logger.debug("Dropped record reqid=0x%x: %s", request_id, reason)
    toolkit.emit("dropped", {"request_id": request_id, "reason": reason})
    return {"ok": False, "reason": reason}


__all__ = [
    "DiagnosticHook",
    "DispatchResult",
    "DispatchSettings",
    "Dispatcher",
    "build_diagnostic_emitter",
    "create_dispatch_record",
]
