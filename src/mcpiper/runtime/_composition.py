"""Runtime composition wiring domain, application, and adapters.

Purpose
-------
Translate :class:`ViewerSettings` into live collaborators: the console sink,
the value formatter, the dispatcher and the FIFO directory reader. Hosts and
tests may inject their own sink or console.

Contents
--------
* :class:`ViewerRuntime` – aggregate of the wired collaborators.
* :func:`build_runtime` – composition root.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console

from mcpiper.adapters.console.rich_console import RichConsoleSink
from mcpiper.adapters.sources import FifoDirectoryReader, SourceFilter
from mcpiper.adapters.value_formatter import DefaultValueFormatter
from mcpiper.application.ports import FlagDescriberPort, SinkPort, ValueFormatterPort
from mcpiper.application.use_cases.dispatch_record import DiagnosticHook, Dispatcher, create_dispatch_record
from mcpiper.domain.flags import describe_flags

from ._settings import ViewerSettings


@dataclass(slots=True, frozen=True)
class ViewerRuntime:
    """Live collaborators assembled by :func:`build_runtime`."""

    settings: ViewerSettings
    sink: SinkPort
    value_formatter: ValueFormatterPort
    dispatcher: Dispatcher
    reader: FifoDirectoryReader


def build_runtime(
    settings: ViewerSettings,
    *,
    sink: SinkPort | None = None,
    console: Console | None = None,
    value_formatter: ValueFormatterPort | None = None,
    flag_describer: FlagDescriberPort = describe_flags,
    diagnostic: DiagnosticHook = None,
) -> ViewerRuntime:
    """Assemble the viewer from resolved settings."""

    if sink is None:
        sink = RichConsoleSink(console=console, force_color=settings.force_color, no_color=settings.no_color)
    if value_formatter is None:
        value_formatter = DefaultValueFormatter(settings.pretty_format)
    dispatcher = create_dispatch_record(
        settings=settings.dispatch_settings,
        sink=sink,
        value_formatter=value_formatter,
        describe_flags=flag_describer,
        diagnostic=diagnostic,
    )
    reader = FifoDirectoryReader(
        settings.fifo_root,
        dispatcher,
        source_filter=SourceFilter(settings.filename_pattern),
        poll_interval=settings.poll_interval,
    )
    return ViewerRuntime(
        settings=settings,
        sink=sink,
        value_formatter=value_formatter,
        dispatcher=dispatcher,
        reader=reader,
    )


__all__ = ["ViewerRuntime", "build_runtime"]
