from __future__ import annotations

from io import StringIO

from rich.console import Console

from mcpiper.adapters.console.rich_console import RichConsoleSink
from mcpiper.adapters.value_formatter import DefaultValueFormatter
from mcpiper.domain.records import DecodedRecord, Operation
from mcpiper.runtime import build_runtime, build_viewer_settings


def test_build_runtime_wires_default_adapters(tmp_path) -> None:
    settings = build_viewer_settings(fifo_root=tmp_path, filename_pattern="debug", environ={})

    runtime = build_runtime(settings)

    assert isinstance(runtime.sink, RichConsoleSink)
    assert isinstance(runtime.value_formatter, DefaultValueFormatter)
    assert runtime.settings is settings
    assert runtime.dispatcher.settings == settings.dispatch_settings


def test_runtime_renders_to_injected_console(tmp_path, record_console: Console) -> None:
    settings = build_viewer_settings(fifo_root=tmp_path, match_expression="foo", environ={})
    runtime = build_runtime(settings, console=record_console)

    runtime.dispatcher.on_record(1, DecodedRecord(request_id=1, operation=Operation.GET, key=b"foo"))
    runtime.dispatcher.on_record(2, DecodedRecord(request_id=2, operation=Operation.GET, key=b"bar"))

    assert record_console.export_text() == "{\n  get foo\n  reqid: 0x1\n  flags: 0x0\n}\n"


def test_diagnostic_hook_is_forwarded(tmp_path) -> None:
    events: list[str] = []
    settings = build_viewer_settings(fifo_root=tmp_path, environ={})
    runtime = build_runtime(
        settings,
        console=Console(file=StringIO()),
        diagnostic=lambda name, payload: events.append(name),
    )

    runtime.dispatcher.on_record(1, DecodedRecord(request_id=1, operation=Operation.END))

    assert events == ["dropped"]
