from __future__ import annotations

import logging
import time

import pytest

from mcpiper.application.ports import RecordHandlerPort, ValueFormattingResult
from mcpiper.application.use_cases.dispatch_record import (
    DispatchSettings,
    Dispatcher,
    build_diagnostic_emitter,
    create_dispatch_record,
)
from mcpiper.application.use_cases.render_record import RenderOptions
from mcpiper.domain.colors import Color
from mcpiper.domain.flags import describe_flags
from mcpiper.domain.palette import DEFAULT_FORMAT, resolve_theme
from mcpiper.domain.patterns import PatternSpec
from mcpiper.domain.records import DecodedRecord, Operation, Result
from mcpiper.domain.styled_text import StyledText


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []

    def record(self, name: str, payload: object = None) -> None:
        self.calls.append((name, payload))


class _FakeSink:
    def __init__(self, recorder: _Recorder) -> None:
        self.recorder = recorder
        self.blocks: list[StyledText] = []

    def write(self, text: StyledText) -> None:
        self.blocks.append(text)
        self.recorder.record("write", text.plain_text())

    def flush(self) -> None:
        self.recorder.record("flush")


class _EchoFormatter:
    def format(self, value: bytes, flags: int) -> ValueFormattingResult:
        return ValueFormattingResult(uncompressed_size=len(value), body=StyledText(value, Color.CYAN))


def _dispatcher(
    pattern: str | None = None,
    *,
    quiet: bool = False,
    diagnostic=None,
    theme: str = "classic",
) -> tuple[Dispatcher, _FakeSink, _Recorder]:
    recorder = _Recorder()
    sink = _FakeSink(recorder)
    dispatcher = create_dispatch_record(
        settings=DispatchSettings(
            content_pattern=PatternSpec.compile(pattern),
            render_options=RenderOptions(quiet=quiet),
            pretty_format=resolve_theme(theme),
        ),
        sink=sink,
        value_formatter=_EchoFormatter(),
        describe_flags=describe_flags,
        diagnostic=diagnostic,
    )
    return dispatcher, sink, recorder


def _highlighted(text: StyledText, color: Color = DEFAULT_FORMAT.match_color) -> list[int]:
    return [index for index in range(len(text)) if text.style_at(index).foreground is color]


def test_dispatcher_satisfies_record_handler_port() -> None:
    dispatcher, _, _ = _dispatcher()

    assert isinstance(dispatcher, RecordHandlerPort)


def test_without_pattern_every_record_is_written_then_flushed() -> None:
    dispatcher, sink, recorder = _dispatcher()
    record = DecodedRecord(request_id=1, operation=Operation.SET, key=b"foo")

    result = dispatcher.on_record(1, record)

    assert result == {"ok": True, "matches": 0}
    assert recorder.calls == [("write", b"{\n  set foo\n  reqid: 0x1\n  flags: 0x0\n}\n"), ("flush", None)]
    assert _highlighted(sink.blocks[0]) == []


def test_end_sentinel_never_reaches_the_sink() -> None:
    dispatcher, _, recorder = _dispatcher()

    result = dispatcher.on_record(9, DecodedRecord(request_id=9, operation=Operation.END))

    assert result == {"ok": False, "reason": "end_marker"}
    assert recorder.calls == []


def test_records_without_matches_are_dropped() -> None:
    dispatcher, _, recorder = _dispatcher("needle")

    result = dispatcher.on_record(1, DecodedRecord(request_id=1, operation=Operation.GET, key=b"hay"))

    assert result == {"ok": False, "reason": "no_match"}
    assert recorder.calls == []


def test_matches_are_recoloured_in_place() -> None:
    dispatcher, sink, _ = _dispatcher("foo")

    result = dispatcher.on_record(1, DecodedRecord(request_id=1, operation=Operation.GET, key=b"foo", value=b"xfoox"))

    assert result == {"ok": True, "matches": 2}
    block = sink.blocks[0]
    plain = block.plain_text()
    key_offset = plain.index(b"foo")
    value_offset = plain.index(b"foo", key_offset + 1)
    expected = list(range(key_offset, key_offset + 3)) + list(range(value_offset, value_offset + 3))
    assert _highlighted(block) == expected


def test_many_matches_are_highlighted_in_one_pass() -> None:
    dispatcher, sink, _ = _dispatcher("a")
    value = b"ab" * 10_000

    started = time.perf_counter()
    result = dispatcher.on_record(1, DecodedRecord(request_id=1, operation=Operation.GET, key=b"k", value=value))
    elapsed = time.perf_counter() - started

    block = sink.blocks[0]
    plain = block.plain_text()
    assert result == {"ok": True, "matches": plain.count(b"a")}
    assert result["matches"] >= 10_000
    recoloured = [run.text for run in block.runs() if run.style.foreground is DEFAULT_FORMAT.match_color]
    assert recoloured == [b"a"] * result["matches"]
    assert elapsed < 2.0


def test_escaped_key_is_matched_by_doubling_the_backslash() -> None:
    dispatcher, sink, _ = _dispatcher("a\\\\nb")

    result = dispatcher.on_record(1, DecodedRecord(request_id=1, operation=Operation.GET, key=b"a\nb"))

    assert result == {"ok": True, "matches": 1}
    block = sink.blocks[0]
    start = block.plain_text().index(b"a\\nb")
    assert _highlighted(block) == list(range(start, start + 4))


def test_single_backslash_escape_does_not_match_rendered_escape() -> None:
    dispatcher, _, _ = _dispatcher("a\\nb")

    result = dispatcher.on_record(1, DecodedRecord(request_id=1, operation=Operation.GET, key=b"a\nb"))

    assert result == {"ok": False, "reason": "no_match"}


def test_flag_descriptions_can_be_matched() -> None:
    dispatcher, sink, _ = _dispatcher("ZLIB_COMPRESSED")

    dispatcher.on_record(1, DecodedRecord(request_id=1, flags=0x800))

    block = sink.blocks[0]
    start = block.plain_text().index(b"ZLIB_COMPRESSED")
    assert _highlighted(block) == list(range(start, start + len(b"ZLIB_COMPRESSED")))


def test_label_text_can_be_matched() -> None:
    dispatcher, sink, _ = _dispatcher("reqid: 0x2a")

    result = dispatcher.on_record(42, DecodedRecord(request_id=42))

    assert result == {"ok": True, "matches": 1}
    block = sink.blocks[0]
    start = block.plain_text().index(b"reqid: 0x2a")
    assert _highlighted(block) == list(range(start, start + len(b"reqid: 0x2a")))


def test_quiet_mode_hides_value_from_matching() -> None:
    dispatcher, sink, _ = _dispatcher("secret", quiet=True)

    result = dispatcher.on_record(1, DecodedRecord(request_id=1, value=b"secret"))

    assert result == {"ok": False, "reason": "no_match"}
    assert sink.blocks == []


def test_match_colour_follows_the_theme() -> None:
    dispatcher, sink, _ = _dispatcher("foo", theme="dark")

    dispatcher.on_record(1, DecodedRecord(request_id=1, key=b"foo"))

    block = sink.blocks[0]
    assert len(_highlighted(block, resolve_theme("dark").match_color)) == 3


def test_callback_request_id_wins_over_record_field() -> None:
    dispatcher, sink, _ = _dispatcher()

    dispatcher.on_record(0x10, DecodedRecord(request_id=1, operation=Operation.GET))

    assert b"reqid: 0x10\n" in sink.blocks[0].plain_text()


def test_sink_receives_fewer_writes_when_records_are_dropped() -> None:
    dispatcher, sink, _ = _dispatcher("get")
    records = [
        DecodedRecord(request_id=1, operation=Operation.GET, result=Result.FOUND),
        DecodedRecord(request_id=2, operation=Operation.SET, result=Result.STORED),
        DecodedRecord(request_id=3, operation=Operation.END),
        DecodedRecord(request_id=4, operation=Operation.GET, result=Result.NOTFOUND),
    ]

    for record in records:
        dispatcher(record.request_id, record)

    assert len(sink.blocks) == 2


def test_diagnostic_hook_observes_drops_and_emissions() -> None:
    events: list[tuple[str, dict]] = []
    dispatcher, _, _ = _dispatcher("foo", diagnostic=lambda name, payload: events.append((name, payload)))

    dispatcher.on_record(1, DecodedRecord(request_id=1, key=b"foo"))
    dispatcher.on_record(2, DecodedRecord(request_id=2, key=b"bar"))

    assert events[0][0] == "emitted"
    assert events[0][1]["request_id"] == 1
    assert events[0][1]["matches"] == 1
    assert events[1] == ("dropped", {"request_id": 2, "reason": "no_match"})


def test_failing_diagnostic_hook_is_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    def _boom(name: str, payload: dict) -> None:
        raise RuntimeError("hook exploded")

    dispatcher, sink, _ = _dispatcher(diagnostic=_boom)

    with caplog.at_level(logging.ERROR):
        result = dispatcher.on_record(1, DecodedRecord(request_id=1))

    assert result["ok"] is True
    assert len(sink.blocks) == 1
    assert "Diagnostic hook failed for emitted" in caplog.text


def test_noop_emitter_accepts_events() -> None:
    emit = build_diagnostic_emitter(None)

    assert emit("emitted", {}) is None


def test_settings_are_exposed_read_only() -> None:
    dispatcher, _, _ = _dispatcher("foo")

    assert dispatcher.settings.content_pattern.source == "foo"
    with pytest.raises(AttributeError):
        dispatcher.settings.content_pattern = PatternSpec.match_everything()  # type: ignore[misc]
