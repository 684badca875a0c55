from __future__ import annotations

from io import StringIO

from rich.console import Console

from mcpiper.adapters.console.rich_console import RichConsoleSink, to_rich_text
from mcpiper.application.ports import SinkPort
from mcpiper.domain.colors import Color
from mcpiper.domain.patterns import PatternSpec, match_all
from mcpiper.domain.styled_text import StyledText


class _CountingStream(StringIO):
    def __init__(self) -> None:
        super().__init__()
        self.flushes = 0

    def flush(self) -> None:
        self.flushes += 1
        super().flush()


def _block() -> StyledText:
    text = StyledText("{\n", Color.DARK_GRAY)
    text.append("  get ")
    text.append("foo", Color.BRIGHT_RED)
    text.append("\n}\n", Color.DARK_GRAY)
    return text


def test_sink_satisfies_port() -> None:
    assert isinstance(RichConsoleSink(console=Console(file=StringIO())), SinkPort)


def test_to_rich_text_maps_runs_to_spans() -> None:
    rich_text = to_rich_text(_block())

    assert rich_text.plain == "{\n  get foo\n}\n"
    styled = [(rich_text.plain[span.start : span.end], str(span.style)) for span in rich_text.spans]
    assert ("foo", "bright_red") in styled
    assert all(style for _, style in styled)


def test_undecodable_bytes_are_backslash_escaped() -> None:
    rich_text = to_rich_text(StyledText(b"caf\xe9"))

    assert rich_text.plain == "caf\\xe9"


def test_highlight_ending_inside_a_multibyte_character_keeps_it_whole(record_console) -> None:
    text = StyledText('"café"\n', Color.CYAN)
    for offset, length in match_all(text.plain_text(), PatternSpec.compile('"caf.')):
        text.set_foreground_range(offset, length, Color.BRIGHT_RED)

    assert [run.text for run in text.runs()] == [b'"caf\xc3', b'\xa9"\n']
    assert to_rich_text(text).plain == '"café"\n'

    RichConsoleSink(console=record_console).write(text)

    assert record_console.export_text() == '"café"\n'


def test_sink_writes_block_verbatim(record_console) -> None:
    sink = RichConsoleSink(console=record_console)

    sink.write(_block())

    assert record_console.export_text() == "{\n  get foo\n}\n"


def test_sink_emits_colour_codes(record_console) -> None:
    sink = RichConsoleSink(console=record_console)

    sink.write(_block())

    assert "\x1b[" in record_console.export_text(styles=True)


def test_sink_respects_no_color(record_console) -> None:
    sink = RichConsoleSink(console=record_console, no_color=True)

    sink.write(_block())

    output = record_console.export_text(styles=True)
    assert output == "{\n  get foo\n}\n"


def test_long_lines_are_not_wrapped() -> None:
    console = Console(file=StringIO(), record=True, width=10)
    sink = RichConsoleSink(console=console)

    sink.write(StyledText("x" * 30 + "\n"))

    assert console.export_text() == "x" * 30 + "\n"


def test_markup_like_text_is_printed_literally(record_console) -> None:
    sink = RichConsoleSink(console=record_console)

    sink.write(StyledText("[bold]not markup[/bold] :smile:\n"))

    assert record_console.export_text() == "[bold]not markup[/bold] :smile:\n"


def test_flush_reaches_the_underlying_stream() -> None:
    stream = _CountingStream()
    sink = RichConsoleSink(console=Console(file=stream))

    sink.flush()

    assert stream.flushes >= 1
