"""Use case turning one decoded record into a colourised text block.

Purpose
-------
Apply the fixed trace layout to a :class:`DecodedRecord`: braces around the
block, a header with operation/result/key, attribute lines, and the optional
value section produced by the value formatter.

Contents
--------
* :class:`RenderOptions` – presentation switches (``quiet``).
* :func:`render_record` – pure rendering function.
* :func:`format_value_size` – the ``value size`` wording.

System Role
-----------
Called by the dispatcher for every incoming record. Returns ``None`` for the
end-of-stream control record so the dispatcher can drop it without touching
the sink.

Alignment Notes
---------------
Span groups (braces, header, labels, values, flag descriptions) each use one
:class:`PrettyFormat` colour; highlighting later overwrites foregrounds per
byte range without knowing these groups.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from mcpiper.application.ports import FlagDescriberPort, ValueFormatterPort
from mcpiper.domain.escaping import backslashify
from mcpiper.domain.palette import DEFAULT_FORMAT, PrettyFormat
from mcpiper.domain.records import DecodedRecord
from mcpiper.domain.styled_text import StyledText


@dataclass(slots=True, frozen=True)
class RenderOptions:
    """Presentation switches; ``quiet`` hides value bodies but never their size."""

    quiet: bool = False


def render_record(
    record: DecodedRecord,
    *,
    options: RenderOptions,
    describe_flags: FlagDescriberPort,
    value_formatter: ValueFormatterPort,
    pretty_format: PrettyFormat = DEFAULT_FORMAT,
) -> StyledText | None:
    """Render ``record`` into a block, or return ``None`` for end records.

    Examples
    --------
    >>> from mcpiper.domain.flags import describe_flags
    >>> from mcpiper.domain.records import Operation
    >>> class _Raw:
    ...     def format(self, value, flags):
    ...         raise AssertionError("no value to format")
    >>> record = DecodedRecord(request_id=1, operation=Operation.SET, key=b"foo")
    >>> text = render_record(record, options=RenderOptions(), describe_flags=describe_flags, value_formatter=_Raw())
    >>> text.plain_text()
    b'{\\n  set foo\\n  reqid: 0x1\\n  flags: 0x0\\n}\\n'
    """

    if record.is_end:
        return None

    fmt = pretty_format
    out = StyledText()
    out.append("{\n", fmt.data_op_color)

    header = serialize_header(record)
    if header:
        out.append("  ")
        out.append(header, fmt.header_color)

    out.append("\n  reqid: ", fmt.msg_attr_color)
    out.append(f"0x{record.request_id:x}", fmt.data_value_color)
    out.append("\n  flags: ", fmt.msg_attr_color)
    out.append(f"0x{record.flags:x}", fmt.data_value_color)
    if record.flags:
        _append_flag_descriptions(out, describe_flags(record.flags), fmt)
    if record.expiration:
        out.append("\n  exptime: ", fmt.msg_attr_color)
        out.append(f"{record.expiration:d}", fmt.data_value_color)
    out.append("\n")

    if record.value:
        _append_value(out, record, options, value_formatter, fmt)

    out.append("}\n", fmt.data_op_color)
    return out


def serialize_header(record: DecodedRecord) -> bytes:
    """Join the known operation, result and escaped key with single spaces.

    Examples
    --------
    >>> from mcpiper.domain.records import Operation, Result
    >>> serialize_header(DecodedRecord(request_id=1, result=Result.NOTFOUND, key=b"a\\nb"))
    b'notfound a\\\\nb'
    >>> serialize_header(DecodedRecord(request_id=1))
    b''
    """

    parts: list[bytes] = []
    if record.operation.is_known:
        parts.append(record.operation.value.encode("ascii"))
    if record.result.is_known:
        parts.append(record.result.value.encode("ascii"))
    if record.key:
        parts.append(backslashify(record.key))
    return b" ".join(parts)


def format_value_size(raw_size: int, uncompressed_size: int) -> str:
    """Describe the value size, including compression savings when relevant.

    Examples
    --------
    >>> format_value_size(10, 20)
    '20 uncompressed, 10 compressed, 50.00% savings'
    >>> format_value_size(10, 10)
    '10'
    """

    if uncompressed_size and uncompressed_size != raw_size:
        savings = 100.0 - 100.0 * raw_size / uncompressed_size
        return f"{uncompressed_size} uncompressed, {raw_size} compressed, {savings:.2f}% savings"
    return str(raw_size)


def _append_flag_descriptions(out: StyledText, descriptions: Sequence[str], fmt: PrettyFormat) -> None:
    names = list(descriptions)
    if not names:
        return
    out.push_style(fmt.attr_color)
    out.append(" [")
    out.append(", ".join(names))
    out.append("]")
    out.pop_style()


def _append_value(
    out: StyledText,
    record: DecodedRecord,
    options: RenderOptions,
    value_formatter: ValueFormatterPort,
    fmt: PrettyFormat,
) -> None:
    value = record.value or b""
    formatted = value_formatter.format(value, record.flags)
    out.append("  value size: ", fmt.msg_attr_color)
    out.append(format_value_size(len(value), formatted.uncompressed_size), fmt.data_value_color)
    if not options.quiet:
        out.append("\n  value: ", fmt.msg_attr_color)
        out.extend(formatted.body)
    out.append("\n")


__all__ = ["RenderOptions", "format_value_size", "render_record", "serialize_header"]
