"""JSON-lines decoder turning source lines into :class:`DecodedRecord` values.

Purpose
-------
Define the boundary format spoken by the sources the viewer subscribes to: one
JSON object per line describing an already-decoded request or reply.

Contents
--------
* :class:`RecordDecodeError` – raised for malformed lines.
* :func:`decode_record_line` – parse a single line.

Alignment Notes
---------------
Recognised keys: ``reqid``, ``op``, ``result``, ``key`` / ``key_b64``,
``flags``, ``exptime``, ``value`` / ``value_b64``. The ``*_b64`` variants carry
binary payloads base64-encoded; the plain variants are UTF-8 text. Unknown
operation or result names decode to ``UNKNOWN``.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Mapping

from mcpiper.domain.records import DecodedRecord, Operation, Result


class RecordDecodeError(ValueError):
    """Raised when a source line is not a valid record."""


def decode_record_line(line: bytes | str) -> DecodedRecord:
    """Parse one JSON-lines record.

    Examples
    --------
    >>> record = decode_record_line('{"reqid": 7, "op": "get", "result": "found", "key": "foo"}')
    >>> record.request_id, record.operation.value, record.result.value, record.key
    (7, 'get', 'found', b'foo')
    """

    try:
        payload = json.loads(line)
    except ValueError as exc:
        raise RecordDecodeError(f"invalid JSON record: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise RecordDecodeError("record must be a JSON object")
    try:
        return DecodedRecord(
            request_id=_integer(payload, "reqid", default=0),
            operation=Operation.from_name(_optional_str(payload, "op")),
            result=Result.from_name(_optional_str(payload, "result")),
            key=_payload_bytes(payload, "key"),
            flags=_integer(payload, "flags", default=0),
            expiration=_optional_integer(payload, "exptime"),
            value=_payload_bytes(payload, "value"),
        )
    except ValueError as exc:
        if isinstance(exc, RecordDecodeError):
            raise
        raise RecordDecodeError(str(exc)) from exc


def _integer(payload: Mapping[str, Any], name: str, *, default: int) -> int:
    value = _optional_integer(payload, name)
    return default if value is None else value


def _optional_integer(payload: Mapping[str, Any], name: str) -> int | None:
    value = payload.get(name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise RecordDecodeError(f"field {name!r} must be an integer, got {value!r}")
    return value


def _optional_str(payload: Mapping[str, Any], name: str) -> str | None:
    value = payload.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise RecordDecodeError(f"field {name!r} must be a string, got {value!r}")
    return value


def _payload_bytes(payload: Mapping[str, Any], name: str) -> bytes | None:
    encoded = _optional_str(payload, f"{name}_b64")
    if encoded is not None:
        try:
            return base64.b64decode(encoded, validate=True)
        except binascii.Error as exc:
            raise RecordDecodeError(f"field '{name}_b64' is not valid base64") from exc
    text = _optional_str(payload, name)
    return None if text is None else text.encode("utf-8")


__all__ = ["RecordDecodeError", "decode_record_line"]
