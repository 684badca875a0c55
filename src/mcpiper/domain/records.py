"""Decoded protocol records consumed by the rendering pipeline.

Purpose
-------
Describe the read-only shape handed over by the decoder: a memcache-style
request or reply with optional key, expiration and value.

Contents
--------
* :class:`Operation` / :class:`Result` enums including ``UNKNOWN`` sentinels.
* :class:`DecodedRecord` frozen dataclass.

System Role
-----------
Domain input of :func:`mcpiper.application.use_cases.render_record.render_record`.
``Operation.END`` marks a control record that must never produce output.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

_U64_MAX = (1 << 64) - 1
_U32_MAX = (1 << 32) - 1


class _NamedEnum(Enum):
    """Enum whose values are the protocol spelling of each member."""

    @classmethod
    def from_name(cls, name: str | None):
        """Return the member spelled ``name``; unknown spellings map to ``UNKNOWN``."""

        if not name:
            return cls["UNKNOWN"]
        normalized = name.strip().lower().replace("_", "-")
        for member in cls:
            if member.value.replace("_", "-") == normalized:
                return member
        return cls["UNKNOWN"]

    @property
    def is_known(self) -> bool:
        return self.name != "UNKNOWN"


class Operation(_NamedEnum):
    """Protocol operations; ``END`` is the end-of-stream control sentinel."""

    UNKNOWN = "unknown"
    GET = "get"
    SET = "set"
    DELETE = "delete"
    LEASE_GET = "lease-get"
    LEASE_SET = "lease-set"
    ADD = "add"
    REPLACE = "replace"
    APPEND = "append"
    PREPEND = "prepend"
    CAS = "cas"
    GETS = "gets"
    INCR = "incr"
    DECR = "decr"
    TOUCH = "touch"
    METAGET = "metaget"
    FLUSHALL = "flushall"
    FLUSHRE = "flushre"
    VERSION = "version"
    STATS = "stats"
    QUIT = "quit"
    SHUTDOWN = "shutdown"
    EXEC = "exec"
    END = "end"


class Result(_NamedEnum):
    """Reply result codes as spelled in the trace output."""

    UNKNOWN = "unknown"
    OK = "ok"
    FOUND = "found"
    NOTFOUND = "notfound"
    STORED = "stored"
    NOTSTORED = "notstored"
    EXISTS = "exists"
    DELETED = "deleted"
    TOUCHED = "touched"
    TIMEOUT = "timeout"
    CONNECT_ERROR = "connect_error"
    CONNECT_TIMEOUT = "connect_timeout"
    TKO = "tko"
    BUSY = "busy"
    REMOTE_ERROR = "remote_error"
    LOCAL_ERROR = "local_error"
    CLIENT_ERROR = "client_error"
    BAD_KEY = "bad_key"
    BAD_VALUE = "bad_value"
    ABORTED = "aborted"


@dataclass(slots=True, frozen=True)
class DecodedRecord:
    """Immutable request/reply record produced by the decoder.

    Attributes
    ----------
    request_id:
        Unsigned 64-bit identifier correlating the record with its request.
    operation / result:
        Enum members; ``UNKNOWN`` means "omit from the header".
    key:
        Raw key bytes or ``None`` when the record carries no key.
    flags:
        Unsigned 64-bit value flags bitfield.
    expiration:
        Unsigned 32-bit expiration time or ``None``.
    value:
        Raw (possibly compressed) value bytes or ``None``.

    Examples
    --------
    >>> record = DecodedRecord(request_id=1, operation=Operation.SET, key=b"foo")
    >>> record.result is Result.UNKNOWN
    True
    >>> record.is_end
    False
    """

    request_id: int
    operation: Operation = Operation.UNKNOWN
    result: Result = Result.UNKNOWN
    key: bytes | None = None
    flags: int = 0
    expiration: int | None = None
    value: bytes | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.request_id <= _U64_MAX:
            raise ValueError(f"request_id out of u64 range: {self.request_id}")
        if not 0 <= self.flags <= _U64_MAX:
            raise ValueError(f"flags out of u64 range: {self.flags}")
        if self.expiration is not None and not 0 <= self.expiration <= _U32_MAX:
            raise ValueError(f"expiration out of u32 range: {self.expiration}")

    @property
    def is_end(self) -> bool:
        """Return ``True`` for the end-of-stream control record."""

        return self.operation is Operation.END

    def replace(self, **changes: Any) -> "DecodedRecord":
        """Return a copied record with ``changes`` applied."""

        return replace(self, **changes)


__all__ = ["DecodedRecord", "Operation", "Result"]
