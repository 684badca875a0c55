"""Port through which the ingestion layer hands over decoded records.

Purpose
-------
Decouple source readers from rendering and filtering: readers only know that
something accepts ``(request_id, record)`` pairs, one at a time.

Contents
--------
* :class:`RecordHandlerPort` – protocol with a single ``on_record`` method.

System Role
-----------
Implemented by the dispatcher built in
:mod:`mcpiper.application.use_cases.dispatch_record`; consumed by
:mod:`mcpiper.adapters.sources`. Callers guarantee calls are never concurrent.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from mcpiper.domain.records import DecodedRecord


@runtime_checkable
class RecordHandlerPort(Protocol):
    """Consume decoded records in arrival order."""

    def on_record(self, request_id: int, record: DecodedRecord) -> Any:
        """Process ``record``; the return value is diagnostic only."""


__all__ = ["RecordHandlerPort"]
