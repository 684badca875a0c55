"""Asyncio reader subscribing to every named pipe in a directory.

Purpose
-------
Feed the dispatcher from many concurrent sources on a single event loop. The
directory is rescanned periodically; each new FIFO whose name passes the
filename filter gets its own reader task, and every decoded line is handed to
the record handler synchronously, so calls into the core are serialised by
construction.

Contents
--------
* :class:`SourceFilter` – filename pattern check evaluated once per source.
* :class:`FifoDirectoryReader` – discovery loop plus per-source reader tasks.

System Role
-----------
Outer ingestion adapter; depends only on :class:`RecordHandlerPort` and the
line decoder. Ordering within one source is preserved, interleaving across
sources follows arrival order on the loop.
"""

from __future__ import annotations

import asyncio
import logging
import os
import stat
from collections.abc import Callable
from functools import partial
from pathlib import Path

from mcpiper.application.ports.records import RecordHandlerPort
from mcpiper.domain.patterns import PatternSpec
from mcpiper.domain.records import DecodedRecord

from .jsonl_decoder import RecordDecodeError, decode_record_line

logger = logging.getLogger(__name__)

LineDecoder = Callable[[bytes], DecodedRecord]

_LINE_LIMIT = 16 * 1024 * 1024


class SourceFilter:
    """Decide which discovered sources to subscribe to.

    Examples
    --------
    >>> SourceFilter(PatternSpec.compile("^mcrouter")).accepts("mcrouter.debug.1")
    True
    >>> SourceFilter(PatternSpec.compile("^mcrouter")).accepts("proxy.1")
    False
    >>> SourceFilter().accepts("anything")
    True
    """

    def __init__(self, pattern: PatternSpec | None = None) -> None:
        self._pattern = pattern if pattern is not None else PatternSpec.match_everything()

    @property
    def pattern(self) -> PatternSpec:
        return self._pattern

    def accepts(self, name: str) -> bool:
        return self._pattern.search_name(name)


def is_fifo(path: Path) -> bool:
    """Return ``True`` when ``path`` currently names a FIFO."""

    return fifo_identity(path) is not None


def fifo_identity(path: Path) -> tuple[int, int] | None:
    """Return ``(st_dev, st_ino)`` of the FIFO at ``path`` or ``None``."""

    try:
        info = path.stat()
    except OSError:
        return None
    if not stat.S_ISFIFO(info.st_mode):
        return None
    return info.st_dev, info.st_ino


class FifoDirectoryReader:
    """Watch ``root`` and stream records from each accepted FIFO.

    Parameters
    ----------
    root:
        Directory holding the named pipes.
    handler:
        Receiver of decoded records; invoked synchronously on the loop.
    source_filter:
        Filename filter applied once when a source is discovered.
    poll_interval:
        Seconds between directory scans.
    decoder:
        Callable turning one line into a :class:`DecodedRecord`.
    """

    def __init__(
        self,
        root: Path,
        handler: RecordHandlerPort,
        *,
        source_filter: SourceFilter | None = None,
        poll_interval: float = 1.0,
        decoder: LineDecoder = decode_record_line,
    ) -> None:
        self._root = Path(root)
        self._handler = handler
        self._filter = source_filter or SourceFilter()
        self._poll_interval = poll_interval
        self._decoder = decoder
        self._active: dict[Path, asyncio.Task[None]] = {}
        self._identities: dict[Path, tuple[int, int]] = {}
        self._failure: BaseException | None = None
        self._unreadable: set[Path] = set()
        self._root_problem_reported = False

    @property
    def active_sources(self) -> list[Path]:
        return sorted(self._active)

    async def run(self) -> None:
        """Scan and read until cancelled; re-raises the first handler failure."""
        try:
            while True:
                self.scan()
                await asyncio.sleep(self._poll_interval)
                if self._failure is not None:
                    raise self._failure
        finally:
            await self.aclose()

    def scan(self) -> list[Path]:
        """Start readers for newly discovered FIFOs and drop vanished ones."""
        self._unreadable = {path for path in self._unreadable if is_fifo(path)}
        # A FIFO removed and recreated under the same name counts as vanished.
        for path in [path for path in self._active if fifo_identity(path) != self._identities.get(path)]:
            logger.info("Source %s disappeared", path.name)
            self._identities.pop(path, None)
            self._active.pop(path).cancel()

        try:
            entries = sorted(self._root.iterdir())
        except FileNotFoundError:
            self._report_root_problem("Source directory %s does not exist (yet)", self._root)
            return []
        except OSError as exc:
            self._report_root_problem("Cannot list source directory %s: %s", self._root, exc)
            return []
        self._root_problem_reported = False

        started: list[Path] = []
        loop = asyncio.get_running_loop()
        for path in entries:
            if path in self._active or path in self._unreadable:
                continue
            if not self._filter.accepts(path.name):
                continue
            identity = fifo_identity(path)
            if identity is None:
                continue
            task = loop.create_task(self._read_source(path), name=f"mcpiper-source:{path.name}")
            task.add_done_callback(partial(self._forget, path))
            self._active[path] = task
            self._identities[path] = identity
            started.append(path)
            logger.info("Subscribed to %s", path.name)
        return started

    async def aclose(self) -> None:
        """Cancel every reader task and wait for them to finish."""
        tasks = list(self._active.values())
        self._active.clear()
        self._identities.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _read_source(self, path: Path) -> None:
        try:
            reader, transport = await self._open_stream(path)
        except OSError as exc:
            logger.warning("Cannot open %s: %s", path.name, exc)
            self._unreadable.add(path)
            return
        try:
            while True:
                try:
                    line = await reader.readline()
                except ValueError as exc:
                    logger.warning("Discarding oversized line from %s: %s", path.name, exc)
                    continue
                if not line:
                    return
                self._deliver(path, line)
        finally:
            transport.close()

    async def _open_stream(self, path: Path) -> tuple[asyncio.StreamReader, asyncio.BaseTransport]:
        # Opening read-write keeps the pipe alive while no writer is attached.
        fd = os.open(path, os.O_RDWR | os.O_NONBLOCK)
        pipe = os.fdopen(fd, "rb", buffering=0)
        reader = asyncio.StreamReader(limit=_LINE_LIMIT)
        loop = asyncio.get_running_loop()
        try:
            transport, _ = await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), pipe)
        except BaseException:
            pipe.close()
            raise
        return reader, transport

    def _deliver(self, path: Path, line: bytes) -> None:
        if not line.strip():
            return
        try:
            record = self._decoder(line)
        except RecordDecodeError as exc:
            logger.warning("Skipping undecodable line from %s: %s", path.name, exc)
            return
        self._handler.on_record(record.request_id, record)

    def _report_root_problem(self, message: str, *args: object) -> None:
        # Logged once until the directory becomes listable again.
        if not self._root_problem_reported:
            logger.warning(message, *args)
            self._root_problem_reported = True

    def _forget(self, path: Path, task: asyncio.Task[None]) -> None:
        if self._active.get(path) is task:
            del self._active[path]
            self._identities.pop(path, None)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Reader for %s failed: %s", path.name, error)
            if self._failure is None:
                self._failure = error


__all__ = ["FifoDirectoryReader", "SourceFilter", "fifo_identity", "is_fifo"]
