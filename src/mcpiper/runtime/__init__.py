"""Runtime façade: resolve settings, compose the viewer, run the event loop.

Purpose
-------
Expose the small entry surface the CLI (and embedding hosts) use instead of
importing the inner layers directly.

Contents
--------
* :func:`build_viewer_settings` / :class:`ViewerSettings` / :class:`ViewerConfigError`.
* :func:`build_runtime` / :class:`ViewerRuntime`.
* :func:`run_viewer` – drive the ingestion loop until cancelled.
"""

from __future__ import annotations

import asyncio

from ._composition import ViewerRuntime, build_runtime
from ._settings import DEFAULT_FIFO_ROOT, ViewerConfigError, ViewerSettings, build_viewer_settings


def run_viewer(runtime: ViewerRuntime) -> None:
    """Block on the event loop reading every subscribed source.

    Returns only when a handler failure propagates or the loop is interrupted.
    """

    asyncio.run(runtime.reader.run())


__all__ = [
    "DEFAULT_FIFO_ROOT",
    "ViewerConfigError",
    "ViewerRuntime",
    "ViewerSettings",
    "build_runtime",
    "build_viewer_settings",
    "run_viewer",
]
