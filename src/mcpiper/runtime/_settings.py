"""Settings resolution for the viewer runtime.

Purpose
-------
Collapse CLI arguments, ``MCPIPER_*`` environment variables and defaults into
one immutable :class:`ViewerSettings` value. Invalid input surfaces as a single
:class:`ViewerConfigError` that the entry point inspects before the event loop
starts; nothing here terminates the process.

Contents
--------
* :class:`ViewerConfigError` – startup configuration failure.
* :class:`ViewerSettings` – resolved configuration.
* :func:`build_viewer_settings` – resolution and validation.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from mcpiper.application.use_cases.dispatch_record import DispatchSettings
from mcpiper.application.use_cases.render_record import RenderOptions
from mcpiper.config import parse_flag
from mcpiper.domain.palette import PrettyFormat, resolve_theme
from mcpiper.domain.patterns import PatternError, PatternSpec

DEFAULT_FIFO_ROOT = Path("/var/mcrouter/fifos")
DEFAULT_POLL_INTERVAL = 1.0

ENV_FIFO_ROOT = "MCPIPER_FIFO_ROOT"
ENV_FILENAME_PATTERN = "MCPIPER_FILENAME_PATTERN"
ENV_QUIET = "MCPIPER_QUIET"
ENV_THEME = "MCPIPER_THEME"
ENV_NO_COLOR = "MCPIPER_NO_COLOR"
ENV_FORCE_COLOR = "MCPIPER_FORCE_COLOR"
ENV_POLL_INTERVAL = "MCPIPER_POLL_INTERVAL"


class ViewerConfigError(ValueError):
    """Raised when the viewer cannot start with the given configuration."""


@dataclass(slots=True, frozen=True)
class ViewerSettings:
    """Immutable configuration shared by rendering, matching and ingestion."""

    fifo_root: Path
    filename_pattern: PatternSpec
    content_pattern: PatternSpec
    quiet: bool
    theme: str
    pretty_format: PrettyFormat
    force_color: bool
    no_color: bool
    poll_interval: float

    @property
    def dispatch_settings(self) -> DispatchSettings:
        return DispatchSettings(
            content_pattern=self.content_pattern,
            render_options=RenderOptions(quiet=self.quiet),
            pretty_format=self.pretty_format,
        )


def build_viewer_settings(
    *,
    match_expression: str | None = None,
    fifo_root: str | Path | None = None,
    filename_pattern: str | None = None,
    quiet: bool | None = None,
    theme: str | None = None,
    force_color: bool | None = None,
    no_color: bool | None = None,
    poll_interval: float | None = None,
    environ: Mapping[str, str] | None = None,
) -> ViewerSettings:
    """Resolve settings; explicit arguments override the environment.

    Examples
    --------
    >>> settings = build_viewer_settings(match_expression="foo", environ={})
    >>> settings.content_pattern.source, settings.filename_pattern.is_everything
    ('foo', True)
    >>> build_viewer_settings(match_expression="\\\\(", environ={})
    Traceback (most recent call last):
    ...
    mcpiper.runtime._settings.ViewerConfigError: Invalid pattern: unmatched \\( in pattern '\\\\('
    """

    env = os.environ if environ is None else environ

    root_value = fifo_root if fifo_root is not None else env.get(ENV_FIFO_ROOT) or DEFAULT_FIFO_ROOT
    root = Path(root_value)
    if not str(root_value).strip():
        raise ViewerConfigError("Fifo's directory (--fifo-root) cannot be empty")

    filename_source = filename_pattern if filename_pattern is not None else env.get(ENV_FILENAME_PATTERN, "")
    try:
        filename_spec = PatternSpec.compile(filename_source)
    except PatternError as exc:
        raise ViewerConfigError(f"Invalid filename pattern: {exc}") from exc

    try:
        content_spec = PatternSpec.compile(match_expression)
    except PatternError as exc:
        raise ViewerConfigError(f"Invalid pattern: {exc}") from exc

    theme_name = theme if theme is not None else env.get(ENV_THEME) or "classic"
    try:
        pretty_format = resolve_theme(theme_name)
    except ValueError as exc:
        raise ViewerConfigError(str(exc)) from exc

    return ViewerSettings(
        fifo_root=root,
        filename_pattern=filename_spec,
        content_pattern=content_spec,
        quiet=_resolve_flag(quiet, env.get(ENV_QUIET)),
        theme=theme_name.strip().lower(),
        pretty_format=pretty_format,
        force_color=_resolve_flag(force_color, env.get(ENV_FORCE_COLOR)),
        no_color=_resolve_flag(no_color, env.get(ENV_NO_COLOR)),
        poll_interval=_resolve_poll_interval(poll_interval, env.get(ENV_POLL_INTERVAL)),
    )


def _resolve_flag(explicit: bool | None, env_value: str | None) -> bool:
    if explicit is not None:
        return explicit
    return parse_flag(env_value)


def _resolve_poll_interval(explicit: float | None, env_value: str | None) -> float:
    if explicit is not None:
        value = explicit
    elif env_value:
        try:
            value = float(env_value)
        except ValueError as exc:
            raise ViewerConfigError(f"{ENV_POLL_INTERVAL} must be a number, got {env_value!r}") from exc
    else:
        return DEFAULT_POLL_INTERVAL
    if value <= 0:
        raise ViewerConfigError(f"poll interval must be positive, got {value}")
    return value


__all__ = [
    "DEFAULT_FIFO_ROOT",
    "ViewerConfigError",
    "ViewerSettings",
    "build_viewer_settings",
]
