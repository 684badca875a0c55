"""Environment helpers: ``.env`` loading and boolean toggles.

Purpose
-------
Let operators keep viewer defaults (``MCPIPER_*`` variables) in a nearby
``.env`` file. Values already present in the process environment always win
over ``.env`` entries.

Contents
--------
* :data:`DOTENV_ENV_VAR` – toggle enabling ``.env`` loading without a flag.
* :func:`should_use_dotenv` – combine the CLI flag with the toggle.
* :func:`enable_dotenv` – load the nearest ``.env`` once per process.
* :func:`parse_flag` – interpret truthy environment strings.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv

DOTENV_ENV_VAR = "MCPIPER_USE_DOTENV"

_TRUTHY = frozenset({"1", "true", "yes", "on"})

_DOTENV_STATE: dict[str, Path | None] = {"loaded": None}


def parse_flag(value: str | None) -> bool:
    """Return ``True`` for ``1/true/yes/on`` (case-insensitive).

    Examples
    --------
    >>> parse_flag("Yes"), parse_flag("0"), parse_flag(None)
    (True, False, False)
    """

    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


def should_use_dotenv(*, explicit: bool | None, env_value: str | None) -> bool:
    """Decide whether to load ``.env``; an explicit CLI choice beats the toggle."""

    if explicit is not None:
        return explicit
    return parse_flag(env_value)


def enable_dotenv(search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` walking up from ``search_from`` (default: cwd).

    Returns the resolved path of the loaded file, or ``None`` when no file was
    found. Loading happens at most once per process.
    """

    if _DOTENV_STATE["loaded"] is not None:
        return _DOTENV_STATE["loaded"]
    start = (search_from or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            load_dotenv(candidate, override=False)
            _DOTENV_STATE["loaded"] = candidate.resolve()
            return _DOTENV_STATE["loaded"]
    return None


def _reset_dotenv_state_for_testing() -> None:
    _DOTENV_STATE["loaded"] = None


__all__ = ["DOTENV_ENV_VAR", "enable_dotenv", "parse_flag", "should_use_dotenv"]
