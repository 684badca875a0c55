from __future__ import annotations

from pathlib import Path

import pytest

from mcpiper.domain.palette import PALETTE_THEMES
from mcpiper.runtime import DEFAULT_FIFO_ROOT, ViewerConfigError, build_viewer_settings


def test_defaults_without_arguments_or_environment() -> None:
    settings = build_viewer_settings(environ={})

    assert settings.fifo_root == DEFAULT_FIFO_ROOT
    assert settings.filename_pattern.is_everything
    assert settings.content_pattern.is_everything
    assert settings.quiet is False
    assert settings.theme == "classic"
    assert settings.pretty_format is PALETTE_THEMES["classic"]
    assert settings.force_color is False
    assert settings.no_color is False
    assert settings.poll_interval == 1.0


def test_environment_supplies_defaults() -> None:
    environ = {
        "MCPIPER_FIFO_ROOT": "/tmp/fifos",
        "MCPIPER_FILENAME_PATTERN": "debug",
        "MCPIPER_QUIET": "yes",
        "MCPIPER_THEME": "dark",
        "MCPIPER_NO_COLOR": "1",
        "MCPIPER_FORCE_COLOR": "true",
        "MCPIPER_POLL_INTERVAL": "0.25",
    }

    settings = build_viewer_settings(environ=environ)

    assert settings.fifo_root == Path("/tmp/fifos")
    assert settings.filename_pattern.source == "debug"
    assert settings.quiet is True
    assert settings.theme == "dark"
    assert settings.no_color is True
    assert settings.force_color is True
    assert settings.poll_interval == 0.25


def test_arguments_override_environment() -> None:
    environ = {"MCPIPER_FIFO_ROOT": "/env", "MCPIPER_QUIET": "1", "MCPIPER_THEME": "dark"}

    settings = build_viewer_settings(fifo_root="/cli", quiet=False, theme="mono", environ=environ)

    assert settings.fifo_root == Path("/cli")
    assert settings.quiet is False
    assert settings.theme == "mono"


def test_dispatch_settings_carry_pattern_quiet_and_palette() -> None:
    settings = build_viewer_settings(match_expression="foo", quiet=True, theme="dark", environ={})

    dispatch = settings.dispatch_settings

    assert dispatch.content_pattern.source == "foo"
    assert dispatch.render_options.quiet is True
    assert dispatch.pretty_format is PALETTE_THEMES["dark"]


@pytest.mark.parametrize(
    "kwargs, environ, message",
    [
        ({"match_expression": "\\("}, {}, "Invalid pattern"),
        ({"filename_pattern": "[abc"}, {}, "Invalid filename pattern"),
        ({}, {"MCPIPER_FILENAME_PATTERN": "a\\"}, "Invalid filename pattern"),
        ({"fifo_root": ""}, {}, "cannot be empty"),
        ({"fifo_root": "   "}, {}, "cannot be empty"),
        ({"theme": "neon"}, {}, "Unknown theme"),
        ({}, {"MCPIPER_POLL_INTERVAL": "soon"}, "must be a number"),
        ({"poll_interval": 0}, {}, "must be positive"),
    ],
)
def test_invalid_configuration_raises(kwargs: dict, environ: dict, message: str) -> None:
    with pytest.raises(ViewerConfigError, match=message):
        build_viewer_settings(environ=environ, **kwargs)


def test_config_error_is_a_value_error() -> None:
    assert issubclass(ViewerConfigError, ValueError)
