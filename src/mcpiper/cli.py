"""Click command line for the live trace viewer.

Purpose
-------
Parse options, resolve settings once, print the active patterns, and hand over
to the runtime's event loop.

Contents
--------
* :func:`cli` – Click command.
* :func:`main` – test-friendly wrapper returning an exit code.
* :func:`configure_logging` – route diagnostics through Rich on stderr.

System Role
-----------
Outermost layer: the only place that turns configuration errors into a
non-zero exit status.
"""

from __future__ import annotations

import logging
import os
from typing import Sequence

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __init__conf__
from . import config as config_module
from .runtime import ViewerConfigError, build_runtime, build_viewer_settings, run_viewer

USAGE = """Search for PATTERN in each mcrouter debug fifo in FIFO_ROOT.

\b
If PATTERN is not provided, match everything.
PATTERN is a basic regular expression (BRE).
Keys and values show escaped bytes such as \\n and \\xNN; to match
them write the backslash twice, e.g. 'a\\\\nb' for the key a\\nb.
"""

EXIT_INTERRUPTED = 130


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through Rich; ``verbose`` enables DEBUG."""

    handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
    )


@click.command(help=USAGE, context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("pattern", required=False)
@click.option("--fifo-root", "-f", default=None, help="Path of mcrouter fifo's directory.")
@click.option(
    "--filename-pattern",
    "-P",
    default=None,
    help="Basic regular expression (BRE) to match the name of the fifos.",
)
@click.option("--quiet", "-q", is_flag=True, help="Doesn't display values.")
@click.option("--theme", default=None, help="Colour theme: classic, dark or mono.")
@click.option("--no-color", is_flag=True, help="Disable colours.")
@click.option("--force-color", is_flag=True, help="Emit colours even when stdout is not a terminal.")
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help="Load environment variables from a nearby .env before resolving settings.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log diagnostics at DEBUG level on stderr.")
@click.option("--version", "-V", is_flag=True, help="Print the installed version and exit.")
@click.pass_context
def cli(
    ctx: click.Context,
    pattern: str | None,
    fifo_root: str | None,
    filename_pattern: str | None,
    quiet: bool,
    theme: str | None,
    no_color: bool,
    force_color: bool,
    use_dotenv: bool,
    verbose: bool,
    version: bool,
) -> None:
    """Resolve settings and run the viewer until interrupted."""

    if version:
        click.echo(__init__conf__.version)
        return

    explicit_dotenv: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not click.core.ParameterSource.DEFAULT:
        explicit_dotenv = use_dotenv
    if config_module.should_use_dotenv(explicit=explicit_dotenv, env_value=os.getenv(config_module.DOTENV_ENV_VAR)):
        config_module.enable_dotenv()

    configure_logging(verbose)

    try:
        settings = build_viewer_settings(
            match_expression=pattern,
            fifo_root=fifo_root,
            filename_pattern=filename_pattern,
            quiet=_explicit_flag(ctx, "quiet", quiet),
            theme=theme,
            force_color=_explicit_flag(ctx, "force_color", force_color),
            no_color=_explicit_flag(ctx, "no_color", no_color),
        )
    except ViewerConfigError as error:
        raise click.ClickException(str(error)) from error

    if not settings.filename_pattern.is_everything:
        click.echo(f"Filename pattern: {settings.filename_pattern}")
    if not settings.content_pattern.is_everything:
        click.echo(f"Data pattern: {settings.content_pattern}")

    runtime = build_runtime(settings)
    try:
        run_viewer(runtime)
    except KeyboardInterrupt:
        ctx.exit(EXIT_INTERRUPTED)


def _explicit_flag(ctx: click.Context, name: str, value: bool) -> bool | None:
    """Return ``value`` only when given on the command line, so env defaults apply otherwise."""

    if ctx.get_parameter_source(name) is click.core.ParameterSource.DEFAULT:
        return None
    return value


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Click command and return its exit code.

    Examples
    --------
    >>> main(["--version"])
    0.1.0
    0
    """

    args = list(argv) if argv is not None else None
    try:
        result = cli.main(args=args, prog_name=__init__conf__.shell_command, standalone_mode=False)
    except click.ClickException as error:
        error.show()
        return error.exit_code
    except click.Abort:
        return EXIT_INTERRUPTED
    return result if isinstance(result, int) else 0


__all__ = ["cli", "configure_logging", "main"]
