"""Typer application and CLI entry point for apilink.

Registers the request commands (``get``, ``post``, ``put``, ``delete``,
``resources``) and the ``profile`` sub-group on a single Typer app.
:func:`main` is the console-script entry point declared in
``pyproject.toml``: it installs a SIGINT handler, runs the app, and turns
stray :class:`~apilink.exceptions.ApilinkError` instances into exit codes.

See Also:
    :mod:`apilink.config`: Configuration resolution used by every request command.
    :mod:`apilink.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
from typing import Any, Optional

import typer

from apilink import __version__
from apilink.commands.profile import profile_app
from apilink.commands.request import (
    delete_command,
    get_command,
    post_command,
    put_command,
    resources_command,
)
from apilink.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="apilink",
    help="Call saved API resources with placeholder substitution and auth headers.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("get")(get_command)
app.command("post")(post_command)
app.command("put")(put_command)
app.command("delete")(delete_command)
app.command("resources")(resources_command)
app.add_typer(profile_app, name="profile", help="Profile management.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"apilink {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile name to use."
    ),
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="JSON or YAML config file (overrides --profile)."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Override the configured base URL."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~apilink.output.OutputManager`, routes
    library logging to stderr under ``--verbose``, and stores the
    configuration selectors in ``ctx.obj`` for the sub-commands.
    """
    from apilink.output import OutputFormat, OutputManager, configure_logging, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["config"] = config
    ctx.obj["base_url"] = base_url
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``apilink`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from apilink.exceptions import ApilinkError
        from apilink.output import error

        if isinstance(exc, ApilinkError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
