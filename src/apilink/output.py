"""CLI output: response payloads on stdout, diagnostics on stderr.

``apilink get users | jq`` must only ever see the payload, so everything
else (status lines, errors, hints, debug chatter, library log records)
goes to stderr. Payloads are rendered as JSON, tab-separated plain text, or
Rich syntax-highlighted JSON; ``AUTO`` picks Rich on a colour TTY and plain
text otherwise. ``NO_COLOR``, ``TERM=dumb`` and ``--no-color`` all disable
colour.

:class:`OutputManager` is built in :func:`~apilink.app.main_callback` and
installed with :func:`set_output`; commands use the module-level helpers.
:func:`configure_logging` routes the library's :mod:`logging` records to
stderr when ``--verbose`` is given.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


def _decode_json_text(data: Any) -> tuple[Any, bool]:
    """Return ``(value, structured)``; strings holding JSON are parsed first."""
    if isinstance(data, str):
        try:
            return json.loads(data), True
        except ValueError:
            return data, False
    return data, True


class OutputManager:
    """Renders payloads and diagnostics for one CLI invocation.

    Args:
        format: Payload format. ``AUTO`` is resolved here from TTY state.
        no_color: Disable colour and Rich markup.
        quiet: Drop ``info``, ``success`` and ``suggest`` messages.
        verbose: Show ``debug`` messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            rich_ok = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    # ------------------------------------------------------------------ #
    # stdout
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def format_response(self, data: Any) -> None:
        """Write one response payload to stdout.

        ``bytes`` are never rendered: their size is reported on stderr and
        they are copied to stdout only when it is piped.
        """
        if isinstance(data, bytes):
            self.info(f"Binary response ({len(data)} bytes)")
            if not _is_tty():
                sys.stdout.buffer.write(data)
                sys.stdout.flush()
            return

        if self._format == OutputFormat.PLAIN:
            for line in self._plain_lines(data):
                self.print_data(line)
            return

        value, structured = _decode_json_text(data)
        if not structured:
            if self._format == OutputFormat.JSON:
                self.print_data(value)
            else:
                self._stdout.print(value)
        elif self._format == OutputFormat.JSON:
            self.print_data(json.dumps(value, indent=2, ensure_ascii=False, default=str))
        elif isinstance(value, (dict, list)):
            rendered = json.dumps(value, indent=2, ensure_ascii=False, default=str)
            self._stdout.print(Syntax(rendered, "json", theme="monokai", word_wrap=True))
        else:
            self._stdout.print(str(value))

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as a JSON array of objects, tab-separated lines, or a Rich table."""
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
            return
        if self._format == OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self.print_data("\t".join(row))
            return

        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    @staticmethod
    def _plain_lines(data: Any) -> list[str]:
        if isinstance(data, dict):
            return [f"{key}\t{value}" for key, value in data.items()]
        if isinstance(data, list):
            return [
                "\t".join(str(v) for v in item.values()) if isinstance(item, dict) else str(item)
                for item in data
            ]
        return [str(data)]

    # ------------------------------------------------------------------ #
    # stderr
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        if not self._quiet:
            self._diagnose(message, message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._diagnose(message, f"[green]{message}[/green]")

    def error(self, message: str) -> None:
        """Always shown, even with ``--quiet``."""
        self._diagnose(f"Error: {message}", f"[bold red]Error:[/bold red] {message}")

    def suggest(self, message: str) -> None:
        if not self._quiet:
            hint = f"→ {message}"
            self._diagnose(hint, f"[dim]{hint}[/dim]")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._diagnose(f"[debug] {message}", f"[dim]\\[debug] {message}[/dim]")

    def _diagnose(self, plain: str, markup: str) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup)


# ------------------------------------------------------------------ #
# Library logging
# ------------------------------------------------------------------ #

_log_handler: Optional[logging.Handler] = None


def configure_logging(verbose: bool) -> None:
    """Send ``apilink.*`` log records at DEBUG level to stderr when *verbose*.

    Any handler installed by an earlier call is removed first, so repeated
    invocations in one process do not stack handlers.
    """
    global _log_handler
    package_logger = logging.getLogger("apilink")
    if _log_handler is not None:
        package_logger.removeHandler(_log_handler)
        package_logger.setLevel(logging.NOTSET)
        _log_handler = None
    if not verbose:
        return

    _log_handler = RichHandler(
        console=Console(stderr=True, no_color=_should_disable_color()),
        show_time=False,
        show_path=False,
    )
    package_logger.addHandler(_log_handler)
    package_logger.setLevel(logging.DEBUG)


# ------------------------------------------------------------------ #
# Installed manager and helpers
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Drop the installed manager and any library log handler."""
    global _output
    _output = None
    configure_logging(False)


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def error(message: str) -> None:
    get_output().error(message)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)
