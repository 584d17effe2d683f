"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet and verbose modes
- format_response in JSON, plain and rich modes, including binary payloads
- print_table in all three modes
- Global instance management
"""

from __future__ import annotations

import json
import logging

import pytest
from rich.logging import RichHandler

from apilink import output as output_module
from apilink.output import (
    OutputFormat,
    OutputManager,
    configure_logging,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("apilink.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("apilink.output._is_tty", lambda: True)


@pytest.fixture()
def clean_env(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("TERM", "xterm-256color")


# ------------------------------------------------------------------ #
# OutputFormat resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager().format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, clean_env):
        assert OutputManager().format == OutputFormat.RICH

    def test_auto_resolves_to_plain_when_tty_but_no_color(self, tty, clean_env):
        assert OutputManager(no_color=True).format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, tty, clean_env):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env_disables_color(self, tty, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert OutputManager().format == OutputFormat.PLAIN

    def test_term_dumb_disables_color(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert OutputManager().format == OutputFormat.PLAIN


# ------------------------------------------------------------------ #
# Streams
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    """Data goes to stdout, diagnostics go to stderr."""

    def test_print_data_goes_to_stdout(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).print_data("hello world")
        captured = capfd.readouterr()
        assert "hello world" in captured.out
        assert captured.err == ""

    @pytest.mark.parametrize("method", ["info", "error", "success", "suggest"])
    def test_diagnostics_go_to_stderr(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        getattr(mgr, method)("message text")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "message text" in captured.err

    def test_error_prefix(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).error("broke")
        assert "Error: broke" in capfd.readouterr().err

    def test_format_response_goes_to_stdout(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON, no_color=True).format_response({"key": "value"})
        captured = capfd.readouterr()
        assert json.loads(captured.out) == {"key": "value"}
        assert captured.err == ""


class TestQuietAndVerbose:
    @pytest.mark.parametrize("method", ["info", "success", "suggest"])
    def test_quiet_suppresses(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        getattr(mgr, method)("hidden")
        assert capfd.readouterr().err == ""

    def test_quiet_keeps_errors(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        mgr.error("shown")
        assert "shown" in capfd.readouterr().err

    def test_debug_hidden_by_default(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).debug("secret")
        assert capfd.readouterr().err == ""

    def test_debug_shown_with_verbose(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
        mgr.debug("details")
        assert "[debug] details" in capfd.readouterr().err


# ------------------------------------------------------------------ #
# format_response
# ------------------------------------------------------------------ #


class TestFormatResponse:
    def test_json_list(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON, no_color=True).format_response([1, 2])
        assert json.loads(capfd.readouterr().out) == [1, 2]

    def test_json_string_that_is_json(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON, no_color=True).format_response('{"a": 1}')
        assert json.loads(capfd.readouterr().out) == {"a": 1}

    def test_json_plain_string(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON, no_color=True).format_response("hello")
        assert capfd.readouterr().out.strip() == "hello"

    def test_plain_dict(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).format_response({"id": 1, "name": "Ada"})
        assert capfd.readouterr().out.splitlines() == ["id\t1", "name\tAda"]

    def test_plain_list_of_dicts(self, capfd, non_tty):
        data = [{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]
        OutputManager(format=OutputFormat.PLAIN, no_color=True).format_response(data)
        assert capfd.readouterr().out.splitlines() == ["1\ta", "2\tb"]

    def test_plain_scalar(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).format_response(42)
        assert capfd.readouterr().out.strip() == "42"

    def test_rich_dict(self, capfd, tty, clean_env):
        OutputManager(format=OutputFormat.RICH).format_response({"key": "value"})
        out = capfd.readouterr().out
        assert "key" in out
        assert "value" in out

    def test_binary_on_tty_reports_size_only(self, capfd, tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).format_response(b"\x00\x01\x02")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "Binary response (3 bytes)" in captured.err


# ------------------------------------------------------------------ #
# print_table
# ------------------------------------------------------------------ #


class TestPrintTable:
    HEADERS = ["Name", "URL"]
    ROWS = [["users", "https://api.example.com/users"], ["user", "https://api.example.com/users/:id"]]

    def test_json(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON, no_color=True).print_table(self.HEADERS, self.ROWS)
        records = json.loads(capfd.readouterr().out)
        assert records[0] == {"Name": "users", "URL": "https://api.example.com/users"}

    def test_plain(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).print_table(self.HEADERS, self.ROWS)
        lines = capfd.readouterr().out.splitlines()
        assert lines[0] == "Name\tURL"
        assert lines[1] == "users\thttps://api.example.com/users"

    def test_rich(self, capfd, tty, clean_env):
        OutputManager(format=OutputFormat.RICH).print_table(self.HEADERS, self.ROWS, title="Resources")
        out = capfd.readouterr().out
        assert "Resources" in out
        assert "users" in out


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_default(self, non_tty):
        reset_output()
        assert isinstance(get_output(), OutputManager)
        assert get_output() is get_output()

    def test_set_and_reset(self, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON)
        set_output(mgr)
        assert get_output() is mgr
        reset_output()
        assert get_output() is not mgr

    def test_convenience_functions_delegate(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True))
        output_module.info("i")
        output_module.error("e")
        output_module.debug("d")
        output_module.format_response({"k": "v"})
        captured = capfd.readouterr()
        assert "i" in captured.err
        assert "Error: e" in captured.err
        assert "[debug] d" in captured.err
        assert captured.out == "k\tv\n"


# ------------------------------------------------------------------ #
# Library logging
# ------------------------------------------------------------------ #


class TestConfigureLogging:
    def _rich_handlers(self) -> list[logging.Handler]:
        return [h for h in logging.getLogger("apilink").handlers if isinstance(h, RichHandler)]

    def test_verbose_enables_debug_records(self) -> None:
        configure_logging(True)
        assert logging.getLogger("apilink").level == logging.DEBUG
        assert len(self._rich_handlers()) == 1

    def test_repeated_calls_do_not_stack_handlers(self) -> None:
        configure_logging(True)
        configure_logging(True)
        assert len(self._rich_handlers()) == 1

    def test_disable_removes_handler(self) -> None:
        configure_logging(True)
        configure_logging(False)
        assert self._rich_handlers() == []
        assert logging.getLogger("apilink").level == logging.NOTSET

    def test_reset_output_removes_handler(self) -> None:
        configure_logging(True)
        reset_output()
        assert self._rich_handlers() == []
