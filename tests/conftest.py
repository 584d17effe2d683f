"""Shared test fixtures for apilink.

Provides a recording fake transport, an in-memory token store, isolated
config directories, output management, and a CLI runner. These fixtures
are discovered by pytest automatically.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

import pytest

from apilink.auth.store import MemoryStore
from apilink.models import TransportResponse
from apilink.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Fake transport
# ---------------------------------------------------------------------------


class FakeTransport:
    """Transport double that records every call.

    Returns *response* for each call, or raises *error* when set.
    """

    def __init__(
        self,
        response: Optional[TransportResponse] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        self.response = response if response is not None else TransportResponse(data={"ok": True})
        self.error = error
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    async def _handle(self, method: str, url: str, body: Any, options: Mapping[str, Any]) -> TransportResponse:
        self.calls.append({"method": method, "url": url, "body": body, "options": dict(options)})
        if self.error is not None:
            raise self.error
        return self.response

    async def get(self, url: str, options: Mapping[str, Any]) -> TransportResponse:
        return await self._handle("get", url, None, options)

    async def post(self, url: str, body: Any, options: Mapping[str, Any]) -> TransportResponse:
        return await self._handle("post", url, body, options)

    async def put(self, url: str, body: Any, options: Mapping[str, Any]) -> TransportResponse:
        return await self._handle("put", url, body, options)

    async def delete(self, url: str, options: Mapping[str, Any]) -> TransportResponse:
        return await self._handle("delete", url, None, options)

    async def aclose(self) -> None:
        self.closed = True

    @property
    def last_call(self) -> dict[str, Any]:
        return self.calls[-1]


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def memory_store() -> MemoryStore:
    """A token store holding ``apis-accessToken`` -> ``awesomeAccessToken``."""
    return MemoryStore({"apis-accessToken": "awesomeAccessToken"})


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; CliRunner swaps those streams per invocation.
    """
    yield
    reset_output()


@pytest.fixture
def quiet_output() -> OutputManager:
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME at tmp_path, forces the XDG code path, clears
    APILINK_* environment variables, and changes into tmp_path.
    """
    monkeypatch.setattr("apilink.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))

    for var in [
        "APILINK_PROFILE",
        "APILINK_CONFIG",
        "APILINK_BASE_URL",
        "APILINK_AUTH_TOKEN",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    from typer.testing import CliRunner

    return CliRunner()
