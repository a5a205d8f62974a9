"""Shared test fixtures for easier_requests.

Provides a controllable stub transport, ledgers wired to it, isolated
config environments, output state management and a CLI runner.  These
fixtures are discovered by pytest automatically.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import pytest

from easier_requests import reset_requester
from easier_requests.ledger import RequestLedger
from easier_requests.models import PreparedRequest
from easier_requests.output import OutputFormat, OutputManager, reset_output, set_output
from easier_requests.transport import Transport


# ---------------------------------------------------------------------------
# Stub transport
# ---------------------------------------------------------------------------


class StubTransport(Transport):
    """In-memory transport with scripted outcomes.

    ``outcomes`` maps a URL to the payload to return, or to an exception
    instance to raise.  URLs without an entry succeed with ``{"ok": True}``.
    :meth:`hold` keeps requests for a URL in flight until the returned
    event is set.
    """

    def __init__(self, outcomes: dict[str, Any] | None = None) -> None:
        self.outcomes: dict[str, Any] = dict(outcomes or {})
        self.sent: list[PreparedRequest] = []
        self.closed = False
        self._gates: dict[str, asyncio.Event] = {}

    def hold(self, url: str) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[url] = gate
        return gate

    async def send(self, request: PreparedRequest) -> Any:
        self.sent.append(request)
        gate = self._gates.get(request.url)
        if gate is not None:
            await gate.wait()
        outcome = self.outcomes.get(request.url, {"ok": True})
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def stub_transport() -> StubTransport:
    return StubTransport()


@pytest.fixture
def ledger(stub_transport: StubTransport) -> RequestLedger:
    """A ledger backed by :class:`StubTransport` with default options."""
    return RequestLedger(transport=stub_transport)


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_globals() -> None:
    """Drop the global OutputManager and default ledger after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, which go stale once CliRunner or capsys restores the
    real streams.
    """
    yield
    reset_output()
    reset_requester()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME and XDG_DATA_HOME at subdirectories of
    tmp_path and clears the EASIER_REQUESTS_* environment variables.

    Returns:
        The tmp_path root directory.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["EASIER_REQUESTS_THROW_ON_FAILURE", "EASIER_REQUESTS_BASE_URL"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, plain OutputManager for tests that don't care about output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a plain, colourless OutputManager so capsys sees exact text."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
