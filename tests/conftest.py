"""Pytest configuration and shared fixtures for btrpc tests."""

from __future__ import annotations

import json
import logging
from typing import Any

import pytest

from btrpc.client import RpcClient
from btrpc.config import ENV_MAPPINGS, reset_config
from btrpc.exceptions import ClientError
from btrpc.models import ConnectionConfig
from btrpc.protocol import SESSION_ID_HEADER
from btrpc.rpc.engine import CallEngine
from btrpc.rpc.transport import HttpRequest


def pytest_configure(config):
    """Register all project markers to avoid warnings when ini isn't loaded."""
    markers = [
        ("unit", "marks tests as unit tests"),
        ("cli", "marks tests as CLI tests"),
        ("property", "marks tests as property-based tests"),
    ]
    for name, desc in markers:
        config.addinivalue_line("markers", f"{name}: {desc}")


class FakeTransport:
    """Transport double that records every send.

    Queued responses are returned in order: dicts are JSON encoded, bytes are
    returned as is and exceptions are raised. Once the queue is empty every
    send succeeds with an empty payload.
    """

    def __init__(self, *responses: Any):
        self.responses = list(responses)
        self.calls: list[tuple[HttpRequest, bytes]] = []

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    def send(self, request: HttpRequest, body: bytes) -> bytes:
        self.calls.append((request, body))
        response = self.responses.pop(0) if self.responses else {"result": "success", "arguments": {}}
        if isinstance(response, BaseException):
            raise response
        if isinstance(response, bytes):
            return response
        return json.dumps(response).encode("utf-8")

    @property
    def bodies(self) -> list[dict[str, Any]]:
        return [json.loads(body) for _, body in self.calls]

    @property
    def tokens(self) -> list[str]:
        return [request.headers[SESSION_ID_HEADER] for request, _ in self.calls]


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch, tmp_path):
    """Keep user config files and BTRPC_* variables out of the tests."""
    for name in ENV_MAPPINGS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def cleanup_logging():
    """Clean up logging handlers after each test to prevent closed file errors."""
    yield
    for logger_name in list(logging.Logger.manager.loggerDict.keys()):
        logger = logging.getLogger(logger_name)
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)
    # setup_logging() stops propagation, which would hide records from caplog
    btrpc_logger = logging.getLogger("btrpc")
    btrpc_logger.propagate = True
    btrpc_logger.setLevel(logging.NOTSET)


@pytest.fixture
def fake_transport():
    """A fresh recording transport."""
    return FakeTransport()


@pytest.fixture
def conflict():
    """Factory for the daemon's stale-session rejection."""

    def _conflict(token: str | None = "fresh-token") -> ClientError:
        headers = [(SESSION_ID_HEADER, token)] if token is not None else []
        return ClientError(409, headers, b"<h1>409: Conflict</h1>")

    return _conflict


@pytest.fixture
def connection_config():
    """Default connection settings for a local daemon."""
    return ConnectionConfig()


@pytest.fixture
def engine(connection_config, fake_transport):
    """Call engine wired to the fake transport."""
    return CallEngine(connection_config, fake_transport)


@pytest.fixture
def client(connection_config, fake_transport):
    """RPC client wired to the fake transport."""
    return RpcClient(connection_config, fake_transport)
