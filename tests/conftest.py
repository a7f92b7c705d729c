"""
Shared pytest fixtures for worker-bridge tests.

The worker service is replaced by ``httpx.MockTransport`` handlers so no
network access is needed.
"""

from typing import Any, Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from core.config import Config, WorkerSettings
from core.correlation import correlation_id_ctx_var
from services.worker import WorkerClient
from ui import log_utils

WORKER_URL = "http://worker:4002/"
INTERNAL_KEY = "internal-key-0123456789"
USER_AUTH = {"authorization": "Bearer user-token"}

ENV_VARS = ("PORT", "WORKER_URL", "INTERNAL_API_KEY", "WORKER_TIMEOUT", "DEFAULT_TENANT_ID")

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingLogger:
    """RequestLogger that keeps everything in memory."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.results: list[tuple[str, int]] = []
        self.errors: list[tuple[str, int, str]] = []

    def log_worker_call(self, operation, method, url, headers, *, body=None) -> None:
        self.calls.append(
            {"operation": operation, "method": method, "url": url, "headers": headers, "body": body}
        )

    def log_worker_result(self, operation, status) -> None:
        self.results.append((operation, status))

    def log_error(self, route, status, message) -> None:
        self.errors.append((route, status, message))


class RecordingHandler:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, response: httpx.Response | Callable[[httpx.Request], httpx.Response]):
        self._response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if callable(self._response):
            return self._response(request)
        return self._response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the shell environment out of settings models."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(name.lower(), raising=False)


@pytest.fixture(autouse=True)
def fresh_correlation_id():
    """Start every test without a correlation id."""
    token = correlation_id_ctx_var.set(None)
    yield
    correlation_id_ctx_var.reset(token)


@pytest.fixture(autouse=True)
def log_root(tmp_path, monkeypatch):
    """Keep request logs out of the working directory."""
    root = tmp_path / "logs"
    monkeypatch.setattr(log_utils, "LOG_ROOT", root)
    monkeypatch.setattr(log_utils, "CLI_LOG_FILE", root / "proxy.log")
    return root


@pytest.fixture()
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture()
def worker_settings() -> WorkerSettings:
    return WorkerSettings(base_url=WORKER_URL, internal_api_key=INTERNAL_KEY, timeout=5.0)


@pytest.fixture()
async def worker_factory(worker_settings, logger):
    """
    Factory fixture that creates a WorkerClient talking to a mock worker.
    """
    clients: list[httpx.AsyncClient] = []

    def _make(handler: Handler, settings: WorkerSettings | None = None) -> WorkerClient:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return WorkerClient(client, settings or worker_settings, logger)

    yield _make

    for client in clients:
        await client.aclose()


@pytest.fixture()
def app_config(worker_settings) -> Config:
    return Config(worker=worker_settings)


@pytest.fixture()
def client_factory(app_config, logger):
    """
    Factory fixture that creates a TestClient whose worker is a mock handler.

    Requests carry a user bearer token unless other default headers are given.
    """
    clients: list[TestClient] = []

    def _make(
        handler: Handler,
        config: Config | None = None,
        headers: dict[str, str] | None = USER_AUTH,
    ) -> TestClient:
        app = create_app(config or app_config, logger, transport=httpx.MockTransport(handler))
        client = TestClient(app, raise_server_exceptions=True, headers=headers)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)
