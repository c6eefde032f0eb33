from __future__ import annotations

from typing import Any, Callable, List

import httpx
import pytest
from typer.testing import CliRunner

from columbo_connector.adapters.api.columbo import ColumboClient
from columbo_connector.cli.main import app


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    for name in ("COLUMBO_SETTINGS_PATH", "COLUMBO_BASE_URL", "COLUMBO_STATIC_BASE_URL", "COLUMBO_CREDENTIALS_PATH"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def cli_app():
    return app


@pytest.fixture()
def audit_records() -> List[dict]:
    return [
        {
            "name": "home-page-audit",
            "lastSweepAt": "2024-03-01T10:00:00Z",
            "summary": {"pages": {"scanned": 42, "found": 50}},
            "screenshot": {"directory": "d1", "filename": "shot.png"},
        },
        {
            "name": "checkout",
            "lastSweepAt": "2024-03-02T11:30:00Z",
            "summary": {"pages": {"scanned": 7, "found": 7}},
        },
    ]


@pytest.fixture()
def mock_client_factory() -> Callable[..., tuple[ColumboClient, list[httpx.Request]]]:
    """Build a client whose transport answers through ``handler``."""

    def factory(handler: Callable[[httpx.Request], Any], **kwargs: Any):
        seen: list[httpx.Request] = []

        def recording(request: httpx.Request):
            seen.append(request)
            return handler(request)

        client = ColumboClient(transport=httpx.MockTransport(recording), **kwargs)
        return client, seen

    return factory
