"""Shared fixtures for the test suite."""

import sys
from pathlib import Path

import httpx
import pytest

BACKEND_DIR = Path(__file__).resolve().parent.parent / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from config import Settings, get_settings  # noqa: E402

ENV_VARS = (
    "PORT",
    "SPREADSHEET_ID",
    "HOSPITAL_RANGE",
    "GOOGLE_CREDENTIALS_BASE64",
    "GOOGLE_APPLICATION_CREDENTIALS",
    "USE_MOCK_DATA",
    "LOG_LEVEL",
    "CORS_ORIGINS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate each test from the real environment and any .env file."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


@pytest.fixture
def settings():
    return Settings(spreadsheet_id="sheet-123", hospital_range="A:Z")


@pytest.fixture
def client():
    """FastAPI test client."""
    from fastapi.testclient import TestClient
    from main import app

    # main reads settings at import; let tests change env afterwards
    get_settings.cache_clear()
    with TestClient(app) as c:
        yield c


@pytest.fixture
def sheets_transport():
    """
    Factory for an httpx.MockTransport that records requests.

    Call with a handler(request) -> httpx.Response; the returned transport
    has a ``calls`` list of the requests it served.
    """
    def _make(handler):
        calls = []

        def _record(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return handler(request)

        transport = httpx.MockTransport(_record)
        transport.calls = calls
        return transport
    return _make


def google_error(status_code: int, message: str, status: str = "INVALID_ARGUMENT") -> httpx.Response:
    """Response shaped like Google's error envelope."""
    return httpx.Response(
        status_code,
        json={"error": {"code": status_code, "message": message, "status": status}},
    )


async def fake_token() -> str:
    return "test-token"
