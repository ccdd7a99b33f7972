"""Shared test fixtures for SpoolTally backend tests."""

import os
from collections.abc import AsyncGenerator, Callable

import pytest

# IMPORTANT: Set environment variables BEFORE any app imports
# This must happen before settings/config are loaded
os.environ["LOG_TO_FILE"] = "false"
os.environ["DEBUG"] = "false"

import httpx  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from backend.app.core.config import settings  # noqa: E402

settings.log_to_file = False

from backend.app.services.moonraker import MoonrakerHistoryClient  # noqa: E402
from backend.tests.history_data import make_history_payload  # noqa: E402

TEST_PRINTER_URL = "http://printer.test"


@pytest.fixture
def history_handler() -> dict:
    """Mutable holder for the fake history service's response.

    Tests set ``status``, ``json`` or ``content``, or ``error`` to an exception
    to raise from the transport. Received requests are appended to ``requests``.
    """
    return {"status": 200, "json": make_history_payload([]), "requests": []}


@pytest.fixture
def history_transport(history_handler) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        history_handler["requests"].append(request)
        if "error" in history_handler:
            raise history_handler["error"]
        if "content" in history_handler:
            return httpx.Response(history_handler["status"], content=history_handler["content"])
        return httpx.Response(history_handler["status"], json=history_handler["json"])

    return httpx.MockTransport(handler)


@pytest.fixture
async def history_client(history_transport) -> AsyncGenerator[MoonrakerHistoryClient, None]:
    client = MoonrakerHistoryClient(TEST_PRINTER_URL, timeout=1.0, transport=history_transport)
    yield client
    await client.close()


@pytest.fixture
def roster_override() -> Callable:
    """Return a helper that swaps the spool roster used by the report route."""
    from backend.app.api.routes.report import get_spool_roster
    from backend.app.main import app

    def _override(roster):
        app.dependency_overrides[get_spool_roster] = lambda: roster

    return _override


@pytest.fixture
async def async_client(history_client) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client wired to the fake history service."""
    from backend.app.api.routes.report import history_client as history_client_dependency
    from backend.app.main import app

    async def override_history_client():
        return history_client

    app.dependency_overrides[history_client_dependency] = override_history_client

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
