"""Shared fixtures for concurrency integration tests.

Requests go through httpx.AsyncClient over ASGITransport so that many of
them are in flight on one event loop at the same time.
"""

from collections.abc import AsyncIterator, Callable

import httpx
import pytest
from fastapi import FastAPI

from fastapi_echo_server import Settings, create_app


@pytest.fixture
def make_client() -> Callable[[FastAPI], httpx.AsyncClient]:
    """Return a factory for async clients bound to an app."""

    def _make(app: FastAPI) -> httpx.AsyncClient:
        transport = httpx.ASGITransport(app=app)
        return httpx.AsyncClient(transport=transport, base_url="http://testserver")

    return _make


@pytest.fixture
async def async_client(
    make_client: Callable[[FastAPI], httpx.AsyncClient],
) -> AsyncIterator[httpx.AsyncClient]:
    """Async client for an app with default settings."""
    async with make_client(create_app(Settings())) as client:
        yield client
