"""Shared pytest fixtures for fastapi-echo-server tests."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from fastapi_echo_server import Settings, create_app


@pytest.fixture
def settings() -> Settings:
    """Default settings, as the server would run without environment overrides."""
    return Settings()


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    """A fresh echo app built from the settings fixture."""
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Synchronous test client for the echo app."""
    return TestClient(app)
