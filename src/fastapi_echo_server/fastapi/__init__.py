"""FastAPI adapter for the echo service."""

from fastapi_echo_server.fastapi.app import create_app
from fastapi_echo_server.fastapi.router import create_echo_router

__all__ = ["create_app", "create_echo_router"]
