"""HTTP echo service with controllable status, delay and diagnostic headers."""

# Primary API: the main entry points
from fastapi_echo_server.config import Settings, configure_logging

# Core types: for embedding and testing
from fastapi_echo_server.core.admission import AdmissionGate
from fastapi_echo_server.core.middleware import (
    admission_middleware,
    build_middleware_chain,
    request_id_middleware,
    response_time_middleware,
)
from fastapi_echo_server.core.resolver import (
    MAX_DELAY_MS,
    EchoQuery,
    ResolvedEcho,
    resolve_echo,
)

# Exceptions: for error handling
from fastapi_echo_server.exceptions import (
    AdmissionRejectedError,
    ConfigurationError,
    EchoServerError,
    HeaderValueError,
)
from fastapi_echo_server.fastapi.app import create_app
from fastapi_echo_server.fastapi.router import create_echo_router

__all__ = [
    # Primary API
    "create_app",
    "create_echo_router",
    "Settings",
    "configure_logging",
    # Core types
    "AdmissionGate",
    "EchoQuery",
    "MAX_DELAY_MS",
    "ResolvedEcho",
    "resolve_echo",
    "admission_middleware",
    "build_middleware_chain",
    "request_id_middleware",
    "response_time_middleware",
    # Exceptions
    "AdmissionRejectedError",
    "ConfigurationError",
    "EchoServerError",
    "HeaderValueError",
]

__version__ = "1.0.0"
