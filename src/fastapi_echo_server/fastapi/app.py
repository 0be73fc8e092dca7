"""Application factory for the echo service."""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from fastapi_echo_server.config import Settings
from fastapi_echo_server.core.admission import AdmissionGate
from fastapi_echo_server.exceptions import AdmissionRejectedError, HeaderValueError
from fastapi_echo_server.fastapi.errors import (
    admission_rejected_handler,
    header_value_handler,
    invalid_query_handler,
)
from fastapi_echo_server.fastapi.router import create_echo_router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the echo service application.

    Args:
        settings: Service settings (defaults to Settings()).

    Returns:
        A FastAPI app with the echo routes and error handlers installed.
        The settings and admission gate are available on ``app.state``.
    """
    settings = settings or Settings()
    gate = AdmissionGate(settings.concurrency_limit, settings.buffer_depth)

    application = FastAPI(title="Echo Server")
    application.state.settings = settings
    application.state.admission_gate = gate
    application.include_router(create_echo_router(settings, gate=gate))

    # Errors raised outside the echo chain (admission, inbound request id)
    application.add_exception_handler(RequestValidationError, invalid_query_handler)
    application.add_exception_handler(HeaderValueError, header_value_handler)
    application.add_exception_handler(AdmissionRejectedError, admission_rejected_handler)

    return application
