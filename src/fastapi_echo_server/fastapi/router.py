"""Router factory for the echo service.

Registers the echo, help and health routes on a FastAPI APIRouter. Echo and
help routes run behind the diagnostic middleware chain; the health route
does not.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any

from fastapi import APIRouter, Request
from fastapi.routing import APIRoute
from starlette.responses import Response

from fastapi_echo_server.config import Settings
from fastapi_echo_server.core.admission import AdmissionGate
from fastapi_echo_server.core.headers import client_headers
from fastapi_echo_server.core.middleware import (
    admission_middleware,
    build_middleware_chain,
    request_id_middleware,
    response_time_middleware,
)
from fastapi_echo_server.core.resolver import EchoQuery, resolve_echo
from fastapi_echo_server.fastapi.errors import error_response_middleware

logger = logging.getLogger(__name__)

HELP = """{
  "Query": {
    "Status": "Optional Int, return 500 if status is less than 200 or greater than 600",
    "Timeout": "Optional Int, in milliseconds, capped at 120000",
    "Delay": "Optional Int, in milliseconds, has lower priority than Timeout",
    "Headers": {
      "X-Request-Id": "Request Id",
      "X-Real-IP": "Client IP, preferred over X-Forwarded-For",
      "X-Forwarded-For": "Client IP",
      "Content-Type": "Content type of the echoed body, defaults to text/plain"
    }
  },
  "Response": {
    "Status": "Status",
    "Body": "Request body for POST and PUT, empty otherwise",
    "Headers": {
      "X-Request-Id": "Request Id",
      "X-Response-Time": "Response time, in milliseconds",
      "X-Client-IP": "Client IP",
      "X-Client-User-Agent": "Client User-Agent"
    }
  }
}
"""

# Statuses whose responses must not carry a body
_NO_BODY_STATUSES = frozenset({204, 304})


def create_echo_router(
    settings: Settings | None = None,
    *,
    gate: AdmissionGate | None = None,
) -> APIRouter:
    """Create an APIRouter serving the echo service routes.

    Args:
        settings: Service settings (defaults to Settings()).
        gate: Admission gate shared by the echo routes. Built from
            settings when omitted.

    Returns:
        An APIRouter with /, /help and /healthz registered.

    Raises:
        ConfigurationError: If the admission limits are invalid.

    Example:
        from fastapi import FastAPI
        from fastapi_echo_server import create_echo_router

        app = FastAPI()
        app.include_router(create_echo_router())
    """
    settings = settings or Settings()
    if gate is None:
        gate = AdmissionGate(settings.concurrency_limit, settings.buffer_depth)

    middleware_stack = (
        admission_middleware(gate),
        request_id_middleware,
        response_time_middleware,
        error_response_middleware,
    )
    route_class = _make_middleware_route(middleware_stack)

    router = APIRouter()

    get_echo = _make_echo_handler(strict_status=settings.strict_status, echo_body=False)
    write_echo = _make_echo_handler(strict_status=settings.strict_status, echo_body=True)

    router.add_api_route(
        "/", get_echo, methods=["GET"], tags=["echo"], route_class_override=route_class
    )
    router.add_api_route(
        "/",
        write_echo,
        methods=["POST", "PUT"],
        tags=["echo"],
        route_class_override=route_class,
    )
    router.add_api_route(
        "/help", get_help, methods=["GET"], tags=["meta"], route_class_override=route_class
    )
    router.add_api_route("/healthz", healthz, methods=["GET"], tags=["meta"])

    logger.info(
        "Echo router created",
        extra={
            "middleware_count": len(middleware_stack),
            "concurrency_limit": gate.limit,
            "buffer_depth": gate.max_pending,
            "strict_status": settings.strict_status,
        },
    )

    return router


def _make_echo_handler(*, strict_status: bool, echo_body: bool) -> Callable[..., Any]:
    """Build an echo endpoint.

    Args:
        strict_status: Passed through to resolve_echo.
        echo_body: Echo the request body and its content-type back.
    """

    async def echo(
        request: Request,
        status: int | None = None,
        timeout: int | None = None,
        delay: int | None = None,
    ) -> Response:
        resolved = resolve_echo(
            EchoQuery(status=status, timeout=timeout, delay=delay),
            strict_status=strict_status,
        )

        await asyncio.sleep(resolved.delay_seconds)

        headers = client_headers(request, echo_body=echo_body)
        body = await request.body() if echo_body else b""
        if resolved.status < 200 or resolved.status in _NO_BODY_STATUSES:
            body = b""

        return Response(content=body, status_code=resolved.status, headers=headers)

    if echo_body:
        echo.__name__ = "echo_body"
        echo.__doc__ = (
            "Respond with the requested status after the requested delay, "
            "echoing the request body."
        )
    else:
        echo.__name__ = "echo"
        echo.__doc__ = "Respond with the requested status after the requested delay."
    echo.__qualname__ = echo.__name__
    return echo


async def get_help() -> Response:
    """Describe the query and header contract."""
    return Response(content=HELP, media_type="application/json")


async def healthz() -> Response:
    """Liveness check."""
    return Response(status_code=200)


def _make_middleware_route(
    middleware_stack: Sequence[Callable[..., Any]],
) -> type[APIRoute]:
    """Create a custom APIRoute subclass that wraps handlers with middleware.

    The wrapping happens in get_route_handler(), around FastAPI's own request
    handler. Query decoding happens inside the chain, so a malformed
    parameter is answered by error_response_middleware and the response
    still passes back through the diagnostic middleware.

    Args:
        middleware_stack: Ordered sequence of middleware (outermost first).

    Returns:
        A subclass of APIRoute with middleware wrapping.
    """

    class MiddlewareRoute(APIRoute):
        def get_route_handler(self) -> Callable[..., Any]:
            original_handler = super().get_route_handler()
            return build_middleware_chain(original_handler, middleware_stack)

    return MiddlewareRoute
