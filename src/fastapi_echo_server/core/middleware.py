"""Middleware primitives for the echo service.

Provides the diagnostic middleware (request id, response time, admission)
and middleware chain assembly. Middleware are plain async callables with
the signature ``(request, call_next)``.
"""

import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from starlette.requests import Request
from starlette.responses import Response

from fastapi_echo_server.core.admission import AdmissionGate
from fastapi_echo_server.core.headers import (
    X_REQUEST_ID,
    X_RESPONSE_TIME,
    header_value,
    new_request_id,
)

logger = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]


async def request_id_middleware(request: Request, call_next: CallNext) -> Response:
    """Propagate the inbound X-Request-ID or stamp a freshly generated one.

    The request itself is left untouched; only the response carries the id.
    """
    inbound = request.headers.get(X_REQUEST_ID)
    request_id = inbound if inbound is not None else new_request_id()

    response = await call_next(request)

    response.headers[X_REQUEST_ID] = header_value(X_REQUEST_ID, request_id)
    return response


async def response_time_middleware(request: Request, call_next: CallNext) -> Response:
    """Set X-Response-Time to the whole milliseconds spent downstream."""
    start = time.perf_counter_ns()

    response = await call_next(request)

    elapsed_ms = (time.perf_counter_ns() - start) // 1_000_000
    response.headers[X_RESPONSE_TIME] = str(elapsed_ms)

    logger.debug(
        "Request completed",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "response_time_ms": elapsed_ms,
        },
    )
    return response


def admission_middleware(gate: AdmissionGate) -> Callable[..., Any]:
    """Create a middleware that runs the rest of the chain inside an admission slot.

    Args:
        gate: Gate shared by every route the middleware is applied to.

    Returns:
        An async middleware function. Raises AdmissionRejectedError when
        the gate is saturated.
    """

    async def middleware(request: Request, call_next: CallNext) -> Response:
        async with gate.admit():
            return await call_next(request)

    middleware.__name__ = "admission"
    middleware.__qualname__ = middleware.__name__
    return middleware


def build_middleware_chain(
    handler: Callable[..., Any],
    middleware_stack: Sequence[Callable[..., Any]],
) -> Callable[..., Any]:
    """Compose middleware around a request handler.

    The first middleware in the stack runs first and sees the final
    response last. An empty stack returns the handler itself.

    Example:
        chain = build_middleware_chain(
            handler, [admission_middleware(gate), request_id_middleware]
        )
        response = await chain(request)
    """
    chain = handler
    for middleware in reversed(middleware_stack):
        chain = _bind(middleware, chain)
    return chain


def _bind(middleware: Callable[..., Any], downstream: Callable[..., Any]) -> Callable[..., Any]:
    async def stage(request: Request) -> Response:
        return await middleware(request, downstream)

    outer = getattr(middleware, "__name__", "middleware")
    inner = getattr(downstream, "__name__", "handler")
    stage.__name__ = stage.__qualname__ = f"{outer}_wrapping_{inner}"
    return stage
