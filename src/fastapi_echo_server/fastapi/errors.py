"""Error responses for the echo service.

The same handlers serve two places: app-level exception handlers, and the
innermost stage of the echo middleware chain, where turning errors into
responses lets the diagnostic middleware still stamp their headers.
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import PlainTextResponse, Response

from fastapi_echo_server.core.middleware import CallNext
from fastapi_echo_server.exceptions import AdmissionRejectedError, HeaderValueError

logger = logging.getLogger(__name__)


async def invalid_query_handler(
    request: Request, exc: RequestValidationError
) -> PlainTextResponse:
    """Answer malformed query parameters with 400, naming the parameters."""
    names = sorted(
        {str(error["loc"][-1]) for error in exc.errors() if error.get("loc")}
    )
    return PlainTextResponse(
        f"Invalid query parameters: {', '.join(names) or 'unknown'}",
        status_code=400,
    )


async def header_value_handler(request: Request, exc: HeaderValueError) -> PlainTextResponse:
    logger.error(
        "Header value construction failed",
        extra={"header": exc.name, "path": request.url.path},
    )
    return PlainTextResponse(str(exc), status_code=500)


async def admission_rejected_handler(
    request: Request, exc: AdmissionRejectedError
) -> PlainTextResponse:
    return PlainTextResponse(str(exc), status_code=500)


async def error_response_middleware(request: Request, call_next: CallNext) -> Response:
    """Convert query decoding and header errors into responses inside the chain."""
    try:
        return await call_next(request)
    except RequestValidationError as exc:
        return await invalid_query_handler(request, exc)
    except HeaderValueError as exc:
        return await header_value_handler(request, exc)
