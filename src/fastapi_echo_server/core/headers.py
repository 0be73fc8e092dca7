"""Diagnostic header composition.

Builds the client context headers echo handlers attach to their responses.
Every value goes through header_value(), which refuses anything that cannot
be written as an HTTP header value instead of letting the server fail later.
"""

import re
import uuid

from starlette.requests import Request

from fastapi_echo_server.exceptions import HeaderValueError

X_REQUEST_ID = "x-request-id"
X_RESPONSE_TIME = "x-response-time"
X_CLIENT_IP = "x-client-ip"
X_CLIENT_USER_AGENT = "x-client-user-agent"
CONTENT_TYPE = "content-type"

X_REAL_IP = "x-real-ip"
X_FORWARDED_FOR = "x-forwarded-for"
USER_AGENT = "user-agent"

DEFAULT_CONTENT_TYPE = "text/plain"

# Control characters other than horizontal tab
_ILLEGAL_HEADER_CHARS = re.compile(r"[\x00-\x08\x0a-\x1f\x7f]")


def header_value(name: str, value: str) -> str:
    """Validate a string for use as a response header value.

    Args:
        name: Header name, used in the error message.
        value: Candidate header value.

    Returns:
        The value unchanged.

    Raises:
        HeaderValueError: If the value contains control characters or
            characters outside latin-1.
    """
    if _ILLEGAL_HEADER_CHARS.search(value):
        raise HeaderValueError(name, value)
    try:
        value.encode("latin-1")
    except UnicodeEncodeError as exc:
        raise HeaderValueError(name, value) from exc
    return value


def new_request_id() -> str:
    """Generate a fresh request id."""
    return str(uuid.uuid4())


def client_ip(request: Request) -> str:
    """Return the client address as seen through proxies.

    Prefers X-Real-IP, then X-Forwarded-For (verbatim), then the transport
    peer as ``host:port``. Returns an empty string when none is known.
    """
    for name in (X_REAL_IP, X_FORWARDED_FOR):
        forwarded = request.headers.get(name)
        if forwarded is not None:
            return forwarded

    if request.client is None:
        return ""
    host, port = request.client.host, request.client.port
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def client_headers(request: Request, *, echo_body: bool = False) -> dict[str, str]:
    """Compose the client context headers for an echo response.

    Args:
        request: The inbound request.
        echo_body: Include the content-type of the echoed body.

    Returns:
        Mapping of header name to validated header value.

    Raises:
        HeaderValueError: If a derived value is not a legal header value.
    """
    headers = {
        X_CLIENT_IP: header_value(X_CLIENT_IP, client_ip(request)),
        X_CLIENT_USER_AGENT: header_value(
            X_CLIENT_USER_AGENT, request.headers.get(USER_AGENT, "")
        ),
    }
    if echo_body:
        headers[CONTENT_TYPE] = header_value(
            CONTENT_TYPE, request.headers.get(CONTENT_TYPE, DEFAULT_CONTENT_TYPE)
        )
    return headers
