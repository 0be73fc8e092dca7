"""Exception hierarchy for echo server errors."""


class EchoServerError(Exception):
    """Base exception for all echo server errors.

    Catching this exception will catch every error raised by the
    fastapi-echo-server package.
    """


class ConfigurationError(EchoServerError):
    """Raised when settings are invalid at startup.

    Example:
        ConfigurationError("ECHO_PORT must be an integer, got 'abc'")
    """


class HeaderValueError(EchoServerError):
    """Raised when a computed value cannot be sent as a header value.

    Header values may not contain control characters (other than a
    horizontal tab) and must be encodable as latin-1. Derived values such as
    the client IP or user-agent are copied from request headers, so a
    malformed inbound header surfaces here and becomes a 500 response.

    Example:
        HeaderValueError("x-client-user-agent", "curl\\x01")
    """

    def __init__(self, name: str, value: str) -> None:
        super().__init__(f"Invalid value for header {name}: {value!r}")
        self.name = name
        self.value = value


class AdmissionRejectedError(EchoServerError):
    """Raised when a request arrives while every slot and buffer entry is taken.

    Example:
        AdmissionRejectedError(limit=200, max_pending=4096)
    """

    def __init__(self, limit: int, max_pending: int) -> None:
        super().__init__(
            f"Service overloaded: {limit} requests in flight "
            f"and {max_pending} requests waiting"
        )
        self.limit = limit
        self.max_pending = max_pending
