"""Query parameter resolution for echo requests.

Turns the optional ``status``, ``timeout`` and ``delay`` query parameters
into the status code and delay a response is produced with:
- status defaults to 200
- ``timeout`` takes priority over ``delay`` whenever it is present
- the delay is clamped to [0, MAX_DELAY_MS]
"""

from dataclasses import dataclass

DEFAULT_STATUS = 200
MAX_DELAY_MS = 120_000

# Final statuses only; 1xx cannot end a response
MIN_STATUS = 200
MAX_STATUS = 600
OUT_OF_RANGE_STATUS = 500


@dataclass(frozen=True)
class EchoQuery:
    """Raw query parameters of an echo request.

    Attributes:
        status: Requested response status.
        timeout: Requested delay in milliseconds.
        delay: Requested delay in milliseconds, used only without timeout.
    """

    status: int | None = None
    timeout: int | None = None
    delay: int | None = None


@dataclass(frozen=True)
class ResolvedEcho:
    """Status and delay an echo response is produced with."""

    status: int
    delay_ms: int

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000


def resolve_echo(query: EchoQuery, *, strict_status: bool = True) -> ResolvedEcho:
    """Resolve an EchoQuery into the status and delay to respond with.

    Args:
        query: Raw query parameters.
        strict_status: Replace statuses outside [MIN_STATUS, MAX_STATUS]
            with OUT_OF_RANGE_STATUS. When False the status is passed
            through as given.

    Returns:
        A ResolvedEcho whose delay_ms lies within [0, MAX_DELAY_MS].

    Examples:
        EchoQuery() -> ResolvedEcho(200, 0)
        EchoQuery(timeout=-5, delay=300) -> ResolvedEcho(200, 0)
        EchoQuery(status=404, delay=999_999) -> ResolvedEcho(404, 120000)
    """
    status = query.status if query.status is not None else DEFAULT_STATUS
    if strict_status and not MIN_STATUS <= status <= MAX_STATUS:
        status = OUT_OF_RANGE_STATUS

    if query.timeout is not None:
        requested = query.timeout
    elif query.delay is not None:
        requested = query.delay
    else:
        requested = 0

    return ResolvedEcho(status=status, delay_ms=min(max(requested, 0), MAX_DELAY_MS))
