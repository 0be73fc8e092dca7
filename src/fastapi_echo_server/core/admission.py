"""Admission control for in-flight requests.

A fixed number of requests run at once; a bounded number more wait for a
slot. Anything beyond that is rejected straight away rather than queued.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi_echo_server.exceptions import AdmissionRejectedError, ConfigurationError

logger = logging.getLogger(__name__)


class AdmissionGate:
    """Bounds concurrently running requests with a bounded wait buffer.

    Args:
        limit: Maximum number of requests holding a slot.
        max_pending: Maximum number of requests waiting for a slot.

    Raises:
        ConfigurationError: If limit < 1 or max_pending < 0.

    Example:
        gate = AdmissionGate(limit=200, max_pending=4096)

        async with gate.admit():
            return await call_next(request)
    """

    def __init__(self, limit: int, max_pending: int) -> None:
        if limit < 1:
            raise ConfigurationError(f"concurrency limit must be at least 1, got {limit}")
        if max_pending < 0:
            raise ConfigurationError(f"buffer depth must not be negative, got {max_pending}")
        self.limit = limit
        self.max_pending = max_pending
        self._semaphore = asyncio.Semaphore(limit)
        self._in_flight = 0
        self._pending = 0

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def pending(self) -> int:
        return self._pending

    @asynccontextmanager
    async def admit(self) -> AsyncIterator[None]:
        """Hold a slot for the duration of the block.

        Raises:
            AdmissionRejectedError: If every slot is taken and the wait
                buffer is full.
        """
        if self._semaphore.locked() and self._pending >= self.max_pending:
            logger.warning(
                "Admission rejected",
                extra={"in_flight": self._in_flight, "pending": self._pending},
            )
            raise AdmissionRejectedError(self.limit, self.max_pending)

        self._pending += 1
        try:
            await self._semaphore.acquire()
        finally:
            self._pending -= 1

        self._in_flight += 1
        try:
            yield
        finally:
            self._in_flight -= 1
            self._semaphore.release()
