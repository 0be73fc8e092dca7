"""Admission control through the HTTP surface.

With a tiny concurrency limit and buffer, requests beyond both are answered
with a 500 straight away while admitted requests complete normally.
"""

import asyncio
import time
from collections.abc import Callable

import httpx
from fastapi import FastAPI

from fastapi_echo_server import Settings, create_app


class TestAdmissionOverflow:
    """Verify overflow is rejected, not dropped."""

    async def test_overflow_without_buffer(
        self, make_client: Callable[[FastAPI], httpx.AsyncClient]
    ) -> None:
        app = create_app(Settings(concurrency_limit=1, buffer_depth=0))

        async with make_client(app) as client:
            responses = await asyncio.gather(
                *(client.get("/", params={"delay": 300}) for _ in range(2))
            )

        statuses = sorted(r.status_code for r in responses)
        assert statuses == [200, 500]
        rejected = next(r for r in responses if r.status_code == 500)
        assert "overloaded" in rejected.text

    async def test_buffer_absorbs_waiting_requests(
        self, make_client: Callable[[FastAPI], httpx.AsyncClient]
    ) -> None:
        app = create_app(Settings(concurrency_limit=1, buffer_depth=1))

        async with make_client(app) as client:
            responses = await asyncio.gather(
                *(client.get("/", params={"delay": 200}) for _ in range(3))
            )

        assert sorted(r.status_code for r in responses) == [200, 200, 500]

    async def test_buffered_request_waits_for_slot(
        self, make_client: Callable[[FastAPI], httpx.AsyncClient]
    ) -> None:
        """A buffered request runs once the slot holder finishes."""
        app = create_app(Settings(concurrency_limit=1, buffer_depth=1))

        async with make_client(app) as client:
            first = asyncio.create_task(client.get("/", params={"delay": 200}))
            await asyncio.sleep(0.05)
            waited_from = time.perf_counter()
            second = await client.get("/", params={"delay": 0})
            waited = time.perf_counter() - waited_from
            first_response = await first

        assert second.status_code == 200
        assert first_response.status_code == 200
        assert waited >= 0.1
        assert app.state.admission_gate.in_flight == 0

    async def test_healthz_bypasses_admission(
        self, make_client: Callable[[FastAPI], httpx.AsyncClient]
    ) -> None:
        app = create_app(Settings(concurrency_limit=1, buffer_depth=0))

        async with make_client(app) as client:
            slow = asyncio.create_task(client.get("/", params={"delay": 300}))
            await asyncio.sleep(0.05)
            health = await client.get("/healthz")
            rejected = await client.get("/")
            slow_response = await slow

        assert health.status_code == 200
        assert rejected.status_code == 500
        assert slow_response.status_code == 200

    async def test_slots_freed_after_burst(
        self, make_client: Callable[[FastAPI], httpx.AsyncClient]
    ) -> None:
        app = create_app(Settings(concurrency_limit=2, buffer_depth=0))

        async with make_client(app) as client:
            await asyncio.gather(
                *(client.get("/", params={"delay": 50}) for _ in range(5))
            )
            follow_up = await client.get("/")

        assert follow_up.status_code == 200
        gate = app.state.admission_gate
        assert gate.in_flight == 0
        assert gate.pending == 0
