from __future__ import annotations

import asyncio
from typing import Any

import pytest

from engine.models import ApiResponse


async def settle(rounds: int = 50) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


class FakeClock:
    def __init__(self) -> None:
        self.sleeping: list[asyncio.Future] = []
        self.requested: list[float] = []

    async def sleep(self, seconds: float) -> None:
        self.requested.append(seconds)
        fut = asyncio.get_running_loop().create_future()
        self.sleeping.append(fut)
        await fut

    async def advance(self) -> None:
        pending, self.sleeping = self.sleeping, []
        for fut in pending:
            if not fut.done():
                fut.set_result(None)
        await settle()


class FakeBackend:
    """Stands in for BackendClient; routes map "METHOD /path" to a response or a callable.

    A GET whose key is in ``gates`` waits for that event before answering.
    """

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes: dict[str, Any] = routes or {}
        self.calls: list[str] = []
        self.gates: dict[str, asyncio.Event] = {}

    async def get(self, path: str, params: dict | None = None) -> ApiResponse:
        key = f"GET {path}"
        if key in self.gates:
            await self.gates[key].wait()
        return self._answer(key)

    async def post(self, path: str, payload: dict | None = None) -> ApiResponse:
        return self._answer(f"POST {path}")

    def _answer(self, key: str) -> ApiResponse:
        self.calls.append(key)
        route = self.routes.get(key)
        if route is None:
            return ApiResponse(success=False, error=f"no route for {key}")
        if callable(route):
            route = route()
        if isinstance(route, ApiResponse):
            return route
        return ApiResponse(success=True, data=route)

    def count(self, key: str) -> int:
        return self.calls.count(key)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()
