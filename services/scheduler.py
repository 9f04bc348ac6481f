from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from loguru import logger


Producer = Callable[[], Awaitable[Any]]
ResultHandler = Callable[[Any], None]
ErrorHandler = Callable[[BaseException], None]
Sleep = Callable[[float], Awaitable[None]]


@dataclass(eq=False)
class PollHandle:
    name: str
    producer: Producer
    interval: float
    on_result: Optional[ResultHandler] = None
    on_error: Optional[ErrorHandler] = None
    ticks: int = 0
    stopped: bool = False
    timer: Optional[asyncio.Task] = None
    in_flight: set[asyncio.Task] = field(default_factory=set)


class PollingScheduler:
    """Fixed-interval runner for async producers; ticks overlap and stop is terminal."""

    def __init__(self, sleep: Sleep = asyncio.sleep) -> None:
        self._sleep = sleep
        self._handles: list[PollHandle] = []

    @property
    def handles(self) -> list[PollHandle]:
        return list(self._handles)

    def start(
        self,
        producer: Producer,
        interval_ms: int,
        on_result: Optional[ResultHandler] = None,
        on_error: Optional[ErrorHandler] = None,
        name: str = "poll",
    ) -> PollHandle:
        if interval_ms <= 0:
            raise ValueError(f"Interval must be positive: {interval_ms}")
        handle = PollHandle(name, producer, interval_ms / 1000.0, on_result, on_error)
        self._handles.append(handle)
        self._fire(handle)
        handle.timer = asyncio.create_task(self._run(handle))
        logger.info("Polling {} every {} ms", name, interval_ms)
        return handle

    def trigger(self, handle: PollHandle) -> bool:
        if handle.stopped:
            return False
        self._fire(handle)
        return True

    def stop(self, handle: PollHandle) -> None:
        if handle.stopped:
            return
        handle.stopped = True
        if handle.timer:
            handle.timer.cancel()
        for task in list(handle.in_flight):
            task.cancel()
        if handle in self._handles:
            self._handles.remove(handle)
        logger.info("Polling {} stopped after {} ticks", handle.name, handle.ticks)

    def stop_all(self) -> None:
        for handle in list(self._handles):
            self.stop(handle)

    async def _run(self, handle: PollHandle) -> None:
        while not handle.stopped:
            await self._sleep(handle.interval)
            if handle.stopped:
                return
            self._fire(handle)

    def _fire(self, handle: PollHandle) -> None:
        handle.ticks += 1
        task = asyncio.create_task(self._invoke(handle))
        handle.in_flight.add(task)
        task.add_done_callback(handle.in_flight.discard)

    async def _invoke(self, handle: PollHandle) -> None:
        try:
            result = await handle.producer()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            if handle.stopped:
                return
            logger.warning("Polling {} failed: {}", handle.name, exc)
            if handle.on_error:
                handle.on_error(exc)
            return
        if handle.stopped or not handle.on_result:
            return
        handle.on_result(result)
