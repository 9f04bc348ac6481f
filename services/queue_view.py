from __future__ import annotations

from loguru import logger

from adapters.queue import QueueSource
from adapters.transport import BackendClient
from engine.models import ApiResponse, QueueSnapshot
from services.scheduler import PollHandle, PollingScheduler
from views import messages


class QueueStatusView:
    def __init__(
        self,
        client: BackendClient,
        scheduler: PollingScheduler,
        interval_ms: int = 5000,
        discard_stale: bool = True,
    ) -> None:
        self.source = QueueSource(client, discard_stale=discard_stale)
        self.scheduler = scheduler
        self.interval_ms = interval_ms
        self._handle: PollHandle | None = None

    @property
    def snapshot(self) -> QueueSnapshot | None:
        return self.source.snapshot

    @property
    def error(self) -> str | None:
        return self.source.last_error

    @property
    def loading(self) -> bool:
        return not self.source.cell.resolved

    def start(self) -> None:
        if self._handle and not self._handle.stopped:
            return
        self._handle = self.scheduler.start(self.source.fetch, self.interval_ms, name="queue")

    def stop(self) -> None:
        if self._handle:
            self.scheduler.stop(self._handle)

    async def clear(self) -> ApiResponse:
        return self._confirm("clear", await self.source.clear())

    async def process(self) -> ApiResponse:
        return self._confirm("process", await self.source.process())

    def render(self) -> str:
        return messages.queue_text(self.snapshot, self.error)

    def _confirm(self, command: str, response: ApiResponse) -> ApiResponse:
        if not response.success:
            logger.warning("Queue {} failed: {}", command, response.error)
            return response
        logger.info("Queue {} accepted: {}", command, response.message or "ok")
        if self._handle:
            self.scheduler.trigger(self._handle)
        return response
