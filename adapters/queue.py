from __future__ import annotations

from typing import Any

from adapters.base import SourceAdapter
from engine.models import ApiResponse, QueueSnapshot


class QueueSource(SourceAdapter[QueueSnapshot]):
    name = "queue"

    async def _request(self) -> ApiResponse:
        return await self.client.get("/api/queue/status")

    def _parse(self, data: Any) -> QueueSnapshot:
        snapshot = QueueSnapshot.model_validate(data)
        ranked = sorted(snapshot.top_signals, key=lambda s: s.confidence, reverse=True)
        return snapshot.model_copy(update={"top_signals": ranked})

    async def clear(self) -> ApiResponse:
        return await self.client.post("/api/queue/clear")

    async def process(self) -> ApiResponse:
        return await self.client.post("/api/queue/process")
