from __future__ import annotations

from typing import Any

from loguru import logger
from pydantic import TypeAdapter

from adapters.base import SourceAdapter
from engine.models import ApiResponse, Signal


_SIGNALS = TypeAdapter(list[Signal])


class SignalSource(SourceAdapter[list[Signal]]):
    name = "signals"

    async def _request(self) -> ApiResponse:
        # price refresh first; its outcome does not gate the read
        update = await self.client.post("/api/signals/update")
        if not update.success:
            logger.debug("Signal price update failed: {}", update.error)
        return await self.client.get("/api/signals")

    def _parse(self, data: Any) -> list[Signal]:
        return _SIGNALS.validate_python(data)
