from __future__ import annotations

import asyncio
from typing import Any

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from adapters.base import SourceAdapter
from engine.models import ApiResponse, ExchangePosition, ExchangeSnapshot, ExchangeStatus


_POSITIONS = TypeAdapter(list[ExchangePosition])


def _read_status(status: ApiResponse) -> bool | None:
    if not status.success or not isinstance(status.data, dict):
        logger.debug("Exchange status unavailable: {}", status.error)
        return None
    try:
        return ExchangeStatus.model_validate(status.data).connected
    except ValidationError:
        logger.debug("Exchange status payload malformed")
        return None


class PositionSource(SourceAdapter[ExchangeSnapshot]):
    name = "positions"

    @property
    def connected(self) -> bool | None:
        snapshot = self.snapshot
        return snapshot.connected if snapshot else None

    async def _request(self) -> ApiResponse:
        positions, status = await asyncio.gather(
            self.client.get("/api/okx/positions"),
            self.client.get("/api/okx/status"),
        )
        if not positions.success or positions.data is None:
            return positions
        # status rides with the positions so a stale pair is dropped together
        return positions.model_copy(
            update={"data": {"positions": positions.data, "connected": _read_status(status)}}
        )

    def _parse(self, data: Any) -> ExchangeSnapshot:
        return ExchangeSnapshot(positions=_POSITIONS.validate_python(data["positions"]), connected=data["connected"])
