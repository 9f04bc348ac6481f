from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter

from adapters.base import SourceAdapter
from adapters.transport import BackendClient
from engine.models import ApiResponse, Signal


_HISTORY = TypeAdapter(list[Signal])


class HistorySource(SourceAdapter[list[Signal]]):
    name = "history"

    def __init__(self, client: BackendClient, limit: int = 100, status: str | None = None, **kwargs) -> None:
        super().__init__(client, **kwargs)
        self.limit = limit
        self.status = status

    async def _request(self) -> ApiResponse:
        params: dict[str, Any] = {"limit": self.limit}
        if self.status and self.status != "all":
            params["status"] = self.status
        return await self.client.get("/api/history", params=params)

    def _parse(self, data: Any) -> list[Signal]:
        return _HISTORY.validate_python(data)
