from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, TypeVar

from loguru import logger
from pydantic import ValidationError

from adapters.transport import BackendClient
from engine.models import ApiResponse, FetchResult
from engine.state import SnapshotCell


T = TypeVar("T")
Listener = Callable[["SourceAdapter[Any]"], None]


class SourceAdapter(ABC, Generic[T]):
    name = "source"

    def __init__(self, client: BackendClient, discard_stale: bool = True) -> None:
        self.client = client
        self.cell: SnapshotCell[T] = SnapshotCell(discard_stale=discard_stale)
        self._listeners: list[Listener] = []

    @property
    def snapshot(self) -> T | None:
        return self.cell.value

    @property
    def last_error(self) -> str | None:
        return self.cell.last_error

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    @abstractmethod
    async def _request(self) -> ApiResponse:
        raise NotImplementedError

    @abstractmethod
    def _parse(self, data: Any) -> T:
        raise NotImplementedError

    async def fetch(self) -> FetchResult[T]:
        seq = self.cell.next_seq()
        response = await self._request()
        if not response.success:
            return self._fail(seq, response.error or "Request failed")
        if response.data is None:
            return self._fail(seq, "Response has no data")
        try:
            value = self._parse(response.data)
        except (ValidationError, TypeError, ValueError) as exc:
            return self._fail(seq, f"Malformed {self.name} payload: {exc}")

        if not self.cell.apply(seq, value):
            logger.debug("Discarded stale {} response #{}", self.name, seq)
            return FetchResult(value=self.cell.value, error=self.cell.last_error, stale=True)
        self._emit()
        return FetchResult(value=value)

    def _fail(self, seq: int, error: str) -> FetchResult[T]:
        if not self.cell.fail(seq, error):
            logger.debug("Discarded stale {} error #{}: {}", self.name, seq, error)
            return FetchResult(value=self.cell.value, error=self.cell.last_error, stale=True)
        logger.warning("{} fetch failed: {}", self.name, error)
        self._emit()
        return FetchResult(value=self.cell.value, error=error)

    def _emit(self) -> None:
        for listener in self._listeners:
            listener(self)
