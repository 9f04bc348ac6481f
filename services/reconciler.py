from __future__ import annotations

from typing import Any

from loguru import logger

from adapters.positions import PositionSource
from adapters.signals import SignalSource
from adapters.transport import BackendClient
from engine.merge import is_exchange_only_id, merge_positions
from engine.models import AggregateStats, ApiResponse, UnifiedPosition
from engine.sorting import SortState, arrange
from engine.stats import compute_aggregates
from services.activity import ActivityLog
from services.config_service import DashboardConfig
from services.scheduler import PollHandle, PollingScheduler


class LiveReconciler:
    """Keeps the unified position set in step with both feeds once each has answered."""

    def __init__(
        self,
        client: BackendClient,
        scheduler: PollingScheduler,
        config: DashboardConfig,
        activity: ActivityLog | None = None,
    ) -> None:
        self.client = client
        self.scheduler = scheduler
        self.config = config
        self.activity = activity
        self.signals = SignalSource(client, discard_stale=config.discard_stale)
        self.positions = PositionSource(client, discard_stale=config.discard_stale)
        self.signals.subscribe(self._on_source_change)
        self.positions.subscribe(self._on_source_change)
        self._handles: dict[str, PollHandle] = {}
        self._merged: list[UnifiedPosition] = []
        self._stats = AggregateStats()
        self._merge_count = 0

    @property
    def ready(self) -> bool:
        return self.signals.cell.resolved and self.positions.cell.resolved

    @property
    def unified(self) -> list[UnifiedPosition]:
        return list(self._merged)

    @property
    def stats(self) -> AggregateStats:
        return self._stats

    @property
    def merge_count(self) -> int:
        return self._merge_count

    @property
    def errors(self) -> dict[str, str]:
        errors = {}
        for source in (self.signals, self.positions):
            if source.last_error:
                errors[source.name] = source.last_error
        return errors

    @property
    def running(self) -> bool:
        return bool(self._handles)

    def start(self) -> None:
        if self._handles:
            return
        self._handles["signals"] = self.scheduler.start(
            self.signals.fetch, self.config.signal_poll_ms, on_error=self._on_poll_error, name="signals"
        )
        self._handles["positions"] = self.scheduler.start(
            self.positions.fetch, self.config.position_poll_ms, on_error=self._on_poll_error, name="positions"
        )
        logger.info("Reconciler started")

    def stop(self) -> None:
        for handle in self._handles.values():
            self.scheduler.stop(handle)
        self._handles.clear()
        logger.info("Reconciler stopped")

    def refresh(self) -> None:
        for handle in self._handles.values():
            self.scheduler.trigger(handle)

    def recompute(self) -> list[UnifiedPosition]:
        signals = self.signals.snapshot or []
        exchange = self.positions.snapshot
        self._merged = merge_positions(signals, exchange.positions if exchange else [])
        self._stats = compute_aggregates(self._merged)
        self._merge_count += 1
        return self.unified

    def view(self, state: SortState, text: str = "") -> list[UnifiedPosition]:
        return arrange(self._merged, state, text=text)

    async def close_position(self, position_id: str) -> ApiResponse:
        if is_exchange_only_id(position_id):
            symbol = next((p.symbol for p in self._merged if p.id == position_id), None)
            if symbol is None:
                return ApiResponse(success=False, error=f"Unknown position: {position_id}")
            response = await self.client.post(f"/api/okx/close/{symbol}")
        else:
            response = await self.client.post(f"/api/signals/close/{position_id}")
        if response.success:
            logger.info("Closed position {}", position_id)
            if self.activity:
                self.activity.add("SUCCESS", f"Closed position {position_id}")
            self.refresh()
        else:
            logger.warning("Close position {} failed: {}", position_id, response.error)
            if self.activity:
                self.activity.add("ERROR", f"Close failed for {position_id}: {response.error}")
        return response

    def _on_source_change(self, source: Any) -> None:
        if source is self.signals and self.activity and source.snapshot is not None and source.last_error is None:
            self.activity.observe_signals(source.snapshot)
        if self.ready:
            self.recompute()

    def _on_poll_error(self, exc: BaseException) -> None:
        if self.activity:
            self.activity.add("ERROR", f"API error: {exc}")
