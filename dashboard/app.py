from __future__ import annotations

import asyncio
import sys
from functools import partial

from loguru import logger

from adapters.history import HistorySource
from adapters.transport import BackendClient
from engine.models import FetchResult, Signal
from engine.sorting import SortState
from engine.stats import compute_history_stats
from services.activity import ActivityLog
from services.config_service import ConfigService, DashboardSettings
from services.queue_view import QueueStatusView
from services.reconciler import LiveReconciler
from services.scheduler import PollingScheduler
from views import messages
from views.export import export_history_csv


def render(
    reconciler: LiveReconciler,
    queue_view: QueueStatusView,
    state: SortState,
    history: HistorySource | None = None,
) -> str:
    parts = [
        messages.positions_text(reconciler.view(state)),
        messages.connection_text(reconciler.positions.connected) + "\n" + messages.stats_text(reconciler.stats),
        messages.queue_text(queue_view.snapshot, queue_view.error),
    ]
    if history is not None and history.cell.resolved:
        parts.append(messages.history_stats_text(compute_history_stats(history.snapshot or [])))
    errors = dict(reconciler.errors)
    if history is not None and history.last_error:
        errors[history.name] = history.last_error
    if errors:
        parts.append(messages.errors_text(errors))
    return "\n\n".join(parts)


def save_history(result: FetchResult[list[Signal]], path: str) -> None:
    if not result.ok or result.stale or result.value is None:
        return
    export_history_csv(result.value, path)
    logger.debug("History exported to {} ({} rows)", path, len(result.value))


async def main() -> None:
    settings = DashboardSettings()
    config = ConfigService(settings).load()
    logger.remove()
    logger.add(sys.stderr, level=config.log_level)

    client = BackendClient(config.api_base_url, timeout=config.request_timeout)
    scheduler = PollingScheduler()
    activity = ActivityLog(limit=config.activity_window)
    reconciler = LiveReconciler(client, scheduler, config, activity)
    queue_view = QueueStatusView(client, scheduler, config.queue_poll_ms, discard_stale=config.discard_stale)
    history = HistorySource(client, limit=config.history_limit, discard_stale=config.discard_stale)
    sort_state = SortState("pnl_percent", "desc")

    activity.add("INFO", f"Dashboard starting against {config.api_base_url}")
    reconciler.start()
    queue_view.start()
    on_history = partial(save_history, path=config.history_csv_path) if config.history_csv_path else None
    scheduler.start(history.fetch, config.history_poll_ms, on_result=on_history, name="history")
    try:
        while True:
            await asyncio.sleep(config.render_interval_ms / 1000.0)
            logger.info("\n{}", render(reconciler, queue_view, sort_state, history))
    finally:
        scheduler.stop_all()
        logger.info("Dashboard stopped")


def run() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
