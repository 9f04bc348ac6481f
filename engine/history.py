from __future__ import annotations

from typing import Literal

from engine.models import Signal
from engine.sorting import FieldSelector, SortState, arrange
from engine.stats import effective_pnl


StatusFilter = Literal["all", "tp_hit", "sl_hit", "manual_close"]

DEFAULT_HISTORY_SORT = SortState("closed_at", "desc")


def closed_or_created(signal: Signal):
    return signal.closed_at or signal.created_at


HISTORY_SELECTORS: dict[str, FieldSelector] = {
    "symbol": "symbol",
    "direction": "direction",
    "pnl_percent": effective_pnl,
    "closed_at": closed_or_created,
    "status": "status",
}


def arrange_history(
    history: list[Signal],
    state: SortState = DEFAULT_HISTORY_SORT,
    text: str = "",
    status: StatusFilter = "all",
) -> list[Signal]:
    if state.field not in HISTORY_SELECTORS:
        raise ValueError(f"Unsupported history sort field: {state.field}")
    if status != "all":
        history = [h for h in history if h.status == status]
    return arrange(history, state, text=text, selectors=HISTORY_SELECTORS)
