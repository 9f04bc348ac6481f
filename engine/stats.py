from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from engine.models import AggregateStats, Signal, UnifiedPosition


def _num(value: float | None) -> float:
    if value is None:
        return 0.0
    value = float(value)
    if math.isnan(value):
        return 0.0
    return value


def compute_aggregates(positions: Iterable[UnifiedPosition]) -> AggregateStats:
    stats = AggregateStats()
    for p in positions:
        stats.total_notional += _num(p.position_usdt)
        stats.total_unrealized_pnl += _num(p.unrealized_pnl)
        pnl_pct = _num(p.pnl_percent)
        if pnl_pct > 0:
            stats.profitable += 1
        elif pnl_pct < 0:
            stats.losing += 1
        stats.by_source[p.source] = stats.by_source.get(p.source, 0) + 1
    return stats


@dataclass
class HistoryStats:
    total: int
    tp_hit: int
    sl_hit: int
    manual_close: int
    total_pnl: float
    avg_pnl: float
    win_rate: float
    best_trade: float
    worst_trade: float


def effective_pnl(signal: Signal) -> float:
    # zero final_pnl falls through to pnl_percent
    return _num(signal.final_pnl) or _num(signal.pnl_percent)


def compute_history_stats(history: list[Signal]) -> HistoryStats | None:
    if not history:
        return None
    counts = {"tp_hit": 0, "sl_hit": 0, "manual_close": 0}
    total_pnl = 0.0
    best = -math.inf
    worst = math.inf
    for signal in history:
        if signal.status in counts:
            counts[signal.status] += 1
        pnl = effective_pnl(signal)
        total_pnl += pnl
        best = max(best, pnl)
        worst = min(worst, pnl)
    total = len(history)
    return HistoryStats(
        total=total,
        tp_hit=counts["tp_hit"],
        sl_hit=counts["sl_hit"],
        manual_close=counts["manual_close"],
        total_pnl=total_pnl,
        avg_pnl=total_pnl / total,
        win_rate=counts["tp_hit"] / total * 100.0,
        best_trade=best,
        worst_trade=worst,
    )
