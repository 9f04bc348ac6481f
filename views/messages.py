from __future__ import annotations

from engine.models import AggregateStats, QueueSnapshot, UnifiedPosition
from engine.stats import HistoryStats


def format_price(price: float) -> str:
    if price >= 1000:
        return f"{price:,.2f}"
    if price >= 1:
        return f"{price:.4f}"
    return f"{price:.6f}"


def format_pct(value: float) -> str:
    return f"{value:+.2f}%"


def positions_text(positions: list[UnifiedPosition]) -> str:
    if not positions:
        return "No positions"
    lines = []
    for p in positions:
        lines.append(
            f"{p.symbol:<10} {p.direction.upper():<5} "
            f"{format_price(p.entry_price)} -> {format_price(p.current_price)} "
            f"{format_pct(p.pnl_percent)} ${p.unrealized_pnl:.2f} "
            f"[{p.source}] conf {p.confidence:.0f}%"
        )
    return "\n".join(lines)


def stats_text(stats: AggregateStats) -> str:
    sources = ", ".join(f"{k}={v}" for k, v in sorted(stats.by_source.items())) or "none"
    return (
        f"Positions: {stats.count} ({sources})\n"
        f"Notional: ${stats.total_notional:,.2f}\n"
        f"Unrealized PnL: ${stats.total_unrealized_pnl:,.2f}\n"
        f"Profitable/Losing: {stats.profitable}/{stats.losing}"
    )


def connection_text(connected: bool | None) -> str:
    if connected is None:
        return "Exchange: unknown"
    return "Exchange: connected" if connected else "Exchange: disconnected"


def history_stats_text(stats: HistoryStats | None) -> str:
    if stats is None:
        return "History: no closed trades"
    return (
        f"History: {stats.total} trades (TP {stats.tp_hit} / SL {stats.sl_hit} / manual {stats.manual_close})\n"
        f"Win rate: {stats.win_rate:.1f}% | Total {format_pct(stats.total_pnl)} | Avg {format_pct(stats.avg_pnl)}\n"
        f"Best {format_pct(stats.best_trade)} | Worst {format_pct(stats.worst_trade)}"
    )


def errors_text(errors: dict[str, str]) -> str:
    return "\n".join(f"{name}: {error} (showing last known data)" for name, error in sorted(errors.items()))


def queue_text(snapshot: QueueSnapshot | None, error: str | None = None) -> str:
    if snapshot is None:
        return f"Signal queue error: {error}" if error else "Signal queue: loading"
    lines = [
        f"Queue: {snapshot.queue_size}/{snapshot.max_queue_size} ({snapshot.usage_percent:.0f}%)",
        f"Queued {snapshot.total_queued} | Executed {snapshot.total_executed} | Expired {snapshot.total_expired}",
    ]
    info = snapshot.dynamic_info
    if info:
        lines.append(
            f"Balance ${info.total_balance:,.2f} | Slots {info.available_slots} "
            f"({info.current_positions}/{info.optimal_positions}) | "
            f"${info.position_size_usdt:,.2f}/slot | Auto-trade {'on' if info.auto_trade_enabled else 'off'}"
        )
    if snapshot.top_signals:
        for i, s in enumerate(snapshot.top_signals, start=1):
            lines.append(f"{i}. {s.symbol} {s.confidence:.1f}%")
    else:
        lines.append("No pending signals")
    if error:
        lines.append(f"Last error: {error}")
    return "\n".join(lines)
