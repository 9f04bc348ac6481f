import math

from engine.merge import merge_positions
from engine.models import ExchangePosition, Signal, UnifiedPosition
from engine.stats import compute_aggregates, compute_history_stats


def _row(symbol: str, usdt: float, pnl: float, pct: float, source: str = "quant_bot") -> UnifiedPosition:
    return UnifiedPosition(
        id=symbol,
        symbol=symbol,
        direction="long",
        entry_price=1.0,
        current_price=1.0,
        pnl_percent=pct,
        position_usdt=usdt,
        unrealized_pnl=pnl,
        stop_loss=0.0,
        take_profit=0.0,
        confidence=50.0,
        source=source,
        market_phase="",
    )


def test_empty_set_is_zero():
    stats = compute_aggregates([])
    assert stats.total_unrealized_pnl == 0
    assert stats.total_notional == 0
    assert stats.count == 0


def test_totals_and_counts():
    rows = [_row("A", 100, 5, 2), _row("B", 50, -3, -1, "okx"), _row("C", 10, 0, 0)]
    stats = compute_aggregates(rows)
    assert stats.total_notional == 160
    assert stats.total_unrealized_pnl == sum(r.unrealized_pnl for r in rows)
    assert (stats.profitable, stats.losing) == (1, 1)
    assert stats.by_source == {"quant_bot": 2, "okx": 1}


def test_nan_treated_as_zero():
    stats = compute_aggregates([_row("A", math.nan, math.nan, math.nan), _row("B", 10, 2, 1)])
    assert stats.total_notional == 10
    assert stats.total_unrealized_pnl == 2
    assert stats.profitable == 1


def test_aggregates_over_merged_set():
    signals = [Signal(id="1", symbol="BTC", unrealized_pnl=4, position_usdt=40), Signal(id="2", symbol="ETH")]
    positions = [ExchangePosition(symbol="SOL", pnl=-2, margin=10, leverage=3, pnl_percent=-1)]
    stats = compute_aggregates(merge_positions(signals, positions))
    assert stats.total_unrealized_pnl == 2
    assert stats.total_notional == 70
    assert stats.by_source == {"quant_bot": 2, "okx": 1}


def test_history_stats():
    history = [
        Signal(id="1", symbol="A", status="tp_hit", pnl_percent=4),
        Signal(id="2", symbol="B", status="sl_hit", pnl_percent=-2, final_pnl=-3),
        Signal(id="3", symbol="C", status="manual_close", pnl_percent=1),
        Signal(id="4", symbol="D", status="tp_hit", final_pnl=2),
    ]
    stats = compute_history_stats(history)
    assert stats.total == 4
    assert (stats.tp_hit, stats.sl_hit, stats.manual_close) == (2, 1, 1)
    assert stats.total_pnl == 4
    assert stats.avg_pnl == 1
    assert stats.win_rate == 50
    assert stats.best_trade == 4
    assert stats.worst_trade == -3


def test_history_stats_empty():
    assert compute_history_stats([]) is None
