from __future__ import annotations

from pathlib import Path

import pandas as pd

from engine.models import Signal
from engine.stats import effective_pnl


HISTORY_COLUMNS = ["symbol", "direction", "entry_price", "exit_price", "pnl", "status", "created_at", "closed_at"]


def _iso(value) -> str:
    return value.isoformat() if value else ""


def history_frame(history: list[Signal]) -> pd.DataFrame:
    rows = [
        {
            "symbol": h.symbol,
            "direction": h.direction,
            "entry_price": h.entry_price,
            "exit_price": h.current_price,
            "pnl": f"{effective_pnl(h):.2f}%",
            "status": h.status,
            "created_at": _iso(h.created_at),
            "closed_at": _iso(h.closed_at),
        }
        for h in history
    ]
    return pd.DataFrame(rows, columns=HISTORY_COLUMNS)


def export_history_csv(history: list[Signal], path: str | Path | None = None) -> str:
    csv = history_frame(history).to_csv(index=False)
    if path is not None:
        Path(path).write_text(csv, encoding="utf-8")
    return csv
