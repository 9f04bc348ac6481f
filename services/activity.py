from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Literal

from loguru import logger

from engine.models import Signal


LogLevel = Literal["INFO", "WARN", "ERROR", "SUCCESS", "DEBUG", "SIGNAL"]

_LOGURU_LEVELS = {
    "INFO": "INFO",
    "WARN": "WARNING",
    "ERROR": "ERROR",
    "SUCCESS": "SUCCESS",
    "DEBUG": "DEBUG",
    "SIGNAL": "INFO",
}


@dataclass
class ActivityEntry:
    timestamp: datetime
    level: LogLevel
    message: str
    data: Any = None


class ActivityLog:
    def __init__(self, limit: int = 100) -> None:
        self._entries: deque[ActivityEntry] = deque(maxlen=limit)
        self._known_ids: set[str] = set()

    @property
    def entries(self) -> list[ActivityEntry]:
        return list(self._entries)

    def add(self, level: LogLevel, message: str, data: Any = None) -> ActivityEntry:
        entry = ActivityEntry(datetime.now(timezone.utc), level, message, data)
        self._entries.append(entry)
        logger.log(_LOGURU_LEVELS[level], message)
        return entry

    def clear(self) -> None:
        self._entries.clear()

    def filter(self, level: str = "ALL") -> list[ActivityEntry]:
        if level == "ALL":
            return self.entries
        return [e for e in self._entries if e.level == level]

    def observe_signals(self, signals: Iterable[Signal]) -> None:
        signals = list(signals)
        current = {s.id for s in signals}
        for s in signals:
            if s.id not in self._known_ids:
                self.add("SIGNAL", f"New signal: {s.symbol} {s.direction.upper()} ({s.confidence:.0f}%)", s)
        for signal_id in sorted(self._known_ids - current):
            self.add("SUCCESS", f"Signal closed: {signal_id[:8]}")
        self._known_ids = current
