from __future__ import annotations

import time
from typing import Generic, TypeVar


T = TypeVar("T")


class SnapshotCell(Generic[T]):
    """Latest value of one source; outcomes older than the last applied one are dropped."""

    def __init__(self, discard_stale: bool = True) -> None:
        self.discard_stale = discard_stale
        self._value: T | None = None
        self._last_error: str | None = None
        self._last_seq = 0
        self._next_seq = 0
        self._resolved = False
        self._updated_at: float | None = None

    @property
    def value(self) -> T | None:
        return self._value

    @property
    def last_error(self) -> str | None:
        return self._last_error

    @property
    def resolved(self) -> bool:
        return self._resolved

    @property
    def updated_at(self) -> float | None:
        return self._updated_at

    def next_seq(self) -> int:
        self._next_seq += 1
        return self._next_seq

    def is_stale(self, seq: int) -> bool:
        return self.discard_stale and seq < self._last_seq

    def apply(self, seq: int, value: T) -> bool:
        if self.is_stale(seq):
            return False
        self._last_seq = max(self._last_seq, seq)
        self._value = value
        self._last_error = None
        self._resolved = True
        self._updated_at = time.time()
        return True

    def fail(self, seq: int, error: str) -> bool:
        if self.is_stale(seq):
            return False
        self._last_seq = max(self._last_seq, seq)
        self._last_error = error
        self._resolved = True
        return True
