from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field


Direction = Literal["long", "short"]
SignalStatus = Literal["active", "tp_hit", "sl_hit", "manual_close", "expired"]
Source = Literal["quant_bot", "okx"]

T = TypeVar("T")


class ApiResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: bool
    data: Any = None
    error: Optional[str] = None
    message: Optional[str] = None


class Signal(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    symbol: str
    direction: Direction = "long"
    entry_price: float = 0.0
    current_price: float = 0.0
    stop_loss: float = 0.0
    take_profit: float = 0.0
    confidence: float = Field(default=0.0, ge=0, le=100)
    pnl_percent: float = 0.0
    status: SignalStatus = "active"
    market_phase: str = ""
    entry_reason: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    position_size: Optional[float] = None
    position_usdt: Optional[float] = None
    unrealized_pnl: Optional[float] = None
    realized_pnl: Optional[float] = None
    final_pnl: Optional[float] = None
    source: Optional[Source] = None


class ExchangePosition(BaseModel):
    model_config = ConfigDict(extra="ignore")

    symbol: str
    size: float = 0.0
    side: Optional[Direction] = None
    entry_price: float = 0.0
    mark_price: float = 0.0
    leverage: float = 1.0
    margin: float = 0.0
    liq_price: float = 0.0
    pnl: float = 0.0
    realized_pnl: float = 0.0
    pnl_percent: float = 0.0

    @property
    def direction(self) -> Direction:
        if self.side:
            return self.side
        return "short" if self.size < 0 else "long"

    @property
    def notional(self) -> float:
        return self.margin * self.leverage


class ExchangeStatus(BaseModel):
    model_config = ConfigDict(extra="ignore")

    connected: bool = False
    enabled: bool = False
    is_demo: bool = False


class TopSignal(BaseModel):
    model_config = ConfigDict(extra="ignore")

    symbol: str
    confidence: float
    priority: float = 0.0


class DynamicInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    total_balance: float = 0.0
    optimal_positions: int = 0
    current_positions: int = 0
    available_slots: int = 0
    position_size_usdt: float = 0.0
    auto_trade_enabled: bool = False


class QueueSnapshot(BaseModel):
    model_config = ConfigDict(extra="ignore")

    queue_size: int = Field(ge=0)
    max_queue_size: int = Field(ge=0)
    total_queued: int = 0
    total_executed: int = 0
    total_expired: int = 0
    top_signals: list[TopSignal] = Field(default_factory=list)
    dynamic_info: Optional[DynamicInfo] = None

    @property
    def usage_percent(self) -> float:
        if self.max_queue_size <= 0:
            return 0.0
        return self.queue_size / self.max_queue_size * 100.0


@dataclass
class ExchangeSnapshot:
    positions: list[ExchangePosition]
    connected: bool | None = None


@dataclass(frozen=True)
class UnifiedPosition:
    id: str
    symbol: str
    direction: Direction
    entry_price: float
    current_price: float
    pnl_percent: float
    position_usdt: float
    unrealized_pnl: float
    stop_loss: float
    take_profit: float
    confidence: float
    source: Source
    market_phase: str
    created_at: datetime | None = None
    leverage: float | None = None
    liq_price: float | None = None


@dataclass
class FetchResult(Generic[T]):
    value: T | None = None
    error: str | None = None
    stale: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class AggregateStats:
    total_notional: float = 0.0
    total_unrealized_pnl: float = 0.0
    profitable: int = 0
    losing: int = 0
    by_source: dict[str, int] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return sum(self.by_source.values())
