from __future__ import annotations

from typing import Iterable

from loguru import logger

from engine.models import ExchangePosition, Signal, UnifiedPosition


EXCHANGE_ID_PREFIX = "okx_"
EXCHANGE_PHASE = "OKX"
EXCHANGE_CONFIDENCE = 100.0


def exchange_position_id(symbol: str) -> str:
    return f"{EXCHANGE_ID_PREFIX}{symbol}"


def is_exchange_only_id(position_id: str) -> bool:
    return position_id.startswith(EXCHANGE_ID_PREFIX)


def build_unified_position(signal: Signal | None, position: ExchangePosition | None) -> UnifiedPosition:
    """Build the single display row for one symbol.

    Exchange data, when present, owns live pricing and pnl. The signal, when
    present, owns identity, risk levels, confidence and age.
    """
    if signal is None and position is None:
        raise ValueError("Unified position needs a signal or an exchange position")

    if signal is None:
        return UnifiedPosition(
            id=exchange_position_id(position.symbol),
            symbol=position.symbol,
            direction=position.direction,
            entry_price=position.entry_price,
            current_price=position.mark_price,
            pnl_percent=position.pnl_percent,
            position_usdt=position.notional,
            unrealized_pnl=position.pnl,
            stop_loss=0.0,
            take_profit=0.0,
            confidence=EXCHANGE_CONFIDENCE,
            source="okx",
            market_phase=EXCHANGE_PHASE,
            created_at=None,
            leverage=position.leverage,
            liq_price=position.liq_price,
        )

    if position is not None and position.symbol != signal.symbol:
        raise ValueError(f"Symbol mismatch: {signal.symbol} != {position.symbol}")

    if position is None:
        return UnifiedPosition(
            id=signal.id,
            symbol=signal.symbol,
            direction=signal.direction,
            entry_price=signal.entry_price,
            current_price=signal.current_price,
            pnl_percent=signal.pnl_percent,
            position_usdt=signal.position_usdt or 0.0,
            unrealized_pnl=signal.unrealized_pnl or 0.0,
            stop_loss=signal.stop_loss,
            take_profit=signal.take_profit,
            confidence=signal.confidence,
            source=signal.source or "quant_bot",
            market_phase=signal.market_phase,
            created_at=signal.created_at,
        )

    return UnifiedPosition(
        id=signal.id,
        symbol=signal.symbol,
        direction=signal.direction,
        entry_price=signal.entry_price,
        current_price=position.mark_price,
        pnl_percent=position.pnl_percent,
        position_usdt=position.notional,
        unrealized_pnl=position.pnl,
        stop_loss=signal.stop_loss,
        take_profit=signal.take_profit,
        confidence=signal.confidence,
        source="okx",
        market_phase=signal.market_phase,
        created_at=signal.created_at,
        leverage=position.leverage,
        liq_price=position.liq_price,
    )


def merge_positions(signals: Iterable[Signal], positions: Iterable[ExchangePosition]) -> list[UnifiedPosition]:
    by_symbol: dict[str, ExchangePosition] = {}
    for position in positions:
        if position.symbol in by_symbol:
            logger.debug("Duplicate exchange position for {} ignored", position.symbol)
            continue
        by_symbol[position.symbol] = position

    merged: list[UnifiedPosition] = []
    seen: set[str] = set()
    for signal in signals:
        if signal.symbol in seen:
            logger.debug("Duplicate signal for {} ignored ({})", signal.symbol, signal.id)
            continue
        seen.add(signal.symbol)
        merged.append(build_unified_position(signal, by_symbol.get(signal.symbol)))

    for symbol, position in by_symbol.items():
        if symbol in seen:
            continue
        seen.add(symbol)
        merged.append(build_unified_position(None, position))
    return merged
