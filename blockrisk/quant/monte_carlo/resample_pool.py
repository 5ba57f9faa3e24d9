"""
Resample Pool Construction
==========================

Turns a trade history into the flat numeric pool that paths are
bootstrap-sampled from:
- trades: one P&L value per trade
- daily: P&L summed per calendar day of open
- percentage: P&L as a fraction of the capital at trade time (compounding)

All pools are chronological so that a resample window keeps the most
recent entries.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from ...models.simulation import ResampleMethod
from ...models.trade import Trade


logger = logging.getLogger(__name__)

ALL_STRATEGIES = "all"


@dataclass(frozen=True, eq=False)
class ResamplePool:
    """Flat pool of values to bootstrap from."""
    values: np.ndarray
    method: ResampleMethod

    @property
    def size(self) -> int:
        return len(self.values)

    @property
    def is_percentage(self) -> bool:
        return self.method == ResampleMethod.PERCENTAGE

    def extended(self, extra: Sequence[float]) -> "ResamplePool":
        """New pool with extra values appended."""
        return ResamplePool(
            values=np.concatenate([self.values, np.asarray(extra, dtype=float)]),
            method=self.method,
        )


def scale_trade_to_one_lot(trade: Trade) -> float:
    """P&L per contract; unscaled when the contract count is not positive."""
    if trade.num_contracts <= 0:
        return trade.pl
    return trade.pl / trade.num_contracts


def trade_pl(trade: Trade, normalize_to_1_lot: bool = False) -> float:
    return scale_trade_to_one_lot(trade) if normalize_to_1_lot else trade.pl


def filter_trades_by_strategy(
    trades: Sequence[Trade],
    strategy: Optional[str] = None
) -> List[Trade]:
    """Keep trades of one strategy; None or "all" keeps everything."""
    if not strategy or strategy == ALL_STRATEGIES:
        return list(trades)
    filtered = [trade for trade in trades if trade.strategy == strategy]
    if not filtered:
        logger.warning(f"Strategy filter '{strategy}' matched no trades")
    return filtered


def sort_trades_chronologically(trades: Sequence[Trade]) -> List[Trade]:
    """Stable sort by open timestamp."""
    return sorted(trades, key=lambda trade: trade.opened_at)


def apply_resample_window(
    values: Sequence[float],
    resample_window: Optional[int] = None
) -> np.ndarray:
    """Keep only the most recent `resample_window` entries."""
    values = np.asarray(values, dtype=float)
    if resample_window is not None and 0 < resample_window < len(values):
        return values[-resample_window:]
    return values


def get_trade_resample_pool(
    trades: Sequence[Trade],
    resample_window: Optional[int] = None,
    strategy: Optional[str] = None
) -> List[Trade]:
    """
    Get the trades to resample from.

    Args:
        trades: All available trades
        resample_window: Number of recent trades to use (None = all)
        strategy: Optional strategy filter

    Returns:
        Chronologically sorted trades, limited to the window
    """
    ordered = sort_trades_chronologically(filter_trades_by_strategy(trades, strategy))
    if resample_window is not None and 0 < resample_window < len(ordered):
        return ordered[-resample_window:]
    return ordered


def calculate_daily_returns(
    trades: Sequence[Trade],
    normalize_to_1_lot: bool = False
) -> pd.Series:
    """
    Sum P&L per calendar day of open.

    Args:
        trades: Trades to aggregate
        normalize_to_1_lot: Whether to scale P&L to 1-lot

    Returns:
        Series of daily P&L indexed by ISO date (YYYY-MM-DD), ascending
    """
    if not trades:
        return pd.Series([], dtype=float, name="daily_pl")

    frame = pd.DataFrame({
        "date": [trade.trading_day for trade in trades],
        "pl": [trade_pl(trade, normalize_to_1_lot) for trade in trades],
    })
    daily = frame.groupby("date", sort=True)["pl"].sum()
    daily.name = "daily_pl"
    return daily


def calculate_percentage_returns(
    trades: Sequence[Trade],
    normalize_to_1_lot: bool = False,
    initial_capital: Optional[float] = None
) -> np.ndarray:
    """
    Express each trade's P&L as a fraction of the capital at trade time.

    For a strategy filtered out of a multi-strategy account, funds_at_close
    includes the other strategies' P&L, so the strategy's own starting
    capital must be passed as `initial_capital`. Otherwise the starting
    capital is inferred from the first trade.

    Args:
        trades: Trades to convert
        normalize_to_1_lot: Whether to scale P&L to 1-lot first
        initial_capital: Starting capital for this strategy

    Returns:
        Array of decimal returns (0.05 = 5%), chronological
    """
    if not trades:
        return np.array([], dtype=float)

    ordered = sort_trades_chronologically(trades)

    if initial_capital is not None and initial_capital > 0:
        capital = initial_capital
    else:
        capital = ordered[0].capital_before_trade

    returns = []
    for trade in ordered:
        if capital <= 0:
            # Busted account: no further growth to measure
            returns.append(0.0)
            continue
        pl = trade_pl(trade, normalize_to_1_lot)
        returns.append(pl / capital)
        capital += pl

    return np.array(returns, dtype=float)


def build_resample_pool(
    trades: Sequence[Trade],
    method: ResampleMethod = ResampleMethod.TRADES,
    resample_window: Optional[int] = None,
    strategy: Optional[str] = None,
    normalize_to_1_lot: bool = False,
    historical_initial_capital: Optional[float] = None
) -> ResamplePool:
    """
    Build the bootstrap pool for a resample method.

    Args:
        trades: Full trade history
        method: 'trades', 'daily' or 'percentage'
        resample_window: Keep only the most recent N pool entries
        strategy: Optional strategy filter
        normalize_to_1_lot: Scale P&L to one contract
        historical_initial_capital: Starting capital for percentage mode

    Returns:
        ResamplePool (may be smaller than the engine minimum)
    """
    method = ResampleMethod(method)
    filtered = sort_trades_chronologically(filter_trades_by_strategy(trades, strategy))

    if method == ResampleMethod.TRADES:
        values = [trade_pl(trade, normalize_to_1_lot) for trade in filtered]
    elif method == ResampleMethod.DAILY:
        values = calculate_daily_returns(filtered, normalize_to_1_lot).to_numpy(dtype=float)
    else:
        values = calculate_percentage_returns(
            filtered, normalize_to_1_lot, historical_initial_capital
        )

    pool = ResamplePool(values=apply_resample_window(values, resample_window), method=method)
    logger.debug(f"Built {method.value} resample pool with {pool.size} values")
    return pool
