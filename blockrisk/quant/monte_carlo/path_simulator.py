"""
Single-path equity simulation and path-level risk metrics.

Equity curves are stored as cumulative returns relative to the starting
capital. Dollar pools add to capital; percentage pools compound it.
"""

import math
from typing import Sequence

import numpy as np

from ...models.simulation import SimulationPath


def calculate_max_drawdown(equity_curve: Sequence[float]) -> float:
    """
    Maximum peak-to-trough decline of a cumulative-return curve.

    The starting capital (0% return) is the initial peak. Drawdown is
    measured in value space: (peak - r) / (1 + peak).

    Args:
        equity_curve: Cumulative returns (0.5 = 50% gain)

    Returns:
        Maximum drawdown as a positive decimal (0.2 = 20% drawdown)
    """
    curve = np.asarray(equity_curve, dtype=float)
    if len(curve) == 0:
        return 0.0

    peaks = np.maximum.accumulate(np.concatenate([[0.0], curve]))[1:]
    valid = peaks > -1
    if not np.any(valid):
        return 0.0

    drawdowns = (peaks[valid] - curve[valid]) / (1 + peaks[valid])
    return float(max(0.0, drawdowns.max()))


def calculate_sharpe_ratio(returns: Sequence[float], periods_per_year: float) -> float:
    """
    Annualized Sharpe ratio (risk-free rate of 0) from per-step returns.

    Uses the sample standard deviation; 0 for fewer than two returns or
    zero volatility.
    """
    returns = np.asarray(returns, dtype=float)
    if len(returns) < 2:
        return 0.0

    std = returns.std(ddof=1)
    if std == 0:
        return 0.0
    return float(returns.mean() / std * math.sqrt(periods_per_year))


def annualize_return(total_return: float, num_steps: int, trades_per_year: float) -> float:
    """
    Compound a total return to a yearly rate over num_steps / trades_per_year years.

    A path that lost more than all its capital annualizes to -100%.
    """
    years_elapsed = num_steps / trades_per_year
    if years_elapsed <= 0:
        return total_return
    growth = 1 + total_return
    if growth <= 0:
        return -1.0
    return growth ** (1 / years_elapsed) - 1


def simulate_path(
    values: Sequence[float],
    initial_capital: float,
    trades_per_year: float,
    percentage_mode: bool = False
) -> SimulationPath:
    """
    Run one resampled sequence through the account and measure it.

    Args:
        values: Resampled dollar P&L, or decimal returns in percentage mode
        initial_capital: Starting capital
        trades_per_year: Steps per year for annualization
        percentage_mode: Compound decimal returns instead of adding dollars

    Returns:
        SimulationPath with equity curve and metrics
    """
    values = np.asarray(values, dtype=float)

    # Accumulate from the starting capital so each step rounds like a running total
    if percentage_mode:
        capital = np.cumprod(np.concatenate([[initial_capital], 1 + values]))
    else:
        capital = np.cumsum(np.concatenate([[initial_capital], values]))

    before, after = capital[:-1], capital[1:]
    step_returns = np.divide(
        after, before, out=np.ones_like(after), where=before > 0
    ) - 1

    equity_curve = (after - initial_capital) / initial_capital
    equity_curve.flags.writeable = False

    final_value = float(capital[-1])
    total_return = (final_value - initial_capital) / initial_capital

    return SimulationPath(
        equity_curve=equity_curve,
        final_value=final_value,
        total_return=total_return,
        annualized_return=annualize_return(total_return, len(values), trades_per_year),
        max_drawdown=calculate_max_drawdown(equity_curve),
        sharpe_ratio=calculate_sharpe_ratio(step_returns, trades_per_year),
    )
