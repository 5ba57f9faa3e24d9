"""
Cross-path aggregation: percentile bands and summary statistics.
"""

import math
from typing import Sequence, Union

import numpy as np

from ...models.simulation import (
    PercentileBand,
    SimulationPath,
    SimulationStatistics,
    ValueAtRisk,
)


BAND_LEVELS = (5, 25, 50, 75, 95)
VAR_LEVELS = (5, 10, 25)


def percentile(sorted_data: Sequence, p: float) -> Union[float, np.ndarray]:
    """
    Linear-interpolation percentile of data sorted ascending along axis 0.

    index = p / 100 * (n - 1), interpolated between the neighbouring
    entries. A 2-D input yields one percentile per column.

    Args:
        sorted_data: Values sorted ascending (1-D, or 2-D sorted per column)
        p: Percentile (0-100)

    Returns:
        Percentile value (array for 2-D input); 0 for empty data
    """
    data = np.asarray(sorted_data, dtype=float)
    n = data.shape[0]
    if n == 0:
        return 0.0

    index = p / 100 * (n - 1)
    lower = math.floor(index)
    upper = min(math.ceil(index), n - 1)
    weight = index - lower

    low, high = data[lower], data[upper]
    # Clipped to the bracketing values so ordered levels stay ordered under rounding
    value = np.clip(low + (high - low) * weight, low, high)
    if data.ndim == 1:
        return float(value)
    return value


def calculate_percentiles(simulations: Sequence[SimulationPath]) -> PercentileBand:
    """
    Calculate percentile curves across all simulations.

    Args:
        simulations: Simulated paths, all of the same length

    Returns:
        PercentileBand with P5, P25, P50, P75, P95 per step
    """
    if not simulations:
        raise ValueError("No simulations to calculate percentiles from")

    curves = np.sort(np.vstack([sim.equity_curve for sim in simulations]), axis=0)
    bands = {f"p{level}": percentile(curves, level) for level in BAND_LEVELS}

    return PercentileBand(
        steps=np.arange(1, curves.shape[1] + 1),
        **bands
    )


def calculate_statistics(simulations: Sequence[SimulationPath]) -> SimulationStatistics:
    """
    Calculate aggregate statistics from all simulations.

    Args:
        simulations: Simulated paths

    Returns:
        SimulationStatistics including VaR at the 5th, 10th and 25th percentiles
    """
    if not simulations:
        raise ValueError("No simulations to calculate statistics from")

    final_values = np.array([s.final_value for s in simulations])
    total_returns = np.array([s.total_return for s in simulations])
    annualized_returns = np.array([s.annualized_return for s in simulations])
    max_drawdowns = np.array([s.max_drawdown for s in simulations])
    sharpe_ratios = np.array([s.sharpe_ratio for s in simulations])

    sorted_total_returns = np.sort(total_returns)

    def median(values: np.ndarray) -> float:
        return percentile(np.sort(values), 50)

    std_final_value = float(final_values.std(ddof=1)) if len(final_values) > 1 else 0.0

    return SimulationStatistics(
        mean_final_value=float(final_values.mean()),
        median_final_value=median(final_values),
        std_final_value=std_final_value,
        mean_total_return=float(total_returns.mean()),
        median_total_return=percentile(sorted_total_returns, 50),
        mean_annualized_return=float(annualized_returns.mean()),
        median_annualized_return=median(annualized_returns),
        mean_max_drawdown=float(max_drawdowns.mean()),
        median_max_drawdown=median(max_drawdowns),
        mean_sharpe_ratio=float(sharpe_ratios.mean()),
        median_sharpe_ratio=median(sharpe_ratios),
        probability_of_profit=float(np.mean(total_returns > 0)),
        value_at_risk=ValueAtRisk(
            **{f"p{level}": percentile(sorted_total_returns, level) for level in VAR_LEVELS}
        ),
    )
