"""
Monte Carlo engine errors.

Every error is raised before any simulation result exists; a run either
completes fully or fails with one of these.
"""

from typing import Optional


class MonteCarloError(Exception):
    """Base exception for Monte Carlo simulation failures."""
    kind = "MonteCarloError"


class InsufficientTradesError(MonteCarloError):
    """Too few input trades to run a simulation."""
    kind = "InsufficientTrades"

    def __init__(self, found: int, required: int):
        self.found = found
        self.required = required
        super().__init__(
            f"Insufficient trades for Monte Carlo simulation. "
            f"Found {found} trades, need at least {required}."
        )


class InsufficientResamplePoolError(MonteCarloError):
    """Resample pool is too small after filtering, windowing and aggregation."""
    kind = "InsufficientResamplePool"

    def __init__(self, pool_size: int, required: int):
        self.pool_size = pool_size
        self.required = required
        super().__init__(
            f"Insufficient data in resample pool. "
            f"Found {pool_size} samples, need at least {required}."
        )

    @property
    def actual_resample_pool_size(self) -> int:
        return self.pool_size


class InvalidSimulationParametersError(MonteCarloError, ValueError):
    """Simulation parameters violate an engine invariant."""
    kind = "InvalidSimulationParameters"


class SimulationCancelledError(MonteCarloError):
    """Run stopped by a cancel signal or deadline between paths."""
    kind = "SimulationCancelled"

    def __init__(self, completed_paths: int, reason: Optional[str] = None):
        self.completed_paths = completed_paths
        self.reason = reason or "cancelled"
        super().__init__(
            f"Simulation {self.reason} after {completed_paths} completed paths"
        )
