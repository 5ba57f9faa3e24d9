"""
blockrisk
=========

Monte Carlo risk simulation for options trading blocks.

Projects a strategy's future equity from its trade log by bootstrap
resampling and reports drawdown, Value at Risk and probability of profit.

Usage:
    >>> from blockrisk import SimulationParameters, run_monte_carlo_simulation
    >>> params = SimulationParameters(
    ...     num_simulations=1000,
    ...     simulation_length=252,
    ...     initial_capital=100000,
    ...     trades_per_year=252,
    ...     random_seed=42,
    ... )
    >>> result = run_monte_carlo_simulation(trades, params)
"""

__version__ = "1.0.0"

from .models import (
    Trade,
    ResampleMethod,
    WorstCaseMode,
    WorstCaseBasis,
    WorstCaseSizing,
    WorstCaseConfig,
    SimulationParameters,
    SimulationPath,
    PercentileBand,
    ValueAtRisk,
    SimulationStatistics,
    MonteCarloResult,
)
from .quant import (
    MonteCarloEngine,
    MonteCarloError,
    InsufficientTradesError,
    InsufficientResamplePoolError,
    InvalidSimulationParametersError,
    SimulationCancelledError,
    run_monte_carlo_simulation,
)

__all__ = [
    'Trade',
    'ResampleMethod',
    'WorstCaseMode',
    'WorstCaseBasis',
    'WorstCaseSizing',
    'WorstCaseConfig',
    'SimulationParameters',
    'SimulationPath',
    'PercentileBand',
    'ValueAtRisk',
    'SimulationStatistics',
    'MonteCarloResult',
    'MonteCarloEngine',
    'MonteCarloError',
    'InsufficientTradesError',
    'InsufficientResamplePoolError',
    'InvalidSimulationParametersError',
    'SimulationCancelledError',
    'run_monte_carlo_simulation',
]
