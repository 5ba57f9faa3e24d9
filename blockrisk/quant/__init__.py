"""
blockrisk Quant Module
======================

Quantitative risk analysis for options trade logs.

Example:
    >>> from blockrisk.quant import run_monte_carlo_simulation
    >>> result = run_monte_carlo_simulation(trades, params)
    >>> result.statistics.value_at_risk.p5
"""

from .monte_carlo import (
    MonteCarloEngine,
    MonteCarloError,
    InsufficientTradesError,
    InsufficientResamplePoolError,
    InvalidSimulationParametersError,
    SimulationCancelledError,
    run_monte_carlo_simulation,
)

__all__ = [
    'MonteCarloEngine',
    'MonteCarloError',
    'InsufficientTradesError',
    'InsufficientResamplePoolError',
    'InvalidSimulationParametersError',
    'SimulationCancelledError',
    'run_monte_carlo_simulation',
]
