"""
Data models shared by the blockrisk simulation engine.
"""

from .trade import Trade, UNKNOWN_STRATEGY
from .simulation import (
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

__all__ = [
    'Trade',
    'UNKNOWN_STRATEGY',
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
]
