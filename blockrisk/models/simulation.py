"""
Monte Carlo Simulation Data Models for blockrisk

Defines the data structures shared by the risk simulation engine:
- Simulation parameters and worst-case injection settings
- Per-path results
- Percentile bands and summary statistics
- The complete result bundle returned to callers
"""

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import numpy as np


class ResampleMethod(str, Enum):
    """What the bootstrap pool is built from"""
    TRADES = "trades"
    DAILY = "daily"
    PERCENTAGE = "percentage"


class WorstCaseMode(str, Enum):
    """How synthetic max-loss events enter the simulation"""
    POOL = "pool"
    GUARANTEE = "guarantee"


class WorstCaseBasis(str, Enum):
    """How the synthetic budget is weighted across strategies"""
    SIMULATION = "simulation"
    HISTORICAL = "historical"


class WorstCaseSizing(str, Enum):
    """How a synthetic loss is sized when it is applied"""
    ABSOLUTE = "absolute"
    RELATIVE = "relative"


@dataclass(frozen=True)
class WorstCaseConfig:
    """Worst-case scenario injection settings"""
    enabled: bool = False
    percentage: float = 5.0  # share of max-loss events (0-100)
    mode: WorstCaseMode = WorstCaseMode.POOL
    based_on: WorstCaseBasis = WorstCaseBasis.SIMULATION
    sizing: WorstCaseSizing = WorstCaseSizing.RELATIVE

    def __post_init__(self):
        object.__setattr__(self, "mode", WorstCaseMode(self.mode))
        object.__setattr__(self, "based_on", WorstCaseBasis(self.based_on))
        object.__setattr__(self, "sizing", WorstCaseSizing(self.sizing))

    @property
    def active(self) -> bool:
        return self.enabled and self.percentage > 0

    def to_dict(self) -> Dict:
        return {
            'enabled': self.enabled,
            'percentage': self.percentage,
            'mode': self.mode.value,
            'based_on': self.based_on.value,
            'sizing': self.sizing.value,
        }


@dataclass(frozen=True)
class SimulationParameters:
    """Parameters for a Monte Carlo risk simulation run"""
    num_simulations: int
    simulation_length: int  # trades/days projected per path
    initial_capital: float
    trades_per_year: float
    resample_method: ResampleMethod = ResampleMethod.TRADES
    resample_window: Optional[int] = None  # most recent N pool entries
    historical_initial_capital: Optional[float] = None
    strategy: Optional[str] = None  # None or "all" disables filtering
    random_seed: Optional[int] = None
    normalize_to_1_lot: bool = False
    worst_case: WorstCaseConfig = field(default_factory=WorstCaseConfig)

    def __post_init__(self):
        object.__setattr__(self, "resample_method", ResampleMethod(self.resample_method))
        if isinstance(self.worst_case, dict):
            object.__setattr__(self, "worst_case", WorstCaseConfig(**self.worst_case))

    @property
    def is_percentage_mode(self) -> bool:
        return self.resample_method == ResampleMethod.PERCENTAGE

    @classmethod
    def from_settings(cls, settings, **overrides) -> "SimulationParameters":
        """
        Build parameters from configured defaults.

        Args:
            settings: MonteCarloSettings instance
            **overrides: Any SimulationParameters field

        Returns:
            SimulationParameters with defaults filled in
        """
        values = {
            'num_simulations': settings.default_num_simulations,
            'simulation_length': settings.default_simulation_length,
            'initial_capital': settings.default_initial_capital,
            'trades_per_year': settings.default_trades_per_year,
        }
        values.update(overrides)
        return cls(**values)

    def with_changes(self, **changes) -> "SimulationParameters":
        return replace(self, **changes)

    def to_dict(self) -> Dict:
        return {
            'num_simulations': self.num_simulations,
            'simulation_length': self.simulation_length,
            'initial_capital': self.initial_capital,
            'trades_per_year': self.trades_per_year,
            'resample_method': self.resample_method.value,
            'resample_window': self.resample_window,
            'historical_initial_capital': self.historical_initial_capital,
            'strategy': self.strategy,
            'random_seed': self.random_seed,
            'normalize_to_1_lot': self.normalize_to_1_lot,
            'worst_case': self.worst_case.to_dict(),
        }


@dataclass(frozen=True, eq=False)
class SimulationPath:
    """Result of a single simulated equity path"""
    equity_curve: np.ndarray  # cumulative return per step
    final_value: float
    total_return: float
    annualized_return: float
    max_drawdown: float
    sharpe_ratio: float

    def to_dict(self) -> Dict:
        return {
            'equity_curve': self.equity_curve.tolist(),
            'final_value': self.final_value,
            'total_return': self.total_return,
            'annualized_return': self.annualized_return,
            'max_drawdown': self.max_drawdown,
            'sharpe_ratio': self.sharpe_ratio,
        }


@dataclass(frozen=True, eq=False)
class PercentileBand:
    """Cross-path percentile curves, one value per step"""
    steps: np.ndarray
    p5: np.ndarray
    p25: np.ndarray
    p50: np.ndarray
    p75: np.ndarray
    p95: np.ndarray

    def to_dict(self) -> Dict:
        return {item.name: getattr(self, item.name).tolist() for item in fields(self)}


@dataclass(frozen=True)
class ValueAtRisk:
    """Total-return percentiles used as Value at Risk"""
    p5: float  # 95% VaR
    p10: float  # 90% VaR
    p25: float


@dataclass(frozen=True)
class SimulationStatistics:
    """Summary statistics across all simulated paths"""
    mean_final_value: float
    median_final_value: float
    std_final_value: float
    mean_total_return: float
    median_total_return: float
    mean_annualized_return: float
    median_annualized_return: float
    mean_max_drawdown: float
    median_max_drawdown: float
    mean_sharpe_ratio: float
    median_sharpe_ratio: float
    probability_of_profit: float
    value_at_risk: ValueAtRisk

    def to_dict(self) -> Dict:
        data: Dict[str, Any] = {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if item.name != 'value_at_risk'
        }
        data['value_at_risk'] = {
            'p5': self.value_at_risk.p5,
            'p10': self.value_at_risk.p10,
            'p25': self.value_at_risk.p25,
        }
        return data


@dataclass(frozen=True, eq=False)
class MonteCarloResult:
    """Complete Monte Carlo simulation result"""
    simulations: Tuple[SimulationPath, ...]
    percentiles: PercentileBand
    statistics: SimulationStatistics
    parameters: SimulationParameters
    timestamp: datetime
    actual_resample_pool_size: int

    def to_dict(self, include_paths: bool = True) -> Dict:
        data = {
            'percentiles': self.percentiles.to_dict(),
            'statistics': self.statistics.to_dict(),
            'parameters': self.parameters.to_dict(),
            'timestamp': self.timestamp.isoformat(),
            'actual_resample_pool_size': self.actual_resample_pool_size,
        }
        if include_paths:
            data['simulations'] = [path.to_dict() for path in self.simulations]
        return data
