"""
Monte Carlo Simulation Module
=============================

Bootstrap risk simulation for trade histories.
"""

from .engine import (
    MonteCarloEngine,
    PathPlan,
    build_path_sample,
    run_path,
    run_monte_carlo_simulation,
)
from .errors import (
    MonteCarloError,
    InsufficientTradesError,
    InsufficientResamplePoolError,
    InvalidSimulationParametersError,
    SimulationCancelledError,
)
from .random_source import RandomSource, SeededRandom, EntropyRandom, create_random_source
from .resample_pool import (
    ResamplePool,
    scale_trade_to_one_lot,
    filter_trades_by_strategy,
    sort_trades_chronologically,
    apply_resample_window,
    get_trade_resample_pool,
    calculate_daily_returns,
    calculate_percentage_returns,
    build_resample_pool,
)
from .worst_case import (
    LossSource,
    SyntheticLossEvent,
    synthetic_event_budget,
    allocate_synthetic_counts,
    create_synthetic_loss_events,
    resolve_loss_sizing,
    synthetic_loss_value,
)
from .resampler import resample_with_replacement, splice_guaranteed_values
from .path_simulator import (
    simulate_path,
    calculate_max_drawdown,
    calculate_sharpe_ratio,
    annualize_return,
)
from .aggregation import percentile, calculate_percentiles, calculate_statistics

__all__ = [
    'MonteCarloEngine',
    'PathPlan',
    'build_path_sample',
    'run_path',
    'run_monte_carlo_simulation',
    'MonteCarloError',
    'InsufficientTradesError',
    'InsufficientResamplePoolError',
    'InvalidSimulationParametersError',
    'SimulationCancelledError',
    'RandomSource',
    'SeededRandom',
    'EntropyRandom',
    'create_random_source',
    'ResamplePool',
    'scale_trade_to_one_lot',
    'filter_trades_by_strategy',
    'sort_trades_chronologically',
    'apply_resample_window',
    'get_trade_resample_pool',
    'calculate_daily_returns',
    'calculate_percentage_returns',
    'build_resample_pool',
    'LossSource',
    'SyntheticLossEvent',
    'synthetic_event_budget',
    'allocate_synthetic_counts',
    'create_synthetic_loss_events',
    'resolve_loss_sizing',
    'synthetic_loss_value',
    'resample_with_replacement',
    'splice_guaranteed_values',
    'simulate_path',
    'calculate_max_drawdown',
    'calculate_sharpe_ratio',
    'annualize_return',
    'percentile',
    'calculate_percentiles',
    'calculate_statistics',
]
