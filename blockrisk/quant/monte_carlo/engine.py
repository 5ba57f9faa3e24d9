"""
Monte Carlo Risk Simulation Engine for blockrisk
================================================

Projects a strategy's future equity from its historical trade record by
bootstrap resampling, and derives risk metrics from the simulated paths:
- Trade, daily and percentage (compounding) resampling
- Worst-case max-loss injection (pool or guaranteed per path)
- Seeded, reproducible paths (serial or across worker processes)
- Percentile bands, drawdown distribution, VaR and probability of profit

A run moves through validation, pool construction, optional worst-case
injection, path simulation and aggregation. Failures are raised before
any path is simulated; there is no partial result.
"""

import logging
import multiprocessing as mp
import threading
import time
import warnings
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import partial
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from ...config.settings import MonteCarloSettings
from ...models.simulation import (
    MonteCarloResult,
    SimulationParameters,
    SimulationPath,
    WorstCaseMode,
)
from ...models.trade import Trade
from .aggregation import calculate_percentiles, calculate_statistics
from .errors import (
    InsufficientResamplePoolError,
    InsufficientTradesError,
    InvalidSimulationParametersError,
    SimulationCancelledError,
)
from .path_simulator import simulate_path
from .random_source import create_random_source
from .resample_pool import ResamplePool, build_resample_pool
from .resampler import resample_with_replacement, splice_guaranteed_values
from .worst_case import (
    create_synthetic_loss_events,
    resolve_loss_sizing,
    synthetic_loss_value,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class PathPlan:
    """Everything one path needs; shared read-only by all paths of a run."""
    pool: np.ndarray
    guaranteed: np.ndarray
    simulation_length: int
    initial_capital: float
    trades_per_year: float
    percentage_mode: bool = False
    base_seed: Optional[int] = None
    guarantee_seed_offset: int = 999999

    @property
    def baseline_size(self) -> int:
        return max(0, self.simulation_length - len(self.guaranteed))


def build_path_sample(index: int, plan: PathPlan) -> np.ndarray:
    """
    Resampled value sequence for path `index`.

    Seeded runs use seed + index for the draws and
    seed + index + guarantee_seed_offset for guaranteed-event placement.
    """
    seed = plan.base_seed + index if plan.base_seed is not None else None
    sample = resample_with_replacement(plan.pool, plan.baseline_size, create_random_source(seed))

    if len(plan.guaranteed) == 0:
        return sample

    placement_seed = seed + plan.guarantee_seed_offset if seed is not None else None
    return splice_guaranteed_values(
        sample,
        plan.guaranteed,
        create_random_source(placement_seed),
        plan.simulation_length,
    )


def run_path(index: int, plan: PathPlan) -> SimulationPath:
    """Simulate path `index`; pure given the plan, safe to run in a worker."""
    return simulate_path(
        build_path_sample(index, plan),
        plan.initial_capital,
        plan.trades_per_year,
        plan.percentage_mode,
    )


class MonteCarloEngine:
    """
    Bootstrap Monte Carlo risk simulator for trade histories.

    Features:
    - Three resampling regimes with matching equity arithmetic
    - Synthetic worst-case loss injection across strategies
    - Seeded reproducibility independent of worker count
    - Cancellation and deadlines checked between paths
    """

    def __init__(self, settings: Optional[MonteCarloSettings] = None):
        """
        Initialize the Monte Carlo engine.

        Args:
            settings: MonteCarloSettings instance, uses environment defaults if None
        """
        self.settings = settings or MonteCarloSettings()

        # Determine number of workers
        if self.settings.n_workers == -1:
            self.n_workers = max(1, mp.cpu_count() - 1)
        else:
            self.n_workers = max(1, self.settings.n_workers)

    def run(
        self,
        trades: Sequence[Trade],
        params: SimulationParameters,
        cancel_event: Optional[threading.Event] = None
    ) -> MonteCarloResult:
        """
        Run a Monte Carlo simulation.

        Args:
            trades: Historical trades
            params: Simulation parameters
            cancel_event: Optional signal checked between paths

        Returns:
            MonteCarloResult with all paths, percentile bands and statistics

        Raises:
            InvalidSimulationParametersError: parameters violate an invariant
            InsufficientTradesError: fewer trades than the configured minimum
            InsufficientResamplePoolError: pool smaller than the configured minimum
            SimulationCancelledError: cancelled or past the deadline
        """
        self._validate(trades, params)
        timestamp = datetime.now(timezone.utc)

        logger.info(
            f"Starting Monte Carlo run: {params.num_simulations} paths x "
            f"{params.simulation_length} steps, method={params.resample_method.value}"
        )

        pool = build_resample_pool(
            trades,
            method=params.resample_method,
            resample_window=params.resample_window,
            strategy=params.strategy,
            normalize_to_1_lot=params.normalize_to_1_lot,
            historical_initial_capital=params.historical_initial_capital,
        )
        actual_pool_size = pool.size
        if actual_pool_size < self.settings.min_resample_pool_size:
            raise InsufficientResamplePoolError(actual_pool_size, self.settings.min_resample_pool_size)
        logger.info(f"Resample pool ready with {actual_pool_size} values")

        pool, guaranteed = self._inject_worst_case(trades, params, pool)

        plan = PathPlan(
            pool=pool.values,
            guaranteed=np.asarray(guaranteed, dtype=float),
            simulation_length=params.simulation_length,
            initial_capital=params.initial_capital,
            trades_per_year=params.trades_per_year,
            percentage_mode=params.is_percentage_mode,
            base_seed=params.random_seed,
            guarantee_seed_offset=self.settings.guarantee_seed_offset,
        )
        simulations = self._simulate(plan, params.num_simulations, cancel_event)

        result = MonteCarloResult(
            simulations=tuple(simulations),
            percentiles=calculate_percentiles(simulations),
            statistics=calculate_statistics(simulations),
            parameters=params,
            timestamp=timestamp,
            actual_resample_pool_size=actual_pool_size,
        )
        logger.info(
            f"Monte Carlo run complete: P(profit)={result.statistics.probability_of_profit:.2%}, "
            f"VaR95={result.statistics.value_at_risk.p5:.2%}"
        )
        return result

    def _validate(self, trades: Sequence[Trade], params: SimulationParameters):
        """Validate parameters and input size."""
        if params.num_simulations <= 0:
            raise InvalidSimulationParametersError("num_simulations must be positive")
        if params.simulation_length <= 0:
            raise InvalidSimulationParametersError("simulation_length must be positive")
        if params.initial_capital <= 0:
            raise InvalidSimulationParametersError("initial_capital must be positive")
        if params.trades_per_year <= 0:
            raise InvalidSimulationParametersError("trades_per_year must be positive")
        if params.resample_window is not None and params.resample_window <= 0:
            raise InvalidSimulationParametersError("resample_window must be positive")
        if not 0 <= params.worst_case.percentage <= 100:
            raise InvalidSimulationParametersError("worst-case percentage must be between 0 and 100")

        if params.num_simulations < 100:
            warnings.warn("num_simulations < 100 may produce unreliable results")

        if len(trades) < self.settings.min_trades:
            raise InsufficientTradesError(len(trades), self.settings.min_trades)

    def _inject_worst_case(
        self,
        trades: Sequence[Trade],
        params: SimulationParameters,
        pool: ResamplePool
    ) -> Tuple[ResamplePool, List[float]]:
        """
        Build synthetic max-loss values.

        Returns:
            (pool, guaranteed): pool mode extends the pool, guarantee mode
            returns the values every path must contain
        """
        worst_case = params.worst_case
        if not worst_case.active:
            return pool, []

        # Tail losses come from every strategy in the log, not only the filtered one
        events = create_synthetic_loss_events(
            trades,
            worst_case.percentage,
            params.simulation_length,
            worst_case.based_on,
        )

        historical_capital = params.historical_initial_capital
        if historical_capital is not None and historical_capital > 0:
            capital_basis = historical_capital
        else:
            capital_basis = params.initial_capital
        sizing = resolve_loss_sizing(worst_case.sizing, capital_basis)
        values = [
            synthetic_loss_value(
                event,
                percentage_mode=params.is_percentage_mode,
                sizing=sizing,
                capital_basis=capital_basis,
                normalize_to_1_lot=params.normalize_to_1_lot,
            )
            for event in events
        ]

        logger.info(
            f"Worst-case injection: {len(values)} synthetic losses, "
            f"mode={worst_case.mode.value}, sizing={sizing.value}"
        )

        if worst_case.mode == WorstCaseMode.POOL:
            return pool.extended(values), []
        return pool, values[:params.simulation_length]

    def _simulate(
        self,
        plan: PathPlan,
        num_simulations: int,
        cancel_event: Optional[threading.Event]
    ) -> List[SimulationPath]:
        """Run all paths in path-index order."""
        timeout = self.settings.timeout_seconds
        deadline = time.monotonic() + timeout if timeout else None
        indices = range(num_simulations)

        if self.n_workers > 1 and num_simulations >= self.settings.parallel_threshold:
            logger.debug(f"Simulating across {self.n_workers} worker processes")
            executor = ProcessPoolExecutor(max_workers=self.n_workers)
            try:
                chunksize = max(1, num_simulations // (self.n_workers * 4))
                paths = executor.map(partial(run_path, plan=plan), indices, chunksize=chunksize)
                return self._collect(paths, num_simulations, cancel_event, deadline)
            finally:
                executor.shutdown(wait=True, cancel_futures=True)

        paths = (run_path(index, plan) for index in indices)
        return self._collect(paths, num_simulations, cancel_event, deadline)

    @staticmethod
    def _collect(
        paths: Iterator[SimulationPath],
        num_simulations: int,
        cancel_event: Optional[threading.Event],
        deadline: Optional[float]
    ) -> List[SimulationPath]:
        """Pull paths in order, checking for cancellation before each one."""
        simulations: List[SimulationPath] = []
        for _ in range(num_simulations):
            if cancel_event is not None and cancel_event.is_set():
                logger.warning(f"Monte Carlo run cancelled after {len(simulations)} paths")
                raise SimulationCancelledError(len(simulations))
            if deadline is not None and time.monotonic() > deadline:
                logger.warning(f"Monte Carlo run timed out after {len(simulations)} paths")
                raise SimulationCancelledError(len(simulations), reason="timed out")
            simulations.append(next(paths))
        return simulations


def run_monte_carlo_simulation(
    trades: Sequence[Trade],
    params: SimulationParameters,
    settings: Optional[MonteCarloSettings] = None,
    cancel_event: Optional[threading.Event] = None
) -> MonteCarloResult:
    """
    Run a Monte Carlo simulation with a one-off engine.

    Args:
        trades: Historical trade data
        params: Simulation parameters
        settings: Engine settings, environment defaults if None
        cancel_event: Optional signal checked between paths

    Returns:
        MonteCarloResult with all simulations and analysis
    """
    return MonteCarloEngine(settings).run(trades, params, cancel_event=cancel_event)
