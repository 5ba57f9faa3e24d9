"""
Worst-Case Scenario Injection
=============================

Builds synthetic maximum-loss events per strategy so that tail risk the
historical sample under-represents still shows up in simulated paths.

The event budget is a share of the simulation length, apportioned across
strategies with the largest-remainder method. Each event carries the
strategy's worst loss in dollars and, for relative sizing, as a fraction
of the capital at the time.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Sequence

from ...models.simulation import WorstCaseBasis, WorstCaseSizing
from ...models.trade import Trade


logger = logging.getLogger(__name__)


class LossSource(str, Enum):
    """Where a strategy's maximum loss magnitude came from"""
    MARGIN = "margin"
    MAX_LOSS = "max_loss"
    HISTORICAL_PL = "historical_pl"


_REASONS = {
    LossSource.MARGIN: "Synthetic worst-case scenario",
    LossSource.MAX_LOSS: "Synthetic worst-case scenario (historical max loss)",
    LossSource.HISTORICAL_PL: "Synthetic worst-case scenario (largest historical loss)",
}


@dataclass(frozen=True)
class SyntheticLossEvent:
    """A synthetic max-loss outcome for one strategy."""
    strategy: str
    loss_amount: float  # negative dollars
    source: LossSource
    num_contracts: int = 1  # strategy's average contract count
    capital_ratio: Optional[float] = None  # loss / capital before the trade
    opened_at: Optional[datetime] = None

    @property
    def reason(self) -> str:
        return _REASONS[self.source]

    @property
    def one_lot_loss(self) -> float:
        if self.num_contracts <= 0:
            return self.loss_amount
        return self.loss_amount / self.num_contracts


def synthetic_event_budget(simulation_length: int, percentage: float) -> int:
    """ceil(length * pct / 100), at least 1 and at most the simulation length."""
    if percentage <= 0 or simulation_length <= 0:
        return 0
    requested = math.ceil(simulation_length * percentage / 100)
    return min(simulation_length, max(1, requested))


def allocate_synthetic_counts(weights: Sequence[float], budget: int) -> List[int]:
    """
    Apportion an integer budget by weight using the largest-remainder method.

    Integer parts of weight/total * budget go first; leftover units go to the
    largest fractional remainders, ties broken by position. All-zero weights
    fall back to an even split.

    Args:
        weights: Non-negative weight per strategy (negatives count as zero)
        budget: Total units to hand out

    Returns:
        Allocation per weight; always sums to `budget`
    """
    if not weights:
        return []
    if budget <= 0:
        return [0] * len(weights)

    positive = [weight if weight > 0 else 0 for weight in weights]
    total_weight = sum(positive)

    if total_weight == 0:
        share, remainder = divmod(budget, len(weights))
        allocations = [share] * len(weights)
        for index in range(remainder):
            allocations[index] += 1
        return allocations

    raw = [weight / total_weight * budget for weight in positive]
    allocations = [math.floor(value) for value in raw]
    remainder = budget - sum(allocations)

    eligible = [index for index, weight in enumerate(positive) if weight > 0]
    order = sorted(eligible, key=lambda index: (-(raw[index] - allocations[index]), index))

    cursor = 0
    while remainder > 0:
        allocations[order[cursor % len(order)]] += 1
        remainder -= 1
        cursor += 1

    return allocations


def group_trades_by_strategy(trades: Sequence[Trade]) -> Dict[str, List[Trade]]:
    """Group trades by strategy label in order of first appearance."""
    groups: Dict[str, List[Trade]] = {}
    for trade in trades:
        groups.setdefault(trade.strategy_name, []).append(trade)
    return groups


def _strategy_loss_profile(strategy_trades: Sequence[Trade]):
    """Largest absolute loss, its source, the largest capital ratio and average contracts."""
    max_absolute_loss = 0.0
    source: Optional[LossSource] = None
    max_ratio = 0.0
    total_contracts = 0
    counted = 0

    for trade in strategy_trades:
        capital_before = max(1.0, trade.capital_before_trade)
        candidates = (
            (LossSource.MARGIN, trade.margin_req if trade.margin_req and trade.margin_req > 0 else 0.0),
            (LossSource.MAX_LOSS, abs(trade.max_loss or 0.0)),
            (LossSource.HISTORICAL_PL, -trade.pl if trade.pl < 0 else 0.0),
        )
        for candidate_source, magnitude in candidates:
            if magnitude <= 0:
                continue
            if magnitude > max_absolute_loss:
                max_absolute_loss = magnitude
                source = candidate_source
            max_ratio = max(max_ratio, magnitude / capital_before)

        if trade.num_contracts:
            total_contracts += trade.num_contracts
            counted += 1

    avg_contracts = max(1, math.floor(total_contracts / counted + 0.5)) if counted else 1
    return max_absolute_loss, source, max_ratio, avg_contracts


def create_synthetic_loss_events(
    trades: Sequence[Trade],
    percentage: float,
    simulation_length: int,
    based_on: WorstCaseBasis = WorstCaseBasis.SIMULATION
) -> List[SyntheticLossEvent]:
    """
    Create synthetic max-loss events for worst-case testing.

    Args:
        trades: Trades to derive per-strategy max losses from
        percentage: Share of the simulation that should be max-loss events (0-100)
        simulation_length: Steps per simulated path
        based_on: 'simulation' weights strategies equally,
            'historical' weights them by trade count

    Returns:
        Synthetic events, grouped by strategy in first-appearance order
    """
    budget = synthetic_event_budget(simulation_length, percentage)
    if budget == 0 or not trades:
        return []

    groups = group_trades_by_strategy(trades)
    based_on = WorstCaseBasis(based_on)
    weights = [
        len(strategy_trades) if based_on == WorstCaseBasis.HISTORICAL else 1
        for strategy_trades in groups.values()
    ]
    allocations = allocate_synthetic_counts(weights, budget)

    events: List[SyntheticLossEvent] = []
    for (strategy, strategy_trades), count in zip(groups.items(), allocations):
        if count == 0:
            continue

        max_loss, source, ratio, avg_contracts = _strategy_loss_profile(strategy_trades)
        if max_loss <= 0:
            logger.debug(f"No loss data for strategy '{strategy}', skipping {count} events")
            continue

        event = SyntheticLossEvent(
            strategy=strategy,
            loss_amount=-max_loss,
            source=source,
            num_contracts=avg_contracts,
            capital_ratio=ratio if ratio > 0 else None,
            opened_at=min(trade.opened_at for trade in strategy_trades),
        )
        events.extend([event] * count)

    logger.debug(f"Created {len(events)} synthetic loss events from budget {budget}")
    return events


def resolve_loss_sizing(requested: WorstCaseSizing, capital_basis: float) -> WorstCaseSizing:
    """Relative sizing needs a positive capital basis, else fall back to absolute."""
    requested = WorstCaseSizing(requested)
    if requested == WorstCaseSizing.RELATIVE and capital_basis > 0:
        return WorstCaseSizing.RELATIVE
    return WorstCaseSizing.ABSOLUTE


def synthetic_loss_value(
    event: SyntheticLossEvent,
    percentage_mode: bool,
    sizing: WorstCaseSizing,
    capital_basis: float,
    normalize_to_1_lot: bool = False
) -> float:
    """
    Convert an event into a pool value for the active resample method.

    Args:
        event: Synthetic loss event
        percentage_mode: Pool holds decimal returns instead of dollars
        sizing: Resolved sizing (see resolve_loss_sizing)
        capital_basis: Capital the loss is measured against
        normalize_to_1_lot: Use the per-contract loss for absolute sizing

    Returns:
        Negative dollar loss, or negative decimal return in percentage mode
    """
    basis = capital_basis if capital_basis > 0 else 1.0
    dollars = event.one_lot_loss if normalize_to_1_lot else event.loss_amount
    relative = WorstCaseSizing(sizing) == WorstCaseSizing.RELATIVE
    ratio = event.capital_ratio

    if percentage_mode:
        if relative:
            if ratio and ratio > 0:
                return -abs(ratio)
            return event.loss_amount / basis
        return dollars / basis

    if relative and ratio and ratio > 0:
        return -abs(ratio) * basis
    return dollars
