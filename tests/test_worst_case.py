from datetime import timedelta

import pytest

from blockrisk.models.simulation import WorstCaseBasis, WorstCaseSizing
from blockrisk.quant.monte_carlo.worst_case import (
    LossSource,
    SyntheticLossEvent,
    allocate_synthetic_counts,
    create_synthetic_loss_events,
    resolve_loss_sizing,
    synthetic_event_budget,
    synthetic_loss_value,
)


@pytest.mark.parametrize("length,pct,expected", [
    (100, 5, 5),
    (100, 0.1, 1),
    (10, 100, 10),
    (7, 50, 4),
    (100, 0, 0),
])
def test_event_budget(length, pct, expected):
    assert synthetic_event_budget(length, pct) == expected


def test_allocation_largest_remainder():
    assert allocate_synthetic_counts([90, 10], 10) == [9, 1]
    assert allocate_synthetic_counts([1, 1, 1], 5) == [2, 2, 1]


def test_allocation_always_sums_to_budget():
    for weights in ([3, 7, 11], [1, 0, 2], [5], [0.3, 0.3, 0.4]):
        for budget in range(0, 17):
            allocation = allocate_synthetic_counts(weights, budget)
            assert sum(allocation) == budget
            assert all(count >= 0 for count in allocation)


def test_allocation_all_zero_weights_splits_evenly():
    assert allocate_synthetic_counts([0, 0, 0], 4) == [2, 1, 1]


def test_zero_weight_gets_nothing():
    assert allocate_synthetic_counts([0, 5], 3) == [0, 3]


def test_historical_basis_weights_by_trade_count(make_trade):
    trades = [make_trade(strategy="A") for _ in range(90)] + [make_trade(strategy="B") for _ in range(10)]
    events = create_synthetic_loss_events(trades, 10, 100, WorstCaseBasis.HISTORICAL)
    strategies = [event.strategy for event in events]
    assert strategies.count("A") == 9
    assert strategies.count("B") == 1


def test_simulation_basis_weights_equally(make_trade):
    trades = [make_trade(strategy="A") for _ in range(90)] + [make_trade(strategy="B") for _ in range(10)]
    events = create_synthetic_loss_events(trades, 10, 100, WorstCaseBasis.SIMULATION)
    strategies = [event.strategy for event in events]
    assert strategies.count("A") == 5
    assert strategies.count("B") == 5


def test_margin_is_preferred_when_largest(make_trade):
    trades = [make_trade(pl=-1000.0, margin_req=10000.0, max_loss=-2000.0, funds_at_close=110000.0)]
    (event,) = create_synthetic_loss_events(trades, 100, 1)
    assert event.loss_amount == -10000.0
    assert event.source == LossSource.MARGIN
    assert event.reason == "Synthetic worst-case scenario"
    assert event.capital_ratio == pytest.approx(10000 / 111000)


def test_max_loss_used_without_margin(make_trade):
    trades = [make_trade(pl=-100.0, margin_req=None, max_loss=-800.0)]
    (event,) = create_synthetic_loss_events(trades, 100, 1)
    assert event.loss_amount == -800.0
    assert event.source == LossSource.MAX_LOSS
    assert "historical max loss" in event.reason


def test_realized_loss_fallback(make_trade):
    trades = [
        make_trade(pl=-300.0, margin_req=None, max_loss=None),
        make_trade(pl=200.0, margin_req=None, max_loss=None),
    ]
    (event,) = create_synthetic_loss_events(trades, 100, 1)
    assert event.loss_amount == -300.0
    assert event.source == LossSource.HISTORICAL_PL


def test_strategy_without_losses_is_skipped(make_trade):
    trades = [make_trade(pl=50.0, margin_req=None, max_loss=None, strategy="Winner")]
    assert create_synthetic_loss_events(trades, 50, 10) == []


def test_missing_strategy_groups_as_unknown(make_trade):
    trades = [make_trade(strategy=None)]
    (event,) = create_synthetic_loss_events(trades, 100, 1)
    assert event.strategy == "Unknown"


def test_average_contracts_round_half_up(make_trade):
    trades = [make_trade(num_contracts=1), make_trade(num_contracts=2)]
    (event,) = create_synthetic_loss_events(trades, 100, 1)
    assert event.num_contracts == 2


def test_event_opened_at_is_earliest(make_trade):
    first = make_trade()
    later = make_trade(date_opened=first.opened_at + timedelta(days=3))
    (event,) = create_synthetic_loss_events([later, first], 100, 1)
    assert event.opened_at == first.opened_at


def test_resolve_sizing_falls_back_to_absolute():
    assert resolve_loss_sizing(WorstCaseSizing.RELATIVE, 100000) == WorstCaseSizing.RELATIVE
    assert resolve_loss_sizing(WorstCaseSizing.RELATIVE, 0) == WorstCaseSizing.ABSOLUTE
    assert resolve_loss_sizing("absolute", 100000) == WorstCaseSizing.ABSOLUTE


def _event(**overrides):
    values = dict(
        strategy="A",
        loss_amount=-2000.0,
        source=LossSource.MARGIN,
        num_contracts=4,
        capital_ratio=0.02,
    )
    values.update(overrides)
    return SyntheticLossEvent(**values)


def test_loss_value_dollar_relative():
    value = synthetic_loss_value(_event(), False, WorstCaseSizing.RELATIVE, 50000.0)
    assert value == pytest.approx(-1000.0)


def test_loss_value_dollar_absolute():
    assert synthetic_loss_value(_event(), False, WorstCaseSizing.ABSOLUTE, 50000.0) == -2000.0


def test_loss_value_dollar_absolute_one_lot():
    value = synthetic_loss_value(_event(), False, WorstCaseSizing.ABSOLUTE, 50000.0, normalize_to_1_lot=True)
    assert value == -500.0


def test_loss_value_percentage_relative():
    assert synthetic_loss_value(_event(), True, WorstCaseSizing.RELATIVE, 50000.0) == pytest.approx(-0.02)


def test_loss_value_percentage_relative_without_ratio():
    value = synthetic_loss_value(_event(capital_ratio=None), True, WorstCaseSizing.RELATIVE, 50000.0)
    assert value == pytest.approx(-0.04)


def test_loss_value_percentage_absolute():
    assert synthetic_loss_value(_event(), True, WorstCaseSizing.ABSOLUTE, 40000.0) == pytest.approx(-0.05)


def test_loss_value_dollar_relative_without_ratio():
    value = synthetic_loss_value(
        _event(capital_ratio=None), False, WorstCaseSizing.RELATIVE, 50000.0, normalize_to_1_lot=True
    )
    assert value == -500.0
