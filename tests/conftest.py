"""
Shared fixtures for the blockrisk test suite.
"""

from datetime import datetime, timedelta

import pytest

from blockrisk.config.settings import MonteCarloSettings
from blockrisk.models.simulation import SimulationParameters
from blockrisk.models.trade import Trade


BASE_DATE = datetime(2024, 1, 1, 9, 30)


def build_trade(**overrides) -> Trade:
    values = dict(
        date_opened=BASE_DATE,
        pl=100.0,
        num_contracts=1,
        funds_at_close=100000.0,
        margin_req=1000.0,
        max_loss=-1000.0,
        max_profit=100.0,
        strategy="Test Strategy",
    )
    values.update(overrides)
    return Trade(**values)


@pytest.fixture
def make_trade():
    return build_trade


@pytest.fixture
def daily_trades():
    """Fifty trades on consecutive days alternating +100 / -50."""
    return [
        build_trade(
            date_opened=BASE_DATE + timedelta(days=i),
            pl=100.0 if i % 2 == 0 else -50.0,
            funds_at_close=100000.0 + i * 100,
        )
        for i in range(50)
    ]


@pytest.fixture
def settings():
    return MonteCarloSettings(n_workers=1)


@pytest.fixture
def base_params():
    return SimulationParameters(
        num_simulations=100,
        simulation_length=50,
        initial_capital=100000.0,
        trades_per_year=252,
        random_seed=42,
    )
