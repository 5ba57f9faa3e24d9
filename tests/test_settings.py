import pytest
from pydantic import ValidationError

from blockrisk.config.settings import (
    ApplicationSettings,
    LoggingSettings,
    MonteCarloSettings,
    get_settings,
)
from blockrisk.models.simulation import ResampleMethod, SimulationParameters


def test_monte_carlo_defaults():
    settings = MonteCarloSettings()
    assert settings.min_trades == 10
    assert settings.min_resample_pool_size == 5
    assert settings.guarantee_seed_offset == 999999
    assert settings.timeout_seconds is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("MONTE_CARLO_MIN_TRADES", "25")
    monkeypatch.setenv("MONTE_CARLO_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    assert MonteCarloSettings().min_trades == 25
    assert MonteCarloSettings().timeout_seconds == 2.5
    assert LoggingSettings().level == "DEBUG"


def test_non_positive_timeout_rejected():
    with pytest.raises(ValidationError):
        MonteCarloSettings(timeout_seconds=0)


def test_get_settings_is_cached(monkeypatch):
    get_settings.cache_clear()
    monkeypatch.setenv("ENVIRONMENT", "production")
    try:
        settings = get_settings()
        assert settings is get_settings()
        assert settings.is_production
    finally:
        get_settings.cache_clear()


def test_application_settings_nest_sub_settings():
    settings = ApplicationSettings(monte_carlo=MonteCarloSettings(min_trades=3))
    assert settings.monte_carlo.min_trades == 3
    assert settings.app_name == "blockrisk"
    assert not settings.is_production


def test_parameters_from_settings():
    settings = MonteCarloSettings(default_num_simulations=250, default_initial_capital=5000.0)
    params = SimulationParameters.from_settings(settings, resample_method="daily", random_seed=9)

    assert params.num_simulations == 250
    assert params.initial_capital == 5000.0
    assert params.simulation_length == settings.default_simulation_length
    assert params.resample_method == ResampleMethod.DAILY
    assert params.random_seed == 9
    assert not params.worst_case.enabled


def test_parameters_accept_worst_case_dict():
    params = SimulationParameters(
        num_simulations=10,
        simulation_length=10,
        initial_capital=1000.0,
        trades_per_year=252,
        worst_case={"enabled": True, "percentage": 10, "mode": "guarantee"},
    )
    assert params.worst_case.active
    assert params.to_dict()["worst_case"]["mode"] == "guarantee"
