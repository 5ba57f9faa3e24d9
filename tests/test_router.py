from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from blockrisk.app import create_app
from blockrisk.config.settings import ApplicationSettings, MonteCarloSettings


@pytest.fixture
def client():
    settings = ApplicationSettings(monte_carlo=MonteCarloSettings(n_workers=1))
    return TestClient(create_app(settings))


def _trades_payload(count):
    start = datetime(2024, 3, 1, 10, 0)
    return [
        {
            "date_opened": (start + timedelta(days=i)).isoformat(),
            "pl": 150.0 if i % 3 else -200.0,
            "num_contracts": 2,
            "funds_at_close": 50000.0 + i * 50,
            "margin_req": 2500.0,
            "strategy": "Iron Condor",
        }
        for i in range(count)
    ]


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_defaults(client):
    response = client.get("/risk-simulator/defaults")
    assert response.status_code == 200
    data = response.json()
    assert data["min_trades"] == 10
    assert data["num_simulations"] == 1000


def test_run_simulation(client):
    response = client.post(
        "/risk-simulator/simulations",
        json={
            "trades": _trades_payload(30),
            "num_simulations": 100,
            "simulation_length": 20,
            "random_seed": 5,
            "worst_case": {"enabled": True, "percentage": 10, "mode": "guarantee"},
        },
    )
    assert response.status_code == 200
    data = response.json()
    assert len(data["simulations"]) == 100
    assert len(data["percentiles"]["p50"]) == 20
    assert data["actual_resample_pool_size"] == 30
    assert data["parameters"]["worst_case"]["mode"] == "guarantee"


def test_run_simulation_without_paths(client):
    response = client.post(
        "/risk-simulator/simulations",
        json={
            "trades": _trades_payload(12),
            "num_simulations": 100,
            "simulation_length": 10,
            "include_paths": False,
        },
    )
    assert response.status_code == 200
    assert "simulations" not in response.json()


def test_insufficient_trades_is_unprocessable(client):
    response = client.post(
        "/risk-simulator/simulations",
        json={"trades": _trades_payload(5), "num_simulations": 100},
    )
    assert response.status_code == 422
    assert response.json()["error"] == "InsufficientTrades"


def test_request_validation(client):
    response = client.post(
        "/risk-simulator/simulations",
        json={"trades": [], "num_simulations": 0},
    )
    assert response.status_code == 422
