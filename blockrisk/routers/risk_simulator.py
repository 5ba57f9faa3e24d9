"""
Risk Simulator Router

Runs Monte Carlo risk simulations over a submitted trade log.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..config.settings import ApplicationSettings, get_settings
from ..models.simulation import (
    ResampleMethod,
    SimulationParameters,
    WorstCaseBasis,
    WorstCaseConfig,
    WorstCaseMode,
    WorstCaseSizing,
)
from ..models.trade import Trade
from ..quant.monte_carlo.engine import MonteCarloEngine

logger = structlog.get_logger("blockrisk.risk_simulator")

router = APIRouter(prefix="/risk-simulator", tags=["Risk Simulator"])


# Request/Response Models
class TradePayload(BaseModel):
    date_opened: datetime
    pl: float
    num_contracts: int = 1
    funds_at_close: float = 0.0
    margin_req: Optional[float] = None
    max_loss: Optional[float] = None
    max_profit: Optional[float] = None
    strategy: Optional[str] = None
    date_closed: Optional[datetime] = None

    def to_trade(self) -> Trade:
        return Trade(**self.model_dump())


class WorstCasePayload(BaseModel):
    enabled: bool = False
    percentage: float = Field(default=5.0, ge=0, le=100)
    mode: WorstCaseMode = WorstCaseMode.POOL
    based_on: WorstCaseBasis = WorstCaseBasis.SIMULATION
    sizing: WorstCaseSizing = WorstCaseSizing.RELATIVE


class SimulationRequest(BaseModel):
    trades: List[TradePayload]
    num_simulations: Optional[int] = Field(default=None, ge=1, le=100000)
    simulation_length: Optional[int] = Field(default=None, ge=1, le=10000)
    initial_capital: Optional[float] = Field(default=None, gt=0)
    trades_per_year: Optional[float] = Field(default=None, gt=0)
    resample_method: ResampleMethod = ResampleMethod.TRADES
    resample_window: Optional[int] = Field(default=None, ge=1)
    historical_initial_capital: Optional[float] = Field(default=None, gt=0)
    strategy: Optional[str] = None
    random_seed: Optional[int] = None
    normalize_to_1_lot: bool = False
    worst_case: WorstCasePayload = Field(default_factory=WorstCasePayload)
    include_paths: bool = True

    def to_parameters(self, settings: ApplicationSettings) -> SimulationParameters:
        overrides = self.model_dump(
            exclude={"trades", "worst_case", "include_paths"}, exclude_none=True
        )
        overrides["worst_case"] = WorstCaseConfig(**self.worst_case.model_dump())
        return SimulationParameters.from_settings(settings.monte_carlo, **overrides)


class DefaultsResponse(BaseModel):
    num_simulations: int
    simulation_length: int
    initial_capital: float
    trades_per_year: float
    min_trades: int
    min_resample_pool_size: int


@router.get("/defaults", response_model=DefaultsResponse)
def get_defaults(settings: ApplicationSettings = Depends(get_settings)):
    """Get configured simulation defaults and input minimums."""
    mc = settings.monte_carlo
    return DefaultsResponse(
        num_simulations=mc.default_num_simulations,
        simulation_length=mc.default_simulation_length,
        initial_capital=mc.default_initial_capital,
        trades_per_year=mc.default_trades_per_year,
        min_trades=mc.min_trades,
        min_resample_pool_size=mc.min_resample_pool_size,
    )


@router.post("/simulations")
def run_simulation(
    request: SimulationRequest,
    settings: ApplicationSettings = Depends(get_settings)
) -> Dict[str, Any]:
    """Run a Monte Carlo simulation over the submitted trades."""
    params = request.to_parameters(settings)
    logger.info(
        "Running risk simulation",
        trades=len(request.trades),
        num_simulations=params.num_simulations,
        simulation_length=params.simulation_length,
        resample_method=params.resample_method.value,
    )

    engine = MonteCarloEngine(settings.monte_carlo)
    result = engine.run([trade.to_trade() for trade in request.trades], params)
    return result.to_dict(include_paths=request.include_paths)
