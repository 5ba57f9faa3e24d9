"""
blockrisk Configuration Settings
Uses pydantic-settings for environment-based configuration management.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MonteCarloSettings(BaseSettings):
    """Monte Carlo engine configuration settings."""
    model_config = SettingsConfigDict(env_prefix="MONTE_CARLO_")

    # Validation thresholds
    min_trades: int = Field(default=10, ge=1, description="Minimum input trades per run")
    min_resample_pool_size: int = Field(default=5, ge=1, description="Minimum resample pool size")

    # Seeding
    guarantee_seed_offset: int = Field(
        default=999999, description="Seed offset for guaranteed worst-case placement"
    )

    # Parameter defaults
    default_num_simulations: int = Field(default=1000, gt=0, description="Default path count")
    default_simulation_length: int = Field(default=252, gt=0, description="Default steps per path")
    default_trades_per_year: float = Field(default=252.0, gt=0, description="Default annualization basis")
    default_initial_capital: float = Field(default=100000.0, gt=0, description="Default starting capital")

    # Execution
    n_workers: int = Field(default=1, description="Worker processes (-1 uses all cores, 1 runs in-process)")
    parallel_threshold: int = Field(default=2000, ge=1, description="Minimum paths before using workers")
    timeout_seconds: Optional[float] = Field(default=None, description="Run deadline in seconds")

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("timeout_seconds must be positive")
        return v


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""
    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        description="Log format"
    )
    json_format: bool = Field(default=True, description="Use JSON format for logs")


class ApplicationSettings(BaseSettings):
    """Main application settings aggregating all sub-settings."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Application info
    app_name: str = Field(default="blockrisk", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    environment: str = Field(default="development", description="Environment (development/staging/production)")

    # Sub-settings
    monte_carlo: MonteCarloSettings = Field(default_factory=MonteCarloSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> ApplicationSettings:
    """Get cached application settings."""
    return ApplicationSettings()
