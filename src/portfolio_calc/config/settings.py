"""Engine settings and configuration."""

from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Calculation engine configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PORTFOLIO_CALC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Portfolio Calculation Engine"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # Calendar used when a caller does not pass an explicit as_of date
    timezone: str = "Asia/Kolkata"

    # XIRR solver
    xirr_initial_guess: float = 0.1
    xirr_max_iterations: int = 100
    xirr_tolerance: float = 1e-6
    xirr_lower_bound: float = -0.99
    xirr_upper_bound: float = 10.0
    bisection_max_iterations: int = 200

    # Lots and capital gains
    long_term_holding_days: int = 365
    ltcg_rate: Decimal = Decimal("0.125")
    stcg_rate: Decimal = Decimal("0.20")
    ltcg_exemption: Decimal = Decimal("125000")
    tax_exempt_interest_types: tuple[str, ...] = ("PPF", "EPF", "VPF", "SSY")

    # Goal projection
    projection_horizon_months: int = 1200
    projection_max_iterations: int = 50
    negligible_monthly_rate: float = 1e-4
    on_track_tolerance: Decimal = Decimal("0.9")


# Global settings instance (can be replaced at runtime)
_settings: Optional[EngineSettings] = None


def get_settings() -> EngineSettings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = EngineSettings()
    return _settings


def set_settings(settings: EngineSettings) -> None:
    """Set the global settings instance (used by host applications and tests)."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
