"""Engine configuration."""

from portfolio_calc.config.settings import (
    EngineSettings,
    get_settings,
    set_settings,
    reset_settings,
)
from portfolio_calc.config.logging_config import setup_logging

__all__ = [
    "EngineSettings",
    "get_settings",
    "set_settings",
    "reset_settings",
    "setup_logging",
]
