"""Logging configuration."""

import logging
import sys

from portfolio_calc.config.settings import get_settings


def setup_logging() -> None:
    """Configure engine logging for a host process."""
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Pydantic validation chatter is not useful outside debugging
    logging.getLogger("pydantic").setLevel(logging.WARNING)
