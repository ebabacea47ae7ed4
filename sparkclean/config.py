"""
Centralized configuration with environment variable overrides.

Scheduling constants, booking defaults and business details are
configurable here. Engine modules read them from ``settings``.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from sparkclean.logging_context import RequestIdFilter

load_dotenv()

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

LOG_FORMAT = "%(asctime)s [%(name)s] [%(request_id)s] %(levelname)s: %(message)s"


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_bool(env_var: str, default: str) -> bool:
    """Parse a boolean flag from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default).strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for {env_var}: {raw!r}")


@dataclass(frozen=True)
class BusinessConfig:
    """Business-specific settings loaded from environment or defaults."""

    name: str = os.getenv("BUSINESS_NAME", "SparkClean")
    timezone: str = os.getenv("BUSINESS_TIMEZONE", "America/New_York")
    currency: str = os.getenv("CURRENCY", "USD")


@dataclass(frozen=True)
class SchedulingConfig:
    """Slot generation and booking commit settings."""

    slot_granularity_minutes: int = _safe_int("SLOT_GRANULARITY_MINUTES", "30")
    default_booking_status: str = os.getenv("DEFAULT_BOOKING_STATUS", "pending")
    revalidate_bookings: bool = _safe_bool("REVALIDATE_BOOKINGS", "true")
    available_dates_lookahead_days: int = _safe_int("AVAILABLE_DATES_LOOKAHEAD_DAYS", "14")
    upcoming_bookings_limit: int = _safe_int("UPCOMING_BOOKINGS_LIMIT", "5")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessConfig = field(default_factory=BusinessConfig)
    scheduling: SchedulingConfig = field(default_factory=SchedulingConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    granularity = config.scheduling.slot_granularity_minutes
    if not 1 <= granularity <= 24 * 60:
        raise ValueError(
            f"SLOT_GRANULARITY_MINUTES must be between 1 and 1440, got {granularity}"
        )
    if config.scheduling.default_booking_status not in ("pending", "confirmed"):
        raise ValueError(
            "DEFAULT_BOOKING_STATUS must be 'pending' or 'confirmed', "
            f"got {config.scheduling.default_booking_status!r}"
        )
    if config.scheduling.available_dates_lookahead_days < 1:
        raise ValueError(
            "AVAILABLE_DATES_LOOKAHEAD_DAYS must be >= 1, "
            f"got {config.scheduling.available_dates_lookahead_days}"
        )
    if config.scheduling.upcoming_bookings_limit < 1:
        raise ValueError(
            "UPCOMING_BOOKINGS_LIMIT must be >= 1, "
            f"got {config.scheduling.upcoming_bookings_limit}"
        )
    if not config.business.currency:
        raise ValueError("CURRENCY must not be empty")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    handler = logging.StreamHandler()
    handler.addFilter(RequestIdFilter())
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[handler],
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.business.name)
    return config


# Singleton instance
settings = load_config()
