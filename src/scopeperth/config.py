"""
Centralized Configuration Module

Provides configuration classes and environment variable loading for all components.

Usage:
    from scopeperth.config import get_config

    config = get_config()
    budget = config.metrics.budget
    api_port = config.api.port
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

from scopeperth.core import constants

# Load .env file if present
load_dotenv()


def _get_project_root() -> Path:
    """Get the project root directory."""
    # config.py -> scopeperth -> src -> project_root
    current = Path(__file__).resolve()
    return current.parent.parent.parent


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _env_list(name: str, default: str) -> Tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass
class SupabaseConfig:
    """Remote data store credentials (read-only anon key)."""

    url: Optional[str] = field(default_factory=lambda: os.getenv(
        "SCOPEPERTH_SUPABASE_URL", os.getenv("SUPABASE_URL")
    ))
    key: Optional[str] = field(default_factory=lambda: os.getenv(
        "SCOPEPERTH_SUPABASE_KEY", os.getenv("SUPABASE_ANON_KEY")
    ))

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.key)


@dataclass
class DatabaseConfig:
    """Local preference store configuration."""

    path: str = field(default_factory=lambda: os.getenv(
        "SCOPEPERTH_PREFS_DB",
        str(_get_project_root() / "scopeperth_prefs.db")
    ))

    def __post_init__(self):
        # Resolve relative paths
        if not os.path.isabs(self.path):
            self.path = str(_get_project_root() / self.path)


@dataclass
class APIConfig:
    """API server configuration."""

    host: str = field(default_factory=lambda: os.getenv(
        "SCOPEPERTH_API_HOST", "127.0.0.1"
    ))
    port: int = field(default_factory=lambda: int(os.getenv(
        "SCOPEPERTH_API_PORT", "5000"
    )))
    debug: bool = field(default_factory=lambda: _env_bool("SCOPEPERTH_DEBUG", "false"))


@dataclass
class MetricsConfig:
    """Thresholds used by the derived-metrics engine.

    Every value here changed at least once in the dashboard's history, so
    none of them are hard-coded in the metric functions themselves.
    """

    budget: int = field(default_factory=lambda: int(os.getenv(
        "SCOPEPERTH_BUDGET", str(constants.DEFAULT_BUDGET)
    )))
    best_value_discount_pct: float = field(default_factory=lambda: float(os.getenv(
        "SCOPEPERTH_BEST_VALUE_DISCOUNT_PCT", str(constants.DEFAULT_BEST_VALUE_DISCOUNT_PCT)
    )))
    investment_pick_discount_pct: float = field(default_factory=lambda: float(os.getenv(
        "SCOPEPERTH_INVESTMENT_PICK_DISCOUNT_PCT",
        str(constants.DEFAULT_INVESTMENT_PICK_DISCOUNT_PCT),
    )))
    investment_pick_limit: int = constants.DEFAULT_INVESTMENT_PICK_LIMIT
    min_priced_for_median: int = field(default_factory=lambda: int(os.getenv(
        "SCOPEPERTH_MIN_PRICED_FOR_MEDIAN", str(constants.DEFAULT_MIN_PRICED_FOR_MEDIAN)
    )))
    motivated_days_on_market: int = field(default_factory=lambda: int(os.getenv(
        "SCOPEPERTH_MOTIVATED_DAYS", str(constants.DEFAULT_MOTIVATED_DAYS_ON_MARKET)
    )))
    motivation_score_threshold: int = constants.DEFAULT_MOTIVATION_SCORE_THRESHOLD
    near_beach_km: float = field(default_factory=lambda: float(os.getenv(
        "SCOPEPERTH_NEAR_BEACH_KM", str(constants.DEFAULT_NEAR_BEACH_KM)
    )))
    coast_longitude: float = field(default_factory=lambda: float(os.getenv(
        "SCOPEPERTH_COAST_LONGITUDE", str(constants.DEFAULT_COAST_LONGITUDE)
    )))
    rental_reference_bedrooms: int = constants.RENTAL_REFERENCE_BEDROOMS
    rental_reference_property_type: str = constants.RENTAL_REFERENCE_PROPERTY_TYPE
    exclude_unpriced_under_max_price: bool = field(default_factory=lambda: _env_bool(
        "SCOPEPERTH_EXCLUDE_UNPRICED_UNDER_MAX_PRICE", "true"
    ))
    new_listing_days: int = constants.DEFAULT_NEW_LISTING_DAYS
    timezone: str = field(default_factory=lambda: os.getenv(
        "SCOPEPERTH_TIMEZONE", constants.DEFAULT_TIMEZONE
    ))

    def __post_init__(self):
        if not 0 <= self.best_value_discount_pct < 100:
            self.best_value_discount_pct = constants.DEFAULT_BEST_VALUE_DISCOUNT_PCT
        if self.min_priced_for_median < 1:
            self.min_priced_for_median = constants.DEFAULT_MIN_PRICED_FOR_MEDIAN


@dataclass
class LoggingConfig:
    """Logging configuration.

    ``quiet_loggers`` are third-party loggers (the Supabase HTTP stack and
    the Flask dev server) held at ``quiet_level`` so request chatter does not
    drown the dashboard's own messages.
    """

    level: str = field(default_factory=lambda: os.getenv(
        "SCOPEPERTH_LOG_LEVEL", "INFO"
    ).upper())
    log_file: Optional[str] = field(default_factory=lambda: os.getenv(
        "SCOPEPERTH_LOG_FILE"
    ) or None)
    format: str = field(default_factory=lambda: os.getenv(
        "SCOPEPERTH_LOG_FORMAT", constants.DEFAULT_LOG_FORMAT
    ))
    date_format: str = field(default_factory=lambda: os.getenv(
        "SCOPEPERTH_LOG_DATE_FORMAT", constants.DEFAULT_LOG_DATE_FORMAT
    ))
    quiet_loggers: Tuple[str, ...] = field(default_factory=lambda: _env_list(
        "SCOPEPERTH_QUIET_LOGGERS", ",".join(constants.DEFAULT_QUIET_LOGGERS)
    ))
    quiet_level: str = field(default_factory=lambda: os.getenv(
        "SCOPEPERTH_QUIET_LOG_LEVEL", "WARNING"
    ).upper())

    def __post_init__(self):
        self.level = self.level.upper()
        self.quiet_level = self.quiet_level.upper()
        if self.level not in constants.LOG_LEVELS:
            self.level = "INFO"
        if self.quiet_level not in constants.LOG_LEVELS:
            self.quiet_level = "WARNING"
        if self.log_file:
            self.log_file = str(Path(self.log_file).expanduser())


@dataclass
class Config:
    """Main configuration container."""

    supabase: SupabaseConfig = field(default_factory=SupabaseConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    api: APIConfig = field(default_factory=APIConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Singleton instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        Config: The application configuration.
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the configuration (useful for testing)."""
    global _config
    _config = None
