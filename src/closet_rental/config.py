"""Application configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from closet_rental.utils.config_store import load_config_data, update_config_section
from closet_rental.version import __app_name__, __company__

APP_NAME = __app_name__
APP_DATA_DIRNAME = "ClosetRental"
IN_MEMORY_DATABASE = ":memory:"
LOGS_DIRNAME = "logs"
LOG_FILENAME = "app.log"
LOG_MAX_BYTES = 1_000_000
LOG_BACKUP_COUNT = 3
CONFIG_FILENAME = "config.json"
ENGINE_SECTION = "engine"

CURRENCY_CODE = "VND"
DATE_DISPLAY_FORMAT = "%d/%m/%Y"
DEFAULT_TOP_N = 5
MIN_RENTAL_DAYS = 1
MAX_DISCOUNT_PERCENT = 100
# SQLite INTEGER is signed 64-bit.
MAX_SQLITE_INTEGER = 2**63 - 1
# One line costs at most 1e14 per day.
MAX_RENTAL_PRICE = 1_000_000_000
MAX_QUANTITY = 100_000

REVENUE_WEEKS = 12
REVENUE_MONTHS = 12
REVENUE_YEARS = 5


@dataclass(frozen=True)
class AppConfig:
    """Static configuration values for ClosetRental."""

    app_name: str = APP_NAME
    organization_name: str = __company__


@dataclass(frozen=True)
class EngineSettings:
    """Runtime settings for the rental engine."""

    database: str = IN_MEMORY_DATABASE
    enforce_availability: bool = False
    top_n: int = DEFAULT_TOP_N
    currency: str = CURRENCY_CODE
    log_level: str = "INFO"


def load_engine_settings(config_path: Path) -> EngineSettings:
    """Load engine settings from the JSON config file, falling back to defaults."""
    data = load_config_data(config_path).get(ENGINE_SECTION)
    if not isinstance(data, dict):
        return EngineSettings()
    defaults = EngineSettings()
    top_n = data.get("top_n", defaults.top_n)
    if not isinstance(top_n, int) or isinstance(top_n, bool) or top_n < 1:
        top_n = defaults.top_n
    return EngineSettings(
        database=str(data.get("database") or defaults.database),
        enforce_availability=bool(
            data.get("enforce_availability", defaults.enforce_availability)
        ),
        top_n=top_n,
        currency=str(data.get("currency") or defaults.currency),
        log_level=str(data.get("log_level") or defaults.log_level).upper(),
    )


def save_engine_settings(config_path: Path, settings: EngineSettings) -> None:
    """Save engine settings to disk, keeping other config sections."""
    update_config_section(
        config_path,
        ENGINE_SECTION,
        {
            "database": settings.database,
            "enforce_availability": settings.enforce_availability,
            "top_n": settings.top_n,
            "currency": settings.currency,
            "log_level": settings.log_level,
        },
    )
