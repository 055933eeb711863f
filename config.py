"""Configuration management with environment variable support."""

import logging
import os
from dataclasses import dataclass, field


def _optional_int(name: str) -> int | None:
    """Read an integer environment variable, None when unset or blank."""
    value = os.getenv(name, "").strip()
    return int(value) if value else None


@dataclass(frozen=True)
class TableConfig:
    """Default table configuration."""

    num_decks: int = field(
        default_factory=lambda: int(os.getenv("BLACKJACK_NUM_DECKS", "8"))
    )
    min_bet: int = field(
        default_factory=lambda: int(os.getenv("BLACKJACK_MIN_BET", "10"))
    )
    start_money: int = field(
        default_factory=lambda: int(os.getenv("BLACKJACK_START_MONEY", "1000"))
    )
    seed: int | None = field(default_factory=lambda: _optional_int("BLACKJACK_SEED"))


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "WARNING").upper())
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    table: TableConfig = field(default_factory=TableConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def configure_logging(app_config: AppConfig | None = None) -> None:
    """Set up root logging from the configuration (DEBUG forces debug level)."""
    app_config = app_config or config
    level = "DEBUG" if app_config.debug else app_config.logging.level
    logging.basicConfig(level=level, format=app_config.logging.format)


# Global configuration instance
config = AppConfig()
