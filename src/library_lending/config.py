"""Configuration management for the library lending engine.

Settings are read from ``LIBRARY_LENDING_*`` environment variables (or a
``.env`` file) and validated with Pydantic v2.
"""

import logging
import sys

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class LendingConfig(BaseSettings):
    """Runtime settings for a :class:`~library_lending.library.Library`."""

    model_config = SettingsConfigDict(
        # Use LIBRARY_LENDING_ prefix for all env vars
        env_prefix="LIBRARY_LENDING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    library_name: str = Field(
        default="community-library",
        description="Name used in log messages and demo output",
        pattern=r"^[a-z0-9-]+$",
    )

    # === Recommendations ===

    recommendation_strategy: str = Field(
        default="frequency",
        description="Strategy used by new recommendation engines",
        pattern=r"^(frequency|genre)$",
    )

    recommendation_limit: int = Field(
        default=5,
        description="Maximum number of items returned by a recommendation",
        ge=1,
        le=5,
    )

    # === Events ===

    record_events: bool = Field(
        default=True,
        description="Keep emitted lending events in memory for inspection",
    )

    # === Logging ===

    debug: bool = Field(
        default=False,
        description="Enable debug logging, including every emitted event",
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lowercase level names from the environment."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("library_name")
    @classmethod
    def validate_library_name(cls, v: str) -> str:
        if len(v) < 3:
            raise ValueError("Library name must be at least 3 characters")
        if len(v) > 50:
            raise ValueError("Library name must not exceed 50 characters")
        return v

    @property
    def effective_log_level(self) -> int:
        """Numeric logging level, forced to DEBUG in debug mode."""
        if self.debug:
            return logging.DEBUG
        return getattr(logging, self.log_level)


def configure_logging(config: LendingConfig | None = None) -> None:
    """Install the root logging handler on stderr.

    Safe to call more than once; the level is always re-applied.
    """
    config = config or get_config()
    logging.basicConfig(
        level=config.effective_log_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logging.getLogger().setLevel(config.effective_log_level)
    logging.getLogger(__name__).debug("Logging configured for %s", config.library_name)


class _ConfigStore:
    """Internal storage for configuration singleton."""

    _instance: LendingConfig | None = None


def get_config() -> LendingConfig:
    """Get or create the global configuration instance."""
    if _ConfigStore._instance is None:  # type: ignore[reportPrivateUsage]
        _ConfigStore._instance = LendingConfig()  # type: ignore[reportPrivateUsage]
    return _ConfigStore._instance  # type: ignore[reportPrivateUsage]


def reset_config() -> None:
    """Reset configuration (useful for testing)."""
    _ConfigStore._instance = None  # type: ignore[reportPrivateUsage]
