"""
Library Lending package.

An in-memory lending engine for a small library.

Key Components:
- models: Pydantic models for items, patrons and circulation outcomes
- catalog: item metadata, copy counts and search
- waitlist: per-item FIFO reservation queues and notification listeners
- lending: checkout/return orchestration
- recommendation: swappable recommendation strategies
- library: facade wiring everything together
- config: settings with pydantic-settings
"""

__version__ = "0.1.0"

from .catalog import Catalog, InventoryLine
from .config import LendingConfig, configure_logging, get_config, reset_config
from .events import EventLog
from .exceptions import InvalidArgumentError, LibraryError, NotFoundError
from .lending import LendingEngine
from .library import Library
from .recommendation import (
    FrequencyBasedStrategy,
    GenreBasedStrategy,
    RecommendationEngine,
    RecommendationStrategy,
    get_strategy,
)
from .waitlist import Notifiable, WaitlistRegistry

__all__ = [
    "Catalog",
    "EventLog",
    "FrequencyBasedStrategy",
    "GenreBasedStrategy",
    "InvalidArgumentError",
    "InventoryLine",
    "LendingConfig",
    "LendingEngine",
    "Library",
    "LibraryError",
    "Notifiable",
    "NotFoundError",
    "RecommendationEngine",
    "RecommendationStrategy",
    "WaitlistRegistry",
    "__version__",
    "configure_logging",
    "get_config",
    "get_strategy",
    "reset_config",
]
