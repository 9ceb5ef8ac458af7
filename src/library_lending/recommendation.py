"""Recommendation engine for the library lending system.

Recommendations are derived from a patron's borrowing history and the
current state of the catalog. Algorithms are interchangeable strategies:

1. **Frequency based**: the patron's single most borrowed genre, newest first
2. **Genre based**: any genre the patron has ever borrowed, catalog order

Both only suggest items that have a copy on the shelf and that the patron
does not currently hold, and never return more than five items.
"""

import logging
from abc import ABC, abstractmethod
from collections import Counter

from .catalog import Catalog
from .exceptions import InvalidArgumentError
from .models.item import LibraryItem, item_genre
from .models.patron import Patron

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 5


def _borrowable(patron: Patron, catalog: Catalog) -> list[LibraryItem]:
    """Items with a copy available that the patron is not holding, in catalog order."""
    held = patron.held_keys
    return [
        item
        for item in catalog.items()
        if catalog.available_copies(item.key) > 0 and item.key not in held
    ]


def _history_genres(patron: Patron, catalog: Catalog) -> list[str]:
    """Genres of every borrowed item, in history order.

    Records whose item has since left the catalog, or whose item has no
    genre, are skipped.
    """
    genres = []
    for record in patron.borrowing_history:
        item = catalog.find(record.item_key)
        genre = item_genre(item) if item is not None else None
        if genre:
            genres.append(genre)
    return genres


class RecommendationStrategy(ABC):
    """Abstraction for recommendation algorithms."""

    name: str = ""

    @abstractmethod
    def recommend(
        self,
        patron: Patron,
        catalog: Catalog,
        limit: int = MAX_RECOMMENDATIONS,
    ) -> list[LibraryItem]:
        """Return at most ``limit`` items suggested for ``patron``."""
        ...


class FrequencyBasedStrategy(RecommendationStrategy):
    """
    Recommend items from the patron's most borrowed genre, newest first.

    The top genre is the one with the highest count across the full history,
    returned records included. On a tie the genre the patron borrowed first
    wins. With no genre history every borrowable item is a candidate.
    """

    name = "frequency"

    def top_genre(self, patron: Patron, catalog: Catalog) -> str | None:
        # Counter keeps first-seen order and most_common() is stable on ties
        counts = Counter(_history_genres(patron, catalog))
        if not counts:
            return None
        return counts.most_common(1)[0][0]

    def recommend(
        self,
        patron: Patron,
        catalog: Catalog,
        limit: int = MAX_RECOMMENDATIONS,
    ) -> list[LibraryItem]:
        top = self.top_genre(patron, catalog)
        candidates = [
            item
            for item in _borrowable(patron, catalog)
            if top is None or item_genre(item) == top
        ]
        candidates.sort(key=lambda item: item.publication_year, reverse=True)
        logger.debug("Frequency strategy: top genre %s, %d candidates", top, len(candidates))
        return candidates[:limit]


class GenreBasedStrategy(RecommendationStrategy):
    """
    Recommend items sharing any genre the patron has borrowed.

    Falls back to every borrowable item when nothing matches. Order is the
    catalog's insertion order.
    """

    name = "genre"

    def recommend(
        self,
        patron: Patron,
        catalog: Catalog,
        limit: int = MAX_RECOMMENDATIONS,
    ) -> list[LibraryItem]:
        liked = set(_history_genres(patron, catalog))
        borrowable = _borrowable(patron, catalog)
        matches = [item for item in borrowable if item_genre(item) in liked]
        if not matches:
            logger.debug("Genre strategy: no genre match for %s, falling back", patron.id)
            matches = borrowable
        return matches[:limit]


STRATEGIES: dict[str, type[RecommendationStrategy]] = {
    FrequencyBasedStrategy.name: FrequencyBasedStrategy,
    GenreBasedStrategy.name: GenreBasedStrategy,
}


def get_strategy(name: str) -> RecommendationStrategy:
    """
    Build a strategy from its registered name.

    Raises:
        InvalidArgumentError: If no strategy is registered under ``name``
    """
    try:
        return STRATEGIES[name]()
    except KeyError:
        raise InvalidArgumentError(
            f"Unknown recommendation strategy {name!r}; expected one of {sorted(STRATEGIES)}"
        ) from None


class RecommendationEngine:
    """
    Holds the current strategy and delegates to it.

    ``strategy`` is a plain attribute: assign a new one at any time without
    touching patrons or the catalog.
    """

    def __init__(
        self,
        strategy: RecommendationStrategy | None = None,
        limit: int = MAX_RECOMMENDATIONS,
    ) -> None:
        if not 1 <= limit <= MAX_RECOMMENDATIONS:
            raise InvalidArgumentError(
                f"limit must be between 1 and {MAX_RECOMMENDATIONS}, got {limit}"
            )
        self.strategy = strategy or FrequencyBasedStrategy()
        self.limit = limit

    def recommend(self, patron: Patron, catalog: Catalog) -> list[LibraryItem]:
        items = self.strategy.recommend(patron, catalog, self.limit)
        logger.info(
            "Recommended %d item(s) for %s using %s",
            len(items),
            patron.id,
            self.strategy.name or type(self.strategy).__name__,
        )
        return items[: self.limit]
