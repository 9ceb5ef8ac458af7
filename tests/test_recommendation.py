"""
Tests for the recommendation engine.

These tests verify that:
1. Frequency based recommendations follow the top genre, newest first
2. Ties for the top genre go to the genre borrowed first
3. Results never include held items and never exceed five entries
4. Strategies can be swapped without rebuilding anything
"""

import pytest

from library_lending.exceptions import InvalidArgumentError
from library_lending.recommendation import (
    MAX_RECOMMENDATIONS,
    FrequencyBasedStrategy,
    GenreBasedStrategy,
    RecommendationEngine,
    RecommendationStrategy,
    get_strategy,
)


@pytest.fixture
def borrow(engine):
    """Check an item out and straight back in for a patron."""

    def _borrow(patron, key, keep=False):
        engine.checkout(patron.id, key)
        if not keep:
            engine.return_item(patron.id, key)

    return _borrow


class TestFrequencyBased:
    def test_recommends_top_genre_newest_first(self, catalog, registered, borrow, make_book):
        alice, _ = registered
        catalog.add(make_book("p-old", year=1994))
        catalog.add(make_book("p-new", year=2018))
        catalog.add(make_book("p-mid", year=2005))
        catalog.add(make_book("f-1", genre="Fantasy", year=2020))
        catalog.add(make_book("p-read-1", year=2001))
        catalog.add(make_book("p-read-2", year=2002))
        borrow(alice, "p-read-1")
        borrow(alice, "p-read-2")

        results = FrequencyBasedStrategy().recommend(alice, catalog)

        assert all(item.genre == "Programming" for item in results)
        years = [item.publication_year for item in results]
        assert years == sorted(years, reverse=True)
        assert [item.key for item in results][:3] == ["p-new", "p-mid", "p-read-2"]

    def test_tie_goes_to_first_borrowed_genre(self, catalog, registered, borrow, make_book):
        alice, _ = registered
        catalog.add(make_book("f-read", genre="Fantasy"))
        catalog.add(make_book("p-read", genre="Programming"))
        catalog.add(make_book("f-new", genre="Fantasy", year=2010))
        catalog.add(make_book("p-new", genre="Programming", year=2020))
        borrow(alice, "f-read")
        borrow(alice, "p-read")

        strategy = FrequencyBasedStrategy()

        assert strategy.top_genre(alice, catalog) == "Fantasy"
        assert {item.genre for item in strategy.recommend(alice, catalog)} == {"Fantasy"}

    def test_closed_records_count_toward_frequency(self, catalog, registered, borrow, make_book):
        alice, _ = registered
        for key in ("f1", "f2"):
            catalog.add(make_book(key, genre="Fantasy"))
        catalog.add(make_book("p1", genre="Programming"))
        borrow(alice, "p1", keep=True)
        borrow(alice, "f1")
        borrow(alice, "f2")

        assert FrequencyBasedStrategy().top_genre(alice, catalog) == "Fantasy"

    def test_no_history_recommends_everything_available(self, catalog, alice, make_book):
        catalog.add(make_book("a", year=2000))
        catalog.add(make_book("b", genre="Fantasy", year=2010))

        results = FrequencyBasedStrategy().recommend(alice, catalog)

        assert [item.key for item in results] == ["b", "a"]

    def test_removed_items_ignored_in_history(self, catalog, registered, borrow, make_book):
        alice, _ = registered
        catalog.add(make_book("gone", genre="Horror"))
        catalog.add(make_book("p1"))
        borrow(alice, "gone")
        catalog.remove("gone")

        assert FrequencyBasedStrategy().top_genre(alice, catalog) is None

    def test_unavailable_items_skipped(self, engine, catalog, registered, borrow, make_book):
        alice, bob = registered
        catalog.add(make_book("read"))
        catalog.add(make_book("out"))
        catalog.add(make_book("shelf"))
        borrow(alice, "read")
        engine.checkout(bob.id, "out")

        keys = [item.key for item in FrequencyBasedStrategy().recommend(alice, catalog)]

        assert "out" not in keys
        assert "shelf" in keys


class TestGenreBased:
    def test_matches_any_borrowed_genre_in_catalog_order(
        self, catalog, registered, borrow, make_book
    ):
        alice, _ = registered
        catalog.add(make_book("f1", genre="Fantasy"))
        catalog.add(make_book("h1", genre="History"))
        catalog.add(make_book("p1", genre="Programming"))
        catalog.add(make_book("f2", genre="Fantasy"))
        catalog.add(make_book("p2", genre="Programming"))
        borrow(alice, "f1")
        borrow(alice, "p1")

        results = GenreBasedStrategy().recommend(alice, catalog)

        assert [item.key for item in results] == ["f1", "p1", "f2", "p2"]

    def test_falls_back_to_all_available(self, catalog, registered, borrow, make_book):
        alice, _ = registered
        catalog.add(make_book("h1", genre="History"))
        catalog.add(make_book("p1", genre="Programming"))
        borrow(alice, "h1", keep=True)

        results = GenreBasedStrategy().recommend(alice, catalog)

        assert [item.key for item in results] == ["p1"]

    def test_non_book_items_only_in_fallback(
        self, catalog, registered, borrow, make_book, sample_dvd
    ):
        alice, _ = registered
        catalog.add(sample_dvd)
        catalog.add(make_book("p1"))
        catalog.add(make_book("p2"))
        borrow(alice, "p1")

        keys = [item.key for item in GenreBasedStrategy().recommend(alice, catalog)]

        assert keys == ["p1", "p2"]


class TestInvariants:
    @pytest.mark.parametrize("strategy", [FrequencyBasedStrategy(), GenreBasedStrategy()])
    def test_never_more_than_five(self, catalog, registered, borrow, make_book, strategy):
        alice, _ = registered
        for i in range(12):
            catalog.add(make_book(f"p{i}", year=1990 + i))
        borrow(alice, "p0")

        assert len(strategy.recommend(alice, catalog)) == MAX_RECOMMENDATIONS

    @pytest.mark.parametrize("strategy", [FrequencyBasedStrategy(), GenreBasedStrategy()])
    def test_never_recommends_held_items(self, catalog, registered, borrow, make_book, strategy):
        alice, _ = registered
        catalog.add(make_book("held", year=2024), copies=3)
        catalog.add(make_book("other", year=2000))
        borrow(alice, "held", keep=True)

        keys = [item.key for item in strategy.recommend(alice, catalog)]

        assert "held" not in keys
        assert keys == ["other"]


class TestRecommendationEngine:
    def test_defaults_to_frequency(self):
        engine = RecommendationEngine()
        assert isinstance(engine.strategy, FrequencyBasedStrategy)
        assert engine.limit == MAX_RECOMMENDATIONS

    def test_limit_applied(self, catalog, alice, make_book):
        for i in range(4):
            catalog.add(make_book(f"b{i}"))

        engine = RecommendationEngine(limit=2)

        assert len(engine.recommend(alice, catalog)) == 2

    @pytest.mark.parametrize("limit", [0, 6])
    def test_limit_out_of_range(self, limit):
        with pytest.raises(InvalidArgumentError):
            RecommendationEngine(limit=limit)

    def test_swap_strategy_at_runtime(self, catalog, registered, borrow, make_book):
        alice, _ = registered
        catalog.add(make_book("f-read", genre="Fantasy"))
        catalog.add(make_book("p-read", genre="Programming"))
        catalog.add(make_book("f-new", genre="Fantasy", year=2010))
        catalog.add(make_book("p-new", genre="Programming", year=2020))
        borrow(alice, "f-read")
        borrow(alice, "p-read")
        engine = RecommendationEngine(FrequencyBasedStrategy())
        by_frequency = engine.recommend(alice, catalog)

        engine.strategy = GenreBasedStrategy()
        by_genre = engine.recommend(alice, catalog)

        assert {item.genre for item in by_frequency} == {"Fantasy"}
        assert {item.genre for item in by_genre} == {"Fantasy", "Programming"}

    def test_custom_strategy(self, catalog, alice, make_book):
        class FirstItem(RecommendationStrategy):
            name = "first"

            def recommend(self, patron, catalog, limit=MAX_RECOMMENDATIONS):
                return catalog.items()[:1]

        catalog.add(make_book("a"))
        catalog.add(make_book("b"))

        results = RecommendationEngine(FirstItem()).recommend(alice, catalog)

        assert [item.key for item in results] == ["a"]


class TestGetStrategy:
    def test_known_names(self):
        assert isinstance(get_strategy("frequency"), FrequencyBasedStrategy)
        assert isinstance(get_strategy("genre"), GenreBasedStrategy)

    def test_unknown_name(self):
        with pytest.raises(InvalidArgumentError, match="collaborative"):
            get_strategy("collaborative")
