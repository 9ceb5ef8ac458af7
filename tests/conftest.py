"""Test configuration and fixtures for the library lending engine.

Every test gets fresh, isolated components:
1. Configuration built explicitly, never read from the developer's env
2. A shared EventLog wired into catalog, waitlist and engine
3. A deterministic clock so borrow records have predictable timestamps
"""

import os
from collections.abc import Generator
from datetime import datetime, timedelta

import pytest

from library_lending.catalog import Catalog
from library_lending.config import LendingConfig, reset_config
from library_lending.events import EventLog
from library_lending.lending import LendingEngine
from library_lending.library import Library
from library_lending.models.item import DVD, Book, Magazine
from library_lending.models.patron import Patron
from library_lending.waitlist import WaitlistRegistry


class FakeClock:
    """Clock that advances one minute per reading."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 15, 10, 0, 0)

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(minutes=1)
        return current


def _make_book(
    key: str,
    title: str | None = None,
    genre: str = "Programming",
    year: int = 2000,
    author: str = "Test Author",
) -> Book:
    return Book(
        key=key,
        title=title or f"Book {key}",
        author=author,
        publication_year=year,
        genre=genre,
    )


@pytest.fixture
def make_book():
    """Factory for books with sensible defaults."""
    return _make_book


# === Environment Fixtures ===


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Provide a clean environment without LIBRARY_LENDING_* variables."""
    original_env = os.environ.copy()

    for key in list(os.environ.keys()):
        if key.startswith("LIBRARY_LENDING_"):
            del os.environ[key]

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def test_config(clean_env) -> Generator[LendingConfig, None, None]:  # noqa: ARG001
    """Provide a test-specific configuration."""
    reset_config()

    config = LendingConfig(
        _env_file=None,
        library_name="test-library",
        debug=True,
        log_level="DEBUG",
    )

    yield config

    reset_config()


# === Component Fixtures ===


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def events() -> EventLog:
    return EventLog()


@pytest.fixture
def catalog(events: EventLog) -> Catalog:
    return Catalog(events)


@pytest.fixture
def waitlist(events: EventLog) -> WaitlistRegistry:
    return WaitlistRegistry(events)


@pytest.fixture
def engine(catalog: Catalog, waitlist: WaitlistRegistry, events: EventLog, clock) -> LendingEngine:
    return LendingEngine(catalog, waitlist, events, clock=clock)


@pytest.fixture
def library(test_config: LendingConfig, clock: FakeClock) -> Library:
    return Library(test_config, clock=clock)


# === Test Data Fixtures ===


@pytest.fixture
def sample_book() -> Book:
    return Book(
        key="978-0134685991",
        title="Effective Java",
        author="Joshua Bloch",
        publication_year=2018,
        genre="Programming",
    )


@pytest.fixture
def sample_dvd() -> DVD:
    return DVD(
        key="dvd-inception-2010",
        title="Inception",
        director="Christopher Nolan",
        publication_year=2010,
        duration_minutes=148,
    )


@pytest.fixture
def sample_magazine() -> Magazine:
    return Magazine(
        key="mag-science-today-58",
        title="Science Today",
        publisher="Editorial",
        publication_year=2024,
        issue_number=58,
    )


@pytest.fixture
def alice() -> Patron:
    return Patron(id="P001", name="Alice", email="alice@example.com")


@pytest.fixture
def bob() -> Patron:
    return Patron(id="P002", name="Bob")


@pytest.fixture
def registered(engine: LendingEngine, waitlist: WaitlistRegistry, alice: Patron, bob: Patron):
    """Register alice and bob with the engine and as waitlist listeners."""
    for patron in (alice, bob):
        engine.register_patron(patron)
        waitlist.register_listener(patron.id, patron.notify_available)
    return alice, bob


# === Cleanup Fixtures ===


@pytest.fixture(autouse=True)
def cleanup_after_test():
    """Reset global configuration after each test."""
    yield
    reset_config()
