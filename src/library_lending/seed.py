"""
Demo data for the library lending engine.

Loads a small mixed catalog and two patrons, then replays a short lending
session: checkouts, an empty shelf, a reservation and the return that
notifies the waiting patron.
"""

import logging

from .library import Library
from .models.item import DVD, Book, Magazine
from .models.patron import Patron

logger = logging.getLogger(__name__)

DEMO_BOOKS = [
    {
        "key": "978-0134685991",
        "title": "Effective Java",
        "author": "Joshua Bloch",
        "publication_year": 2018,
        "genre": "Programming",
        "copies": 3,
    },
    {
        "key": "978-0201633610",
        "title": "Design Patterns",
        "author": "Erich Gamma",
        "publication_year": 1994,
        "genre": "Programming",
        "copies": 2,
    },
    {
        "key": "978-0596009205",
        "title": "Head First Java",
        "author": "Kathy Sierra",
        "publication_year": 2005,
        "genre": "Programming",
        "copies": 1,
    },
    {
        "key": "978-0439139595",
        "title": "Harry Potter and the Goblet of Fire",
        "author": "J. K. Rowling",
        "publication_year": 2000,
        "genre": "Fantasy",
        "copies": 2,
    },
]


def seed_catalog(library: Library) -> None:
    """Add the demo books, a DVD and a magazine."""
    for data in DEMO_BOOKS:
        fields = dict(data)
        copies = fields.pop("copies")
        library.add_item(Book(**fields), copies=copies)

    library.add_item(
        DVD(
            key="dvd-inception-2010",
            title="Inception",
            director="Christopher Nolan",
            publication_year=2010,
            duration_minutes=148,
        )
    )
    library.add_item(
        Magazine(
            key="mag-science-today-58",
            title="Science Today",
            publisher="Editorial",
            publication_year=2024,
            issue_number=58,
        )
    )


def seed_demo_data(library: Library) -> dict[str, Patron]:
    """
    Seed the catalog and replay the demo session.

    Returns:
        The registered demo patrons keyed by id
    """
    seed_catalog(library)

    alice = library.register_patron(Patron(id="P001", name="Alice"))
    bob = library.register_patron(Patron(id="P002", name="Bob"))

    library.checkout(alice.id, "978-0134685991")
    library.checkout(alice.id, "978-0439139595")
    library.checkout(alice.id, "978-0596009205")

    # Only copy is out: Bob has to wait for it
    library.checkout(bob.id, "978-0596009205")
    library.reserve(bob.id, "978-0596009205")

    library.return_item(alice.id, "978-0596009205")

    logger.info("Seeded %d items and %d patrons", len(library.catalog), 2)
    return {alice.id: alice, bob.id: bob}
