#!/usr/bin/env python3
"""Demonstration of the library lending engine.

This script replays the demo session and shows:
1. The inventory after checkouts
2. The waitlist notification on return
3. Recommendations under both strategies
4. The recorded lending events
"""

# Add parent directory to path for imports
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from library_lending.config import configure_logging, get_config
from library_lending.library import Library
from library_lending.seed import seed_demo_data


def demonstrate_lending():
    """Run the demo session and print what happened."""

    config = get_config()
    configure_logging(config)
    library = Library(config)

    print(f"=== {config.library_name} lending demo ===\n")

    patrons = seed_demo_data(library)
    alice, bob = patrons["P001"], patrons["P002"]

    # 1. Inventory
    print("1. Inventory:")
    for line in library.inventory():
        print(
            f"   {line.item.title:<40} "
            f"available={line.available_copies}/{line.total_copies}"
        )
    print()

    # 2. Notifications
    print("2. Notifications:")
    for key in bob.notifications:
        print(f"   {bob.name} was told {library.find_item(key).title} is available")
    print()

    # 3. Recommendations
    print(f"3. Recommendations for {alice.name}:")
    for strategy in ("frequency", "genre"):
        library.use_strategy(strategy)
        titles = [item.title for item in library.recommend(alice.id)]
        print(f"   {strategy}: {', '.join(titles) or '(none)'}")
    print()

    # 4. Events
    print("4. Lending events:")
    for event in library.events.events:
        who = f" by {event.patron_id}" if event.patron_id else ""
        print(f"   {event.type.value:<24} {event.item_key}{who}")


if __name__ == "__main__":
    demonstrate_lending()
