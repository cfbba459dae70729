"""
kb catalog - List the stories a game is dealt from.
"""

from kanban.lib.config import GameConfig
from kanban.pm.catalog import load_catalog


def cmd_catalog(args, config: GameConfig) -> int:
    """Print the story catalog in reveal order."""
    entries = load_catalog(config.catalog_path)

    source = str(config.catalog_path) if config.catalog_path else "built-in"
    print(f"Story catalog ({source})")
    print()
    print(f"{'ID':<4} {'DESCRIPTION':<36} {'PRICE':>6} {'ANALYSIS':>9} {'DEV':>5} {'TEST':>5}")
    print("─" * 70)

    for entry in entries:
        desc = entry["description"]
        desc = desc[:33] + "..." if len(desc) > 36 else desc
        print(
            f"{entry['id']:<4} {desc:<36} {entry['price']:>6} "
            f"{entry['analysis_effort']:>9} {entry['dev_effort']:>5} {entry['test_effort']:>5}"
        )

    print("─" * 70)
    print(f"{len(entries)} story(s), first {config.initial_backlog} dealt at start")
    return 0
