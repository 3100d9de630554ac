#!/usr/bin/env python3
"""
Data Update Script for LotteryMaster

1. Removes datasets left over from previous days
2. Fetches today's draw history for each requested game
3. Prints a per-game summary
"""
import argparse
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from lotterymaster import config
from lotterymaster.games import PROFILES
from lotterymaster.scraper import LotteryScraper


def update_pipeline(games, data_dir=None, history_limit=None):
    """Acquire today's dataset for every game in `games`."""
    print("=" * 60)
    print("LOTTERYMASTER: DATA UPDATE")
    print("=" * 60)

    scraper = LotteryScraper(data_dir=data_dir, history_limit=history_limit)
    print(f"Data directory: {scraper.data_dir}")

    results = {game: scraper.scrape(game) for game in games}

    print(f"\n{'='*60}")
    failures = 0
    for game, result in results.items():
        if result.success:
            marker = "✓ new" if result.is_new_file else "✓ kept"
            print(f"{marker:8s} {PROFILES[game].display_name}: {result.file_name}")
        else:
            failures += 1
            print(f"✗ {PROFILES[game].display_name}: {result.message} [{result.error}]")
    print(f"{'='*60}")
    return failures


def main():
    parser = argparse.ArgumentParser(description="Fetch today's lottery draw histories")
    parser.add_argument("--game", choices=sorted(PROFILES), action="append",
                        help="Game to update (repeatable, default: all)")
    parser.add_argument("--data-dir", default=None, help="Override LOTTERY_DATA_PATH")
    parser.add_argument("--limit", type=int, default=None, help="Number of draws to request")
    args = parser.parse_args()

    config.configure_logging()
    failures = update_pipeline(args.game or list(PROFILES), args.data_dir, args.limit)
    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
