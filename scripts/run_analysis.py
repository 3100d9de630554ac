#!/usr/bin/env python3
"""
Standalone analysis script.

Loads the latest dataset for a game, prints number statistics for every
zone, writes plotly HTML charts and optionally asks the configured
provider for a structured analysis.
"""
import argparse
import json
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from lotterymaster import config
from lotterymaster.ai_analysis import AIAnalysisService
from lotterymaster.analysis import frequency_distribution, number_statistics
from lotterymaster.charts import frequency_figure, gap_figure, trend_figure
from lotterymaster.errors import LotteryError
from lotterymaster.games import PROFILES, profile_for
from lotterymaster.scraper import latest_dataset, load_dataset


def print_zone(stats, distribution):
    df = stats["dataframe"]
    print(f"\n{'='*70}")
    print(f"{stats['game']} / {stats['zone']} (last {stats['period_count']} draws)")
    print(f"{'='*70}")
    hot = df.sort_values(["frequency", "number"], ascending=[False, True]).head(5)
    print("Hottest : " + ", ".join(f"{r.number}({r.frequency})" for r in hot.itertuples()))
    overdue = df.sort_values(["current_gap", "number"], ascending=[False, True]).head(5)
    print("Overdue : " + ", ".join(f"{r.number}(gap {r.current_gap})" for r in overdue.itertuples()))
    uniformity = distribution["uniformity"]
    if uniformity:
        verdict = "non-uniform" if uniformity["significant"] else "consistent with uniform"
        print(f"Chi-squared: {uniformity['chi2_stat']} (p={uniformity['chi2_pvalue']}, {verdict})")


def main():
    parser = argparse.ArgumentParser(description="Analyse the latest lottery dataset")
    parser.add_argument("game", choices=sorted(PROFILES))
    parser.add_argument("--periods", type=int, default=config.DEFAULT_PERIOD_COUNT)
    parser.add_argument("--output-dir", default=os.path.join(config.DATA_DIR, "charts"))
    parser.add_argument("--ai", action="store_true", help="Also request a provider analysis")
    args = parser.parse_args()

    config.configure_logging()
    profile = profile_for(args.game)

    path = latest_dataset(profile.game_id)
    if path is None:
        print(f"No {profile.game_id} dataset found in {config.DATA_DIR}. Run update_data.py first.")
        sys.exit(1)

    print("Loading data...")
    records = load_dataset(path, profile.game_id)
    print(f"Loaded {len(records)} draws from {path}")

    os.makedirs(args.output_dir, exist_ok=True)
    for zone in profile.selectors():
        stats = number_statistics(records, profile.game_id, zone, args.periods)
        distribution = frequency_distribution(records, profile.game_id, zone, args.periods)
        print_zone(stats, distribution)

        prefix = os.path.join(args.output_dir, f"{profile.game_id.lower()}_{zone}")
        trend_figure(stats).write_html(f"{prefix}_trend.html")
        frequency_figure(distribution).write_html(f"{prefix}_frequency.html")
        gap_figure(stats).write_html(f"{prefix}_gaps.html")
    print(f"\nCharts written to {args.output_dir}")

    if args.ai:
        print(f"\n{'='*70}")
        print("PROVIDER ANALYSIS")
        print(f"{'='*70}")
        try:
            result = AIAnalysisService().analyze(path, profile.game_id)
        except LotteryError as e:
            print(f"Provider analysis failed: {e}")
            sys.exit(1)
        if result["fallback"]:
            print("Provider reply could not be parsed; showing the empty structure.")
        print(f"Provider: {result['provider']} ({result['model']})")
        print(json.dumps(result["structured"], ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
