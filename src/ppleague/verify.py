"""Standalone verifier for the ppleague scheduling app.

Validates a schedule CSV (as written by `ppleague`) against a league config.
Usage: ppleague-verify <schedule.csv> [config.yaml]
"""

import csv
import sys
from pathlib import Path

import yaml

from ppleague.config import load_config
from ppleague.constraints import validate_schedule, format_validation_report
from ppleague.models import Match
from ppleague.stats import compute_stats, format_stats_report


def parse_csv_schedule(csv_path: str | Path) -> list[Match]:
    """Parse a schedule CSV back into Match objects.

    Rows without a Day or Time become unscheduled matches.
    """
    matches = []
    with open(csv_path, newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            p1 = (row.get("Player1") or "").strip()
            p2 = (row.get("Player2") or "").strip()
            if not p1 or not p2:
                continue

            week_str = (row.get("Week") or "").strip()
            try:
                week = int(week_str)
            except ValueError:
                print(f"Warning: cannot parse week {week_str!r}, skipping row")
                continue

            day = (row.get("Day") or "").strip().lower() or None
            t = (row.get("Time") or "").strip() or None
            match_id = (row.get("Match") or "").strip() or None

            matches.append(Match(
                player1=p1,
                player2=p2,
                week_number=week,
                match_id=match_id,
                scheduled_day=day,
                scheduled_time=t,
                status=(row.get("Status") or "scheduled").strip(),
            ))

    return matches


def verify(csv_path: str | Path, config: dict) -> dict:
    """Validate a schedule CSV against a loaded config and print the reports."""
    matches = parse_csv_schedule(csv_path)
    print(f"Loaded {len(matches)} matches")

    result = validate_schedule(
        matches, config["players"], config["availability"],
        total_weeks=config["season"]["total_weeks"],
    )
    print(format_validation_report(result))

    stats = compute_stats(matches, config["players"], config["availability"])
    print("\n" + format_stats_report(stats))
    return result


def main():
    if len(sys.argv) < 2:
        print("Usage: ppleague-verify <schedule.csv> [config.yaml]")
        print("  Validates a schedule CSV against the league config.")
        sys.exit(1)

    csv_path = sys.argv[1]
    config_path = sys.argv[2] if len(sys.argv) > 2 else "config.yaml"

    if not Path(csv_path).exists():
        print(f"Error: {csv_path} not found")
        sys.exit(1)
    if not Path(config_path).exists():
        print(f"Error: {config_path} not found")
        sys.exit(1)

    print(f"Loading config from {config_path}...")
    try:
        config = load_config(config_path)
    except (ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Parsing schedule from {csv_path}...")
    result = verify(csv_path, config)
    sys.exit(0 if result["valid"] else 1)


if __name__ == "__main__":
    main()
