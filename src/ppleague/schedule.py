#!/usr/bin/env python3
"""Ping-pong league schedule builder.

Generate mode (default):
    ppleague [config.yaml] [--week N] [-o DIR]

    Builds the season's round-robin fixtures from the YAML config, places
    every week's matches into table slots from player availability, and
    writes:
      {DIR}/schedule.txt  - Human-readable week-by-week + per-player schedule
      {DIR}/schedule.csv  - Machine-readable schedule (re-importable)
      {DIR}/stats.txt     - Validation report + statistics

Verify mode:
    ppleague --verify <schedule.csv> [config.yaml]

    Re-imports a schedule CSV and checks all constraints against config.
    Exit code 0 if valid, 1 if violations found.

Examples:
    ppleague                         # default config.yaml, output/
    ppleague fall.yaml -o fall2026   # alternate config and output dir
    ppleague --week 2                # only place week 2's matches
    ppleague --verify output/schedule.csv
"""

import argparse
import sys
from pathlib import Path

import yaml

from ppleague.config import load_config
from ppleague.constraints import validate_schedule, format_validation_report
from ppleague.models import Season
from ppleague.output import format_fixtures, write_schedule
from ppleague.season import add_player, advance_week, start_season
from ppleague.stats import compute_stats, format_stats_report
from ppleague.verify import verify


def build_season(config: dict, week: int | None = None) -> Season:
    """Create a season from config and run its weekly scheduling.

    With week set, the season is advanced to that week and only its matches
    are placed; every other week is left unscheduled.
    """
    season_cfg = config["season"]
    availability = config["availability"]

    season = Season(
        name=season_cfg["name"],
        total_weeks=season_cfg["total_weeks"],
        start_date=season_cfg["start_date"],
    )
    if week is not None and not 1 <= week <= season.total_weeks:
        raise ValueError(f"Week {week} is outside 1..{season.total_weeks}")
    for pid in config["players"]:
        add_player(season, pid, config["display_names"].get(pid))

    def _week_availability(n):
        return availability if week is None or week == n else {}

    def _report(n, results):
        if week is None or week == n:
            week_total = len([m for m in season.matches if m.week_number == n])
            print(f"  Week {n}: {len(results)}/{week_total} matches placed")

    _report(1, start_season(season, _week_availability(1)))
    last = season.total_weeks if week is None else week
    while season.current_week < last:
        n = season.current_week + 1
        _report(n, advance_week(season, _week_availability(n)))
    return season


def main():
    parser = argparse.ArgumentParser(
        description="Ping-pong league schedule builder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Output files (generate mode):
  {dir}/schedule.txt   Human-readable schedule (week view + per-player)
  {dir}/schedule.csv   Schedule CSV (can be checked with --verify)
  {dir}/stats.txt      Validation report + statistics

Exit codes:
  0  Schedule valid
  1  Constraint violations found, or config error
""",
    )
    parser.add_argument(
        "config", nargs="?", default="config.yaml",
        help="Path to config YAML file (default: config.yaml)"
    )
    parser.add_argument(
        "--output-prefix", "-o", default="output",
        help="Output directory for generated files (default: output/)"
    )
    parser.add_argument(
        "--week", type=int, metavar="N",
        help="Only place week N's matches (default: every week)"
    )
    parser.add_argument(
        "--verify", metavar="CSV",
        help="Verify an existing schedule CSV instead of generating"
    )
    args = parser.parse_args()

    config_path = args.config
    if not Path(config_path).exists():
        print(f"Error: config file {config_path} not found")
        sys.exit(1)

    print(f"Loading config from {config_path}...")
    try:
        config = load_config(config_path)
    except (ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.verify:
        if not Path(args.verify).exists():
            print(f"Error: {args.verify} not found")
            sys.exit(1)
        print(f"Verifying schedule from {args.verify}...")
        result = verify(args.verify, config)
        sys.exit(0 if result["valid"] else 1)

    # Generation mode
    print(f"Generating schedule for {len(config['players'])} players "
          f"over {config['season']['total_weeks']} weeks...")
    try:
        season = build_season(config, week=args.week)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if not season.matches:
        print("Error: no matches were generated!")
        sys.exit(1)

    print("\n" + format_fixtures(season.matches, config["display_names"]))

    # Validate
    print("\nValidating...")
    result = validate_schedule(
        season.matches, config["players"], config["availability"],
        total_weeks=season.total_weeks,
    )
    report = format_validation_report(result)
    print(report)

    stats = compute_stats(season.matches, config["players"], config["availability"])
    stats_text = format_stats_report(stats)
    print("\n" + stats_text)

    print("\nWriting output files...")
    write_schedule(season.matches, output_prefix=args.output_prefix,
                   display_names=config["display_names"], title=season.name)

    stats_path = Path(args.output_prefix) / "stats.txt"
    stats_path.write_text(report + "\n\n" + stats_text)
    print(f"Written: {stats_path}")

    if result["valid"]:
        print("\nSchedule generated successfully!")
    else:
        print(f"\nSchedule has {len(result['errors'])} constraint violations.")
        sys.exit(1)


if __name__ == "__main__":
    main()
