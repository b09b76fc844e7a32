"""Output formatters for the ppleague scheduling app."""

import csv
from io import StringIO
from pathlib import Path

from ppleague.models import Match, format_slot, slot_to_minutes
from ppleague.roundrobin import group_by_week


def _slot_order(m: Match) -> int:
    return slot_to_minutes(m.slot_key)


def _name(player: str, display_names: dict | None) -> str:
    if display_names:
        return display_names.get(player, player)
    return player


def format_fixtures(matches: list[Match], display_names: dict | None = None) -> str:
    """Format the fixture list week by week, without slots."""
    lines = []
    for week, week_games in group_by_week(matches).items():
        lines.append(f"Week {week}:")
        for m in week_games:
            lines.append(f"  {_name(m.player1, display_names)} vs "
                         f"{_name(m.player2, display_names)}")
    return "\n".join(lines)


def format_schedule(matches: list[Match], display_names: dict | None = None,
                    title: str = "") -> str:
    """Format schedule as human-readable text, organized by week."""
    scheduled = [m for m in matches if m.is_scheduled]
    unscheduled = [m for m in matches if not m.is_scheduled]

    lines = []
    lines.append("=" * 60)
    lines.append((title or "LEAGUE SCHEDULE").upper())
    lines.append("=" * 60)

    for week, week_games in group_by_week(scheduled).items():
        lines.append(f"\n--- WEEK {week} ---")
        for m in sorted(week_games, key=_slot_order):
            label = format_slot(m.scheduled_day, m.scheduled_time)
            done = "  (played)" if m.status == "completed" else ""
            lines.append(
                f"  {label:<14} {_name(m.player1, display_names)} vs "
                f"{_name(m.player2, display_names)}{done}"
            )

    if unscheduled:
        lines.append(f"\n{'=' * 60}")
        lines.append(f"UNSCHEDULED MATCHES ({len(unscheduled)})")
        lines.append("=" * 60)
        for m in unscheduled:
            lines.append(
                f"  {_name(m.player1, display_names)} vs "
                f"{_name(m.player2, display_names)}  (Week {m.week_number})"
            )

    # Per-player schedule
    lines.append("\n" + "=" * 60)
    lines.append("PER-PLAYER SCHEDULES")
    lines.append("=" * 60)

    by_player: dict[str, list[Match]] = {}
    for m in matches:
        by_player.setdefault(m.player1, []).append(m)
        by_player.setdefault(m.player2, []).append(m)

    for player in sorted(by_player):
        lines.append(f"\n{_name(player, display_names)}:")
        games = sorted(by_player[player],
                       key=lambda m: (m.week_number, _slot_order(m) if m.is_scheduled else 10 ** 6))
        for i, m in enumerate(games, 1):
            opponent = _name(m.opponent(player), display_names)
            label = format_slot(m.scheduled_day, m.scheduled_time) or "UNSCHEDULED"
            lines.append(f"  {i:>2}. W{m.week_number:<2} {label:<14} vs {opponent}")

    return "\n".join(lines)


def format_schedule_csv(matches: list[Match]) -> str:
    """Format schedule as CSV.

    Columns: Match, Week, Day, Time, Player1, Player2, Status
    Unscheduled matches have empty Day and Time.
    """
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(["Match", "Week", "Day", "Time", "Player1", "Player2", "Status"])

    ordered = sorted(matches, key=lambda m: (
        m.week_number, not m.is_scheduled,
        _slot_order(m) if m.is_scheduled else 0,
    ))
    for m in ordered:
        writer.writerow([m.match_id, m.week_number, m.scheduled_day or "",
                         m.scheduled_time or "", m.player1, m.player2, m.status])

    return output.getvalue()


def write_schedule(matches: list[Match], output_prefix: str = "output",
                   display_names: dict | None = None, title: str = ""):
    """Write all output files into {output_prefix}/ directory."""
    out_dir = Path(output_prefix)
    out_dir.mkdir(parents=True, exist_ok=True)

    schedule_path = out_dir / "schedule.txt"
    schedule_path.write_text(format_schedule(matches, display_names, title=title))
    print(f"Written: {schedule_path}")

    csv_path = out_dir / "schedule.csv"
    csv_path.write_text(format_schedule_csv(matches))
    print(f"Written: {csv_path}")
