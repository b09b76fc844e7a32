"""Statistics and balance reporting for the ppleague scheduling app."""

from collections import defaultdict

from ppleague.models import DAYS, Match, slot_to_minutes


def compute_stats(matches: list[Match], players: list[str],
                  availability: dict | None = None) -> dict:
    """Compute statistics for a schedule.

    Returns dict with all stats needed for reporting.
    """
    scheduled = [m for m in matches if m.is_scheduled]
    unscheduled = [m for m in matches if not m.is_scheduled]

    all_players = sorted(set(players) | {p for m in matches for p in m.players})

    matches_per_player = defaultdict(int)
    unscheduled_per_player = defaultdict(int)
    day_counts = defaultdict(lambda: defaultdict(int))  # player -> day -> count
    matches_per_week = defaultdict(lambda: defaultdict(int))  # player -> week -> count
    preference_totals = defaultdict(int)
    slots_by_player_week = defaultdict(list)

    for m in matches:
        for p in m.players:
            matches_per_player[p] += 1
            matches_per_week[p][m.week_number] += 1

    for m in unscheduled:
        for p in m.players:
            unscheduled_per_player[p] += 1

    for m in scheduled:
        for p in m.players:
            day_counts[p][m.scheduled_day] += 1
            slots_by_player_week[(p, m.week_number)].append(slot_to_minutes(m.slot_key))
            if availability is not None:
                preference_totals[p] += (availability.get(p) or {}).get(m.slot_key, 0)

    # Closest pair of a player's matches within any one week
    min_gap_minutes: dict[str, int] = {}
    for (p, _week), minutes in slots_by_player_week.items():
        if len(minutes) < 2:
            continue
        minutes = sorted(minutes)
        gap = min(b - a for a, b in zip(minutes, minutes[1:]))
        if p not in min_gap_minutes or gap < min_gap_minutes[p]:
            min_gap_minutes[p] = gap

    return {
        "all_players": all_players,
        "total_matches": len(matches),
        "scheduled_matches": len(scheduled),
        "unscheduled_matches": len(unscheduled),
        "matches_per_player": dict(matches_per_player),
        "unscheduled_per_player": dict(unscheduled_per_player),
        "day_counts": {p: dict(d) for p, d in day_counts.items()},
        "matches_per_week": {p: dict(w) for p, w in matches_per_week.items()},
        "preference_totals": dict(preference_totals),
        "min_gap_minutes": min_gap_minutes,
    }


def _fmt_gap(minutes: int | None) -> str:
    if minutes is None:
        return "-"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h{mins:02d}"


def format_stats_report(stats: dict) -> str:
    """Format stats as a text report."""
    all_players = stats["all_players"]
    lines = []
    lines.append("=" * 60)
    lines.append("SCHEDULE STATISTICS")
    lines.append("=" * 60)

    total = stats["total_matches"]
    placed = stats["scheduled_matches"]
    lines.append(f"\nMatches: {total}  Scheduled: {placed}  "
                 f"Unscheduled: {stats['unscheduled_matches']}")

    width = max([len(p) for p in all_players] + [6])

    # Per-player summary
    lines.append("\n--- PER PLAYER ---")
    lines.append(f"{'Player':<{width}} {'Games':>5} {'Unsch':>5} {'Pref':>5} {'MinGap':>7}")
    lines.append("-" * (width + 26))
    for p in all_players:
        games = stats["matches_per_player"].get(p, 0)
        uns = stats["unscheduled_per_player"].get(p, 0)
        pref = stats["preference_totals"].get(p, 0)
        gap = _fmt_gap(stats["min_gap_minutes"].get(p))
        flag = " ***" if uns else ""
        lines.append(f"{p:<{width}} {games:>5} {uns:>5} {pref:>5} {gap:>7}{flag}")

    # Day of week distribution
    lines.append("\n--- MATCHES PER DAY OF WEEK ---")
    header = f"{'Player':<{width}}"
    for d in DAYS:
        header += f" {d.capitalize():>4}"
    lines.append(header)
    lines.append("-" * (width + 5 * len(DAYS)))
    for p in all_players:
        row = f"{p:<{width}}"
        for d in DAYS:
            c = stats["day_counts"].get(p, {}).get(d, 0)
            row += f" {c:>4}"
        lines.append(row)

    # Matches per week
    lines.append("\n--- MATCHES PER WEEK ---")
    max_week = max(
        (max(wk.keys()) for wk in stats["matches_per_week"].values() if wk),
        default=0
    )
    if max_week > 0:
        header = f"{'Player':<{width}}"
        for w in range(1, max_week + 1):
            header += f" W{w:>2}"
        lines.append(header)
        for p in all_players:
            row = f"{p:<{width}}"
            for w in range(1, max_week + 1):
                c = stats["matches_per_week"].get(p, {}).get(w, 0)
                row += f" {c:>3}"
            lines.append(row)

    return "\n".join(lines)
