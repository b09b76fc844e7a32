"""Constraint validation for the ppleague scheduling app.

Can validate either an in-memory match list or a re-imported CSV.
"""

from collections import defaultdict

from ppleague.models import Match, is_valid_slot_key


def validate_schedule(matches: list[Match], players: list[str],
                      availability: dict | None = None,
                      total_weeks: int | None = None) -> dict:
    """Validate a season's matches against all constraints.

    Returns dict with:
    - valid: bool (True if no hard constraint violations)
    - errors: list of hard constraint violations
    - warnings: list of soft constraint issues
    """
    errors = []
    warnings = []
    roster = set(players)

    # (week, slot) -> match ids, and (week, slot, player) -> match ids
    table_usage = defaultdict(list)
    player_usage = defaultdict(list)
    matchup_counts = defaultdict(int)

    for m in matches:
        label = f"{m.match_id} ({m.player1} vs {m.player2}, week {m.week_number})"

        unknown = [p for p in m.players if p not in roster]
        for p in unknown:
            errors.append(f"{label}: unknown player {p}")
        if m.player1 == m.player2:
            errors.append(f"{label}: player paired with themselves")
            continue

        if total_weeks is not None and not 1 <= m.week_number <= total_weeks:
            errors.append(f"{label}: week outside 1..{total_weeks}")

        key = tuple(sorted(m.players))
        matchup_counts[key] += 1

        if not m.is_scheduled:
            warnings.append(f"UNSCHEDULED: {label}")
            continue

        slot = m.slot_key
        if not is_valid_slot_key(slot):
            errors.append(f"{label}: invalid slot {slot}")
            continue

        table_usage[(m.week_number, slot)].append(m.match_id)
        for p in m.players:
            player_usage[(m.week_number, slot, p)].append(m.match_id)

        if availability is not None and not unknown:
            for p in m.players:
                weight = (availability.get(p) or {}).get(slot, 0)
                if weight <= 0:
                    errors.append(f"{label}: {p} is not available at {slot}")

    # Check: one match per table slot per week
    for (week, slot), ids in sorted(table_usage.items()):
        if len(ids) > 1:
            errors.append(
                f"Table conflict in week {week} at {slot}: {', '.join(ids)}"
            )

    # Check: no player booked twice in one slot
    for (week, slot, p), ids in sorted(player_usage.items()):
        if len(ids) > 1:
            errors.append(
                f"{p} plays {len(ids)} matches in week {week} at {slot}: "
                f"{', '.join(ids)}"
            )

    # Every pair meets once per season
    for (p1, p2), count in sorted(matchup_counts.items()):
        if count > 1:
            errors.append(f"{p1} vs {p2} scheduled {count} times")

    ordered = sorted(roster)
    for i, p1 in enumerate(ordered):
        for p2 in ordered[i + 1:]:
            if matchup_counts.get((p1, p2), 0) == 0:
                warnings.append(f"{p1} vs {p2} never meet")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }


def format_validation_report(result: dict) -> str:
    """Format validation results as text."""
    lines = []
    lines.append("=" * 60)
    lines.append("SCHEDULE VALIDATION REPORT")
    lines.append("=" * 60)

    if result["valid"]:
        lines.append("\nRESULT: VALID (no hard constraint violations)")
    else:
        lines.append(f"\nRESULT: INVALID ({len(result['errors'])} violations)")

    if result["errors"]:
        lines.append(f"\n--- ERRORS ({len(result['errors'])}) ---")
        for e in result["errors"]:
            lines.append(f"  ERROR: {e}")

    if result["warnings"]:
        lines.append(f"\n--- WARNINGS ({len(result['warnings'])}) ---")
        for w in result["warnings"]:
            lines.append(f"  WARN: {w}")

    return "\n".join(lines)
