"""Round-robin fixture generation for the ppleague scheduling app."""

import math

from ppleague.models import Match


# Placeholder opponent for odd rosters. An object, not a string, so it can
# never collide with a real player ID.
BYE = object()


def _check_total_weeks(total_weeks: int):
    if not isinstance(total_weeks, int) or total_weeks < 1:
        raise ValueError(f"total_weeks must be a positive integer, got {total_weeks!r}")


def generate_rounds(players: list[str]) -> list[list[tuple[str, str]]]:
    """Generate all rounds of a single round robin using the circle method.

    For N players: N-1 rounds if even, N rounds (one bye each) if odd.
    Pairings against the bye are dropped.
    """
    entrants = list(players)
    if len(entrants) < 2:
        return []

    if len(entrants) % 2 == 1:
        entrants.append(BYE)
    n = len(entrants)

    # Circle method: fix position 0, rotate the rest
    fixed = entrants[0]
    rotating = entrants[1:]
    rounds = []
    for _ in range(n - 1):
        current = [fixed] + rotating
        pairings = []
        for i in range(n // 2):
            p1 = current[i]
            p2 = current[n - 1 - i]
            if p1 is BYE or p2 is BYE:
                continue
            pairings.append((p1, p2))
        rounds.append(pairings)

        # Rotate: last to front
        rotating = [rotating[-1]] + rotating[:-1]

    return rounds


def generate_round_robin(players: list[str], total_weeks: int) -> list[Match]:
    """Generate a season's fixtures: every pair of players meets exactly once.

    Rounds are packed into weeks ceil(rounds / total_weeks) at a time; any
    excess rounds pile into the final week so no week number exceeds
    total_weeks.
    """
    _check_total_weeks(total_weeks)
    if len(set(players)) != len(players):
        dupes = sorted({p for p in players if list(players).count(p) > 1})
        raise ValueError(f"Duplicate players in roster: {', '.join(map(str, dupes))}")

    rounds = generate_rounds(players)
    if not rounds:
        return []

    rounds_per_week = max(1, math.ceil(len(rounds) / total_weeks))

    matches = []
    for round_idx, pairings in enumerate(rounds):
        week = min(round_idx // rounds_per_week + 1, total_weeks)
        for p1, p2 in pairings:
            matches.append(Match(player1=p1, player2=p2, week_number=week))
    return matches


def generate_join_fixtures(new_player: str, opponents: list[str],
                           current_week: int, total_weeks: int) -> list[Match]:
    """Fixtures for a player joining an active season.

    The newcomer meets every existing player once, spread round-robin over
    the remaining weeks starting with the current one.
    """
    _check_total_weeks(total_weeks)
    if not 1 <= current_week <= total_weeks:
        raise ValueError(
            f"current_week must be between 1 and {total_weeks}, got {current_week}"
        )
    if new_player in opponents:
        raise ValueError(f"Player {new_player} cannot be their own opponent")

    remaining_weeks = total_weeks - current_week + 1
    matches = []
    for i, opponent in enumerate(opponents):
        week = current_week + (i % remaining_weeks)
        matches.append(Match(player1=new_player, player2=opponent, week_number=week))
    return matches


def group_by_week(matches: list[Match]) -> dict[int, list[Match]]:
    """Group matches by week number, keeping their original order."""
    by_week: dict[int, list[Match]] = {}
    for m in matches:
        by_week.setdefault(m.week_number, []).append(m)
    return dict(sorted(by_week.items()))


def verify_round_robin(matches: list[Match], players: list[str]) -> dict:
    """Verify that a fixture list is a complete single round robin.

    Returns dict with:
    - valid: bool
    - errors: list of error strings
    - matchup_counts: dict of (player_a, player_b) -> count
    - games_per_player: dict of player -> game count
    """
    errors = []
    matchup_counts: dict[tuple[str, str], int] = {}
    games_per_player: dict[str, int] = {p: 0 for p in players}

    for m in matches:
        if m.player1 == m.player2:
            errors.append(f"{m.match_id}: {m.player1} is paired with themselves")
            continue
        key = tuple(sorted([m.player1, m.player2]))
        matchup_counts[key] = matchup_counts.get(key, 0) + 1
        games_per_player[m.player1] = games_per_player.get(m.player1, 0) + 1
        games_per_player[m.player2] = games_per_player.get(m.player2, 0) + 1

    # Check every pair plays exactly once
    for i, p1 in enumerate(players):
        for p2 in players[i + 1:]:
            key = tuple(sorted([p1, p2]))
            count = matchup_counts.get(key, 0)
            if count != 1:
                errors.append(f"{p1} vs {p2}: played {count} times (expected 1)")

    # Pairs involving someone outside the roster
    roster = set(players)
    for (a, b), count in matchup_counts.items():
        if a not in roster or b not in roster:
            errors.append(f"{a} vs {b}: player not in roster")

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "matchup_counts": matchup_counts,
        "games_per_player": games_per_player,
    }
