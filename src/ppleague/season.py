"""Season workflow for the ppleague scheduling app.

Drives the fixture generator and slot assigner through a season's life:
registration -> active (week 1..N) -> completed. Works on a caller-owned
Season object; persisting it, and serialising calls for the same season
and week, is up to the caller.
"""

from ppleague.models import Match, Season, SeasonPlayer, SchedulingResult
from ppleague.roundrobin import generate_join_fixtures, generate_round_robin
from ppleague.scheduler import auto_schedule, check_reschedule


def find_match(season: Season, match_id: str) -> Match:
    for m in season.matches:
        if m.match_id == match_id:
            return m
    raise ValueError(f"Match not found: {match_id}")


def find_player(season: Season, player_id: str) -> SeasonPlayer:
    for p in season.players:
        if p.player_id == player_id:
            return p
    raise ValueError(f"Player not in season: {player_id}")


def week_matches(season: Season, week: int) -> list[Match]:
    return [m for m in season.matches if m.week_number == week]


def schedule_week(season: Season, week: int,
                  availability: dict) -> list[SchedulingResult]:
    """Place the week's unplaced matches around those already placed."""
    matches = week_matches(season, week)
    pending = [m for m in matches
               if m.status == "scheduled" and not m.is_scheduled]
    if not pending:
        return []
    committed = [m for m in matches if m.is_scheduled]

    results = auto_schedule(pending, availability, existing=committed,
                            roster=season.player_ids)

    by_id = {m.match_id: m for m in pending}
    for r in results:
        m = by_id[r.match_id]
        m.scheduled_day = r.day
        m.scheduled_time = r.time
    return results


def add_player(season: Season, player_id: str, display_name: str | None = None,
               availability: dict | None = None) -> list[Match]:
    """Register a player. In an active season they get fixtures for the
    remaining weeks, and the current week is scheduled if availability is
    given.

    Returns the new player's fixtures (empty during registration).
    """
    if season.status == "completed":
        raise ValueError("Season is already completed")
    if player_id in season.player_ids:
        raise ValueError(f"Already joined this season: {player_id}")

    opponents = season.player_ids
    season.players.append(SeasonPlayer(player_id=player_id,
                                       display_name=display_name or player_id))

    if season.status != "active" or not opponents:
        return []

    fixtures = generate_join_fixtures(player_id, opponents,
                                      season.current_week, season.total_weeks)
    season.matches.extend(fixtures)
    if availability is not None:
        schedule_week(season, season.current_week, availability)
    return fixtures


def start_season(season: Season, availability: dict) -> list[SchedulingResult]:
    """Generate the full fixture list, activate week 1 and schedule it."""
    if season.status != "registration":
        raise ValueError("Season is not in registration")
    if len(season.players) < 2:
        raise ValueError("Need at least 2 players to start")

    season.matches.extend(generate_round_robin(season.player_ids, season.total_weeks))
    season.status = "active"
    season.current_week = 1
    return schedule_week(season, 1, availability)


def advance_week(season: Season, availability: dict) -> list[SchedulingResult]:
    if season.status != "active":
        raise ValueError("Season is not active")
    if season.current_week >= season.total_weeks:
        raise ValueError("Already at the last week")

    season.current_week += 1
    return schedule_week(season, season.current_week, availability)


def rerun_scheduler(season: Season, availability: dict) -> list[SchedulingResult]:
    """Drop the current week's slots for unplayed matches and place them again."""
    if season.status != "active":
        raise ValueError("Season is not active")

    for m in week_matches(season, season.current_week):
        if m.status == "scheduled":
            m.clear_slot()
    return schedule_week(season, season.current_week, availability)


def reschedule_match(season: Season, match_id: str, day: str, time: str,
                     player_id: str | None = None) -> Match:
    """Manually move a current-week match to another slot.

    When player_id is given, only the match's participants may move it.
    """
    match = find_match(season, match_id)
    if match.status != "scheduled":
        raise ValueError("Match already completed")
    if player_id is not None and not match.involves(player_id):
        raise ValueError("Only match participants can reschedule")
    if match.week_number != season.current_week:
        raise ValueError("Can only reschedule current week matches")

    check_reschedule(match, day, time, week_matches(season, match.week_number))
    match.scheduled_day = day
    match.scheduled_time = time
    return match


def report_result(season: Season, match_id: str, winner: str,
                  player1_score: int | None = None,
                  player2_score: int | None = None) -> Match:
    match = find_match(season, match_id)
    if match.status == "completed":
        raise ValueError("Match already completed")
    if not match.involves(winner):
        raise ValueError(f"Winner {winner} did not play in {match_id}")

    match.status = "completed"
    match.winner = winner
    match.player1_score = player1_score
    match.player2_score = player2_score

    find_player(season, winner).wins += 1
    find_player(season, match.opponent(winner)).losses += 1
    return match


def complete_season(season: Season):
    season.status = "completed"


def standings(season: Season) -> list[SeasonPlayer]:
    """Players ordered by wins, then win percentage."""
    return sorted(season.players, key=lambda p: (-p.wins, -p.win_pct))
