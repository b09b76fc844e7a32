"""Config loading and validation for the ppleague scheduling app."""

from datetime import date, time
from pathlib import Path

import yaml

from ppleague.models import (
    DayOfWeek, SLOT_MINUTES, START_HOUR, END_HOUR, is_valid_slot_key, make_slot_key,
)


def parse_time(s: str) -> time:
    """Parse time strings like '5:30pm', '10am', '17:00'."""
    s = s.strip()
    s_lower = s.lower()

    is_pm = s_lower.endswith("pm")
    is_am = s_lower.endswith("am")

    # Strip am/pm suffix
    s_clean = s_lower
    if is_pm or is_am:
        s_clean = s_clean[:-2].strip()

    if ":" in s_clean:
        parts = s_clean.split(":")
        h = int(parts[0])
        m = int(parts[1])
    else:
        h = int(s_clean)
        m = 0

    if is_pm and h < 12:
        h += 12
    elif is_am and h == 12:
        h = 0

    return time(h, m)


def parse_date(s: str) -> date:
    """Parse date string YYYY-MM-DD."""
    parts = s.strip().split("-")
    return date(int(parts[0]), int(parts[1]), int(parts[2]))


def _minutes(t: time) -> int:
    return t.hour * 60 + t.minute


def parse_time_range(s: str) -> list[str]:
    """Expand '9am-11am' (end exclusive) or a single time into 'HH:MM' buckets.

    Raises ValueError for times off the half-hour grid or outside the
    08:00-22:00 window.
    """
    s = str(s)
    if "-" in s:
        start_s, end_s = s.split("-", 1)
        start, end = _minutes(parse_time(start_s)), _minutes(parse_time(end_s))
        if end <= start:
            raise ValueError(f"Empty time range {s!r}")
    else:
        start = _minutes(parse_time(s))
        end = start + SLOT_MINUTES

    if start % SLOT_MINUTES or end % SLOT_MINUTES:
        raise ValueError(f"Time range {s!r} is not on the {SLOT_MINUTES}-minute grid")
    if start < START_HOUR * 60 or end > END_HOUR * 60:
        raise ValueError(
            f"Time range {s!r} falls outside {START_HOUR:02d}:00-{END_HOUR:02d}:00"
        )

    return [f"{m // 60:02d}:{m % 60:02d}" for m in range(start, end, SLOT_MINUTES)]


def expand_day_availability(day: str, entry) -> dict[str, int]:
    """Expand one day's availability entry into {slot_key: weight}.

    entry may be a string ('9am-12pm'), a list of strings (weight 1 each), or
    a mapping of range -> weight. A later range overrides an earlier one.
    """
    code = DayOfWeek.from_str(day).code

    if isinstance(entry, dict):
        entries = list(entry.items())
    elif isinstance(entry, list):
        entries = [(e, 1) for e in entry]
    else:
        entries = [(entry, 1)]

    slots: dict[str, int] = {}
    for rng, weight in entries:
        if isinstance(weight, bool) or not isinstance(weight, int) or weight <= 0:
            raise ValueError(f"Weight for {day} {rng!r} must be a positive integer, got {weight!r}")
        for t in parse_time_range(rng):
            slots[make_slot_key(code, t)] = weight
    return slots


def _parse_player_availability(player: str, raw) -> dict[str, int]:
    """Either day -> entry entries, or an explicit 'slots' map of slot_key -> weight."""
    slots: dict[str, int] = {}
    for day, entry in (raw or {}).items():
        if day == "slots":
            for key, weight in (entry or {}).items():
                if not is_valid_slot_key(key):
                    raise ValueError(f"{player}: invalid slot key {key!r}")
                if isinstance(weight, bool) or not isinstance(weight, int):
                    raise ValueError(f"{player}: weight at {key} must be an integer")
                slots[key] = weight
            continue
        try:
            slots.update(expand_day_availability(str(day), entry))
        except KeyError:
            raise ValueError(f"{player}: unknown day {day!r}")
        except ValueError as e:
            raise ValueError(f"{player}: {e}")
    return slots


def load_config(path: str | Path) -> dict:
    """Load and validate a league YAML file, returning structured data.

    Returns dict with:
    - season: {name, total_weeks, start_date}
    - players: [player ids] in roster order
    - display_names: {player id -> display name}
    - availability: {player id -> {slot_key -> weight}}

    Raises ValueError listing every hard error found.
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(
            f"Config validation errors:\n  {path} must hold a YAML mapping, "
            f"got {type(raw).__name__}"
        )

    errors = []

    # Season
    raw_season = raw.get("season") or {}
    if not isinstance(raw_season, dict):
        errors.append(f"season must be a mapping, got {raw_season!r}")
        raw_season = {}
    total_weeks = raw_season.get("total_weeks")
    if not isinstance(total_weeks, int) or isinstance(total_weeks, bool) or total_weeks < 1:
        errors.append(f"season.total_weeks must be a positive integer, got {total_weeks!r}")
    start_date = raw_season.get("start_date")
    if start_date is not None and not isinstance(start_date, date):
        try:
            start_date = parse_date(str(start_date))
        except (ValueError, IndexError):
            errors.append(f"season.start_date is not YYYY-MM-DD: {start_date!r}")
            start_date = None
    season = {
        "name": raw_season.get("name", ""),
        "total_weeks": total_weeks,
        "start_date": start_date,
    }

    # Players
    players: list[str] = []
    display_names: dict[str, str] = {}
    for entry in raw.get("players") or []:
        if isinstance(entry, dict):
            if "id" not in entry:
                errors.append(f"Player entry missing 'id': {entry!r}")
                continue
            pid = str(entry["id"])
            name = entry.get("name", pid)
        else:
            pid = str(entry)
            name = pid
        if pid in display_names:
            errors.append(f"Player {pid} listed more than once")
            continue
        players.append(pid)
        display_names[pid] = name
    if not players:
        errors.append("No players listed")

    # Availability
    availability: dict[str, dict[str, int]] = {}
    for pid, pdata in (raw.get("availability") or {}).items():
        pid = str(pid)
        if pid not in display_names:
            print(f"Warning: availability given for {pid}, who is not on the roster")
        try:
            availability[pid] = _parse_player_availability(pid, pdata)
        except ValueError as e:
            errors.append(str(e))

    for pid in players:
        if pid not in availability:
            print(f"Warning: {pid} has no availability; their matches cannot be scheduled")

    if errors:
        raise ValueError("Config validation errors:\n" + "\n".join(f"  {e}" for e in errors))

    return {
        "season": season,
        "players": players,
        "display_names": display_names,
        "availability": availability,
    }
