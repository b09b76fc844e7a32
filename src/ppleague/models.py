"""Data models and the weekly slot grid for the ppleague scheduling app."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


DAYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")
START_HOUR = 8
END_HOUR = 22
SLOT_MINUTES = 30
DAY_MINUTES = 24 * 60


class DayOfWeek(Enum):
    Mon = 0
    Tue = 1
    Wed = 2
    Thu = 3
    Fri = 4
    Sat = 5
    Sun = 6

    @classmethod
    def from_str(cls, s: str) -> "DayOfWeek":
        return cls[s.strip()[:3].capitalize()]

    @property
    def code(self) -> str:
        """Lowercase slot-key code, e.g. 'mon'."""
        return DAYS[self.value]


def all_slot_times() -> list[str]:
    """All 'HH:MM' buckets of one day, 08:00 through 21:30."""
    times = []
    for hour in range(START_HOUR, END_HOUR):
        for minute in range(0, 60, SLOT_MINUTES):
            times.append(f"{hour:02d}:{minute:02d}")
    return times


def all_slot_keys() -> list[str]:
    """Every bookable slot key of the week, in canonical (chronological) order."""
    return [make_slot_key(day, t) for day in DAYS for t in all_slot_times()]


_VALID_TIMES = frozenset(all_slot_times())


def make_slot_key(day: str, time: str) -> str:
    return f"{day}-{time}"


def split_slot_key(key: str) -> tuple[str, str]:
    day, _, time = key.partition("-")
    return day, time


def is_valid_slot_key(key: str) -> bool:
    if not isinstance(key, str):
        return False
    day, time = split_slot_key(key)
    return day in DAYS and time in _VALID_TIMES


def parse_slot_key(key: str) -> tuple[str, str]:
    """Split a slot key, raising ValueError if it is not on the weekly grid."""
    if not is_valid_slot_key(key):
        raise ValueError(
            f"Invalid slot key {key!r}: expected 'day-HH:MM' with day in "
            f"{', '.join(DAYS)} and a half-hour time from 08:00 to 21:30"
        )
    return split_slot_key(key)


def slot_to_minutes(key: str) -> int:
    """Minutes from the start of the week (Monday 00:00) to this slot."""
    day, time = split_slot_key(key)
    hh, mm = time.split(":")
    return DAYS.index(day) * DAY_MINUTES + int(hh) * 60 + int(mm)


def format_slot(day: Optional[str], time: Optional[str]) -> Optional[str]:
    """Display label like 'Mon 9:00 AM'. None when the match has no slot."""
    if not day or not time:
        return None
    hh, mm = time.split(":")
    hour = int(hh)
    ampm = "PM" if hour >= 12 else "AM"
    if hour > 12:
        hour -= 12
    elif hour == 0:
        hour = 12
    return f"{day.capitalize()} {hour}:{mm} {ampm}"


@dataclass
class Match:
    """A pairing of two players in a given week, optionally placed in a slot."""
    player1: str
    player2: str
    week_number: int
    match_id: Optional[str] = None
    scheduled_day: Optional[str] = None
    scheduled_time: Optional[str] = None
    status: str = "scheduled"  # "scheduled" or "completed"
    winner: Optional[str] = None
    player1_score: Optional[int] = None
    player2_score: Optional[int] = None

    def __post_init__(self):
        if self.match_id is None:
            # player1 length keeps ids distinct when player ids contain hyphens
            self.match_id = (
                f"W{self.week_number}-{len(self.player1)}-{self.player1}-{self.player2}"
            )

    @property
    def players(self) -> tuple[str, str]:
        return (self.player1, self.player2)

    @property
    def is_scheduled(self) -> bool:
        return bool(self.scheduled_day and self.scheduled_time)

    @property
    def slot_key(self) -> Optional[str]:
        if not self.is_scheduled:
            return None
        return make_slot_key(self.scheduled_day, self.scheduled_time)

    def involves(self, player: str) -> bool:
        return player in (self.player1, self.player2)

    def opponent(self, player: str) -> str:
        if player == self.player1:
            return self.player2
        return self.player1

    def clear_slot(self):
        self.scheduled_day = None
        self.scheduled_time = None


@dataclass
class SchedulingResult:
    """One successfully placed match."""
    match_id: str
    day: str
    time: str

    @property
    def slot_key(self) -> str:
        return make_slot_key(self.day, self.time)


@dataclass
class SeasonPlayer:
    """A player registered in a season, with a running record."""
    player_id: str
    display_name: str = ""
    wins: int = 0
    losses: int = 0

    @property
    def games_played(self) -> int:
        return self.wins + self.losses

    @property
    def win_pct(self) -> float:
        if self.games_played == 0:
            return 0.0
        return self.wins / self.games_played


@dataclass
class Season:
    """A league season. Owned by the caller; the workflow mutates it in place."""
    name: str
    total_weeks: int
    status: str = "registration"  # "registration", "active" or "completed"
    current_week: int = 0
    start_date: Optional[date] = None
    players: list[SeasonPlayer] = field(default_factory=list)
    matches: list[Match] = field(default_factory=list)

    @property
    def player_ids(self) -> list[str]:
        return [p.player_id for p in self.players]
