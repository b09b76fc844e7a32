"""Weekly slot assignment engine for the ppleague scheduling app.

Each match of a week is placed in a (day, time) slot where both players are
available, subject to two hard constraints:

1. Table exclusivity: one match per slot per week (there is one table).
2. Player exclusivity: a player is never booked twice in the same slot.

Placement is greedy and most-constrained-first: matches with the fewest
candidate slots are placed first. Each candidate is scored by the sum of
both players' preference weights plus a spacing bonus that rewards keeping
a player's matches apart within the week. Matches left without a free
candidate are omitted from the result and stay unscheduled.

All occupancy state is built fresh per call from the caller's snapshot.
"""

from collections import defaultdict

from ppleague.models import (
    DAY_MINUTES, Match, SchedulingResult,
    all_slot_keys, is_valid_slot_key, make_slot_key, parse_slot_key,
    slot_to_minutes, split_slot_key,
)

SPACING_WEIGHT = 3


def spacing_score(slot: str, assigned: list[str]) -> float:
    """Bonus in [0, 3] for distance from a player's other slots this week.

    Saturates once the nearest existing assignment is 24 hours away; zero
    when the player has nothing assigned yet.
    """
    if not assigned:
        return 0

    slot_min = slot_to_minutes(slot)
    min_dist = min(abs(slot_to_minutes(a) - slot_min) for a in assigned)
    return min(min_dist / DAY_MINUTES, 1) * SPACING_WEIGHT


def candidate_slots(match: Match, availability: dict) -> list[tuple[str, int]]:
    """Slots where both players are available, with their combined weight.

    Returned in canonical slot order.
    """
    p1_avail = availability.get(match.player1) or {}
    p2_avail = availability.get(match.player2) or {}

    candidates = []
    for slot in all_slot_keys():
        p1_pref = p1_avail.get(slot, 0)
        p2_pref = p2_avail.get(slot, 0)
        if p1_pref > 0 and p2_pref > 0:
            candidates.append((slot, p1_pref + p2_pref))
    return candidates


def _validate_inputs(matches: list[Match], availability: dict,
                     existing: list[Match], roster) -> None:
    """Reject malformed input before any assignment happens."""
    weeks = {m.week_number for m in matches}
    if len(weeks) > 1:
        raise ValueError(
            f"Matches span several weeks ({', '.join(map(str, sorted(weeks)))}); "
            f"schedule one week at a time"
        )

    seen_ids = set()
    for m in matches:
        if m.match_id in seen_ids:
            raise ValueError(f"Duplicate match id {m.match_id}")
        seen_ids.add(m.match_id)
        if m.player1 == m.player2:
            raise ValueError(f"Match {m.match_id} pairs {m.player1} with themselves")

    if roster is not None:
        known = set(roster)
        for m in matches:
            for p in m.players:
                if p not in known:
                    raise ValueError(f"Match {m.match_id} references unknown player {p}")

    for player, slots in availability.items():
        for key, weight in (slots or {}).items():
            if not is_valid_slot_key(key):
                raise ValueError(f"Availability for {player} has invalid slot key {key!r}")
            if isinstance(weight, bool) or not isinstance(weight, (int, float)):
                raise ValueError(
                    f"Availability for {player} at {key} has non-numeric weight {weight!r}"
                )

    for m in existing:
        if not m.is_scheduled:
            continue
        parse_slot_key(m.slot_key)
        if weeks and m.week_number not in weeks:
            raise ValueError(
                f"Existing match {m.match_id} is in week {m.week_number}, "
                f"not week {next(iter(weeks))}"
            )


def auto_schedule(matches: list[Match], availability: dict,
                  existing: list[Match] | None = None,
                  roster: list[str] | None = None) -> list[SchedulingResult]:
    """Assign each of one week's matches to a free slot.

    Args:
        matches: Matches of a single week to place (their own slot fields
            are ignored).
        availability: player -> {slot_key: weight}; weight <= 0 or a
            missing key means unavailable.
        existing: Already-committed matches of the same week; any that
            carry a slot seed the table and player occupancy.
        roster: Optional set of known players; matches naming anyone else
            are rejected.

    Returns:
        One SchedulingResult per placed match, in placement order. Matches
        that could not be placed are absent.
    """
    existing = existing or []
    _validate_inputs(matches, availability, existing, roster)

    table_slots: set[str] = set()
    assigned: dict[str, list[str]] = defaultdict(list)

    for m in existing:
        if m.is_scheduled:
            slot = m.slot_key
            table_slots.add(slot)
            assigned[m.player1].append(slot)
            assigned[m.player2].append(slot)

    match_candidates = [(m, candidate_slots(m, availability)) for m in matches]

    # Most-constrained-first; sort is stable so ties keep input order
    match_candidates.sort(key=lambda mc: len(mc[1]))

    results = []
    for match, candidates in match_candidates:
        p1_assigned = assigned[match.player1]
        p2_assigned = assigned[match.player2]

        best_slot = None
        best_score = None
        for slot, base_score in candidates:
            if slot in table_slots:
                continue
            if slot in p1_assigned or slot in p2_assigned:
                continue

            total = (base_score
                     + spacing_score(slot, p1_assigned)
                     + spacing_score(slot, p2_assigned))
            # Strict comparison: the earliest slot wins a tie
            if best_score is None or total > best_score:
                best_slot = slot
                best_score = total

        if best_slot is None:
            continue

        day, time = split_slot_key(best_slot)
        results.append(SchedulingResult(match_id=match.match_id, day=day, time=time))
        table_slots.add(best_slot)
        p1_assigned.append(best_slot)
        p2_assigned.append(best_slot)

    return results


def valid_reschedule_slots(match: Match, week_matches: list[Match],
                           availability: dict) -> list[tuple[str, str]]:
    """All (day, time) slots a match could be moved to.

    Both players must be available, the table must be free, and neither
    player may already be booked. The match itself and completed matches
    do not block anything.
    """
    p1_avail = availability.get(match.player1) or {}
    p2_avail = availability.get(match.player2) or {}

    table_slots = set()
    p1_slots = set()
    p2_slots = set()
    for other in week_matches:
        if other.match_id == match.match_id or other.status == "completed":
            continue
        if not other.is_scheduled:
            continue
        slot = other.slot_key
        table_slots.add(slot)
        if other.involves(match.player1):
            p1_slots.add(slot)
        if other.involves(match.player2):
            p2_slots.add(slot)

    valid = []
    for slot in all_slot_keys():
        if p1_avail.get(slot, 0) <= 0 or p2_avail.get(slot, 0) <= 0:
            continue
        if slot in table_slots or slot in p1_slots or slot in p2_slots:
            continue
        valid.append(split_slot_key(slot))
    return valid


def check_reschedule(match: Match, day: str, time: str,
                     week_matches: list[Match]) -> None:
    """Raise ValueError if a match cannot be moved to (day, time).

    Unlike valid_reschedule_slots, a completed match still holds its table
    here, so a manual move onto an already played slot is refused.
    """
    slot = make_slot_key(day, time)
    parse_slot_key(slot)
    for other in week_matches:
        if other.match_id == match.match_id:
            continue
        if other.slot_key == slot:
            raise ValueError(
                f"Table conflict: {other.match_id} is already scheduled at {slot}"
            )
