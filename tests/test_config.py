"""Tests for config.py — parsing and loading."""

from datetime import date, time
from pathlib import Path

import pytest

from ppleague.config import (
    expand_day_availability, load_config, parse_date, parse_time, parse_time_range,
)

REPO_CONFIG = Path(__file__).resolve().parent.parent / "config.yaml"


def _write(tmp_path, text):
    path = tmp_path / "league.yaml"
    path.write_text(text)
    return path


class TestParseTime:
    def test_am(self):
        assert parse_time("10am") == time(10, 0)
        assert parse_time("9am") == time(9, 0)

    def test_pm(self):
        assert parse_time("5pm") == time(17, 0)
        assert parse_time("12pm") == time(12, 0)
        assert parse_time("1pm") == time(13, 0)

    def test_with_minutes(self):
        assert parse_time("5:30pm") == time(17, 30)

    def test_24hour(self):
        assert parse_time("17:00") == time(17, 0)
        assert parse_time("9:30") == time(9, 30)

    def test_case_and_whitespace(self):
        assert parse_time("  5:30PM  ") == time(17, 30)


class TestParseDate:
    def test_basic(self):
        assert parse_date("2026-09-07") == date(2026, 9, 7)


class TestParseTimeRange:
    def test_range_end_exclusive(self):
        assert parse_time_range("9am-10:30am") == ["09:00", "09:30", "10:00"]

    def test_single_time(self):
        assert parse_time_range("17:30") == ["17:30"]

    def test_whole_window(self):
        assert len(parse_time_range("8am-10pm")) == 28

    def test_off_grid(self):
        with pytest.raises(ValueError, match="grid"):
            parse_time_range("9:15-10:00")

    def test_outside_window(self):
        with pytest.raises(ValueError, match="outside"):
            parse_time_range("7am-9am")
        with pytest.raises(ValueError, match="outside"):
            parse_time_range("22:00")

    def test_empty_range(self):
        with pytest.raises(ValueError, match="Empty"):
            parse_time_range("10am-9am")


class TestExpandDayAvailability:
    def test_string(self):
        assert expand_day_availability("mon", "12pm-1pm") == {
            "mon-12:00": 1, "mon-12:30": 1,
        }

    def test_list(self):
        assert expand_day_availability("Tuesday", ["9am", "17:00-18:00"]) == {
            "tue-09:00": 1, "tue-17:00": 1, "tue-17:30": 1,
        }

    def test_weights(self):
        slots = expand_day_availability("wed", {"12:00-13:00": 3, "12:30": 1})
        assert slots == {"wed-12:00": 3, "wed-12:30": 1}

    def test_bad_weight(self):
        with pytest.raises(ValueError, match="positive integer"):
            expand_day_availability("wed", {"12:00": 0})


class TestLoadConfig:
    def test_loads_repo_config(self):
        config = load_config(REPO_CONFIG)
        assert config["season"]["total_weeks"] == 3
        assert config["season"]["start_date"] == date(2026, 9, 7)
        assert config["players"] == ["alice", "bob", "carol", "dave", "erin"]
        assert config["display_names"]["alice"] == "Alice"
        assert config["availability"]["alice"]["tue-12:00"] == 3
        assert config["availability"]["erin"]["sat-10:30"] == 2

    def test_minimal(self, tmp_path):
        path = _write(tmp_path, """
season:
  total_weeks: 2
players: [a, b]
availability:
  a:
    mon: "9am-10am"
  b:
    slots:
      mon-09:00: 2
""")
        config = load_config(path)
        assert config["season"]["name"] == ""
        assert config["season"]["start_date"] is None
        assert config["display_names"] == {"a": "a", "b": "b"}
        assert config["availability"] == {
            "a": {"mon-09:00": 1, "mon-09:30": 1},
            "b": {"mon-09:00": 2},
        }

    def test_bad_total_weeks(self, tmp_path):
        path = _write(tmp_path, """
season:
  total_weeks: 0
players: [a, b]
""")
        with pytest.raises(ValueError, match="total_weeks"):
            load_config(path)

    def test_player_without_id(self, tmp_path):
        path = _write(tmp_path, """
season:
  total_weeks: 1
players:
  - {name: Alice}
  - bob
""")
        with pytest.raises(ValueError, match="missing 'id'"):
            load_config(path)

    def test_top_level_not_a_mapping(self, tmp_path):
        path = _write(tmp_path, "- alice\n- bob\n")
        with pytest.raises(ValueError, match="must hold a YAML mapping"):
            load_config(path)

    def test_season_not_a_mapping(self, tmp_path):
        path = _write(tmp_path, "season: [1, 2]\nplayers: [a, b]\n")
        with pytest.raises(ValueError, match="season must be a mapping"):
            load_config(path)

    def test_duplicate_player(self, tmp_path):
        path = _write(tmp_path, """
season: {total_weeks: 2}
players: [a, b, a]
""")
        with pytest.raises(ValueError, match="more than once"):
            load_config(path)

    def test_unknown_day(self, tmp_path):
        path = _write(tmp_path, """
season: {total_weeks: 2}
players: [a, b]
availability:
  a:
    someday: "9am-10am"
""")
        with pytest.raises(ValueError, match="unknown day"):
            load_config(path)

    def test_bad_slot_key(self, tmp_path):
        path = _write(tmp_path, """
season: {total_weeks: 2}
players: [a, b]
availability:
  a:
    slots:
      mon-23:00: 1
""")
        with pytest.raises(ValueError, match="invalid slot key"):
            load_config(path)

    def test_all_errors_reported_together(self, tmp_path):
        path = _write(tmp_path, """
season: {total_weeks: -1}
players: []
""")
        with pytest.raises(ValueError) as exc:
            load_config(path)
        assert "total_weeks" in str(exc.value)
        assert "No players" in str(exc.value)

    def test_warnings(self, tmp_path, capsys):
        path = _write(tmp_path, """
season: {total_weeks: 1}
players: [a, b]
availability:
  a:
    mon: "9am"
  zed:
    mon: "9am"
""")
        config = load_config(path)
        out = capsys.readouterr().out
        assert "Warning: availability given for zed" in out
        assert "Warning: b has no availability" in out
        assert "zed" in config["availability"]
