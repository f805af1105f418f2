"""
Tests for the domain models.

Covers:
- TimeOfDayPoint parsing and validation
- Schedule ordering, duplicate detection and effective range lookup
- ComfortRange bang-bang decisions
- FurnaceState invariants
- TemperatureLog retention and (de)serialisation
"""

from __future__ import annotations

from datetime import datetime

import pytest

from thermostat.domain.exceptions import (
    CorruptDataError,
    CrcFailureError,
    DuplicateTimeError,
    MalformedRangeError,
    MalformedTimeError,
    ScheduleValidationError,
    ZeroReadingError,
)
from thermostat.domain.models import (
    ComfortRange,
    FurnaceAction,
    FurnaceState,
    Schedule,
    TemperatureLog,
    TimeOfDayPoint,
)

DAY_MS = 24 * 60 * 60 * 1000
HOUR_MS = 60 * 60 * 1000


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 1, 15, hour, minute, 30)


class TestTimeOfDayPoint:

    @pytest.mark.parametrize("key,hour,minute", [
        ("8:00", 8, 0),
        ("08:05", 8, 5),
        ("16:07", 16, 7),
        ("0:00", 0, 0),
        ("23:59", 23, 59),
    ])
    def test_parses_valid_keys(self, key, hour, minute):
        point = TimeOfDayPoint.parse(key, [19, 21])
        assert (point.hour, point.minute) == (hour, minute)
        assert (point.min_temp, point.max_temp) == (19, 21)

    @pytest.mark.parametrize("key", ["8", "8:0", "800", "a:00", "8:00 ", "123:00", "8:000", "", "-1:00"])
    def test_rejects_malformed_keys(self, key):
        with pytest.raises(MalformedTimeError):
            TimeOfDayPoint.parse(key, [19, 21])

    def test_rejects_out_of_range_hour(self):
        with pytest.raises(MalformedTimeError, match="invalid hour"):
            TimeOfDayPoint.parse("24:00", [19, 21])

    def test_rejects_out_of_range_minute(self):
        with pytest.raises(MalformedTimeError, match="invalid minutes"):
            TimeOfDayPoint.parse("8:60", [19, 21])

    @pytest.mark.parametrize("value", [
        19,
        "19,21",
        [19],
        [19, 21, 23],
        ["19", 21],
        [19, None],
        [True, 21],
        [float("nan"), 21],
        [19, float("inf")],
        [19, 10 ** 400],
        [21, 19],
        [20, 20],
    ])
    def test_rejects_malformed_ranges(self, value):
        with pytest.raises(MalformedRangeError):
            TimeOfDayPoint.parse("8:00", value)

    def test_accepts_float_ranges(self):
        point = TimeOfDayPoint.parse("8:00", [19.5, 21.25])
        assert point.comfort_range == ComfortRange(19.5, 21.25)

    def test_canonical_key(self):
        assert TimeOfDayPoint.parse("08:05", [1, 2]).time_key == "8:05"


class TestSchedule:

    def test_sorted_numerically_not_lexicographically(self):
        schedule = Schedule.from_mapping({
            "22:00": [15, 18],
            "8:00": [19, 21],
            "10:30": [18, 20],
            "9:45": [17, 19],
        })
        assert [p.time_key for p in schedule.points] == ["8:00", "9:45", "10:30", "22:00"]

    def test_duplicate_time_of_day_rejected(self):
        with pytest.raises(DuplicateTimeError):
            Schedule.from_mapping({"8:00": [19, 21], "08:00": [18, 20]})

    def test_first_bad_entry_aborts(self):
        with pytest.raises(MalformedRangeError):
            Schedule.from_mapping({"8:00": [19, 21], "9:00": [22, 21], "10:00": "x"})

    def test_non_mapping_rejected(self):
        with pytest.raises(ScheduleValidationError):
            Schedule.from_mapping([["8:00", [19, 21]]])

    def test_empty_schedule_is_valid(self):
        schedule = Schedule.from_mapping({})
        assert schedule.is_empty()
        assert schedule.effective_range_at(at(12)) is None

    def test_effective_range_wraps_to_previous_day(self):
        schedule = Schedule.from_mapping({"8:00": [19, 21], "22:00": [15, 18]})
        assert schedule.effective_range_at(at(7)) == ComfortRange(15, 18)
        assert schedule.effective_range_at(at(9)) == ComfortRange(19, 21)
        assert schedule.effective_range_at(at(23)) == ComfortRange(15, 18)

    def test_entry_takes_effect_strictly_after_its_minute(self):
        schedule = Schedule.from_mapping({"8:00": [19, 21], "22:00": [15, 18]})
        assert schedule.effective_range_at(at(8, 0)) == ComfortRange(15, 18)
        assert schedule.effective_range_at(at(8, 1)) == ComfortRange(19, 21)

    def test_single_entry_applies_all_day(self):
        schedule = Schedule.from_mapping({"12:00": [18, 22]})
        assert schedule.effective_range_at(at(3)) == ComfortRange(18, 22)
        assert schedule.effective_range_at(at(15)) == ComfortRange(18, 22)

    def test_mapping_round_trip(self):
        raw = {"8:00": [19, 21], "22:00": [15, 18], "6:30": [17.5, 20]}
        schedule = Schedule.from_mapping(raw)
        assert schedule.to_mapping() == raw
        assert Schedule.from_mapping(schedule.to_mapping()) == schedule


class TestComfortRange:

    @pytest.mark.parametrize("reading,expected", [
        (17, FurnaceAction.HEAT),
        (22, FurnaceAction.COOL),
        (20, FurnaceAction.OFF),
        (19, FurnaceAction.OFF),
        (21, FurnaceAction.OFF),
        (18.999, FurnaceAction.HEAT),
        (21.001, FurnaceAction.COOL),
    ])
    def test_decide(self, reading, expected):
        assert ComfortRange(19, 21).decide(reading) == expected

    @pytest.mark.parametrize("error", [
        CrcFailureError("CRC failure"),
        ZeroReadingError("read 0 degree temperature", data="t=0"),
    ])
    def test_sensor_error_means_no_action(self, error):
        assert ComfortRange(19, 21).decide(error) is None


class TestFurnaceState:

    @pytest.mark.parametrize("action", list(FurnaceAction))
    def test_invariants_hold_for_every_action(self, action):
        state = FurnaceState.for_action(action)
        assert not (state.heat and state.cool)
        assert state.fan == (state.heat or state.cool)
        assert state.action == action

    def test_heat_and_cool_together_is_impossible(self):
        with pytest.raises(ValueError):
            FurnaceState(fan=True, heat=True, cool=True)

    def test_fan_must_follow_heat_or_cool(self):
        with pytest.raises(ValueError):
            FurnaceState(fan=True, heat=False, cool=False)
        with pytest.raises(ValueError):
            FurnaceState(fan=False, heat=True, cool=False)

    def test_default_is_off(self):
        assert FurnaceState() == FurnaceState.for_action(FurnaceAction.OFF)
        assert FurnaceState().to_dict() == {"fan": False, "heat": False, "cool": False}


class TestTemperatureLog:

    def test_entry_survives_until_max_age(self):
        t = 1_700_000_000_000
        log = TemperatureLog()
        log.append(t, 20.5)

        log.trim(t + 6 * DAY_MS + 23 * HOUR_MS, 7 * DAY_MS)
        assert t in log

        log.trim(t + 7 * DAY_MS + HOUR_MS, 7 * DAY_MS)
        assert t not in log

    def test_trim_compares_numerically(self):
        # "999..." sorts after "1000..." as text but is older as a number
        log = TemperatureLog()
        log.append(999_999_999_999, 18.0)
        log.append(1_000_000_000_000, 19.0)

        removed = log.trim(1_000_000_000_000, 1)
        assert removed == 1
        assert list(log.entries) == [1_000_000_000_000]

    def test_errors_are_stored_as_markers(self):
        log = TemperatureLog()
        log.append(1000, CrcFailureError("CRC failure"))
        log.append(2000, ZeroReadingError("read 0 degree temperature", data="t=0"))

        assert log.entries[1000] == {"error": "crc_failure", "message": "CRC failure"}
        assert log.entries[2000]["error"] == "zero_reading"
        assert log.entries[2000]["data"] == "t=0"

    def test_mapping_round_trip(self):
        log = TemperatureLog()
        log.append(2000, 21.0)
        log.append(1000, CrcFailureError("CRC failure"))

        mapping = log.to_mapping()
        assert list(mapping) == ["1000", "2000"]
        assert TemperatureLog.from_mapping(mapping) == log

    @pytest.mark.parametrize("raw", [
        [],
        "not a log",
        {"yesterday": 20.0},
        {"1000": "warm"},
        {"1000": {"temperature": 20}},
        {"1000": True},
        {"1000": 10 ** 400},
    ])
    def test_from_mapping_rejects_corrupt_data(self, raw):
        with pytest.raises(CorruptDataError):
            TemperatureLog.from_mapping(raw)
