import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple, Union

from thermostat.domain.exceptions import (
    CorruptDataError,
    DuplicateTimeError,
    MalformedRangeError,
    MalformedTimeError,
    ScheduleValidationError,
    SensorError,
)


# ========== Furnace ==========

class FurnaceAction(Enum):
    HEAT = "heat"
    COOL = "cool"
    OFF = "off"


@dataclass(frozen=True)
class FurnaceState:
    """
    What the furnace is doing right now.

    Only ever replaced as a whole, never patched field by field, so it always
    matches the last set of pin writes.
    """
    fan: bool = False
    heat: bool = False
    cool: bool = False

    def __post_init__(self):
        if self.heat and self.cool:
            raise ValueError("furnace cannot heat and cool at the same time")
        if self.fan != (self.heat or self.cool):
            raise ValueError("fan runs exactly when heating or cooling")

    @classmethod
    def for_action(cls, action: FurnaceAction) -> 'FurnaceState':
        if action == FurnaceAction.HEAT:
            return cls(fan=True, heat=True, cool=False)
        elif action == FurnaceAction.COOL:
            return cls(fan=True, heat=False, cool=True)
        elif action == FurnaceAction.OFF:
            return cls(fan=False, heat=False, cool=False)
        else:
            raise ValueError(f"Unknown furnace action: {action}")

    @property
    def action(self) -> FurnaceAction:
        if self.heat:
            return FurnaceAction.HEAT
        if self.cool:
            return FurnaceAction.COOL
        return FurnaceAction.OFF

    def to_dict(self) -> dict:
        return {"fan": self.fan, "heat": self.heat, "cool": self.cool}


# A sensor read either yields degrees Celsius or the error explaining why not
TemperatureReading = Union[float, SensorError]


def is_number(value) -> bool:
    """True for finite ints and floats that fit a float. JSON booleans do not count."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


# ========== Schedule ==========

_TIME_KEY = re.compile(r"([0-9]{1,2}):([0-9]{2})")


@dataclass(frozen=True)
class ComfortRange:
    """The [min, max] band the house should be kept in."""
    min_temp: float
    max_temp: float

    def decide(self, reading: TemperatureReading) -> Optional[FurnaceAction]:
        """
        Bang-bang decision for a single reading.

        Returns None when the reading is a sensor error: the caller leaves the
        furnace exactly as it is rather than forcing it off.
        """
        if isinstance(reading, SensorError):
            return None
        if reading < self.min_temp:
            return FurnaceAction.HEAT
        if reading > self.max_temp:
            return FurnaceAction.COOL
        return FurnaceAction.OFF


@dataclass(frozen=True)
class TimeOfDayPoint:
    """A comfort range that takes effect at a given time of day."""
    hour: int
    minute: int
    min_temp: float
    max_temp: float

    @classmethod
    def parse(cls, time_str, temp_range) -> 'TimeOfDayPoint':
        """
        Build a point from an "H:MM" key and a [min, max] pair.

        Raises:
            MalformedTimeError: key is not H:MM / HH:MM or is out of range
            MalformedRangeError: value is not two numbers with min < max
        """
        if not isinstance(time_str, str):
            raise MalformedTimeError(f'Improperly formed time string: "{time_str}"')
        match = _TIME_KEY.fullmatch(time_str)
        if match is None:
            raise MalformedTimeError(f'Improperly formed time string: "{time_str}"')
        hour, minute = int(match.group(1)), int(match.group(2))
        if hour > 23:
            raise MalformedTimeError(f"Invalid time string: {time_str} (invalid hour)")
        if minute > 59:
            raise MalformedTimeError(f"Invalid time string: {time_str} (invalid minutes)")

        if not isinstance(temp_range, (list, tuple)):
            raise MalformedRangeError(f"temperature range must be an array, not: {temp_range!r}")
        if len(temp_range) != 2:
            raise MalformedRangeError(
                f"temperature range must have length 2, got length {len(temp_range)}"
            )
        min_temp, max_temp = temp_range
        if not is_number(min_temp) or not is_number(max_temp):
            raise MalformedRangeError(
                f"Invalid temperature range: {list(temp_range)} (both values must be numbers)"
            )
        if min_temp >= max_temp:
            raise MalformedRangeError(
                f"Invalid temperature range: {list(temp_range)} (min temperature must be less than max)"
            )

        return cls(hour=hour, minute=minute, min_temp=min_temp, max_temp=max_temp)

    @property
    def time_key(self) -> str:
        return f"{self.hour}:{self.minute:02d}"

    @property
    def sort_key(self) -> Tuple[int, int]:
        return (self.hour, self.minute)

    @property
    def comfort_range(self) -> ComfortRange:
        return ComfortRange(self.min_temp, self.max_temp)


@dataclass(frozen=True)
class Schedule:
    """
    Time-of-day comfort ranges, sorted ascending with unique times.

    An empty schedule is valid and means nothing has been configured yet.
    """
    points: Tuple[TimeOfDayPoint, ...] = ()

    @classmethod
    def from_mapping(cls, raw: Mapping) -> 'Schedule':
        """
        Validate a whole submitted schedule. The first bad entry aborts.

        Raises:
            ScheduleValidationError (or a subclass) describing the first problem
        """
        if not isinstance(raw, Mapping):
            raise ScheduleValidationError(f"schedule must be an object, not: {raw!r}")

        seen: Dict[Tuple[int, int], str] = {}
        points = []
        for time_str, temp_range in raw.items():
            point = TimeOfDayPoint.parse(time_str, temp_range)
            if point.sort_key in seen:
                raise DuplicateTimeError(
                    f'Duplicate time "{time_str}" (same time of day as "{seen[point.sort_key]}")'
                )
            seen[point.sort_key] = time_str
            points.append(point)

        points.sort(key=lambda p: p.sort_key)
        return cls(points=tuple(points))

    def effective_range_at(self, now: datetime) -> Optional[ComfortRange]:
        """
        Range in effect at the wall-clock time ``now``.

        That is the last entry strictly before now's hour:minute. Before the
        first entry of the day, the last entry of the day still applies.
        """
        if not self.points:
            return None

        current = (now.hour, now.minute)
        effective = self.points[-1]
        for point in self.points:
            if point.sort_key < current:
                effective = point
            else:
                break
        return effective.comfort_range

    def to_mapping(self) -> Dict[str, list]:
        return {p.time_key: [p.min_temp, p.max_temp] for p in self.points}

    def is_empty(self) -> bool:
        return not self.points

    def __len__(self) -> int:
        return len(self.points)


# ========== Temperature log ==========

LogValue = Union[float, dict]


def log_value_for(reading: TemperatureReading) -> LogValue:
    """Errors are stored as a marker dict so gaps in the history stay explainable."""
    if isinstance(reading, SensorError):
        return reading.to_dict()
    return reading


@dataclass
class TemperatureLog:
    """
    Readings keyed by insertion time in milliseconds since the Unix epoch.
    """
    entries: Dict[int, LogValue] = field(default_factory=dict)

    def append(self, timestamp_ms: int, reading: TemperatureReading) -> None:
        self.entries[int(timestamp_ms)] = log_value_for(reading)

    def trim(self, now_ms: int, max_age_ms: int) -> int:
        """
        Drop every entry older than ``now_ms - max_age_ms``.

        Returns:
            Number of entries removed
        """
        oldest_allowed = now_ms - max_age_ms
        expired = [ts for ts in self.entries if ts < oldest_allowed]
        for ts in expired:
            del self.entries[ts]
        return len(expired)

    def to_mapping(self) -> Dict[str, LogValue]:
        return {str(ts): self.entries[ts] for ts in sorted(self.entries)}

    @classmethod
    def from_mapping(cls, raw) -> 'TemperatureLog':
        """
        Raises:
            CorruptDataError: if raw is not a timestamp -> reading mapping
        """
        if not isinstance(raw, Mapping):
            raise CorruptDataError("temperature log must be a JSON object")

        entries: Dict[int, LogValue] = {}
        for key, value in raw.items():
            try:
                timestamp = int(key)
            except (TypeError, ValueError):
                raise CorruptDataError(f"invalid log timestamp: {key!r}") from None
            if not is_number(value) and not (isinstance(value, dict) and "error" in value):
                raise CorruptDataError(f"invalid log entry at {key}: {value!r}")
            entries[timestamp] = value
        return cls(entries=entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, timestamp_ms) -> bool:
        return timestamp_ms in self.entries
