# adapters/mock/mock_repositories.py

"""
Mock repository adapters - store everything in memory.
No files needed!

Data is kept in its serialised mapping form so a save/load cycle goes
through the same conversion as the JSON file repositories.
"""

import copy
from typing import Optional

from thermostat.domain.exceptions import (
    CorruptDataError,
    ScheduleValidationError,
    StorageIOError,
)
from thermostat.domain.models import Schedule, TemperatureLog
from thermostat.domain.ports import ScheduleRepository, TemperatureLogRepository


class InMemoryScheduleRepository(ScheduleRepository):
    """Store the schedule mapping in memory"""

    def __init__(self, initial: Optional[dict] = None):
        self.data: Optional[dict] = copy.deepcopy(initial)
        self.save_count = 0
        self.fail_writes = False

    def load(self) -> Schedule:
        if self.data is None:
            return Schedule()
        try:
            return Schedule.from_mapping(self.data)
        except ScheduleValidationError as e:
            raise CorruptDataError(f"stored schedule is invalid: {e.message}") from e

    def save(self, schedule: Schedule) -> None:
        if self.fail_writes:
            raise StorageIOError("Simulated schedule write failure")
        self.data = schedule.to_mapping()
        self.save_count += 1


class InMemoryTemperatureLogRepository(TemperatureLogRepository):
    """Store the temperature log mapping in memory"""

    def __init__(self, initial: Optional[dict] = None):
        self.data: Optional[dict] = copy.deepcopy(initial)
        self.save_count = 0
        self.fail_writes = False

    def load(self) -> TemperatureLog:
        if self.data is None:
            return TemperatureLog()
        return TemperatureLog.from_mapping(self.data)

    def save(self, log: TemperatureLog) -> None:
        if self.fail_writes:
            raise StorageIOError("Simulated log write failure")
        self.data = copy.deepcopy(log.to_mapping())
        self.save_count += 1
