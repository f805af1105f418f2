"""
Tests for the JSON file repositories.
"""

import json

import pytest

from thermostat.adapters.storage import (
    JsonFileScheduleRepository,
    JsonFileTemperatureLogRepository,
)
from thermostat.domain.exceptions import CorruptDataError, CrcFailureError, StorageIOError
from thermostat.domain.models import Schedule, TemperatureLog


@pytest.fixture()
def schedule_path(tmp_path):
    return tmp_path / "temperatureSchedule.json"


@pytest.fixture()
def log_path(tmp_path):
    return tmp_path / "temperatureLogFile.json"


class TestJsonFileScheduleRepository:

    def test_missing_file_is_empty_schedule(self, schedule_path):
        repo = JsonFileScheduleRepository(str(schedule_path))
        assert repo.path == schedule_path
        assert repo.load().is_empty()

    def test_save_writes_canonical_mapping(self, schedule_path):
        repo = JsonFileScheduleRepository(schedule_path)
        repo.save(Schedule.from_mapping({"22:00": [15, 18], "08:00": [19, 21]}))

        assert json.loads(schedule_path.read_text()) == {"8:00": [19, 21], "22:00": [15, 18]}
        assert repo.load().to_mapping() == {"8:00": [19, 21], "22:00": [15, 18]}

    def test_save_overwrites(self, schedule_path):
        repo = JsonFileScheduleRepository(schedule_path)
        repo.save(Schedule.from_mapping({"8:00": [19, 21]}))
        repo.save(Schedule.from_mapping({"9:00": [18, 20]}))

        assert repo.load().to_mapping() == {"9:00": [18, 20]}
        assert [p.name for p in schedule_path.parent.iterdir()] == [schedule_path.name]

    def test_invalid_json_is_corrupt(self, schedule_path):
        schedule_path.write_text("{not json")
        with pytest.raises(CorruptDataError):
            JsonFileScheduleRepository(schedule_path).load()

    def test_invalid_schedule_is_corrupt(self, schedule_path):
        schedule_path.write_text(json.dumps({"8:00": [21, 19]}))
        with pytest.raises(CorruptDataError):
            JsonFileScheduleRepository(schedule_path).load()

    def test_oversized_number_is_corrupt(self, schedule_path):
        schedule_path.write_text('{"8:00": [19, 1' + "0" * 400 + "]}")
        with pytest.raises(CorruptDataError):
            JsonFileScheduleRepository(schedule_path).load()

    def test_corrupt_file_is_replaced_on_save(self, schedule_path):
        schedule_path.write_text("\x00\x01garbage")
        repo = JsonFileScheduleRepository(schedule_path)
        repo.save(Schedule.from_mapping({"8:00": [19, 21]}))

        assert repo.load().to_mapping() == {"8:00": [19, 21]}

    def test_unwritable_location_is_io_failure(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        repo = JsonFileScheduleRepository(blocker / "schedule.json")

        with pytest.raises(StorageIOError):
            repo.save(Schedule())


class TestJsonFileTemperatureLogRepository:

    def test_missing_file_is_empty_log(self, log_path):
        repo = JsonFileTemperatureLogRepository(str(log_path))
        assert repo.path == log_path
        assert len(repo.load()) == 0

    def test_save_and_load(self, log_path):
        log = TemperatureLog()
        log.append(1_700_000_600_000, 20.5)
        log.append(1_700_000_000_000, CrcFailureError("CRC failure"))

        repo = JsonFileTemperatureLogRepository(log_path)
        repo.save(log)

        assert json.loads(log_path.read_text()) == {
            "1700000000000": {"error": "crc_failure", "message": "CRC failure"},
            "1700000600000": 20.5,
        }
        assert repo.load() == log

    def test_non_object_is_corrupt(self, log_path):
        log_path.write_text("[1, 2, 3]")
        with pytest.raises(CorruptDataError):
            JsonFileTemperatureLogRepository(log_path).load()

    def test_truncated_file_is_corrupt(self, log_path):
        log_path.write_text('{"1700000000000": 20.')
        with pytest.raises(CorruptDataError):
            JsonFileTemperatureLogRepository(log_path).load()
