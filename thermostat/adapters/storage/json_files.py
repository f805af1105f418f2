# adapters/storage/json_files.py

"""
JSON file repository implementations for the furnace thermostat.

These adapters implement the repository ports defined in domain/ports.py.
Each repository owns one file holding the whole structure, rewritten
wholesale on every save.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Union

from thermostat.domain.exceptions import (
    CorruptDataError,
    ScheduleValidationError,
    StorageIOError,
)
from thermostat.domain.models import Schedule, TemperatureLog
from thermostat.domain.ports import ScheduleRepository, TemperatureLogRepository

logger = logging.getLogger(__name__)


def read_json_file_if_exists(path: Path) -> Optional[Any]:
    """
    Returns:
        Parsed JSON, or None if the file does not exist

    Raises:
        CorruptDataError: file exists but is not valid JSON
        StorageIOError: file exists but could not be read
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as e:
        raise StorageIOError(f"Could not read {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise CorruptDataError(f"{path} is not valid UTF-8 text") from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptDataError(f"{path} does not contain valid json: {e}") from e


def write_json_file(path: Path, data: Any) -> None:
    """
    Replace ``path`` with ``data`` as JSON.

    Writes a sibling temp file and renames it over the target, so readers
    never see a half-written file.

    Raises:
        StorageIOError: the file could not be written
    """
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise StorageIOError(f"Could not write {path}: {e}") from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.warning("Could not remove temp file %s", tmp_name)


class JsonFileScheduleRepository(ScheduleRepository):
    """
    Schedule stored as {"H:MM": [min, max], ...}.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Schedule:
        data = read_json_file_if_exists(self._path)
        if data is None:
            logger.info("No schedule file at %s, starting with an empty schedule", self._path)
            return Schedule()
        try:
            return Schedule.from_mapping(data)
        except ScheduleValidationError as e:
            raise CorruptDataError(f"{self._path} does not hold a valid schedule: {e.message}") from e

    def save(self, schedule: Schedule) -> None:
        write_json_file(self._path, schedule.to_mapping())


class JsonFileTemperatureLogRepository(TemperatureLogRepository):
    """
    Temperature log stored as {"<timestamp ms>": reading-or-error, ...}.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> TemperatureLog:
        data = read_json_file_if_exists(self._path)
        if data is None:
            logger.info("No temperature log at %s, starting a new one", self._path)
            return TemperatureLog()
        return TemperatureLog.from_mapping(data)

    def save(self, log: TemperatureLog) -> None:
        write_json_file(self._path, log.to_mapping())
