# domain/exceptions.py

"""
Exception hierarchy for the furnace thermostat.

Every error carries a short machine-readable ``kind`` so it can be logged,
stored in the temperature log, or returned to an API caller verbatim.
"""

from typing import Optional


class ThermostatError(Exception):
    """Base exception for the thermostat."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message, "kind": self.kind}


# ═══════════════════════════════════════════════════════════════════
# SENSOR ERRORS
# ═══════════════════════════════════════════════════════════════════

class SensorError(ThermostatError):
    """Sensor data is unavailable or invalid."""

    kind = "sensor_error"

    def __init__(self, message: str, data: Optional[str] = None):
        super().__init__(message)
        self.data = data

    def to_dict(self) -> dict:
        result = {"error": self.kind, "message": self.message}
        if self.data is not None:
            result["data"] = self.data
        return result


class CrcFailureError(SensorError):
    """The device payload did not carry a successful CRC marker."""

    kind = "crc_failure"


class NoReadingError(SensorError):
    """The device payload has no temperature field."""

    kind = "no_reading"


class ZeroReadingError(SensorError):
    """The sensor reported exactly zero, which it does when disconnected."""

    kind = "zero_reading"


class SensorIOError(SensorError):
    """The device file could not be read (or the read timed out)."""

    kind = "io_failure"


# ═══════════════════════════════════════════════════════════════════
# SCHEDULE VALIDATION ERRORS
# ═══════════════════════════════════════════════════════════════════

class ScheduleValidationError(ThermostatError):
    """A submitted schedule was rejected. Nothing was applied."""

    kind = "validation_error"


class MalformedTimeError(ScheduleValidationError):
    kind = "malformed_time"


class MalformedRangeError(ScheduleValidationError):
    kind = "malformed_range"


class DuplicateTimeError(ScheduleValidationError):
    kind = "duplicate_time"


# ═══════════════════════════════════════════════════════════════════
# PERSISTENCE ERRORS
# ═══════════════════════════════════════════════════════════════════

class PersistenceError(ThermostatError):
    """Stored data could not be read or written."""

    kind = "persistence_error"


class StorageIOError(PersistenceError):
    kind = "io_failure"


class CorruptDataError(PersistenceError):
    """The file exists but does not hold the expected JSON structure."""

    kind = "corrupt_data"


# ═══════════════════════════════════════════════════════════════════
# HARDWARE ERRORS
# ═══════════════════════════════════════════════════════════════════

class HardwareError(ThermostatError):
    """Furnace hardware is in an unknown state. Always fatal."""

    kind = "hardware_error"


class PinWriteError(HardwareError):
    kind = "pin_write_failure"

    def __init__(self, message: str, pin: Optional[int] = None):
        super().__init__(message)
        self.pin = pin
