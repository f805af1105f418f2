# api/models/enums.py

"""
Enums for the Thermostat API.
"""

from enum import Enum


class SensorErrorKind(str, Enum):
    CRC_FAILURE = "crc_failure"
    NO_READING = "no_reading"
    ZERO_READING = "zero_reading"
    IO_FAILURE = "io_failure"

class SystemHealth(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
