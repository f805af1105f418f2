# adapters/sensors/ds18b20.py

"""
1-Wire adapter for the DS18B20 temperature probe.

This is a driven adapter (secondary adapter) that implements the TemperatureSensor port.
The w1-therm kernel driver exposes each probe as a text file; this adapter reads
and parses it, hiding the sysfs format from the domain.

A w1_slave payload looks like:

    72 01 4b 46 7f ff 0e 10 57 : crc=57 YES
    72 01 4b 46 7f ff 0e 10 57 t=23125
"""

import logging
import re
from pathlib import Path

from thermostat.domain.exceptions import (
    CrcFailureError,
    NoReadingError,
    SensorIOError,
    ZeroReadingError,
)
from thermostat.domain.ports import TemperatureSensor

logger = logging.getLogger(__name__)

DEFAULT_DEVICES_DIR = "/sys/bus/w1/devices"

_CRC_SUCCESS = re.compile(r"crc=.. YES")
_TEMPERATURE = re.compile(r"t=([0-9]+)")


class DS18B20Sensor(TemperatureSensor):
    """
    Adapter for a DS18B20 probe on the 1-Wire bus.

    Each read opens the device file fresh; the kernel performs the
    conversion on open, which takes most of a second. Bytes that are not
    UTF-8 are replaced, so line noise fails the CRC or reading checks.
    """

    def __init__(self, sensor_id: str, devices_dir: str = DEFAULT_DEVICES_DIR):
        """
        Args:
            sensor_id: 1-Wire device id, e.g. "28-ee6b781a64ff"
            devices_dir: Directory the w1 bus exposes devices under
        """
        self._sensor_id = sensor_id
        self._device_file = Path(devices_dir) / sensor_id / "w1_slave"

    @property
    def device_file(self) -> Path:
        return self._device_file

    def read_temperature(self) -> float:
        """
        Read the probe.

        Returns:
            Temperature in degrees Celsius

        Raises:
            SensorIOError: device file missing or unreadable
            CrcFailureError, NoReadingError, ZeroReadingError: bad payload
        """
        try:
            payload = self._device_file.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.error("Could not read %s: %s", self._device_file, e)
            raise SensorIOError(f"Could not read sensor {self._sensor_id}: {e}") from e

        return self.parse_payload(payload)

    @staticmethod
    def parse_payload(payload: str) -> float:
        """
        Parse a raw w1_slave payload.

        The temperature field is an integer in milli-degrees. A value of
        exactly zero is what the probe reports when it drops off the bus,
        so it is treated as a failure rather than 0°C.

        Args:
            payload: Raw device text

        Returns:
            Temperature in degrees Celsius
        """
        if not _CRC_SUCCESS.search(payload):
            raise CrcFailureError("CRC failure")

        match = _TEMPERATURE.search(payload)
        if match is None:
            raise NoReadingError("couldn't find temperature in data", data=payload)

        millidegrees = int(match.group(1))
        if millidegrees == 0:
            raise ZeroReadingError("read 0 degree temperature", data=payload)

        return millidegrees / 1000
