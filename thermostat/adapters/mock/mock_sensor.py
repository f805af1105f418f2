# adapters/mock/mock_sensor.py

"""
Mock sensor adapter for testing without real hardware.
Produces w1_slave payloads and parses them like the real probe.
"""

import random
import time
from typing import Optional

from thermostat.adapters.sensors.ds18b20 import DS18B20Sensor
from thermostat.domain.exceptions import SensorIOError
from thermostat.domain.ports import TemperatureSensor


class MockDS18B20Sensor(TemperatureSensor):
    """
    Fake 1-Wire probe.
    No real hardware needed!
    """

    def __init__(
            self,
            base_temp: float = 20.0,
            variation: float = 0.0,
            read_delay: float = 0.0
    ):
        """
        Args:
            base_temp: Average temperature to report
            variation: How much to vary from base (±variation)
            read_delay: Seconds each read blocks for (to exercise timeouts)
        """
        self._base_temp = base_temp
        self._variation = variation
        self._read_delay = read_delay
        self._is_healthy = True
        self._payload_override: Optional[str] = None
        self.read_count = 0

    def read_temperature(self) -> float:
        self.read_count += 1
        if self._read_delay:
            time.sleep(self._read_delay)
        if not self._is_healthy:
            raise SensorIOError("Sensor is broken (simulated failure)")
        return DS18B20Sensor.parse_payload(self.payload())

    def payload(self) -> str:
        if self._payload_override is not None:
            return self._payload_override
        temp = self._base_temp + random.uniform(-self._variation, self._variation)
        millidegrees = round(temp * 1000)
        return (
            "72 01 4b 46 7f ff 0e 10 57 : crc=57 YES\n"
            f"72 01 4b 46 7f ff 0e 10 57 t={millidegrees}\n"
        )

    # ===== Testing helpers =====

    def break_sensor(self):
        """Simulate the device file disappearing"""
        self._is_healthy = False

    def fix_sensor(self):
        """Restore sensor (for testing recovery)"""
        self._is_healthy = True
        self._payload_override = None

    def fail_crc(self):
        """Report a payload whose CRC check failed"""
        self._payload_override = (
            "72 01 4b 46 7f ff 0e 10 57 : crc=00 NO\n"
            "72 01 4b 46 7f ff 0e 10 57 t=23125\n"
        )

    def disconnect(self):
        """Report the all-zero reading the probe gives when it drops off the bus"""
        self._payload_override = (
            "00 00 00 00 00 00 00 00 00 : crc=00 YES\n"
            "00 00 00 00 00 00 00 00 00 t=0\n"
        )

    def set_temperature(self, temp: float):
        """Manually set temperature (for testing specific scenarios)"""
        self._base_temp = temp
