# adapters/mock/mock_pins.py

"""
Mock pin driver - simulates the furnace relays without real hardware.
"""

from typing import Dict, List, Optional, Tuple

from thermostat.domain.exceptions import PinWriteError
from thermostat.domain.ports import PinDriver


class MockPinDriver(PinDriver):
    """
    Fake GPIO - just records every write.
    """

    def __init__(self):
        self.writes: List[Tuple[int, int]] = []
        self._levels: Dict[int, int] = {}
        self._failing_pin: Optional[int] = None

    def set_pin(self, pin: int, level: int) -> None:
        if pin == self._failing_pin:
            raise PinWriteError(f"Simulated write failure on pin {pin}", pin=pin)
        self.writes.append((pin, level))
        self._levels[pin] = level

    # ===== Testing helpers =====

    def level(self, pin: int) -> Optional[int]:
        """Last level written to pin, or None if never written"""
        return self._levels.get(pin)

    def fail_pin(self, pin: Optional[int]):
        """Make writes to ``pin`` fail (None to stop failing)"""
        self._failing_pin = pin

    def reset(self):
        self.writes = []
        self._levels = {}
