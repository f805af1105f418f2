# adapters/pins/gpio.py

"""
Raspberry Pi GPIO adapter implementing the PinDriver port.

The furnace relays hang off two BCM pins: main power and the heat/cool
selector. This adapter only knows how to set levels; which level means what
is the FurnaceController's business.
"""

import logging
from typing import Iterable

from thermostat.domain.exceptions import HardwareError, PinWriteError
from thermostat.domain.ports import PinDriver

logger = logging.getLogger(__name__)


class RPiGPIOPinDriver(PinDriver):
    """
    Drives output pins through RPi.GPIO (BCM numbering).

    Pins must be declared up front so they are configured as outputs
    before the first write.
    """

    def __init__(self, output_pins: Iterable[int]):
        """
        Args:
            output_pins: BCM pin numbers to configure as outputs

        Raises:
            HardwareError: RPi.GPIO is not installed or not on a Raspberry Pi
        """
        self._pins = tuple(output_pins)
        self.GPIO = self._setup_gpio()

        try:
            self.GPIO.setwarnings(False)
            self.GPIO.setmode(self.GPIO.BCM)
            for pin in self._pins:
                self.GPIO.setup(pin, self.GPIO.OUT)
                logger.info("GPIO pin %s set as OUTPUT", pin)
        except (RuntimeError, ValueError) as e:
            raise HardwareError(f"Could not configure GPIO pins {self._pins}: {e}") from e

    @staticmethod
    def _setup_gpio():
        """Import RPi.GPIO; it only loads on a Raspberry Pi."""
        try:
            import RPi.GPIO as GPIO  # type: ignore
        except (ImportError, RuntimeError) as e:
            raise HardwareError(
                "RPi.GPIO not available. Install the 'hardware' extra on a Raspberry Pi "
                "or set USE_MOCK_HARDWARE=true."
            ) from e
        return GPIO

    def set_pin(self, pin: int, level: int) -> None:
        if pin not in self._pins:
            raise PinWriteError(f"GPIO pin {pin} was not configured as an output", pin=pin)
        try:
            self.GPIO.output(pin, self.GPIO.HIGH if level else self.GPIO.LOW)
        except (RuntimeError, ValueError, OSError) as e:
            logger.error("Error writing level %s to GPIO pin %s: %s", level, pin, e)
            raise PinWriteError(f"Failed to write level {level} to GPIO pin {pin}: {e}", pin=pin) from e
        logger.debug("GPIO pin %s -> %s", pin, level)
