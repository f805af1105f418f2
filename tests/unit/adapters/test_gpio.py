"""
Tests for the RPi.GPIO pin driver.

RPi.GPIO only imports on a Raspberry Pi, so the module is replaced with a
MagicMock for these tests.
"""

import sys
from unittest.mock import MagicMock, call

import pytest

from thermostat.adapters.pins import RPiGPIOPinDriver
from thermostat.domain.exceptions import HardwareError, PinWriteError


@pytest.fixture()
def fake_gpio(monkeypatch):
    gpio = MagicMock()
    gpio.BCM = "BCM"
    gpio.OUT = "OUT"
    gpio.HIGH = 1
    gpio.LOW = 0
    monkeypatch.setattr(RPiGPIOPinDriver, "_setup_gpio", staticmethod(lambda: gpio))
    return gpio


class TestRPiGPIOPinDriver:

    def test_configures_output_pins(self, fake_gpio):
        RPiGPIOPinDriver([17, 22])

        fake_gpio.setmode.assert_called_once_with("BCM")
        fake_gpio.setup.assert_has_calls([call(17, "OUT"), call(22, "OUT")])

    def test_set_pin_writes_level(self, fake_gpio):
        driver = RPiGPIOPinDriver([17, 22])
        driver.set_pin(17, 0)
        driver.set_pin(22, 1)

        fake_gpio.output.assert_has_calls([call(17, 0), call(22, 1)])

    def test_unconfigured_pin_is_rejected(self, fake_gpio):
        driver = RPiGPIOPinDriver([17])
        with pytest.raises(PinWriteError):
            driver.set_pin(4, 1)
        fake_gpio.output.assert_not_called()

    def test_write_failure_is_pin_write_error(self, fake_gpio):
        fake_gpio.output.side_effect = RuntimeError("channel not set up")
        driver = RPiGPIOPinDriver([17])

        with pytest.raises(PinWriteError) as exc_info:
            driver.set_pin(17, 1)
        assert exc_info.value.pin == 17

    def test_setup_failure_is_hardware_error(self, fake_gpio):
        fake_gpio.setup.side_effect = RuntimeError("not running on a Raspberry Pi")
        with pytest.raises(HardwareError):
            RPiGPIOPinDriver([17])

    def test_missing_library_is_hardware_error(self, monkeypatch):
        monkeypatch.setitem(sys.modules, "RPi", None)
        monkeypatch.setitem(sys.modules, "RPi.GPIO", None)
        with pytest.raises(HardwareError, match="USE_MOCK_HARDWARE"):
            RPiGPIOPinDriver([17])
