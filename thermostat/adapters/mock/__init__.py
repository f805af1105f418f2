# adapters/mock/__init__.py

"""
Mock adapters for testing without real hardware.
"""

from .mock_sensor import MockDS18B20Sensor
from .mock_repositories import (
    InMemoryScheduleRepository,
    InMemoryTemperatureLogRepository
)
from .mock_pins import MockPinDriver

__all__ = [
    'MockDS18B20Sensor',
    'InMemoryScheduleRepository',
    'InMemoryTemperatureLogRepository',
    'MockPinDriver'
]
