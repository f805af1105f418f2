# adapters/storage/__init__.py

"""
JSON file adapter implementations for the furnace thermostat.
"""

from thermostat.adapters.storage.json_files import (
    JsonFileScheduleRepository,
    JsonFileTemperatureLogRepository
)

__all__ = [
    'JsonFileScheduleRepository',
    'JsonFileTemperatureLogRepository'
]
