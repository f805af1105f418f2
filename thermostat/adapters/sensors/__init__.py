# adapters/sensors/__init__.py

"""
Temperature sensor adapters.
"""

from .ds18b20 import DS18B20Sensor

__all__ = ["DS18B20Sensor"]
