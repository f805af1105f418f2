# adapters/pins/__init__.py

"""
Pin driver adapters for the furnace relays.
"""

from .gpio import RPiGPIOPinDriver

__all__ = ["RPiGPIOPinDriver"]
