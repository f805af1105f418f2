"""
Furnace thermostat: schedule-driven two-stage furnace control with a small
remote-control API.
"""

__version__ = "1.0.0"
