# domain/ports.py

"""
Ports (interfaces) for the furnace thermostat.

Ports define the contracts between the domain and external systems.
They specify WHAT the domain needs and HOW to interact with it,
but NOT the implementation details.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from thermostat.domain.models import Schedule, TemperatureLog


# ═══════════════════════════════════════════════════════════════════
# SENSOR PORTS
# ═══════════════════════════════════════════════════════════════════

class TemperatureSensor(ABC):
    """
    Port for reading the house temperature.

    Adapters: DS18B20Sensor (1-Wire sysfs), MockDS18B20Sensor
    """

    @abstractmethod
    def read_temperature(self) -> float:
        """
        Read the current temperature.

        Returns:
            Temperature in degrees Celsius

        Raises:
            SensorError: CRC failure, missing reading, zero reading or I/O failure
        """
        pass


# ═══════════════════════════════════════════════════════════════════
# FURNACE HARDWARE PORTS
# ═══════════════════════════════════════════════════════════════════

class PinDriver(ABC):
    """
    Port for driving output pins.

    Adapters: RPiGPIOPinDriver, MockPinDriver
    """

    @abstractmethod
    def set_pin(self, pin: int, level: int) -> None:
        """
        Drive an output pin to a level.

        Args:
            pin: BCM pin number
            level: 0 or 1

        Raises:
            PinWriteError: if the write failed (hardware state now unknown)
        """
        pass


# ═══════════════════════════════════════════════════════════════════
# PERSISTENCE PORTS
# ═══════════════════════════════════════════════════════════════════

class ScheduleRepository(ABC):
    """
    Port for storing the schedule.

    Adapters: JsonFileScheduleRepository, InMemoryScheduleRepository
    """

    @abstractmethod
    def load(self) -> Schedule:
        """
        Load the stored schedule.

        Returns:
            Stored schedule, or an empty one if nothing is stored yet

        Raises:
            CorruptDataError: stored data is not a valid schedule
            StorageIOError: storage could not be read
        """
        pass

    @abstractmethod
    def save(self, schedule: Schedule) -> None:
        """
        Replace the stored schedule.

        Raises:
            StorageIOError: storage could not be written
        """
        pass


class TemperatureLogRepository(ABC):
    """
    Port for storing the temperature log.

    Adapters: JsonFileTemperatureLogRepository, InMemoryTemperatureLogRepository
    """

    @abstractmethod
    def load(self) -> TemperatureLog:
        """
        Raises:
            CorruptDataError: stored data is not a valid log
            StorageIOError: storage could not be read
        """
        pass

    @abstractmethod
    def save(self, log: TemperatureLog) -> None:
        """
        Raises:
            StorageIOError: storage could not be written
        """
        pass


# ═══════════════════════════════════════════════════════════════════
# INFRASTRUCTURE/UTILITY PORTS
# ═══════════════════════════════════════════════════════════════════

class TimeProvider(ABC):
    """
    Port for getting current time.

    Adapters: SystemTimeProvider, FixedTimeProvider (for testing)
    """

    @abstractmethod
    def now(self) -> datetime:
        """
        Get current wall-clock time (timezone-aware).

        Returns:
            Current datetime
        """
        pass


class Logger(ABC):
    """
    Port for logging.

    Adapters: DualLogger
    """

    @abstractmethod
    def info(self, message: str, context: dict = None) -> None:
        pass

    @abstractmethod
    def warning(self, message: str, context: dict = None) -> None:
        pass

    @abstractmethod
    def error(
            self,
            message: str,
            context: dict = None,
            exception: Exception = None
    ) -> None:
        pass

    @abstractmethod
    def debug(self, message: str, context: dict = None) -> None:
        pass
