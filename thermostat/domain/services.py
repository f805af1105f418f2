# domain/services.py

"""
Domain Services for the Furnace Thermostat

Services contain the business logic for:
- Sampling the temperature sensor
- Driving the furnace through its OFF/HEAT/COOL states
- Managing the time-of-day schedule
- Keeping a bounded temperature history
- Running the periodic logging and furnace-update cadences

Each service orchestrates workflows and uses ports to interact with
external systems (hardware, storage). Blocking port calls are pushed to a
worker thread so the event loop keeps serving the API while they run.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Dict, List, Mapping, Optional, Tuple

from thermostat.domain.exceptions import (
    CorruptDataError,
    SensorError,
    SensorIOError,
    StorageIOError,
)
from thermostat.domain.models import (
    ComfortRange,
    FurnaceAction,
    FurnaceState,
    Schedule,
    TemperatureLog,
    TemperatureReading,
)
from thermostat.domain.ports import (
    Logger,
    PinDriver,
    ScheduleRepository,
    TemperatureLogRepository,
    TemperatureSensor,
    TimeProvider,
)


class _LoggingMixin:
    """Log through the Logger port when one was injected, otherwise print."""

    _logger: Optional[Logger] = None

    def _log_info(self, message: str, context: dict = None):
        if self._logger:
            self._logger.info(message, context)
        else:
            print(f"[INFO] {message}")

    def _log_warning(self, message: str, context: dict = None):
        if self._logger:
            self._logger.warning(message, context)
        else:
            print(f"[WARNING] {message}")

    def _log_error(self, message: str, context: dict = None, exception: Exception = None):
        if self._logger:
            self._logger.error(message, context, exception)
        else:
            print(f"[ERROR] {message}")
            if exception:
                print(f"  Exception: {exception}")


async def _storage_call(func, *args, timeout: float, description: str):
    """Run a blocking repository read off the loop, mapping expiry to StorageIOError."""
    try:
        return await asyncio.wait_for(asyncio.to_thread(func, *args), timeout)
    except asyncio.TimeoutError:
        raise StorageIOError(f"Timed out after {timeout}s while {description}") from None


async def _storage_write(
        func,
        *args,
        timeout: float,
        description: str,
        on_slow: Callable[[str], None]
):
    """
    Run a blocking repository write off the loop and wait for its outcome.

    A worker thread cannot be stopped, so a write that outlives ``timeout``
    is reported through ``on_slow`` and then awaited to completion. Its
    result or exception is the real outcome of the write.
    """
    write = asyncio.ensure_future(asyncio.to_thread(func, *args))
    try:
        return await asyncio.wait_for(asyncio.shield(write), timeout)
    except asyncio.TimeoutError:
        on_slow(f"Still {description} after {timeout}s, waiting for it to finish")
        return await write


# ═══════════════════════════════════════════════════════════════════
# TEMPERATURE SAMPLING SERVICE
# ═══════════════════════════════════════════════════════════════════

class TemperatureSamplingService(_LoggingMixin):
    """
    Reads the sensor once per call and hands back a reading or the error.

    Sensor failures are data here, not exceptions: both cadences and the
    API need to see them.
    """

    def __init__(
            self,
            sensor: TemperatureSensor,
            read_timeout: float = 10.0,
            logger: Optional[Logger] = None
    ):
        self._sensor = sensor
        self._read_timeout = read_timeout
        self._logger = logger

    async def sample(self) -> TemperatureReading:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._sensor.read_temperature),
                self._read_timeout
            )
        except asyncio.TimeoutError:
            error = SensorIOError(f"Sensor read timed out after {self._read_timeout}s")
        except SensorError as e:
            error = e

        self._log_warning(f"Sensor read failed: {error.message}", {"kind": error.kind})
        return error


# ═══════════════════════════════════════════════════════════════════
# FURNACE CONTROLLER
# ═══════════════════════════════════════════════════════════════════

class FurnaceController(_LoggingMixin):
    """
    State machine over OFF / HEAT / COOL.

    Main power is always written before the heat/cool selector, and OFF only
    touches main power, so the selector never switches a live circuit into an
    undefined mode. Pin failures are not caught here: they must reach the
    process supervisor.
    """

    def __init__(
            self,
            pin_driver: PinDriver,
            main_power_pin: int = 17,
            selector_pin: int = 22,
            power_enabled_level: int = 0,
            power_disabled_level: int = 1,
            selector_heat_level: int = 1,
            selector_cool_level: int = 0,
            logger: Optional[Logger] = None
    ):
        self._pins = pin_driver
        self._main_power_pin = main_power_pin
        self._selector_pin = selector_pin
        self._power_enabled_level = power_enabled_level
        self._power_disabled_level = power_disabled_level
        self._selector_heat_level = selector_heat_level
        self._selector_cool_level = selector_cool_level
        self._logger = logger

        self._state = FurnaceState()
        self._lock = asyncio.Lock()

    @property
    def state(self) -> FurnaceState:
        return self._state

    def pin_writes_for(self, action: FurnaceAction) -> List[Tuple[int, int]]:
        """Ordered (pin, level) writes that put the furnace into ``action``."""
        if action == FurnaceAction.HEAT:
            return [
                (self._main_power_pin, self._power_enabled_level),
                (self._selector_pin, self._selector_heat_level),
            ]
        elif action == FurnaceAction.COOL:
            return [
                (self._main_power_pin, self._power_enabled_level),
                (self._selector_pin, self._selector_cool_level),
            ]
        elif action == FurnaceAction.OFF:
            return [(self._main_power_pin, self._power_disabled_level)]
        else:
            raise ValueError(f"Unknown furnace action: {action}")

    async def apply(self, action: FurnaceAction) -> FurnaceState:
        """
        Switch the furnace to ``action``.

        Returns:
            The new FurnaceState

        Raises:
            PinWriteError: hardware state is unknown; the caller must stop
        """
        async with self._lock:
            writes = self.pin_writes_for(action)
            previous = self._state
            self._state = FurnaceState.for_action(action)

            for pin, level in writes:
                await asyncio.to_thread(self._pins.set_pin, pin, level)

            if previous != self._state:
                self._log_info(f"Furnace {previous.action.value} -> {action.value}")
            return self._state


# ═══════════════════════════════════════════════════════════════════
# SCHEDULE SERVICE
# ═══════════════════════════════════════════════════════════════════

class ScheduleService(_LoggingMixin):
    """
    Owns the live schedule.

    Submissions are all-or-nothing: validate everything, persist, and only
    then swap the in-memory schedule.
    """

    def __init__(
            self,
            repository: ScheduleRepository,
            storage_timeout: float = 10.0,
            logger: Optional[Logger] = None
    ):
        self._repo = repository
        self._storage_timeout = storage_timeout
        self._logger = logger

        self._schedule = Schedule()
        self._lock = asyncio.Lock()

    @property
    def schedule(self) -> Schedule:
        return self._schedule

    async def load(self) -> Schedule:
        """
        Load the stored schedule at startup.

        A corrupt file means an empty schedule; it gets replaced on the next
        successful submission.
        """
        async with self._lock:
            try:
                schedule = await _storage_call(
                    self._repo.load,
                    timeout=self._storage_timeout,
                    description="loading schedule"
                )
            except CorruptDataError as e:
                self._log_warning(f"Stored schedule is corrupt, starting empty: {e.message}")
                schedule = Schedule()

            self._schedule = schedule
            self._log_info(f"Loaded schedule with {len(schedule)} entries")
            return schedule

    async def submit(self, raw: Mapping) -> Schedule:
        """
        Replace the schedule with a submitted "H:MM" -> [min, max] mapping.

        Raises:
            ScheduleValidationError: nothing was changed
            PersistenceError: nothing was changed
        """
        schedule = Schedule.from_mapping(raw)

        async with self._lock:
            await _storage_write(
                self._repo.save, schedule,
                timeout=self._storage_timeout,
                description="saving schedule",
                on_slow=self._log_warning
            )
            self._schedule = schedule

        self._log_info(f"Schedule updated with {len(schedule)} entries", schedule.to_mapping())
        return schedule

    def effective_range_at(self, now: datetime) -> Optional[ComfortRange]:
        return self._schedule.effective_range_at(now)


# ═══════════════════════════════════════════════════════════════════
# TEMPERATURE LOG SERVICE
# ═══════════════════════════════════════════════════════════════════

class TemperatureLogService(_LoggingMixin):
    """
    Bounded-retention temperature history.

    The log is best-effort: a missing or corrupt file starts an empty log.
    Write failures still propagate.
    """

    def __init__(
            self,
            repository: TemperatureLogRepository,
            max_age: timedelta = timedelta(days=7),
            storage_timeout: float = 10.0,
            logger: Optional[Logger] = None
    ):
        self._repo = repository
        self._max_age_ms = int(max_age.total_seconds() * 1000)
        self._storage_timeout = storage_timeout
        self._logger = logger

        self._log = TemperatureLog()
        self._lock = asyncio.Lock()

    async def load(self) -> TemperatureLog:
        async with self._lock:
            try:
                log = await _storage_call(
                    self._repo.load,
                    timeout=self._storage_timeout,
                    description="loading temperature log"
                )
            except CorruptDataError as e:
                self._log_warning(f"Temperature log is corrupt, starting empty: {e.message}")
                log = TemperatureLog()

            self._log = log
            self._log_info(f"Loaded temperature log with {len(log)} entries")
            return log

    async def record(self, timestamp_ms: int, reading: TemperatureReading) -> int:
        """
        Append a reading, drop expired entries and persist.

        Returns:
            Number of expired entries dropped
        """
        async with self._lock:
            self._log.append(timestamp_ms, reading)
            removed = self._log.trim(timestamp_ms, self._max_age_ms)
            await _storage_write(
                self._repo.save, self._log,
                timeout=self._storage_timeout,
                description="saving temperature log",
                on_slow=self._log_warning
            )
            return removed

    def snapshot(self) -> Dict[str, object]:
        return self._log.to_mapping()

    def __len__(self) -> int:
        return len(self._log)


# ═══════════════════════════════════════════════════════════════════
# CONTROL LOOP
# ═══════════════════════════════════════════════════════════════════

class ControlLoop(_LoggingMixin):
    """
    Runs the two periodic cadences.

    - logging tick: sample, append, trim, persist
    - furnace tick: schedule lookup, sample, decide, actuate

    Each runs once at startup and then at a fixed rate. The furnace period is
    shorter than the logging one. A cadence never overlaps itself; the two
    cadences are independent of each other. An exception escaping a tick is
    fatal and handed to ``on_fatal``.
    """

    def __init__(
            self,
            sampler: TemperatureSamplingService,
            furnace: FurnaceController,
            schedule_service: ScheduleService,
            log_service: TemperatureLogService,
            time_provider: TimeProvider,
            logging_interval: float = 600.0,
            furnace_update_interval: float = 540.0,
            on_fatal: Optional[Callable[[BaseException], None]] = None,
            logger: Optional[Logger] = None
    ):
        self._sampler = sampler
        self._furnace = furnace
        self._schedule = schedule_service
        self._log = log_service
        self._time = time_provider
        self._logging_interval = logging_interval
        self._furnace_update_interval = furnace_update_interval
        self._on_fatal = on_fatal
        self._logger = logger

        self._logging_busy = False
        self._furnace_busy = False
        self._tasks: List[asyncio.Task] = []

    async def start(self) -> None:
        """Launch both cadences. Each ticks immediately."""
        self._tasks = [
            asyncio.create_task(
                self._run_cadence("logging", self._logging_interval, self.run_logging_tick),
                name="thermostat-logging"
            ),
            asyncio.create_task(
                self._run_cadence("furnace", self._furnace_update_interval, self.run_furnace_tick),
                name="thermostat-furnace"
            ),
        ]
        for task in self._tasks:
            task.add_done_callback(self._on_cadence_done)

        self._log_info(
            "Control loop started",
            {"logging_interval_s": self._logging_interval,
             "furnace_interval_s": self._furnace_update_interval}
        )

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []

    @property
    def running(self) -> bool:
        return any(not t.done() for t in self._tasks)

    async def run_logging_tick(self) -> bool:
        """
        Returns:
            False if skipped because the previous logging tick is still running
        """
        if self._logging_busy:
            self._log_warning("Previous logging tick still running, skipping")
            return False

        self._logging_busy = True
        try:
            reading = await self._sampler.sample()
            timestamp_ms = self._now_ms()
            removed = await self._log.record(timestamp_ms, reading)
            if isinstance(reading, SensorError):
                self._log_warning(f"Logged sensor error: {reading.kind}")
            else:
                self._log_info(f"Logged temperature {reading}°C", {"expired": removed})
            return True
        finally:
            self._logging_busy = False

    async def run_furnace_tick(self) -> Optional[FurnaceAction]:
        """
        Returns:
            The action applied, or None if nothing was applied (empty schedule,
            sensor error, or overlapping tick)
        """
        if self._furnace_busy:
            self._log_warning("Previous furnace update still running, skipping")
            return None

        self._furnace_busy = True
        try:
            comfort = self._schedule.effective_range_at(self._time.now())
            if comfort is None:
                self._log_info("No schedule configured, skipping furnace update")
                return None

            reading = await self._sampler.sample()
            action = comfort.decide(reading)
            if action is None:
                self._log_warning(
                    "Tried to read temperature for furnace update but got an error; "
                    f"leaving furnace {self._furnace.state.action.value}",
                    reading.to_dict()
                )
                return None

            await self._furnace.apply(action)
            return action
        finally:
            self._furnace_busy = False

    async def _run_cadence(
            self,
            name: str,
            interval: float,
            tick: Callable[[], Awaitable[object]]
    ) -> None:
        loop = asyncio.get_running_loop()
        next_run = loop.time()
        while True:
            await tick()
            next_run += interval
            await asyncio.sleep(max(0.0, next_run - loop.time()))

    def _on_cadence_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is None:
            return
        self._log_error(f"Fatal error in {task.get_name()}", exception=exc)
        if self._on_fatal:
            self._on_fatal(exc)

    def _now_ms(self) -> int:
        return int(self._time.now().timestamp() * 1000)


# ═══════════════════════════════════════════════════════════════════
# CONTEXT
# ═══════════════════════════════════════════════════════════════════

@dataclass
class ThermostatContext:
    """
    Everything the control loop and the API handlers share.

    Built once at startup and handed to the API; there are no module globals.
    ``terminate`` exits the process immediately with the given code.
    """
    sampler: TemperatureSamplingService
    furnace: FurnaceController
    schedule: ScheduleService
    temperature_log: TemperatureLogService
    control_loop: ControlLoop
    time_provider: TimeProvider
    terminate: Callable[[int], None]
    logger: Optional[Logger] = None

    async def start(self) -> None:
        """Furnace off first, then restore stored state, then start ticking."""
        await self.furnace.apply(FurnaceAction.OFF)
        await self.schedule.load()
        await self.temperature_log.load()
        await self.control_loop.start()

    async def stop(self) -> None:
        await self.control_loop.stop()
