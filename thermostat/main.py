# main.py

"""
Main application entry point for the furnace thermostat.

This wires together the hardware adapters, storage, services and the API,
then serves the API with the control loop running alongside it.

Run with: thermostat   (or python -m thermostat.main)
"""

import logging
from datetime import timedelta
from typing import Callable, Optional

from dotenv import load_dotenv

from thermostat.adapters.mock import MockDS18B20Sensor, MockPinDriver
from thermostat.adapters.pins.gpio import RPiGPIOPinDriver
from thermostat.adapters.sensors.ds18b20 import DS18B20Sensor
from thermostat.adapters.storage.json_files import (
    JsonFileScheduleRepository,
    JsonFileTemperatureLogRepository
)
from thermostat.adapters.utils.logger import get_logger
from thermostat.adapters.utils.process import terminate_process
from thermostat.adapters.utils.time_providers import SystemTimeProvider
from thermostat.config import Settings, get_settings
from thermostat.domain.ports import Logger, PinDriver, TemperatureSensor
from thermostat.domain.services import (
    ControlLoop,
    FurnaceController,
    ScheduleService,
    TemperatureLogService,
    TemperatureSamplingService,
    ThermostatContext
)


def create_hardware(settings: Settings, log: Logger) -> tuple[TemperatureSensor, PinDriver]:
    """
    Create the sensor and pin driver.

    Raises:
        HardwareError: GPIO unavailable and mock hardware not requested
    """
    if settings.use_mock_hardware:
        log.warning("Using mock sensor and pins (USE_MOCK_HARDWARE)")
        return MockDS18B20Sensor(variation=0.5), MockPinDriver()

    sensor = DS18B20Sensor(settings.sensor_id, devices_dir=settings.sensor_devices_dir)
    pins = RPiGPIOPinDriver([settings.main_power_pin, settings.selector_pin])
    log.info(f"Sensor {settings.sensor_id} at {sensor.device_file}")
    log.info(f"Furnace pins: main power {settings.main_power_pin}, selector {settings.selector_pin}")
    return sensor, pins


def create_context(
    settings: Settings,
    log: Logger,
    terminate: Callable[[int], None] = terminate_process
) -> ThermostatContext:
    """
    Create the complete control engine.

    Returns:
        ThermostatContext shared by the control loop and the API
    """
    sensor, pins = create_hardware(settings, log)

    sampler = TemperatureSamplingService(
        sensor=sensor,
        read_timeout=settings.sensor_read_timeout,
        logger=log
    )
    furnace = FurnaceController(
        pin_driver=pins,
        main_power_pin=settings.main_power_pin,
        selector_pin=settings.selector_pin,
        power_enabled_level=settings.power_enabled_level,
        power_disabled_level=settings.power_disabled_level,
        selector_heat_level=settings.selector_heat_level,
        selector_cool_level=settings.selector_cool_level,
        logger=log
    )
    schedule = ScheduleService(
        repository=JsonFileScheduleRepository(settings.schedule_file),
        storage_timeout=settings.storage_timeout,
        logger=log
    )
    temperature_log = TemperatureLogService(
        repository=JsonFileTemperatureLogRepository(settings.temperature_log_file),
        max_age=timedelta(seconds=settings.max_log_age_seconds),
        storage_timeout=settings.storage_timeout,
        logger=log
    )
    time_provider = SystemTimeProvider(settings.timezone)

    control_loop = ControlLoop(
        sampler=sampler,
        furnace=furnace,
        schedule_service=schedule,
        log_service=temperature_log,
        time_provider=time_provider,
        logging_interval=settings.logging_interval_seconds,
        furnace_update_interval=settings.furnace_update_interval_seconds,
        on_fatal=lambda exc: terminate(1),
        logger=log
    )

    return ThermostatContext(
        sampler=sampler,
        furnace=furnace,
        schedule=schedule,
        temperature_log=temperature_log,
        control_loop=control_loop,
        time_provider=time_provider,
        terminate=terminate,
        logger=log
    )


def main(settings: Optional[Settings] = None):
    """Main entry point"""
    import uvicorn

    from thermostat.api.app import create_app

    load_dotenv()
    settings = settings or get_settings()

    logging.basicConfig(
        level=logging.DEBUG if settings.log_level.upper() == "DEBUG" else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    log = get_logger(settings.log_file, settings.log_level)

    log("=" * 60)
    log("🌡️  FURNACE THERMOSTAT")
    log("=" * 60)

    context = create_context(settings, log)
    app = create_app(context, settings)

    log(f"Serving API on {settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == '__main__':
    main()
