"""
Shared test fixtures for the thermostat test suite.

Provides:
- Mock hardware (sensor, pins) and in-memory repositories
- A fixed clock
- Services and a fully wired ThermostatContext
- A FastAPI TestClient bound to that context

The TestClient is not used as a context manager, so the app lifespan (and
with it the periodic control loop) never starts during API tests.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from thermostat.adapters.mock import (
    InMemoryScheduleRepository,
    InMemoryTemperatureLogRepository,
    MockDS18B20Sensor,
    MockPinDriver,
)
from thermostat.adapters.utils.time_providers import FixedTimeProvider
from thermostat.api.app import create_app
from thermostat.config import Settings
from thermostat.domain.services import (
    ControlLoop,
    FurnaceController,
    ScheduleService,
    TemperatureLogService,
    TemperatureSamplingService,
    ThermostatContext,
)

MAIN_POWER_PIN = 17
SELECTOR_PIN = 22

# Monday 2024-01-15 09:00 local
START_TIME = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)


class TerminateRecorder:
    """Stands in for process termination; remembers exit codes."""

    def __init__(self):
        self.calls: list[int] = []

    def __call__(self, exit_code: int) -> None:
        self.calls.append(exit_code)


# ========================== Hardware Fixtures ==============================


@pytest.fixture()
def sensor():
    return MockDS18B20Sensor(base_temp=20.0)


@pytest.fixture()
def pins():
    return MockPinDriver()


@pytest.fixture()
def clock():
    return FixedTimeProvider(START_TIME)


# ========================== Repository Fixtures ============================


@pytest.fixture()
def schedule_repo():
    return InMemoryScheduleRepository()


@pytest.fixture()
def log_repo():
    return InMemoryTemperatureLogRepository()


# ========================== Service Fixtures ===============================


@pytest.fixture()
def sampler(sensor):
    return TemperatureSamplingService(sensor, read_timeout=2.0)


@pytest.fixture()
def furnace(pins):
    return FurnaceController(pins, main_power_pin=MAIN_POWER_PIN, selector_pin=SELECTOR_PIN)


@pytest.fixture()
def schedule_service(schedule_repo):
    return ScheduleService(schedule_repo, storage_timeout=2.0)


@pytest.fixture()
def log_service(log_repo):
    return TemperatureLogService(log_repo, max_age=timedelta(days=7), storage_timeout=2.0)


@pytest.fixture()
def terminate():
    return TerminateRecorder()


@pytest.fixture()
def control_loop(sampler, furnace, schedule_service, log_service, clock, terminate):
    return ControlLoop(
        sampler=sampler,
        furnace=furnace,
        schedule_service=schedule_service,
        log_service=log_service,
        time_provider=clock,
        on_fatal=lambda exc: terminate(1),
    )


@pytest.fixture()
def context(sampler, furnace, schedule_service, log_service, control_loop, clock, terminate):
    return ThermostatContext(
        sampler=sampler,
        furnace=furnace,
        schedule=schedule_service,
        temperature_log=log_service,
        control_loop=control_loop,
        time_provider=clock,
        terminate=terminate,
    )


# ========================== API Fixtures ===================================


@pytest.fixture()
def client(context):
    app = create_app(context, Settings(api_prefix="", cors_origins=["*"]))
    return TestClient(app)
