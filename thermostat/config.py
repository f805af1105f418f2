# config.py

"""
Configuration for the furnace thermostat.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Temperature sensor (DS18B20 on the 1-Wire bus)
    sensor_id: str = "28-ee6b781a64ff"
    sensor_devices_dir: str = "/sys/bus/w1/devices"
    sensor_read_timeout: float = 10.0

    # Persisted state
    schedule_file: str = "./temperatureSchedule.json"
    temperature_log_file: str = "./temperatureLogFile.json"
    storage_timeout: float = 10.0

    # Cadences. The furnace period is deliberately shorter than the logging one.
    logging_interval_seconds: float = 10 * 60
    furnace_update_interval_seconds: float = 9 * 60
    max_log_age_seconds: float = 7 * 24 * 60 * 60

    # Furnace wiring (BCM numbering). Main power is active low.
    main_power_pin: int = 17
    selector_pin: int = 22
    power_enabled_level: int = 0
    power_disabled_level: int = 1
    selector_heat_level: int = 1
    selector_cool_level: int = 0

    # Wall-clock zone the schedule is written in; None uses the system zone
    timezone: Optional[str] = None

    # Run without a Raspberry Pi (mock sensor and pins)
    use_mock_hardware: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 5000

    # API
    api_title: str = "Thermostat API"
    api_version: str = "1.0.0"
    api_prefix: str = ""

    # CORS (the web remote is served from anywhere)
    cors_origins: list[str] = ["*"]

    # Service log: DEBUG, INFO, WARN or ERROR
    log_file: Optional[str] = None
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
