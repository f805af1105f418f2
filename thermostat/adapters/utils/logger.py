# adapters/utils/logger.py

"""
Console + file logger implementing the domain Logger port.

Lines look like:

    [2024-01-15 09:00:00] [INFO] Furnace off -> heat
    [2024-01-15 09:10:00] [WARN] Sensor read failed: CRC failure (kind=crc_failure)
"""

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, TextIO

from thermostat.domain.ports import Logger

_LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40}


class DualLogger(Logger):
    """
    Writes every line to stdout and, when configured, appends it to a file.

    Usage:
        log = DualLogger("/var/log/thermostat.log", min_level="DEBUG")
        log("Starting thermostat...")
        log.info("Schedule loaded", {"entries": 3})
        log.error("Pin write failed", exception=e)
    """

    def __init__(self, log_file: Optional[str] = None, min_level: str = "INFO"):
        """
        Args:
            log_file: Path to append to. Falls back to the LOG_FILE env var;
                      with neither, only stdout is written.
            min_level: DEBUG, INFO, WARN or ERROR
        """
        self.log_file = log_file or os.getenv("LOG_FILE")
        self._threshold = _LEVELS.get(min_level.upper(), _LEVELS["INFO"])
        self._file: Optional[TextIO] = None

        if self.log_file:
            Path(self.log_file).parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.log_file, "a", buffering=1)

    def __call__(self, message: str = ""):
        """Unlevelled line, used for banners."""
        self._emit(message)

    def info(self, message: str, context: dict = None) -> None:
        self._log("INFO", message, context)

    def warning(self, message: str, context: dict = None) -> None:
        self._log("WARN", message, context)

    def error(self, message: str, context: dict = None, exception: Exception = None) -> None:
        if exception is not None:
            message = f"{message}: {type(exception).__name__}: {exception}"
        self._log("ERROR", message, context)

    def debug(self, message: str, context: dict = None) -> None:
        self._log("DEBUG", message, context)

    def _log(self, level: str, message: str, context: Optional[dict]):
        if _LEVELS[level] < self._threshold:
            return
        if context:
            message = f"{message} ({' '.join(f'{k}={v}' for k, v in context.items())})"
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        self._emit(f"[{stamp}] [{level}] {message}")

    def _emit(self, line: str):
        print(line, flush=True)
        if self._file:
            self._file.write(f"{line}\n")
            self._file.flush()

    def close(self):
        if self._file:
            self._file.close()
            self._file = None


_logger: Optional[DualLogger] = None


def get_logger(log_file: Optional[str] = None, min_level: str = "INFO") -> DualLogger:
    """Process-wide logger; arguments only apply on first call."""
    global _logger
    if _logger is None:
        _logger = DualLogger(log_file, min_level)
    return _logger
