# adapters/utils/process.py

"""
Immediate process termination.

Used for /kill and for fatal hardware errors. There is no graceful drain:
ticks are not cancellable and the furnace keeps whatever state its relays
are in.
"""

import logging
import os
import sys

from thermostat.adapters.utils.logger import get_logger


def terminate_process(exit_code: int = 0) -> None:
    """Flush logs and exit without running shutdown handlers."""
    log = get_logger()
    log.info(f"Terminating process (exit code {exit_code})")
    log.close()
    logging.shutdown()
    sys.stdout.flush()
    sys.stderr.flush()
    os._exit(exit_code)
