# api/routers/log.py

"""
Temperature log endpoint for the Thermostat API.
"""

from typing import Dict, Union

from fastapi import APIRouter, Depends

from thermostat.api.dependencies import get_context
from thermostat.domain.services import ThermostatContext

router = APIRouter(prefix="/log", tags=["Temperature Log"])


@router.get("", response_model=Dict[str, Union[float, dict]])
def get_log(context: ThermostatContext = Depends(get_context)):
    """Whole retained log: millisecond timestamp -> temperature or error marker."""
    return context.temperature_log.snapshot()
