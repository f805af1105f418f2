# api/routers/state.py

"""
Furnace state endpoints for the Thermostat API.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from thermostat.api.dependencies import get_context
from thermostat.api.models.schemas import (
    ErrorResponse,
    FurnaceControlRequest,
    FurnaceStateResponse,
    StateResponse
)
from thermostat.domain.exceptions import SensorError
from thermostat.domain.models import FurnaceAction
from thermostat.domain.services import ThermostatContext

router = APIRouter(prefix="/state", tags=["Furnace State"])


@router.get("", response_model=StateResponse)
async def get_state(context: ThermostatContext = Depends(get_context)):
    """Current furnace state plus a fresh temperature reading (or why there isn't one)."""
    reading = await context.sampler.sample()
    temperature = reading.to_dict() if isinstance(reading, SensorError) else reading
    return {
        "furnace": context.furnace.state.to_dict(),
        "temperature": temperature
    }


@router.post(
    "",
    response_model=FurnaceStateResponse,
    responses={400: {"model": ErrorResponse}}
)
async def set_state(
    payload: Any = Body(None),
    context: ThermostatContext = Depends(get_context)
):
    """
    Manually switch the furnace.

    Body: {"action": "heat" | "cool" | "off"}. The next furnace-update tick
    applies the schedule again.
    """
    try:
        request = FurnaceControlRequest.model_validate(payload if payload is not None else {})
        action = FurnaceAction(request.action)
    except (ValidationError, ValueError):
        return JSONResponse(status_code=400, content={"error": "invalid action"})

    state = await context.furnace.apply(action)
    return state.to_dict()
