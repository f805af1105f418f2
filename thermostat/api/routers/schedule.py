# api/routers/schedule.py

"""
Schedule endpoints for the Thermostat API.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse, PlainTextResponse

from thermostat.api.dependencies import get_context
from thermostat.api.models.schemas import ErrorResponse
from thermostat.domain.exceptions import PersistenceError, ScheduleValidationError
from thermostat.domain.services import ThermostatContext

router = APIRouter(prefix="/schedule", tags=["Schedule"])


@router.get("", response_model=Dict[str, List[float]])
def get_schedule(context: ThermostatContext = Depends(get_context)):
    """Live schedule as "H:MM" -> [min, max]."""
    return context.schedule.schedule.to_mapping()


@router.post(
    "",
    response_class=PlainTextResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def submit_schedule(
    raw: Any = Body(None),
    context: ThermostatContext = Depends(get_context)
):
    """
    Replace the whole schedule.

    Body: {"8:00": [19, 21], "22:00": [15, 18]}. Either every entry is valid
    and the schedule is replaced, or nothing changes.
    """
    try:
        await context.schedule.submit(raw)
    except ScheduleValidationError as e:
        return JSONResponse(status_code=400, content=e.to_dict())
    except PersistenceError as e:
        return JSONResponse(status_code=500, content=e.to_dict())

    return PlainTextResponse("success")
