# api/routers/admin.py

"""
Administrative endpoints for the Thermostat API.

/kill is not access-controlled. Anyone who can reach the port can stop the
controller, so only expose it on a trusted network.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from starlette.background import BackgroundTask

from thermostat.api.dependencies import get_context
from thermostat.domain.services import ThermostatContext

router = APIRouter(tags=["Admin"])


@router.get("/kill", response_class=PlainTextResponse)
def kill(context: ThermostatContext = Depends(get_context)):
    """Acknowledge, then exit immediately once the response is sent."""
    if context.logger:
        context.logger.warning("Kill requested over the API")
    return PlainTextResponse("\nKILLING", background=BackgroundTask(context.terminate, 0))
