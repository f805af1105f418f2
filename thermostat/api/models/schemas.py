# api/models/schemas.py

"""
Pydantic schemas for request/response validation.
"""

from typing import Any, Optional, Union
from pydantic import BaseModel

from thermostat.api.models.enums import SensorErrorKind, SystemHealth


# ============================================================
# Furnace State Schemas
# ============================================================

class FurnaceStateResponse(BaseModel):
    fan: bool
    heat: bool
    cool: bool


class SensorErrorResponse(BaseModel):
    error: SensorErrorKind
    message: str
    data: Optional[str] = None


class StateResponse(BaseModel):
    furnace: FurnaceStateResponse
    temperature: Union[float, SensorErrorResponse]


class FurnaceControlRequest(BaseModel):
    # Unvalidated so unknown actions get the API's own error body
    action: Any = None


# ============================================================
# Error Schemas
# ============================================================

class ErrorResponse(BaseModel):
    error: str
    kind: Optional[str] = None


# ============================================================
# System Schemas
# ============================================================

class HealthResponse(BaseModel):
    status: SystemHealth
    control_loop_running: bool
