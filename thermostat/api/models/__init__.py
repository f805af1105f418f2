from thermostat.api.models.enums import (
    SensorErrorKind,
    SystemHealth
)

from thermostat.api.models.schemas import (
    # Furnace state
    FurnaceStateResponse,
    SensorErrorResponse,
    StateResponse,
    FurnaceControlRequest,
    # Errors
    ErrorResponse,
    # System
    HealthResponse
)
