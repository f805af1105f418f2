# api/routers/__init__.py

from thermostat.api.routers.state import router as state_router
from thermostat.api.routers.log import router as log_router
from thermostat.api.routers.schedule import router as schedule_router
from thermostat.api.routers.admin import router as admin_router

__all__ = [
    "state_router",
    "log_router",
    "schedule_router",
    "admin_router"
]
