# api/app.py

"""
Thermostat API - FastAPI app for the remote control.

The app shares one ThermostatContext with the control loop; the loop is
started and stopped by the app's lifespan.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.background import BackgroundTask

from thermostat.api.models.enums import SystemHealth
from thermostat.api.models.schemas import HealthResponse
from thermostat.api.routers import (
    state_router,
    log_router,
    schedule_router,
    admin_router
)
from thermostat.config import Settings, get_settings
from thermostat.domain.exceptions import HardwareError
from thermostat.domain.services import ThermostatContext


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Furnace off, state restored and cadences running before serving requests."""
    context: ThermostatContext = app.state.context
    await context.start()

    yield

    await context.stop()


def create_app(context: ThermostatContext, settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="Remote control for the furnace thermostat",
        lifespan=lifespan
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(HardwareError)
    async def hardware_error_handler(request: Request, exc: HardwareError):
        # Relay state is unknown: answer, then stop the process
        if context.logger:
            context.logger.error("Hardware failure while handling request", exception=exc)
        return JSONResponse(
            status_code=500,
            content=exc.to_dict(),
            background=BackgroundTask(context.terminate, 1)
        )

    prefix = settings.api_prefix
    app.include_router(state_router, prefix=prefix)
    app.include_router(log_router, prefix=prefix)
    app.include_router(schedule_router, prefix=prefix)
    app.include_router(admin_router, prefix=prefix)

    @app.get("/")
    def root():
        """Root endpoint with API information."""
        return {
            "name": settings.api_title,
            "version": settings.api_version,
            "docs": "/docs",
            "openapi": "/openapi.json"
        }

    @app.get("/health", response_model=HealthResponse)
    def health():
        """Healthy while both cadences are running."""
        running = context.control_loop.running
        return HealthResponse(
            status=SystemHealth.HEALTHY if running else SystemHealth.DEGRADED,
            control_loop_running=running
        )

    return app
