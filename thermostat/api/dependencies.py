# api/dependencies.py

"""
Access to the shared thermostat context from request handlers.
"""

from fastapi import Request

from thermostat.domain.services import ThermostatContext


def get_context(request: Request) -> ThermostatContext:
    """FastAPI dependency that provides the context built at startup."""
    return request.app.state.context
