"""Actuator-style endpoint for infrastructure tooling."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from sentinel.health.indicator import DOWN, UP, Health

actuator_router = APIRouter()


@actuator_router.get("/actuator/health")
def actuator_health(request: Request) -> JSONResponse:
    """Database indicator as ``{"status": "UP"|"DOWN", "details": {...}}``."""
    indicator = getattr(request.app.state, "db_indicator", None)
    if indicator is None:
        health = Health(status=DOWN, details={"Database": "Unreachable"})
    else:
        health = indicator.health(include_details=True)
    return JSONResponse(health.model_dump(), status_code=200 if health.status == UP else 503)
