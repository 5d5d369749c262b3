"""Health endpoints.

Endpoints:
  GET  /health          liveness: the process answers, nothing else checked
  GET  /health/db       database reachability (?quick=true for a fast check)
  GET  /health/status   all registered checks, aggregated
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request, Response
from fastapi.responses import PlainTextResponse

from sentinel.health.checks import is_quick
from sentinel.health.service import Status

logger = logging.getLogger(__name__)

health_router = APIRouter()

STATUS_CODES = {
    Status.HEALTHY: 200,
    Status.UNHEALTHY: 503,
    Status.FAILED: 500,
}


def query_parameters(request: Request) -> dict[str, Any]:
    """Query string as a parameter mapping; repeated keys become lists."""
    params: dict[str, Any] = {}
    for key in request.query_params.keys():
        values = request.query_params.getlist(key)
        params[key] = values[0] if len(values) == 1 else values
    return params


def status_code_for(status: Status | None) -> int:
    """HTTP code for an aggregated status; a missing status is a failure."""
    if status is None:
        logger.error("Health service returned no status")
        return 500
    return STATUS_CODES.get(status, 500)


@health_router.get("/health")
def liveness() -> Response:
    """Liveness probe: if this answers, the process is up."""
    return Response(status_code=200)


@health_router.get("/health/db", response_class=PlainTextResponse)
def check_db_health(request: Request) -> PlainTextResponse:
    """Database reachability; 503 when unreachable.

    ``quick`` is read like every other check reads it: first value only,
    anything but "true" means a full check.
    """
    quick = is_quick(query_parameters(request))
    db_check = getattr(request.app.state, "db_check", None)
    if db_check is not None and db_check.is_reachable(quick):
        return PlainTextResponse("Database is healthy")
    return PlainTextResponse("Database is unhealthy", status_code=503)


@health_router.get("/health/status")
def check_status(request: Request) -> Response:
    """Run every registered check.

    200 when all pass, 503 when any reports unhealthy, 500 when a check
    itself broke. No details in the body; those go to the log.
    """
    service = request.app.state.health_service
    status = service.evaluate(query_parameters(request))
    return Response(status_code=status_code_for(status))
