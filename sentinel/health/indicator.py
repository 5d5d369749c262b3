"""Actuator-style health indicator for infrastructure tooling.

Wraps a single check's boolean (not the aggregator) into a status plus
free-form details.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from .database import DatabaseHealthCheck

UP = "UP"
DOWN = "DOWN"


class Health(BaseModel):
    status: str
    details: dict[str, Any] = {}


class DatabaseHealthIndicator:
    """Reports database reachability as UP / DOWN."""

    def __init__(self, check: DatabaseHealthCheck) -> None:
        self._check = check

    def health(self, include_details: bool = True) -> Health:
        if self._check.is_reachable(quick=False):
            status, detail = UP, "Reachable"
        else:
            status, detail = DOWN, "Unreachable"
        return Health(status=status, details={"Database": detail} if include_details else {})
