"""Health check contract: the unit the aggregator evaluates.

A check answers one question about one subsystem (is the database
reachable? does the upstream API answer?). Checks are registered once at
startup, in order, and the aggregator runs them per request.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

logger = logging.getLogger(__name__)

# Request parameter asking for a fast/shallow check
PARAMETER_QUICK = "quick"

Parameters = Mapping[str, Any]


def is_quick(parameters: Parameters) -> bool:
    """Extract the ``quick`` flag from a parameter mapping.

    The value may be a scalar or a collection; for a collection only the
    first element counts. Missing or unparsable values mean ``False``.
    """
    quick = parameters.get(PARAMETER_QUICK)
    if quick is None:
        return False

    if isinstance(quick, Iterable) and not isinstance(quick, (str, bytes)):
        quick = next(iter(quick), None)

    return str(quick).lower() == "true"


class HealthCheck:
    """Base class for all health checks.

    Subclasses implement ``is_healthy``. Returning ``False`` means the
    subsystem is unhealthy; raising means the check itself broke, which the
    aggregator reports more severely than a clean ``False``.

    Outcomes are keyed by instance identity, so equality is never
    overridden here even for value-like checks.
    """

    name: str = ""

    def is_healthy(self, parameters: Parameters) -> bool:
        raise NotImplementedError

    def should_run(self, prior_outcomes: Mapping[HealthCheck, bool]) -> bool:
        """Decide whether to run, given the outcomes recorded so far.

        ``prior_outcomes`` is read-only and holds only checks evaluated
        earlier in the same pass.
        """
        return True

    def __str__(self) -> str:
        return self.name or type(self).__name__


class DuplicateCheckError(ValueError):
    """Raised when the same check instance is registered twice."""


class HealthCheckRegistry:
    """Ordered collection of checks handed to the aggregator."""

    def __init__(self, checks: Sequence[HealthCheck] = ()) -> None:
        self._checks: list[HealthCheck] = []
        for check in checks:
            self.register(check)

    def register(self, check: HealthCheck) -> HealthCheck:
        """Append a check; evaluation follows registration order."""
        if any(existing is check for existing in self._checks):
            raise DuplicateCheckError(f"Health check already registered: {check}")
        self._checks.append(check)
        logger.debug("Registered health check %s (#%d)", check, len(self._checks))
        return check

    def __iter__(self) -> Iterator[HealthCheck]:
        return iter(self._checks)

    def __len__(self) -> int:
        return len(self._checks)
