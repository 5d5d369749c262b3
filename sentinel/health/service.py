"""Health check service: runs registered checks and reduces them to one status.

Checks run sequentially in registration order. Each check may look at the
outcomes of the checks before it (read-only) and skip itself. A failing
check never stops the others: a clean ``False`` makes the system
UNHEALTHY, an exception makes it FAILED, and FAILED is never downgraded.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from enum import Enum

from .checks import HealthCheck, Parameters

logger = logging.getLogger(__name__)


# ── Models ───────────────────────────────────────────────────────────────────


class Status(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    FAILED = "failed"


class CheckTimeoutError(Exception):
    """Raised when a check exceeds the per-check timeout."""

    def __init__(self, check: HealthCheck, timeout: float) -> None:
        self.check = check
        self.timeout = timeout
        super().__init__(f"Health check {check} timed out after {timeout}s")


class CheckOutcomes(Mapping[HealthCheck, bool]):
    """Read-only view of the outcomes recorded during one evaluation.

    Keyed by check identity. Two instances of the same class never share
    an entry, whatever their ``__eq__``/``__hash__`` say.
    """

    def __init__(self, entries: dict[int, tuple[HealthCheck, bool]]) -> None:
        self._entries = entries

    def __getitem__(self, check: HealthCheck) -> bool:
        entry = self._entries.get(id(check))
        if entry is None or entry[0] is not check:
            raise KeyError(check)
        return entry[1]

    def __iter__(self) -> Iterator[HealthCheck]:
        return (check for check, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, check: object) -> bool:
        entry = self._entries.get(id(check))
        return entry is not None and entry[0] is check

    def __repr__(self) -> str:
        inner = ", ".join(f"{check}: {healthy}" for check, healthy in self._entries.values())
        return f"CheckOutcomes({{{inner}}})"


@dataclass
class HealthReport:
    """Result of one evaluation pass."""

    status: Status
    outcomes: CheckOutcomes
    skipped: list[HealthCheck] = field(default_factory=list)


# ── Service ──────────────────────────────────────────────────────────────────


class HealthCheckService:
    """Aggregates a fixed, ordered collection of health checks.

    With ``timeout`` set, each ``is_healthy`` call runs on a worker thread
    and overrunning the bound counts as an exception (FAILED). Without it
    a check that never returns stalls the whole evaluation.
    """

    def __init__(self, checks: Iterable[HealthCheck], timeout: float | None = None) -> None:
        self._checks = list(checks)
        self._timeout = timeout
        self._executor: ThreadPoolExecutor | None = None
        if timeout is not None:
            self._executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="health-check")

    @property
    def checks(self) -> list[HealthCheck]:
        return list(self._checks)

    def evaluate(self, parameters: Parameters) -> Status:
        """Run all checks and return the overall status."""
        return self.report(parameters).status

    def report(self, parameters: Parameters) -> HealthReport:
        """Run all checks and return the status with per-check outcomes.

        No checks, or all checks skipped, is HEALTHY.
        """
        status = Status.HEALTHY
        entries: dict[int, tuple[HealthCheck, bool]] = {}
        outcomes = CheckOutcomes(entries)
        skipped: list[HealthCheck] = []

        for check in self._checks:
            try:
                if not check.should_run(outcomes):
                    logger.info("Skipping health check: %s", check)
                    skipped.append(check)
                    continue
                healthy = self._run_check(check, parameters)
            except MemoryError:
                raise
            except Exception:
                logger.exception("Exception during health check: %s", check)
                entries[id(check)] = (check, False)
                status = Status.FAILED
                continue

            entries[id(check)] = (check, healthy)
            if not healthy:
                logger.warning("Health check FAILED: %s", check)
                if status is not Status.FAILED:
                    status = Status.UNHEALTHY

        logger.debug(
            "Health evaluation: %s (%d run, %d skipped)",
            status.value, len(entries), len(skipped),
        )
        return HealthReport(status=status, outcomes=outcomes, skipped=skipped)

    def _run_check(self, check: HealthCheck, parameters: Parameters) -> bool:
        if self._executor is None:
            return bool(check.is_healthy(parameters))

        future = self._executor.submit(check.is_healthy, parameters)
        try:
            return bool(future.result(timeout=self._timeout))
        except FutureTimeoutError:
            future.cancel()
            raise CheckTimeoutError(check, self._timeout) from None

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None
