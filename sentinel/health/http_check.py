"""HTTP dependency check: GET an upstream URL and compare the status code."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

import httpx

from .checks import HealthCheck, Parameters

logger = logging.getLogger(__name__)


class HttpHealthCheck(HealthCheck):
    """Healthy when ``url`` answers with ``expected_status``.

    Transport errors (connect, timeout, reset, protocol) are ordinary
    unhealthy results. Checks listed in ``requires`` gate this one: if any
    of them was recorded unhealthy earlier in the pass, this check is
    skipped.
    """

    def __init__(
        self,
        url: str,
        expected_status: int = 200,
        timeout: float = 1.0,
        requires: Sequence[HealthCheck] = (),
        name: str = "",
    ) -> None:
        self.url = url
        self.expected_status = expected_status
        self.timeout = timeout
        self.requires = tuple(requires)
        self.name = name or f"http:{url}"

    def should_run(self, prior_outcomes: Mapping[HealthCheck, bool]) -> bool:
        for dep in self.requires:
            if dep in prior_outcomes and not prior_outcomes[dep]:
                logger.debug("%s: prerequisite %s is unhealthy", self, dep)
                return False
        return True

    def is_healthy(self, parameters: Parameters) -> bool:
        try:
            with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                resp = client.get(self.url)
        except httpx.ConnectError as e:
            logger.warning("%s: connection error: %s", self, e)
            return False
        except httpx.TimeoutException:
            logger.warning("%s: timed out after %.2fs", self, self.timeout)
            return False
        except httpx.TransportError as e:
            logger.warning("%s: transport error: %s: %s", self, type(e).__name__, e)
            return False

        if resp.status_code != self.expected_status:
            logger.warning(
                "%s: expected %d, got %d", self, self.expected_status, resp.status_code,
            )
            return False
        return True
