"""Health subsystem: check contract, aggregator, database/HTTP checks."""

from .checks import PARAMETER_QUICK, DuplicateCheckError, HealthCheck, HealthCheckRegistry, is_quick
from .service import CheckOutcomes, HealthCheckService, HealthReport, Status
