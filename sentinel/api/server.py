"""FastAPI server for the health aggregator."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import FastAPI
from sqlalchemy.engine import Engine

from sentinel import __version__
from sentinel.api.actuator_routes import actuator_router
from sentinel.api.health_routes import health_router
from sentinel.config import Settings, settings
from sentinel.health.checks import HealthCheckRegistry
from sentinel.health.database import DatabaseHealthCheck, create_database_engine
from sentinel.health.http_check import HttpHealthCheck
from sentinel.health.indicator import DatabaseHealthIndicator
from sentinel.health.service import HealthCheckService

logger = logging.getLogger(__name__)


@dataclass
class HealthComponents:
    """Everything the health endpoints need, wired from settings."""

    service: HealthCheckService
    registry: HealthCheckRegistry
    engine: Engine | None = None
    db_check: DatabaseHealthCheck | None = None
    db_indicator: DatabaseHealthIndicator | None = None

    def close(self) -> None:
        self.service.close()
        if self.db_check is not None:
            self.db_check.close()
        if self.engine is not None:
            self.engine.dispose()


def build_health_components(cfg: Settings) -> HealthComponents:
    """Register checks in evaluation order: database first, then HTTP deps."""
    registry = HealthCheckRegistry()
    engine = None
    db_check = None
    db_indicator = None

    try:
        engine = create_database_engine(cfg)
        db_check = registry.register(DatabaseHealthCheck(
            engine,
            timeout=cfg.db_validation_timeout,
            quick_timeout=cfg.db_quick_validation_timeout,
        ))
        db_indicator = DatabaseHealthIndicator(db_check)
    except Exception:
        logger.exception("Database engine unavailable, database check disabled")

    requires = (db_check,) if cfg.http_checks_require_database and db_check is not None else ()
    for url in cfg.http_check_urls:
        registry.register(HttpHealthCheck(url, timeout=cfg.http_check_timeout, requires=requires))

    logger.info("Health checks registered: %s", ", ".join(str(c) for c in registry) or "none")

    return HealthComponents(
        service=HealthCheckService(registry, timeout=cfg.check_timeout),
        registry=registry,
        engine=engine,
        db_check=db_check,
        db_indicator=db_indicator,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build checks on startup, release the pool on shutdown."""
    components = build_health_components(settings)
    app.state.health_service = components.service
    app.state.db_check = components.db_check
    app.state.db_indicator = components.db_indicator

    yield

    # Shutdown
    components.close()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Sentinel - Health Aggregator",
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(health_router)
    app.include_router(actuator_router)

    return app


app = create_app()
