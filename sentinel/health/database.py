"""Database connectivity check backed by a pooled SQLAlchemy engine.

The pool itself is configuration (size, overflow, checkout wait); the
check only borrows one connection per call and validates it within a
bounded wait.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import QueuePool

from ..config import Settings
from .checks import HealthCheck, Parameters, is_quick

logger = logging.getLogger(__name__)

DEFAULT_VALIDATION_TIMEOUT = 1.0
DEFAULT_QUICK_VALIDATION_TIMEOUT = 0.5


def create_database_engine(settings: Settings) -> Engine:
    """Create the SQLAlchemy engine with connection pooling."""
    logger.info("Creating database engine for: %s", settings.database_url.split("@")[-1])

    url = make_url(settings.database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(
        settings.database_url,
        poolclass=QueuePool,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=settings.db_pool_recycle,
        pool_pre_ping=False,
    )

    @event.listens_for(engine, "checkout")
    def on_checkout(dbapi_conn, connection_record, connection_proxy):
        logger.debug("Database connection checked out from pool")

    return engine


class DatabaseHealthCheck(HealthCheck):
    """Checks that a pooled database connection can be acquired and used.

    Failing to acquire a connection (pool exhausted, server down) raises
    out of ``is_healthy``; a connection that does not answer ``SELECT 1``
    within the bound is reported as unhealthy.
    """

    name = "database"

    def __init__(
        self,
        engine: Engine,
        timeout: float = DEFAULT_VALIDATION_TIMEOUT,
        quick_timeout: float = DEFAULT_QUICK_VALIDATION_TIMEOUT,
    ) -> None:
        self._engine = engine
        self._timeout = timeout
        self._quick_timeout = quick_timeout
        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="db-validate")

    def is_healthy(self, parameters: Parameters) -> bool:
        return self.ping(is_quick(parameters))

    def ping(self, quick: bool = False) -> bool:
        """Borrow a connection and validate it.

        Acquisition errors propagate; validation problems return False.
        """
        timeout = self._quick_timeout if quick else self._timeout
        with self._engine.connect() as conn:
            return self._is_valid(conn, timeout)

    def is_reachable(self, quick: bool = False) -> bool:
        """Like ``ping`` but never raises. For transport-facing callers."""
        try:
            return self.ping(quick)
        except Exception:
            logger.exception("DB health check failed")
            return False

    def _is_valid(self, conn: Connection, timeout: float) -> bool:
        future = self._executor.submit(_select_one, conn)
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError:
            logger.warning("Database connection not valid within %.2fs", timeout)
            # the worker may still hold it; don't hand it back to the pool
            conn.invalidate()
            return False
        except SQLAlchemyError as e:
            logger.warning("Database connection validation failed: %s", e)
            return False

    def close(self) -> None:
        self._executor.shutdown(wait=False)


def _select_one(conn: Connection) -> bool:
    return conn.execute(text("SELECT 1")).scalar() == 1
