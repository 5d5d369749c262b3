"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable, Generator, Mapping
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy.engine import Engine

from sentinel.config import Settings
from sentinel.health.checks import HealthCheck
from sentinel.health.database import DatabaseHealthCheck, create_database_engine


class StubCheck(HealthCheck):
    """Check with a fixed result; records how often it was asked."""

    def __init__(
        self,
        result: bool = True,
        error: Exception | None = None,
        run: bool | Callable[[Mapping[HealthCheck, bool]], bool] = True,
        name: str = "",
    ) -> None:
        self.result = result
        self.error = error
        self.run = run
        self.name = name
        self.calls: list[Any] = []
        self.seen_outcomes: list[dict[HealthCheck, bool]] = []

    def should_run(self, prior_outcomes: Mapping[HealthCheck, bool]) -> bool:
        self.seen_outcomes.append(dict(prior_outcomes))
        if callable(self.run):
            return self.run(prior_outcomes)
        return self.run

    def is_healthy(self, parameters: Any) -> bool:
        self.calls.append(parameters)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def make_check() -> Callable[..., StubCheck]:
    """Factory for stub checks: ``make_check(False)``, ``make_check(error=...)``."""
    return StubCheck


@pytest.fixture
def db_settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file with a one-connection pool."""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'sentinel.db'}",
        db_pool_size=1,
        db_max_overflow=0,
        db_pool_timeout=0.1,
    )


@pytest.fixture
def engine(db_settings: Settings) -> Generator[Engine, None, None]:
    eng = create_database_engine(db_settings)
    yield eng
    eng.dispose()


@pytest.fixture
def db_check(engine: Engine) -> Generator[DatabaseHealthCheck, None, None]:
    check = DatabaseHealthCheck(engine, timeout=1.0, quick_timeout=0.5)
    yield check
    check.close()
