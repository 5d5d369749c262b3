from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Database connection pool
    database_url: str = "sqlite:///./data/sentinel.db"
    db_pool_size: int = 5
    db_max_overflow: int = 0
    db_pool_timeout: float = 30.0  # seconds to wait for a pooled connection
    db_pool_recycle: int = 1800

    # Connection validation bounds for the database check
    db_validation_timeout: float = 1.0
    db_quick_validation_timeout: float = 0.5  # used when ?quick=true

    # Per-check timeout in seconds; None runs checks without a bound
    check_timeout: float | None = None

    # HTTP dependencies to probe (JSON list in the env var)
    http_check_urls: list[str] = []
    http_check_timeout: float = 1.0
    http_checks_require_database: bool = False  # skip HTTP checks once the database is unhealthy

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Logging
    log_level: str = "INFO"


settings = Settings()
