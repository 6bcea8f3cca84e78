"""SQLite helpers for the job-run ledger.

The API process and the cron scheduler thread both write job runs, so the
engine runs in WAL mode with a busy timeout and writes are retried on
transient lock errors.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool

T = TypeVar("T")

logger = logging.getLogger(__name__)

SQLITE_LOCK_ERRORS = (
    "database is locked",
    "database is busy",
    "sqlite_busy",
    "sqlite_locked",
)

DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY_SECONDS = 0.25
DEFAULT_RETRY_BACKOFF = 2.0


def is_sqlite_lock_error(exc: BaseException) -> bool:
    msg = str(exc).lower()
    return any(phrase in msg for phrase in SQLITE_LOCK_ERRORS)


def create_sqlite_engine(database_url: str, *, busy_timeout_seconds: float = 30) -> Engine:
    """Create an engine; sqlite URLs get WAL + busy_timeout pragmas.

    ``sqlite://`` (in-memory) uses a StaticPool so every session sees the same
    database, which is what the test-suite relies on.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)

    in_memory = database_url in {"sqlite://", "sqlite:///:memory:"}
    kwargs = {"connect_args": {"check_same_thread": False, "timeout": int(busy_timeout_seconds)}}
    if in_memory:
        kwargs["poolclass"] = StaticPool
    engine = create_engine(database_url, **kwargs)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        try:
            if not in_memory:
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA busy_timeout=%d" % (int(busy_timeout_seconds * 1000),))
        finally:
            cursor.close()

    return engine


def run_with_retry(
    fn: Callable[[], T],
    max_retries: int = DEFAULT_MAX_RETRIES,
    delay: float = DEFAULT_RETRY_DELAY_SECONDS,
    backoff: float = DEFAULT_RETRY_BACKOFF,
) -> T:
    """Run a ledger write, retrying only on SQLite lock/busy errors."""
    current_delay = delay
    for attempt in range(max_retries + 1):
        try:
            return fn()
        except OperationalError as e:
            if not is_sqlite_lock_error(e) or attempt >= max_retries:
                raise
            logger.warning(
                "SQLite lock error (attempt %d/%d), retrying in %.2fs: %s",
                attempt + 1,
                max_retries + 1,
                current_delay,
                e,
            )
            time.sleep(current_delay)
            current_delay *= backoff
    raise RuntimeError("unreachable")
