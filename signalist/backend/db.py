from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator
from urllib.parse import unquote

from sqlalchemy.orm import Session, declarative_base, sessionmaker

from db_utils import create_sqlite_engine


DEFAULT_DB_PATH = Path(__file__).resolve().parent / "jobs.db"


def _resolve_database_url() -> str:
    configured_url = os.getenv("SQLALCHEMY_DATABASE_URL")
    if not configured_url:
        return f"sqlite:///{DEFAULT_DB_PATH.as_posix()}"

    if not configured_url.startswith("sqlite:///"):
        return configured_url

    # Relative sqlite paths are anchored to the backend directory so the API
    # and the scheduler agree on one file regardless of cwd.
    db_path = Path(unquote(configured_url.replace("sqlite:///", "", 1)))
    if db_path.is_absolute():
        return configured_url
    return f"sqlite:///{(Path(__file__).resolve().parent / db_path).resolve().as_posix()}"


SQLALCHEMY_DATABASE_URL = _resolve_database_url()

engine = create_sqlite_engine(SQLALCHEMY_DATABASE_URL, busy_timeout_seconds=30)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@contextmanager
def session_scope(factory: sessionmaker = SessionLocal) -> Generator[Session, None, None]:
    """Provide a transactional scope around a series of operations."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
