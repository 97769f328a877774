from __future__ import annotations

from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.exc import OperationalError
from sqlmodel import Session, SQLModel, create_engine

from ..models import db as _db_models  # noqa: F401 - ensure models register with metadata
from .config import get_settings
from .errors import ConcurrencyConflictError

# Lock contention as reported by SQLite and PostgreSQL drivers.
_CONTENTION_MARKERS = (
    "database is locked",
    "deadlock detected",
    "could not serialize access",
)


def create_engine_for_url(database_url: str, timeout: float | None = None):
    connect_args: dict[str, Any] = {}
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        if timeout is not None:
            connect_args["timeout"] = timeout
    return create_engine(database_url, echo=False, connect_args=connect_args)


settings = get_settings()
engine = create_engine_for_url(settings.database_url, settings.database_timeout)


def init_db() -> None:
    SQLModel.metadata.create_all(engine)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


def set_engine(new_engine) -> None:
    global engine
    engine = new_engine


def is_contention_error(exc: OperationalError) -> bool:
    message = str(exc.orig if exc.orig is not None else exc).lower()
    return any(marker in message for marker in _CONTENTION_MARKERS)


@contextmanager
def unit_of_work(session: Session) -> Iterator[Session]:
    """Run a block as one database transaction.

    Commits when the block finishes, rolls back on any exception. Rolling back
    also hands the connection back to the pool, so nothing is held between
    retries. Store-level lock contention is reported as a version conflict.
    """
    try:
        yield session
        session.commit()
    except OperationalError as exc:
        session.rollback()
        if is_contention_error(exc):
            raise ConcurrencyConflictError("Account was modified concurrently") from exc
        raise
    except BaseException:
        session.rollback()
        raise
