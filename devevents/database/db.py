"""Database handle management.

A single process-wide ``ConnectionManager`` owns the SQLAlchemy engine. The
engine is created lazily on first use; callers that arrive while the first
connection attempt is still running wait on that same attempt instead of
opening their own. A failed attempt leaves nothing cached, so the next call
starts over.
"""

import logging
import threading
from concurrent.futures import Future
from contextlib import contextmanager
from typing import Any, Dict, Generator, Iterator, Optional

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from devevents.core.config import SQL_ECHO, get_database_url
from devevents.core.errors import DatabaseConnectionError, StorageError

logger = logging.getLogger(__name__)

MISSING_URL_MESSAGE = "Please define the DATABASE_URL environment variable"


class Base(DeclarativeBase):
    pass


SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def get_engine_args(url: str, echo: bool = False) -> Dict[str, Any]:
    """Get SQLAlchemy engine arguments for the given connection URL."""
    args: Dict[str, Any] = {"echo": echo}

    if url.startswith("sqlite"):
        args["connect_args"] = {"check_same_thread": False}
        args["poolclass"] = StaticPool
    else:
        args.update({
            "pool_size": 3,
            "max_overflow": 4,
            "pool_timeout": 30,
            "pool_recycle": 1800,
            "pool_pre_ping": True,
        })

    return args


class ConnectionManager:
    """Cached, lazily established handle to the record store.

    The cache is in one of three states:

    - ``absent``: nothing cached, the next ``acquire()`` connects
    - ``connecting``: an attempt is in flight, ``acquire()`` waits on it
    - ``ready``: the engine is cached and returned directly
    """

    def __init__(self, url: Optional[str] = None, echo: bool = SQL_ECHO):
        self.url = url
        self.echo = echo
        self._engine: Optional[Engine] = None
        self._pending: Optional[Future] = None
        self._lock = threading.Lock()

    @property
    def state(self) -> str:
        with self._lock:
            if self._engine is not None:
                return "ready"
            if self._pending is not None:
                return "connecting"
            return "absent"

    def acquire(self) -> Engine:
        """Return the cached engine, connecting first if needed.

        Raises:
            DatabaseConnectionError: If the connection attempt fails. Every
                caller waiting on the same attempt receives the error.
        """
        with self._lock:
            if self._engine is not None:
                return self._engine

            owner = self._pending is None
            if owner:
                self._pending = Future()
            pending = self._pending

        if not owner:
            return pending.result()

        try:
            engine = self._connect()
        except Exception as e:
            error = e
            if not isinstance(e, DatabaseConnectionError):
                error = DatabaseConnectionError(f"Failed to connect to the database: {e}")
                error.__cause__ = e
            with self._lock:
                self._pending = None
            logger.error("Database connection failed: %s", error)
            pending.set_exception(error)
            raise error

        with self._lock:
            self._engine = engine
            self._pending = None
        pending.set_result(engine)
        return engine

    def _connect(self) -> Engine:
        url = self.url if self.url is not None else get_database_url()
        if not url:
            raise DatabaseConnectionError(MISSING_URL_MESSAGE)

        # Register the tables on Base.metadata
        from devevents.models import bookings, events  # noqa: F401

        engine = create_engine(url, **get_engine_args(url, self.echo))
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            Base.metadata.create_all(bind=engine)
        except Exception:
            engine.dispose()
            raise

        logger.info("Database connection established (%s)", engine.url.render_as_string(hide_password=True))
        return engine

    def close(self) -> None:
        """Dispose of the cached engine and return to the ``absent`` state."""
        with self._lock:
            engine, self._engine = self._engine, None
        if engine is not None:
            engine.dispose()
            logger.info("Database connection closed")


connection_manager = ConnectionManager()


def get_connection() -> Engine:
    """Return the process-wide database handle."""
    return connection_manager.acquire()


def get_db() -> Generator[Session, None, None]:
    db: Session = SessionLocal(bind=get_connection())
    try:
        yield db
    finally:
        db.close()


@contextmanager
def storage_errors(action: str, db: Optional[Session] = None) -> Iterator[None]:
    """Re-raise SQLAlchemy failures as ``StorageError``, rolling ``db`` back first."""
    try:
        yield
    except SQLAlchemyError as e:
        if db is not None:
            db.rollback()
        logger.exception("Failed to %s", action)
        raise StorageError(f"Failed to {action}: {e}") from e
