"""Database handle, session management and initialization"""

import logging
import math
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .config import CONFIG_DIR, get_database_url, get_project_config, save_project_config
from .context import Context
from .errors import OperationCancelled, StoreUnavailable
from ..models import Base

logger = logging.getLogger(__name__)

# SQLite VM instructions between context checks while a statement runs
PROGRESS_STEPS = 1000


class Database:
    """Store handle injected into the services.

    Wraps one SQLAlchemy engine and its session factory. Tests build one over
    a temporary SQLite file; the API and CLI use the project-wide default from
    ``get_database()``.
    """

    def __init__(self, url: str, **engine_kwargs):
        self.url = url
        if url.startswith("sqlite"):
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
        self.engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @classmethod
    def from_config(cls) -> "Database":
        return cls(get_database_url())

    def __repr__(self):
        return f"<Database(url='{self.url}')>"

    def create_tables(self):
        Base.metadata.create_all(bind=self.engine)

    def dispose(self):
        self.engine.dispose()

    @contextmanager
    def session(self, operation: str = "STORE_WRITE") -> Generator[Session, None, None]:
        """Read-write session with automatic commit/rollback.

        SQLAlchemy failures are rolled back and surface as StoreUnavailable.
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.warning("[%s] store write failed: %s", operation, exc)
            raise StoreUnavailable(operation, exc) from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @contextmanager
    def read(self, operation: str, ctx: Optional[Context] = None) -> Generator[Session, None, None]:
        """Short-lived session for a single read.

        The context is checked on entry and again on exit, so a call whose
        context is cancelled mid-read raises instead of returning. On SQLite
        the context also interrupts a running statement and caps how long it
        waits on a locked database. SQLAlchemy failures surface as
        StoreUnavailable.
        """
        ctx = ctx or Context.background()
        ctx.check(operation)
        session = self.SessionLocal()
        try:
            try:
                with self._interruptible(session, ctx):
                    yield session
            except SQLAlchemyError as exc:
                if ctx.done:
                    raise OperationCancelled(operation) from exc
                logger.warning("[%s] store read failed: %s", operation, exc)
                raise StoreUnavailable(operation, exc) from exc
            ctx.check(operation)
        finally:
            session.close()

    @contextmanager
    def _interruptible(self, session: Session, ctx: Context):
        """Bind the SQLite connection behind ``session`` to ``ctx``.

        A progress handler aborts the running statement once the context is
        done, and the busy timeout is cut to the time left before the
        deadline. Both are undone before the connection goes back to the pool.
        Other backends are left as they are.
        """
        if self.engine.dialect.name != "sqlite":
            yield
            return

        connection = session.connection()
        driver_connection = connection.connection.driver_connection
        previous_timeout = None
        remaining = ctx.remaining()
        if remaining is not None:
            previous_timeout = connection.exec_driver_sql("PRAGMA busy_timeout").scalar()
            connection.exec_driver_sql(f"PRAGMA busy_timeout = {math.ceil(remaining * 1000)}")
        driver_connection.set_progress_handler(lambda: int(ctx.done), PROGRESS_STEPS)
        try:
            yield
        finally:
            driver_connection.set_progress_handler(None, 0)
            if previous_timeout is not None:
                connection.exec_driver_sql(f"PRAGMA busy_timeout = {int(previous_timeout)}")


# Project-wide default handle for the API and CLI
_database: Optional[Database] = None


def get_database() -> Database:
    """Get the project database handle"""
    global _database
    if _database is None:
        _database = Database.from_config()
    return _database


def set_database(database: Optional[Database]):
    """Replace the project database handle (None resets it)"""
    global _database
    if _database is not None and _database is not database:
        _database.dispose()
    _database = database


def reset_database_globals():
    """Reset the project database handle for testing"""
    set_database(None)


def initialize_database() -> Database:
    """Create .epictrac, its config and the store tables if missing"""
    CONFIG_DIR.mkdir(exist_ok=True)

    # Ensure config exists
    config = get_project_config()
    save_project_config(config)

    database = get_database()
    database.create_tables()
    logger.info("Database ready at %s", database.url)
    return database
