from __future__ import annotations

import logging
import threading
from typing import Any, Protocol

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from ..errors import TableImportError
from ..models.config_models import DatabaseConfig

"""Database access for the import workers.

The import pipeline only needs two operations:

- ``first(sql)``: run a query and return its first row (or None)
- ``execute(sql)``: run a statement with no result

``ConnectionPool`` provides them on top of a SQLAlchemy engine. The engine's
QueuePool is thread-safe, and every call borrows a connection for exactly one
statement, so any number of table workers can share one pool. Raw SQL goes
through ``exec_driver_sql`` so text such as ``:name`` inside cell values is
never taken for a bind parameter.
"""

logger = logging.getLogger(__name__)

DRIVER = "mysql+pymysql"


class SqlRunner(Protocol):
    def first(self, sql: str) -> Any | None: ...

    def execute(self, sql: str) -> None: ...


def _wrap(e: SQLAlchemyError) -> TableImportError:
    """Turn a SQLAlchemy error into TableImportError, keeping the MySQL error code."""
    code = None
    message = str(e)
    if isinstance(e, DBAPIError) and e.orig is not None:
        args = getattr(e.orig, "args", ())
        if len(args) >= 2 and isinstance(args[0], int):
            code, message = args[0], str(args[1])
        else:
            message = str(e.orig)
    return TableImportError(message, e, code=code)


class ConnectionPool:
    """Shared, internally synchronized pool of database connections."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def first(self, sql: str) -> Any | None:
        try:
            with self._engine.connect() as conn:
                return conn.exec_driver_sql(sql).first()
        except SQLAlchemyError as e:
            raise _wrap(e) from e

    def execute(self, sql: str) -> None:
        try:
            with self._engine.begin() as conn:
                conn.exec_driver_sql(sql)
        except SQLAlchemyError as e:
            raise _wrap(e) from e

    def dispose(self) -> None:
        self._engine.dispose()


def database_url(db: DatabaseConfig) -> URL:
    return URL.create(
        DRIVER,
        username=db.user,
        password=db.password or None,
        host=db.host,
        port=db.port,
        database=db.database,
    )


def create_pool(db: DatabaseConfig, pool_size: int = 5) -> ConnectionPool:
    """Create the process-wide pool. No connection is opened until first use.

    Each statement is committed on its own (AUTOCOMMIT); rows already inserted
    stay applied if a later statement fails.
    """
    engine = create_engine(
        database_url(db),
        pool_pre_ping=True,
        pool_size=max(1, pool_size),
        isolation_level="AUTOCOMMIT",
    )
    logger.debug("created %s engine to %s", db.database_type, db.redacted())
    return ConnectionPool(engine)


class DryRunPool:
    """Stand-in pool that executes nothing.

    Every table is reported as existing and every statement is recorded (and
    logged at DEBUG) instead of being sent to a server.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._statements: list[str] = []

    @property
    def statements(self) -> list[str]:
        with self._lock:
            return list(self._statements)

    def first(self, sql: str) -> Any | None:
        self._record(sql)
        return ("dry-run",)

    def execute(self, sql: str) -> None:
        self._record(sql)

    def dispose(self) -> None:
        pass

    def _record(self, sql: str) -> None:
        logger.debug("dry-run: %s", sql)
        with self._lock:
            self._statements.append(sql)
