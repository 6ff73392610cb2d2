"""Database connection, session management and the ledger transaction boundary.

This module provides database connection management, session factories,
and the ``atomic`` context manager every ledger-mutating operation runs in.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event, func, inspect, select, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from rpeconomy.config import Settings, get_settings
from rpeconomy.domain.errors import LedgerError, StorageError, TransactionConflict
from rpeconomy.models import Base

# SQLSTATE codes for serialization failure, deadlock and lock-not-available
CONFLICT_SQLSTATES = frozenset({"40001", "40P01", "55P03"})
CONFLICT_MESSAGES = (
    "database is locked",
    "deadlock",
    "could not serialize",
    "could not obtain lock",
    "lock wait timeout",
)


def _configure_sqlite_wal(
    dbapi_connection: Any, connection_record: Any  # noqa: ARG001
) -> None:
    """Configure SQLite to use WAL mode and enforce foreign keys.

    Also switches pysqlite's implicit transaction handling off so that
    ``_begin_immediate`` controls when a transaction starts.

    Args:
        dbapi_connection: The DBAPI connection
        connection_record: Connection record (required by SQLAlchemy event API)
    """
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _begin_immediate(conn: Connection) -> None:
    """Take SQLite's write lock when the transaction begins.

    SQLite ignores ``SELECT ... FOR UPDATE``; holding the write lock from the
    first read is what keeps a balance check and its write serialised
    against other connections.
    """
    conn.exec_driver_sql("BEGIN IMMEDIATE")


def configure_sqlite_engine(engine: Engine) -> Engine:
    """Install the SQLite connection and transaction listeners on ``engine``."""
    event.listen(engine, "connect", _configure_sqlite_wal)
    event.listen(engine, "begin", _begin_immediate)
    return engine


def create_db_engine(settings: Settings | None = None) -> Engine:
    """Create and configure the database engine.

    Args:
        settings: Settings to read the URL and pool options from; defaults to
            the cached application settings.

    Returns:
        Engine: Configured SQLAlchemy engine

    Note:
        For SQLite databases, automatically configures WAL mode, foreign keys
        and ``BEGIN IMMEDIATE`` transactions.
    """
    settings = settings or get_settings()

    if settings.database_url.startswith("sqlite"):
        engine = create_engine(
            settings.database_url,
            echo=settings.database_echo,
            pool_pre_ping=True,
            connect_args={"check_same_thread": False},
        )
        configure_sqlite_engine(engine)
    else:
        engine = create_engine(
            settings.database_url,
            echo=settings.database_echo,
            pool_pre_ping=True,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_recycle=settings.database_pool_recycle,
            pool_timeout=settings.database_pool_timeout,
        )

    return engine


# Global engine
_engine: Engine | None = None


def get_engine() -> Engine:
    """Get or create the global database engine."""
    global _engine  # noqa: PLW0603
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Return a session factory bound to ``engine``.

    ``expire_on_commit`` is disabled so results handed back after a commit
    stay readable without another round trip.
    """
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def init_db(engine: Engine | None = None) -> None:
    """Create all tables directly, without migrations.

    Note:
        Intended for development and tests. Deployed databases are managed
        with ``alembic upgrade head``.
    """
    Base.metadata.create_all(bind=engine or get_engine())


def check_database_health(engine: Engine | None = None) -> bool:
    """Return True when a trivial query succeeds against the database."""
    try:
        with (engine or get_engine()).connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False


def get_table_names(engine: Engine | None = None) -> list[str]:
    """Get list of all table names in the database."""
    inspector = inspect(engine or get_engine())
    return inspector.get_table_names()


def count_rows(session: Session, table_name: str) -> int:
    """Count rows in a specific table.

    Raises:
        ValueError: If table_name is not a valid table in the schema
    """
    if table_name not in Base.metadata.tables:
        valid_tables = sorted(Base.metadata.tables.keys())
        raise ValueError(
            f"Invalid table name: {table_name}. Valid tables: {', '.join(valid_tables)}"
        )

    table = Base.metadata.tables[table_name]
    result = session.execute(select(func.count()).select_from(table)).scalar()
    return result or 0


def translate_storage_error(exc: SQLAlchemyError) -> LedgerError:
    """Map a SQLAlchemy failure onto the ledger's error kinds.

    Lock, deadlock and serialization failures become ``TransactionConflict``
    so callers may retry the whole operation; everything else is a
    ``StorageError``.
    """
    if isinstance(exc, DBAPIError):
        orig = exc.orig
        sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
        detail = str(orig).lower()
        if sqlstate in CONFLICT_SQLSTATES or any(msg in detail for msg in CONFLICT_MESSAGES):
            return TransactionConflict("Concurrent update conflict; retry the operation")
    return StorageError(f"Storage failure: {exc.__class__.__name__}")


@contextmanager
def storage_errors() -> Iterator[None]:
    """Re-raise SQLAlchemy failures inside the block as ledger errors."""
    try:
        yield
    except SQLAlchemyError as exc:
        raise translate_storage_error(exc) from exc


@contextmanager
def atomic(session: Session) -> Iterator[Session]:
    """Run the block as one storage transaction.

    Commits when the block completes and rolls back on any exception, so no
    ledger operation is ever partially applied. Storage failures, including
    those raised by the commit itself, surface as ``LedgerError`` subclasses.

    Example:
        ```python
        with atomic(session):
            ledger.mutate_balance(source_id, -amount)
            ledger.mutate_balance(target_id, amount)
        ```
    """
    try:
        with storage_errors():
            yield session
            session.commit()
    except BaseException:
        session.rollback()
        raise
