"""Database engine and session factory.

Nothing here is a process-wide handle: the application builds one engine at
startup and passes the session factory to request handlers via app.state.
"""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool


def build_engine(database_url: str, busy_timeout: float = 15.0) -> Engine:
    if database_url.startswith("sqlite"):
        # SQLite: Use NullPool for thread-safety
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False, "timeout": busy_timeout},
            poolclass=NullPool,
        )
        _configure_sqlite(engine)
        return engine

    # PostgreSQL/MySQL: Use QueuePool with sensible defaults
    return create_engine(
        database_url,
        pool_size=5,  # Number of persistent connections
        max_overflow=10,  # Max temporary connections
        pool_timeout=30,  # Seconds to wait for connection
        pool_recycle=3600,  # Recycle connections after 1 hour
        pool_pre_ping=True,  # Verify connection health
    )


# Execution option naming the SQLite BEGIN mode for a transaction
SQLITE_BEGIN_OPTION = "sqlite_begin"
WRITE_TRANSACTION = {SQLITE_BEGIN_OPTION: "IMMEDIATE"}


def _configure_sqlite(engine: Engine) -> None:
    """
    SQLite has no row locks and pysqlite defers BEGIN until the first write,
    so a count read before an insert is not protected. Take over transaction
    control: transactions opened with WRITE_TRANSACTION start with
    BEGIN IMMEDIATE, so concurrent writers serialize on the database lock for
    the whole check-then-write. Everything else gets a plain deferred BEGIN
    and reads from the WAL snapshot without waiting on writers.
    """

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def begin_transaction(conn):
        mode = conn.get_execution_options().get(SQLITE_BEGIN_OPTION, "DEFERRED")
        conn.exec_driver_sql(f"BEGIN {mode}")


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
