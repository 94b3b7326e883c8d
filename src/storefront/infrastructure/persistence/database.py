"""Engine and session factory.

SQLite needs help to behave like a transactional store under
concurrent writers: pysqlite defers BEGIN until the first write, so two
transactions can both read a stock count before either writes it.  For
SQLite engines every transaction therefore starts with
``BEGIN IMMEDIATE``, which takes the write lock up front and serializes
writers.  Read-only units of work mark their connection with the
``READ_ONLY`` execution option and start a plain deferred ``BEGIN``
instead, so queries do not queue behind writers.  Other backends rely on
row locks and the ledger's version checks.
"""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from storefront.infrastructure.persistence.models import Base

# Seconds a SQLite connection waits for the write lock before failing.
SQLITE_LOCK_TIMEOUT = 30

# Execution option set by read-only units of work.
READ_ONLY = "storefront_read_only"


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine for *database_url* and make sure the schema exists."""
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False, "timeout": SQLITE_LOCK_TIMEOUT},
        )
        _use_immediate_transactions(engine)
    else:
        engine = create_engine(url, echo=echo, pool_pre_ping=True)

    Base.metadata.create_all(engine)
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def _use_immediate_transactions(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        # Let SQLAlchemy emit BEGIN itself.
        dbapi_connection.isolation_level = None
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    @event.listens_for(engine, "begin")
    def _begin(conn):
        if conn.get_execution_options().get(READ_ONLY):
            conn.exec_driver_sql("BEGIN")
        else:
            conn.exec_driver_sql("BEGIN IMMEDIATE")
