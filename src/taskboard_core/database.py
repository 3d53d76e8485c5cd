"""Database connection and session management."""
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from .config import get_settings

settings = get_settings()


def _engine_options(database_url: str) -> dict:
    """Pool settings for server databases; SQLite uses its own pool."""
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,       # Verify connections before using
        "pool_size": 5,
        "max_overflow": 10,
        "pool_recycle": 3600,        # Recycle connections every hour
        "pool_timeout": 30,
    }


def configure_sqlite(engine: Engine) -> None:
    """
    Make a pysqlite engine honor SAVEPOINT and foreign keys.

    The driver's own transaction handling swallows SAVEPOINTs, which the
    per-recipient notification writes depend on. Transactions are started
    explicitly instead.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


engine = create_engine(
    settings.database_url,
    echo=settings.database_echo,
    **_engine_options(settings.database_url),
)
if engine.dialect.name == "sqlite":
    configure_sqlite(engine)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function to get database session.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
