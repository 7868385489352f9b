"""Database configuration for the campusfin API."""
from typing import Generator
from sqlmodel import create_engine, Session
from sqlalchemy import event
from sqlalchemy.pool import StaticPool

from campusfin.config import DATABASE_URL
from campusfin.utils.logger import get_logger

logger = get_logger("campusfin.db")

IS_SQLITE = DATABASE_URL.startswith("sqlite")

if IS_SQLITE:
    logger.info("Using SQLite database", url=DATABASE_URL)
else:
    logger.info("Using server database", dialect=DATABASE_URL.split(":", 1)[0])

# SQLite needs check_same_thread disabled for FastAPI's threadpool
connect_args = {"check_same_thread": False} if IS_SQLITE else {}

if IS_SQLITE:
    engine_kwargs = {}
    # An in-memory database only lives as long as its single connection
    if DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        engine_kwargs["poolclass"] = StaticPool

    engine = create_engine(DATABASE_URL, echo=False, connect_args=connect_args, **engine_kwargs)

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
else:
    engine = create_engine(DATABASE_URL, echo=False, pool_pre_ping=True)


def get_session() -> Generator[Session, None, None]:
    """Dependency for getting database sessions."""
    with Session(engine) as session:
        yield session
