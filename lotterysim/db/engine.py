from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from ..models import Base

# Games live only as long as the process; every engine gets a private database.
IN_MEMORY_SQLITE_URL = "sqlite+pysqlite:///:memory:"


def make_engine(echo: bool = False) -> Engine:
    """Create a fresh in-memory SQLite engine with the schema in place."""
    engine = create_engine(
        IN_MEMORY_SQLITE_URL,
        echo=echo,
        future=True,
    )

    # ensure FK constraints are enforced on SQLite
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    return engine


def get_sessionmaker(engine: Engine):
    # Half-built tickets must not be flushed by a lazy load mid-purchase.
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,  # Keep game objects usable after the round commits
        future=True,
    )
