"""SQLAlchemy engine and session factory for SQL-backed track storage."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from mda.config import settings


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def create_db_engine(url: str) -> Engine:
    kwargs: dict = {"pool_pre_ping": True}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    db_engine = create_engine(url, **kwargs)
    if db_engine.dialect.name == "sqlite":
        event.listen(db_engine, "connect", _set_sqlite_pragmas)
    return db_engine


engine = create_db_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Optional[Engine] = None) -> None:
    """Create the track tables (idempotent). Called before the first SQL-backed save."""
    from mda.models import Base  # noqa: F401 -- ensure all models are registered

    bind = bind or engine
    db_file = bind.url.database if bind.dialect.name == "sqlite" else None
    if db_file and db_file != ":memory:":
        Path(db_file).parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=bind)
