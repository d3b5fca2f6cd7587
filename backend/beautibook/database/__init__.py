"""
Database engine, session factory, and metadata shared across the application.
"""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeMeta, Session, declarative_base, sessionmaker

from beautibook.core.config import settings

logger = logging.getLogger(__name__)


def build_engine_kwargs(db_url: str) -> dict[str, Any]:
    """Engine options for the configured backend."""
    if db_url.startswith("sqlite"):
        # Request handlers run on worker threads (asyncio.to_thread)
        return {"connect_args": {"check_same_thread": False, "timeout": 15}}

    return {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_timeout": settings.database_pool_timeout,
        "pool_recycle": 300,
        "pool_pre_ping": True,
    }


def create_db_engine(db_url: str) -> Engine:
    """Create an engine; SQLite connections get foreign keys switched on."""
    new_engine = create_engine(db_url, **build_engine_kwargs(db_url))

    if new_engine.dialect.name == "sqlite":

        @event.listens_for(new_engine, "connect")
        def _enable_sqlite_fks(dbapi_connection: Any, connection_record: Any) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    @event.listens_for(new_engine, "connect")
    def receive_connect(dbapi_connection: Any, connection_record: Any) -> None:
        connection_record.info["connect_time"] = datetime.now()
        logger.debug("Database connection established")

    return new_engine


engine: Engine = create_db_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)

Base: DeclarativeMeta = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Get database session with proper cleanup."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


__all__ = [
    "Base",
    "SessionLocal",
    "create_db_engine",
    "engine",
    "get_db",
]
