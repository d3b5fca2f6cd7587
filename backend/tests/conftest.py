# backend/tests/conftest.py
"""
Pytest configuration for the booking core.

Every test gets its own SQLite file database and a frozen clock. Time is
pinned to Monday 2025-06-16 09:00 in the business timezone (16:00 UTC),
so Tuesday 2025-06-17 is a full, bookable working day.
"""

import os

# Set testing mode BEFORE any beautibook imports
os.environ["is_testing"] = "true"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from datetime import datetime, timedelta
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.orm import Session, sessionmaker

from beautibook.api.dependencies import get_clock, get_db
from beautibook.database import Base, create_db_engine
from beautibook.main import fastapi_app as app
from beautibook.models.service import Service
from beautibook.models.staff import Staff

from tests.factories.builders import FROZEN_NOW, create_service, create_staff


class FrozenClock:
    """Callable clock that only moves when a test moves it."""

    def __init__(self, now: datetime):
        self.current = now

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current

    def set(self, value: datetime) -> None:
        self.current = value


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(FROZEN_NOW)


@pytest.fixture
def engine(tmp_path):
    test_engine = create_db_engine(f"sqlite:///{tmp_path / 'booking.db'}")
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@pytest.fixture
def db(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def serialized_session_factory(tmp_path) -> Generator[sessionmaker, None, None]:
    """
    Session factory whose transactions start with BEGIN IMMEDIATE.

    SQLite then queues concurrent writers on its busy timeout instead of
    failing one of them with "database is locked", which lets threads race
    for the same slot the way separate API workers would.
    """
    race_engine = create_db_engine(f"sqlite:///{tmp_path / 'race.db'}")

    @event.listens_for(race_engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(race_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    Base.metadata.create_all(bind=race_engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=race_engine, expire_on_commit=False)
    race_engine.dispose()


@pytest.fixture
def service(db: Session) -> Service:
    return create_service(db, name="Haircut", duration_minutes=60, base_price=6500)


@pytest.fixture
def short_service(db: Session) -> Service:
    return create_service(db, name="Fringe Trim", duration_minutes=30, base_price=1500)


@pytest.fixture
def unoffered_service(db: Session) -> Service:
    return create_service(db, name="Balayage", duration_minutes=180, base_price=22000)


@pytest.fixture
def staff(db: Session, service: Service, short_service: Service) -> Staff:
    """Works Tuesday to Saturday, 09:00-18:00 local."""
    return create_staff(db, name="Sarah Johnson", services=[service, short_service])


@pytest.fixture
def client(session_factory, clock) -> Generator[TestClient, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
