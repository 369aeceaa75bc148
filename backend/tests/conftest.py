"""
Shared fixtures: in-memory database, fake Redis, frozen clock, API client.
"""

import json
from datetime import datetime
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from barbershop.config import settings
from barbershop.database import get_db
from barbershop.main import app
from barbershop.models.generated import (
    Barbers,
    Base,
    Bookings,
    Services,
    Settings as SettingRow,
    SpecialHours,
)
from barbershop.redis_client import get_redis
from barbershop.services.availability import FixedClock, get_clock

TZ = settings.timezone



@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    yield session
    session.close()


@pytest.fixture
def fake_redis():
    return MagicMock()


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 11, 25, 8, 0), TZ)


@pytest.fixture
def client(db, fake_redis, clock):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_redis] = lambda: fake_redis
    app.dependency_overrides[get_clock] = lambda: clock
    yield TestClient(app)
    app.dependency_overrides.clear()


# ── Factories ────────────────────────────────────────────────────────────


@pytest.fixture
def make_barber(db):
    def _make(name="Carlos", working_days=(1, 2, 3, 4, 5, 6), **kwargs):
        barber = Barbers(name=name, working_days=json.dumps(list(working_days)), **kwargs)
        db.add(barber)
        db.commit()
        db.refresh(barber)
        return barber
    return _make


@pytest.fixture
def make_service(db):
    def _make(name="Haircut", duration_minutes=30, price=15.0, **kwargs):
        service = Services(name=name, duration_minutes=duration_minutes, price=price, **kwargs)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service
    return _make


@pytest.fixture
def make_booking(db):
    def _make(barber, date, start_time, end_time, status="pending", service=None, **kwargs):
        booking = Bookings(
            barber_id=barber.id,
            service_id=service.id if service else 1,
            date=date,
            start_time=start_time,
            end_time=end_time,
            client_name="Ana",
            client_phone="612345678",
            service_name=service.name if service else "Haircut",
            service_price=service.price if service else 15.0,
            status=status,
            **kwargs,
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking
    return _make


@pytest.fixture
def make_special_hours(db):
    def _make(date, barber=None, is_closed=False, start_time=None, end_time=None):
        row = SpecialHours(
            date=date,
            barber_id=barber.id if barber else None,
            is_closed=1 if is_closed else 0,
            start_time=start_time,
            end_time=end_time,
        )
        db.add(row)
        db.commit()
        return row
    return _make


@pytest.fixture
def set_setting(db):
    def _set(key, value):
        db.merge(SettingRow(key=key, value=value))
        db.commit()
    return _set
