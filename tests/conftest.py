"""Shared fixtures: throwaway SQLite database, store, manager and HTTP client."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("TRACING_ENABLED", "false")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from paysvc.common.db import Base
from paysvc.services.payment.main import app, get_payment_service
from paysvc.services.payment.service import PaymentService
from paysvc.services.payment.store import SqlAlchemyPaymentStore


class TickingClock:
    """Deterministic clock that moves forward one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def store(session_factory):
    return SqlAlchemyPaymentStore(session_factory)


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def payment_service(store, clock):
    return PaymentService(store, clock=clock)


@pytest.fixture
def client(payment_service):
    app.dependency_overrides[get_payment_service] = lambda: payment_service
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
