"""SQLAlchemy engine, session factory and declarative base."""

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from paysvc.common.config import settings


def _connect_args(url: str) -> dict:
    # Sync FastAPI endpoints run in a threadpool; SQLite refuses cross-thread use by default.
    if make_url(url).get_backend_name() == "sqlite":
        return {"check_same_thread": False}
    return {}


engine = create_engine(settings.database_url, pool_pre_ping=True, connect_args=_connect_args(settings.database_url))
# `expire_on_commit=False` keeps ORM objects readable after the session closes.
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


class Base(DeclarativeBase):
    """Declarative base for SQLAlchemy models."""


def create_schema() -> None:
    """Create missing tables directly from model metadata (no migrations)."""

    Base.metadata.create_all(engine)
