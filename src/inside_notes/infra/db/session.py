from __future__ import annotations

from collections.abc import Callable

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

SessionFactory = Callable[[], Session]


def create_sqlalchemy_engine(database_url: str) -> Engine:
    # pool_pre_ping keeps the health check honest after the database restarts.
    return create_engine(database_url, future=True, pool_pre_ping=True)


def create_sqlalchemy_session_factory(engine: Engine) -> SessionFactory:
    """Build a factory that produces SQLAlchemy sessions bound to ``engine``."""

    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, class_=Session)

    def _factory() -> Session:
        return SessionLocal()

    return _factory
