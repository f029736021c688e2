"""SQLAlchemy engine + session management for the sql backend.

Uses a session-per-request pattern. With the file backend no engine is created
and ``get_optional_session`` returns None.
"""

from __future__ import annotations

from flask import Flask, current_app, g
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from pension_lottery.models.base import Base


def create_app_engine(database_url: str) -> Engine:
    return create_engine(database_url, pool_pre_ping=True, future=True)


def get_db_backend() -> str:
    return str(current_app.config.get("DATA_BACKEND", "file")).lower().strip()


def init_db(app: Flask) -> None:
    """Initialize database engine and per-request sessions (sql backend only)."""

    if str(app.config.get("DATA_BACKEND", "file")).lower().strip() != "sql":
        return

    engine = create_app_engine(str(app.config["DATABASE_URL"]))
    session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    # Create tables on startup (production would use migrations).
    Base.metadata.create_all(bind=engine)

    app.extensions["engine"] = engine
    app.extensions["session_factory"] = session_factory

    @app.before_request
    def _open_session() -> None:
        g.db = session_factory()  # type: ignore[attr-defined]

    @app.teardown_request
    def _close_session(exc: BaseException | None) -> None:
        session: Session | None = getattr(g, "db", None)
        if session is None:
            return

        try:
            if exc is None:
                session.commit()
            else:
                session.rollback()
        finally:
            session.close()


def get_session() -> Session:
    """Get the current request's SQLAlchemy session."""

    session: Session | None = getattr(g, "db", None)
    if session is None:
        raise RuntimeError("Database session not initialized")
    return session


def get_optional_session() -> Session | None:
    """Current request session, or None when the file backend is active."""

    if get_db_backend() != "sql":
        return None
    return get_session()
