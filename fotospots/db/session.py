# fotospots/db/session.py
from __future__ import annotations

from typing import Generator

from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from fotospots.core.config import get_settings

# ---------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------

_settings = get_settings()
DATABASE_URL = _settings.DATABASE_URL


def _engine_kwargs(url: str) -> dict:
    """SQLite needs thread sharing enabled; in-memory SQLite a single connection."""
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}

    kwargs: dict = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    return kwargs


engine = create_engine(DATABASE_URL, echo=False, **_engine_kwargs(DATABASE_URL))


# ---------------------------------------------------------------------
# Session dependency
# ---------------------------------------------------------------------
def get_session() -> Generator[Session, None, None]:
    """FastAPI dependency: yields a scoped DB session."""
    with Session(engine) as session:
        yield session


# ---------------------------------------------------------------------
# Schema initialization (non-destructive)
# ---------------------------------------------------------------------
def init_db() -> None:
    """
    Create all tables if they don't exist.

    Non-destructive: existing tables are not dropped or altered.
    """
    # Import models so that SQLModel sees all table definitions
    from fotospots.db import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
