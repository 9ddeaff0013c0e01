"""Database configuration and session management."""

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from pantryplanner.config import get_settings


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


def create_db_engine(database_url: str | None = None, echo: bool = False) -> Engine:
    """Create a synchronous engine; in-memory SQLite shares one connection."""
    database_url = database_url or get_settings().database_url

    if database_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, echo=echo)


def init_db(engine: Engine) -> None:
    """Create tables if they don't exist."""
    # Register models on the metadata
    from pantryplanner import models  # noqa: F401

    Base.metadata.create_all(engine)


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(engine, expire_on_commit=False)
