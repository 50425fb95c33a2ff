"""
Database engine configuration.

Creates the SQLAlchemy engine for the configured database (a SQLite file in
the data directory unless LLMKEYRING_DATABASE_URL says otherwise).
"""

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from llmkeyring.config import get_settings
from llmkeyring.core import get_logger
from llmkeyring.db.base import Base

logger = get_logger(__name__)

_engine: Engine | None = None


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for ``database_url``.

    In-memory SQLite shares one connection so every session sees the same
    database.
    """
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(database_url, echo=echo, pool_pre_ping=True)

    if url.database in (None, "", ":memory:"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        )

    db_dir = Path(url.database).parent
    if not db_dir.exists():
        db_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Created database directory", data={"path": str(db_dir)})
    return create_engine(
        database_url,
        connect_args={"check_same_thread": False},
        echo=echo,
        pool_pre_ping=True,
    )


def get_engine() -> Engine:
    """
    Get or create the database engine.

    Returns cached engine instance, creating it on first call.
    """
    global _engine

    if _engine is not None:
        return _engine

    settings = get_settings()
    _engine = build_engine(settings.effective_database_url, echo=settings.debug)
    logger.info(
        "Database engine created",
        data={"dialect": _engine.dialect.name, "debug": settings.debug},
    )
    return _engine


def create_tables(engine: Engine | None = None) -> None:
    """Create missing tables."""
    Base.metadata.create_all(engine or get_engine())


def dispose_engine() -> None:
    """Dispose of the engine and release all connections."""
    global _engine
    if _engine is not None:
        _engine.dispose()
        _engine = None
        logger.info("Database engine disposed")
