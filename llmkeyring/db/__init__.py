"""Database models, engine, and session management."""

from llmkeyring.db.base import Base
from llmkeyring.db.engine import (
    build_engine,
    create_tables,
    dispose_engine,
    get_engine,
)
from llmkeyring.db.models import Preference, SecretItem
from llmkeyring.db.session import get_session_factory, make_session_factory, reset_session_factory

__all__ = [
    # Base
    "Base",
    # Engine
    "build_engine",
    "create_tables",
    "dispose_engine",
    "get_engine",
    # Session
    "get_session_factory",
    "make_session_factory",
    "reset_session_factory",
    # Models
    "Preference",
    "SecretItem",
]
