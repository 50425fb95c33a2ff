"""
SQLAlchemy ORM models.

Two tables: a key-value preference store holding the provider list, and
the encrypted secret items.
"""

from __future__ import annotations

from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from llmkeyring.db.base import Base


class Preference(Base):
    """One key-value preference; values are JSON text."""

    __tablename__ = "preferences"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)


class SecretItem(Base):
    """Encrypted secret addressed by (service, account)."""

    __tablename__ = "secret_items"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    service: Mapped[str] = mapped_column(String(128), nullable=False)
    account: Mapped[str] = mapped_column(String(255), nullable=False)
    ciphertext: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (UniqueConstraint("service", "account", name="uq_secret_items_service_account"),)
