"""
Secret storage for provider API keys.

Secrets are addressed by a reference string (the provider's ``keyRef``)
inside a service namespace. Reads fall back to a legacy namespace so keys
saved under the previous application name keep working.
"""

from __future__ import annotations

import base64
import hashlib
import os
from abc import ABC, abstractmethod
from pathlib import Path

from cryptography.fernet import Fernet, InvalidToken
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from llmkeyring.config import Settings
from llmkeyring.core import SecretStoreError, get_logger
from llmkeyring.db.models import SecretItem

logger = get_logger(__name__)

DEFAULT_SERVICE = "LLMKeyring"
LEGACY_SERVICE = "LLMManager"


class SecretStore(ABC):
    """Contract for keychain-like secret storage."""

    @abstractmethod
    def save(self, secret: str, ref: str) -> None:
        """Store ``secret`` under ``ref``, replacing any previous value."""

    @abstractmethod
    def read(self, ref: str) -> str | None:
        """The secret for ``ref``, or None when absent in every namespace."""

    @abstractmethod
    def delete(self, ref: str) -> None:
        """Remove ``ref`` from the primary and legacy namespaces."""

    @abstractmethod
    def delete_all(self) -> None:
        """Remove every secret of both namespaces."""


class MemorySecretStore(SecretStore):
    """Dict-backed store for tests and ephemeral runs."""

    def __init__(self, legacy: dict[str, str] | None = None):
        self.primary: dict[str, str] = {}
        self.legacy: dict[str, str] = dict(legacy or {})

    def save(self, secret: str, ref: str) -> None:
        self.primary[ref] = secret

    def read(self, ref: str) -> str | None:
        if ref in self.primary:
            return self.primary[ref]
        return self.legacy.get(ref)

    def delete(self, ref: str) -> None:
        self.primary.pop(ref, None)
        self.legacy.pop(ref, None)

    def delete_all(self) -> None:
        self.primary.clear()
        self.legacy.clear()


def derive_fernet_key(key: str) -> bytes:
    """Fernet key from an arbitrary passphrase (sha256, urlsafe base64)."""
    return base64.urlsafe_b64encode(hashlib.sha256(key.encode()).digest())


def load_or_create_key_file(path: Path) -> bytes:
    """Read the generated key, creating it (mode 0600) on first use."""
    if path.exists():
        return path.read_bytes().strip()
    path.parent.mkdir(parents=True, exist_ok=True)
    key = Fernet.generate_key()
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    with os.fdopen(fd, "wb") as fh:
        fh.write(key)
    logger.info("Generated secret store key", data={"path": str(path)})
    return key


def build_cipher(settings: Settings) -> Fernet:
    """Cipher from the configured key, else from the per-user key file."""
    if settings.encryption_key:
        return Fernet(derive_fernet_key(settings.encryption_key))
    return Fernet(load_or_create_key_file(settings.key_file))


class SQLSecretStore(SecretStore):
    """
    Encrypted secrets in the ``secret_items`` table.

    Primary-namespace failures raise ``SecretStoreError``. Legacy cleanup is
    best effort: failures are logged and ignored.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        cipher: Fernet,
        service: str = DEFAULT_SERVICE,
        legacy_service: str | None = LEGACY_SERVICE,
    ):
        self._session_factory = session_factory
        self._cipher = cipher
        self.service = service
        self.legacy_service = legacy_service

    def save(self, secret: str, ref: str) -> None:
        ciphertext = self._cipher.encrypt(secret.encode("utf-8")).decode("ascii")
        try:
            with self._session_factory() as session, session.begin():
                session.execute(
                    delete(SecretItem).where(SecretItem.service == self.service, SecretItem.account == ref)
                )
                session.add(SecretItem(service=self.service, account=ref, ciphertext=ciphertext))
        except SQLAlchemyError as exc:
            raise SecretStoreError(f"Failed to save secret: {exc}", details={"key_ref": ref}) from exc
        logger.debug("Secret saved", data={"key_ref": ref, "service": self.service})

    def read(self, ref: str) -> str | None:
        for service in self._services():
            ciphertext = self._fetch(service, ref)
            if ciphertext is not None:
                return self._decrypt(ciphertext, ref)
        return None

    def delete(self, ref: str) -> None:
        try:
            with self._session_factory() as session, session.begin():
                session.execute(
                    delete(SecretItem).where(SecretItem.service == self.service, SecretItem.account == ref)
                )
        except SQLAlchemyError as exc:
            raise SecretStoreError(f"Failed to delete secret: {exc}", details={"key_ref": ref}) from exc
        self._delete_legacy(SecretItem.account == ref)

    def delete_all(self) -> None:
        try:
            with self._session_factory() as session, session.begin():
                session.execute(delete(SecretItem).where(SecretItem.service == self.service))
        except SQLAlchemyError as exc:
            raise SecretStoreError(f"Failed to delete secrets: {exc}") from exc
        self._delete_legacy()
        logger.info("All secrets deleted", data={"service": self.service})

    def _services(self) -> list[str]:
        services = [self.service]
        if self.legacy_service and self.legacy_service != self.service:
            services.append(self.legacy_service)
        return services

    def _fetch(self, service: str, ref: str) -> str | None:
        stmt = select(SecretItem.ciphertext).where(SecretItem.service == service, SecretItem.account == ref)
        try:
            with self._session_factory() as session:
                return session.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise SecretStoreError(f"Failed to read secret: {exc}", details={"key_ref": ref}) from exc

    def _decrypt(self, ciphertext: str, ref: str) -> str:
        try:
            return self._cipher.decrypt(ciphertext.encode("ascii")).decode("utf-8")
        except (InvalidToken, UnicodeError) as exc:
            raise SecretStoreError("Failed to decrypt secret", details={"key_ref": ref}) from exc

    def _delete_legacy(self, *criteria) -> None:
        if not self.legacy_service or self.legacy_service == self.service:
            return
        try:
            with self._session_factory() as session, session.begin():
                session.execute(delete(SecretItem).where(SecretItem.service == self.legacy_service, *criteria))
        except SQLAlchemyError as exc:
            logger.warning(
                "Legacy secret cleanup failed",
                data={"service": self.legacy_service, "error": str(exc)},
            )
