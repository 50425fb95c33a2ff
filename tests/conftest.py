from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest
from cryptography.fernet import Fernet
from sqlalchemy.orm import Session, sessionmaker

from llmkeyring.config import Settings
from llmkeyring.core import Messages
from llmkeyring.db import build_engine, create_tables, make_session_factory
from llmkeyring.db.repositories import ProviderPersistence
from llmkeyring.storage import MemorySecretStore, SQLSecretStore


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it was asked to send."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


def responding(status_code: int = 200, **kwargs) -> RecordingTransport:
    return RecordingTransport(lambda request: httpx.Response(status_code, **kwargs))


@pytest.fixture
def messages() -> Messages:
    return Messages("en")


@pytest.fixture
def secrets() -> MemorySecretStore:
    return MemorySecretStore()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        data_dir=str(tmp_path),
        database_url="sqlite://",
        locale="en",
        bootstrap_defaults=False,
    )


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker[Session]:
    return make_session_factory(engine)


@pytest.fixture
def persistence(session_factory) -> ProviderPersistence:
    return ProviderPersistence(session_factory)


@pytest.fixture
def sql_secrets(session_factory) -> SQLSecretStore:
    return SQLSecretStore(session_factory, Fernet(Fernet.generate_key()))
