"""
Provider list persistence in the ``preferences`` table.

The list is stored as one JSON blob under ``providers``; the default id
lives under ``defaultProviderID`` and its row is removed when unset.
"""

from __future__ import annotations

import json
from uuid import UUID

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete
from sqlalchemy.orm import Session, sessionmaker

from llmkeyring.core import get_logger
from llmkeyring.db.models import Preference
from llmkeyring.providers.base import Provider

logger = get_logger(__name__)

PROVIDERS_KEY = "providers"
DEFAULT_PROVIDER_KEY = "defaultProviderID"

_provider_list = TypeAdapter(list[Provider])


def dump_providers(providers: list[Provider]) -> str:
    """JSON text of ``providers`` with camelCase wire names."""
    return _provider_list.dump_json(providers, by_alias=True).decode("utf-8")


def load_providers(raw: str | bytes) -> list[Provider]:
    """
    Decode a stored provider list.

    Raises:
        pydantic.ValidationError: the blob is not a valid provider list.
    """
    return _provider_list.validate_json(raw)


class ProviderPersistence:
    """Loads and saves the provider list and default selection."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def load(self) -> tuple[list[Provider], UUID | None]:
        with self._session_factory() as session:
            blob = session.get(Preference, PROVIDERS_KEY)
            default_row = session.get(Preference, DEFAULT_PROVIDER_KEY)
            raw_providers = blob.value if blob else None
            raw_default = default_row.value if default_row else None

        providers: list[Provider] = []
        if raw_providers:
            try:
                providers = load_providers(raw_providers)
            except PydanticValidationError as exc:
                logger.warning(
                    "Stored provider list is unreadable, starting empty",
                    data={"errors": exc.error_count()},
                )

        default_id: UUID | None = None
        if raw_default:
            try:
                default_id = UUID(json.loads(raw_default))
            except (ValueError, TypeError) as exc:
                logger.warning("Stored default provider id is unreadable", data={"error": str(exc)})

        return providers, default_id

    def save(self, providers: list[Provider], default_id: UUID | None) -> None:
        with self._session_factory() as session, session.begin():
            session.merge(Preference(key=PROVIDERS_KEY, value=dump_providers(providers)))
            if default_id is None:
                session.execute(delete(Preference).where(Preference.key == DEFAULT_PROVIDER_KEY))
            else:
                session.merge(Preference(key=DEFAULT_PROVIDER_KEY, value=json.dumps(str(default_id))))
        logger.debug(
            "Providers saved",
            data={"count": len(providers), "default": str(default_id) if default_id else None},
        )
