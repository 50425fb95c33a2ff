"""
Provider registry: the single owner of the configured provider list.

Every mutation is persisted immediately. Health checks run concurrently;
each one writes its result onto whatever record is current when it
finishes, so the last write wins and results for deleted providers are
dropped.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import httpx

from llmkeyring.config import Settings, get_settings
from llmkeyring.core import Messages, NotFoundError, ValidationError, get_logger, get_messages, utcnow
from llmkeyring.providers.base import (
    BearerAuth,
    LastTest,
    ModelList,
    NoAuth,
    Provider,
    ProviderAdapter,
    ProviderKind,
    TestResult,
)
from llmkeyring.providers.factory import make_adapter
from llmkeyring.providers.templates import Template, build_provider, default_providers
from llmkeyring.providers.urls import alternate_for, normalize, suggest_kind_and_base

if TYPE_CHECKING:
    from llmkeyring.db.repositories.providers import ProviderPersistence
    from llmkeyring.storage.secrets import SecretStore

logger = get_logger(__name__)

MASK = "••••"


def mask_secret(secret: str | None) -> str:
    """Display form of a key: first 4, three dots, last 4."""
    if not secret:
        return MASK
    if len(secret) <= 8:
        return "•" * len(secret)
    return f"{secret[:4]}•••{secret[-4:]}"


class ProviderRegistry:
    """Ordered provider list with a default selection and key management."""

    def __init__(
        self,
        secrets: SecretStore,
        persistence: ProviderPersistence,
        settings: Settings | None = None,
        messages: Messages | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.secrets = secrets
        self.persistence = persistence
        self.settings = settings or get_settings()
        self.messages = messages or get_messages()
        self._transport = transport
        self._providers: list[Provider] = []
        self._default_id: UUID | None = None
        self._load()

    def _load(self) -> None:
        self._providers, self._default_id = self.persistence.load()
        if self._default_id is not None and self._index(self._default_id) is None:
            logger.warning("Default provider no longer exists", data={"id": str(self._default_id)})
            self._default_id = None
        if not self._providers and self.settings.bootstrap_defaults:
            self._providers = default_providers(self.messages)
            self._default_id = self._providers[0].id
            self._persist()
            logger.info("Seeded default providers", data={"count": len(self._providers)})
        logger.info(
            "Provider registry initialized",
            data={"providers": len(self._providers), "default": str(self._default_id) if self._default_id else None},
        )

    def _persist(self) -> None:
        self.persistence.save(self._providers, self._default_id)

    def _index(self, provider_id: UUID) -> int | None:
        for idx, provider in enumerate(self._providers):
            if provider.id == provider_id:
                return idx
        return None

    def _replace(self, provider: Provider) -> Provider:
        idx = self._index(provider.id)
        if idx is None:
            raise NotFoundError(f"Provider '{provider.id}' not found")
        self._providers[idx] = provider
        self._persist()
        return provider

    def adapter_for(self, provider: Provider) -> ProviderAdapter:
        return make_adapter(
            provider.kind,
            self.secrets,
            messages=self.messages,
            timeout=self.settings.provider_timeout_seconds,
            transport=self._transport,
        )

    # -- queries --------------------------------------------------------------

    @property
    def providers(self) -> list[Provider]:
        return list(self._providers)

    @property
    def default_id(self) -> UUID | None:
        return self._default_id

    def get(self, provider_id: UUID) -> Provider:
        """Resolve a provider by ID or raise NotFoundError."""
        idx = self._index(provider_id)
        if idx is None:
            raise NotFoundError(f"Provider '{provider_id}' not found")
        return self._providers[idx]

    def default_provider(self) -> Provider | None:
        if self._default_id is None:
            return None
        idx = self._index(self._default_id)
        return self._providers[idx] if idx is not None else None

    # -- list mutations -------------------------------------------------------

    def add(self, provider: Provider) -> Provider:
        if self._index(provider.id) is not None:
            raise ValidationError(f"Provider '{provider.id}' already exists")
        self._providers.append(provider)
        self._persist()
        logger.info("Provider added", data={"id": str(provider.id), "kind": provider.kind.value})
        return provider

    def add_template(self, template: Template) -> Provider:
        return self.add(build_provider(template, self.messages))

    def update(self, provider: Provider) -> Provider:
        """Replace the record with the same id."""
        return self._replace(provider)

    def delete(self, provider_id: UUID) -> None:
        provider = self.get(provider_id)
        self._providers = [p for p in self._providers if p.id != provider_id]
        if self._default_id == provider_id:
            self._default_id = None
        self._persist()
        if provider.key_ref:
            try:
                self.secrets.delete(provider.key_ref)
            except Exception as exc:
                logger.warning(
                    "Could not delete provider key",
                    data={"id": str(provider_id), "key_ref": provider.key_ref, "error": str(exc)},
                )
        logger.info("Provider deleted", data={"id": str(provider_id)})

    def move(self, from_index: int, to_index: int) -> list[Provider]:
        """Move the provider at ``from_index`` so it ends up at ``to_index``."""
        count = len(self._providers)
        if not (0 <= from_index < count and 0 <= to_index < count):
            raise ValidationError(
                "Index out of range",
                details={"from_index": from_index, "to_index": to_index, "count": count},
            )
        provider = self._providers.pop(from_index)
        self._providers.insert(to_index, provider)
        self._persist()
        return self.providers

    def set_default(self, provider_id: UUID | None) -> None:
        if provider_id is not None:
            self.get(provider_id)
        self._default_id = provider_id
        self._persist()

    # -- adapter operations ---------------------------------------------------

    async def test(self, provider_id: UUID) -> Provider:
        """Run a health check and record it as the provider's last test."""
        provider = self.get(provider_id)
        result: TestResult = await self.adapter_for(provider).test_health(provider)
        last = LastTest(status=result.status, at=utcnow(), message=result.message)
        logger.info(
            "Provider tested",
            data={"id": str(provider_id), "kind": provider.kind.value, "status": result.status.value},
        )

        idx = self._index(provider_id)
        if idx is None:
            logger.info("Provider deleted during test, result dropped", data={"id": str(provider_id)})
            return provider.model_copy(update={"last_test": last})
        updated = self._providers[idx].model_copy(update={"last_test": last})
        return self._replace(updated)

    async def test_default(self) -> Provider | None:
        provider = self.default_provider()
        if provider is None:
            return None
        return await self.test(provider.id)

    async def list_models(self, provider_id: UUID) -> ModelList:
        provider = self.get(provider_id)
        return await self.adapter_for(provider).list_models(provider)

    # -- keys -----------------------------------------------------------------

    def save_api_key(self, provider_id: UUID, key: str) -> Provider:
        key = key.strip()
        if not key:
            raise ValidationError("API key must not be empty")
        provider = self.get(provider_id)
        key_ref = provider.key_ref or f"prov_{provider.id}"
        self.secrets.save(key, key_ref)
        logger.info("API key saved", data={"id": str(provider_id), "key_ref": key_ref})
        return self._replace(provider.model_copy(update={"auth": BearerAuth(key_ref=key_ref)}))

    def remove_api_key(self, provider_id: UUID) -> Provider:
        provider = self.get(provider_id)
        if provider.key_ref:
            self.secrets.delete(provider.key_ref)
            logger.info("API key removed", data={"id": str(provider_id), "key_ref": provider.key_ref})
        return self._replace(provider.model_copy(update={"auth": NoAuth()}))

    def clear_all_api_keys(self) -> None:
        self.secrets.delete_all()
        self._providers = [
            p.model_copy(update={"auth": NoAuth(), "last_test": LastTest()}) for p in self._providers
        ]
        self._persist()
        logger.info("All API keys cleared", data={"providers": len(self._providers)})

    def reveal_key(self, provider_id: UUID) -> str | None:
        provider = self.get(provider_id)
        if not provider.key_ref:
            return None
        return self.secrets.read(provider.key_ref)

    def masked_key(self, provider_id: UUID) -> str:
        provider = self.get(provider_id)
        if not provider.key_ref:
            return MASK
        try:
            return mask_secret(self.secrets.read(provider.key_ref))
        except Exception as exc:
            logger.warning("Could not read provider key", data={"id": str(provider_id), "error": str(exc)})
            return MASK

    def has_key(self, provider_id: UUID) -> bool:
        provider = self.get(provider_id)
        if not provider.key_ref:
            return False
        try:
            return bool(self.secrets.read(provider.key_ref))
        except Exception as exc:
            logger.warning("Could not read provider key", data={"id": str(provider_id), "error": str(exc)})
            return False

    # -- base URL helpers -----------------------------------------------------

    def suggest(self, raw_url: str) -> tuple[ProviderKind, str] | None:
        return suggest_kind_and_base(raw_url)

    def apply_alternate(self, provider_id: UUID) -> Provider:
        """Switch an Aliyun provider between native and compatible mode."""
        provider = self.get(provider_id)
        alternate = alternate_for(provider)
        if alternate is None:
            raise ValidationError("No alternate endpoint for this provider")
        kind, base = alternate
        return self._replace(provider.model_copy(update={"kind": kind, "base_url": base}))

    def normalize_base(self, provider_id: UUID) -> Provider:
        provider = self.get(provider_id)
        base = normalize(provider.kind, provider.base_url)
        return self._replace(provider.model_copy(update={"base_url": base}))
