"""Provider management endpoints."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from llmkeyring.api.schemas import (
    APIKeyBody,
    DefaultBody,
    MoveBody,
    ProviderCreate,
    ProviderUpdate,
    SuggestBody,
)
from llmkeyring.config import Settings, get_settings
from llmkeyring.core import ValidationError, get_logger
from llmkeyring.db import create_tables, get_engine, get_session_factory
from llmkeyring.db.repositories import ProviderPersistence
from llmkeyring.providers import Provider, ProviderKind, ProviderRegistry, Template
from llmkeyring.providers.templates import TEMPLATES
from llmkeyring.storage import SQLSecretStore, build_cipher

logger = get_logger(__name__)

router = APIRouter(tags=["providers"])


def build_registry(settings: Settings) -> ProviderRegistry:
    """Registry over the configured database and encrypted secret store."""
    create_tables(get_engine())
    session_factory = get_session_factory()
    secrets = SQLSecretStore(
        session_factory,
        build_cipher(settings),
        service=settings.secret_service,
        legacy_service=settings.legacy_secret_service,
    )
    return ProviderRegistry(secrets, ProviderPersistence(session_factory), settings)


def get_registry(request: Request) -> ProviderRegistry:
    """Resolve provider registry from app state (initialize if missing)."""
    registry = getattr(request.app.state, "provider_registry", None)
    if registry is None:
        registry = build_registry(get_settings())
        request.app.state.provider_registry = registry
    return registry


def provider_view(registry: ProviderRegistry, provider: Provider) -> dict[str, Any]:
    """Wire form of a provider plus key and default indicators."""
    view = provider.model_dump(mode="json", by_alias=True)
    view["masked_key"] = registry.masked_key(provider.id)
    view["has_key"] = registry.has_key(provider.id)
    view["is_default"] = registry.default_id == provider.id
    return view


@router.get("/kinds")
async def list_kinds(registry: ProviderRegistry = Depends(get_registry)) -> list[dict[str, str]]:
    """Supported provider kinds with display names."""
    return [{"kind": kind.value, "name": registry.messages(kind.display_key)} for kind in ProviderKind]


@router.get("/templates")
async def list_templates(registry: ProviderRegistry = Depends(get_registry)) -> list[dict[str, str]]:
    return [
        {
            "template": template.value,
            "name": registry.messages(spec.name_key),
            "kind": spec.kind.value,
            "base_url": spec.base_url,
        }
        for template, spec in TEMPLATES.items()
    ]


@router.get("/providers")
async def list_providers(registry: ProviderRegistry = Depends(get_registry)) -> list[dict[str, Any]]:
    """List providers in display order."""
    return [provider_view(registry, provider) for provider in registry.providers]


@router.post("/providers", status_code=status.HTTP_201_CREATED)
async def create_provider(
    body: ProviderCreate, registry: ProviderRegistry = Depends(get_registry)
) -> dict[str, Any]:
    provider = registry.add(
        Provider(
            name=body.name,
            kind=body.kind,
            base_url=body.base_url,
            default_model=body.default_model,
            enabled=body.enabled,
            extra_headers=body.extra_headers,
        )
    )
    if body.api_key:
        provider = registry.save_api_key(provider.id, body.api_key)
    return provider_view(registry, provider)


@router.post("/providers/templates/{template}", status_code=status.HTTP_201_CREATED)
async def create_from_template(
    template: Template, registry: ProviderRegistry = Depends(get_registry)
) -> dict[str, Any]:
    """Add a provider from a built-in template."""
    return provider_view(registry, registry.add_template(template))


@router.post("/providers/test-default")
async def test_default_provider(
    registry: ProviderRegistry = Depends(get_registry),
) -> dict[str, Any] | None:
    """Health-check the default provider; null when none is set."""
    provider = await registry.test_default()
    return provider_view(registry, provider) if provider else None


@router.get("/providers/{provider_id}")
async def get_provider(
    provider_id: UUID, registry: ProviderRegistry = Depends(get_registry)
) -> dict[str, Any]:
    return provider_view(registry, registry.get(provider_id))


@router.patch("/providers/{provider_id}")
async def update_provider(
    provider_id: UUID, body: ProviderUpdate, registry: ProviderRegistry = Depends(get_registry)
) -> dict[str, Any]:
    changes = body.model_dump(exclude_unset=True)
    for field in ("name", "kind", "base_url", "enabled", "extra_headers"):
        if field in changes and changes[field] is None:
            raise ValidationError(f"'{field}' cannot be null")
    current = registry.get(provider_id)
    updated = registry.update(current.model_copy(update=changes))
    return provider_view(registry, updated)


@router.delete("/providers/{provider_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_provider(provider_id: UUID, registry: ProviderRegistry = Depends(get_registry)) -> None:
    registry.delete(provider_id)


@router.post("/providers/{provider_id}/test")
async def test_provider(
    provider_id: UUID, registry: ProviderRegistry = Depends(get_registry)
) -> dict[str, Any]:
    """Run a health check and return the provider with its new last test."""
    return provider_view(registry, await registry.test(provider_id))


@router.get("/providers/{provider_id}/models")
async def list_provider_models(
    provider_id: UUID, registry: ProviderRegistry = Depends(get_registry)
) -> dict[str, Any]:
    """List model identifiers for a specific provider."""
    models, error = await registry.list_models(provider_id)
    return {"models": models, "error": error}


@router.put("/providers/{provider_id}/key")
async def save_key(
    provider_id: UUID, body: APIKeyBody, registry: ProviderRegistry = Depends(get_registry)
) -> dict[str, Any]:
    return provider_view(registry, registry.save_api_key(provider_id, body.api_key))


@router.delete("/providers/{provider_id}/key")
async def remove_key(
    provider_id: UUID, registry: ProviderRegistry = Depends(get_registry)
) -> dict[str, Any]:
    return provider_view(registry, registry.remove_api_key(provider_id))


@router.get("/providers/{provider_id}/key")
async def reveal_key(
    provider_id: UUID, registry: ProviderRegistry = Depends(get_registry)
) -> dict[str, str | None]:
    """Plain-text key; the explicit reveal action."""
    logger.info("API key revealed", data={"id": str(provider_id)})
    return {"api_key": registry.reveal_key(provider_id)}


@router.delete("/keys", status_code=status.HTTP_204_NO_CONTENT)
async def clear_keys(registry: ProviderRegistry = Depends(get_registry)) -> None:
    registry.clear_all_api_keys()


@router.put("/default")
async def set_default(
    body: DefaultBody, registry: ProviderRegistry = Depends(get_registry)
) -> dict[str, str | None]:
    registry.set_default(body.provider_id)
    return {"provider_id": str(registry.default_id) if registry.default_id else None}


@router.post("/providers/{provider_id}/move")
async def move_provider(
    provider_id: UUID, body: MoveBody, registry: ProviderRegistry = Depends(get_registry)
) -> list[dict[str, Any]]:
    from_index = [p.id for p in registry.providers].index(registry.get(provider_id).id)
    return [provider_view(registry, p) for p in registry.move(from_index, body.to_index)]


@router.post("/suggest")
async def suggest(
    body: SuggestBody, registry: ProviderRegistry = Depends(get_registry)
) -> dict[str, str] | None:
    """Propose a kind and canonical base for a pasted URL."""
    suggestion = registry.suggest(body.url)
    if suggestion is None:
        return None
    kind, base = suggestion
    return {"kind": kind.value, "base_url": base}


@router.post("/providers/{provider_id}/alternate")
async def apply_alternate(
    provider_id: UUID, registry: ProviderRegistry = Depends(get_registry)
) -> dict[str, Any]:
    return provider_view(registry, registry.apply_alternate(provider_id))


@router.post("/providers/{provider_id}/normalize")
async def normalize_base(
    provider_id: UUID, registry: ProviderRegistry = Depends(get_registry)
) -> dict[str, Any]:
    return provider_view(registry, registry.normalize_base(provider_id))
