"""Ollama native provider adapter."""

from __future__ import annotations

import httpx
from pydantic import BaseModel, ValidationError

from llmkeyring.providers.base import PreparedRequest, Provider, ProviderKind
from llmkeyring.providers.http_adapter import HTTPProviderAdapter
from llmkeyring.providers.urls import append_path

LOOPBACK_HOSTS = ("localhost", "::1")
IPV4_LOOPBACK = "127.0.0.1"


class _Tag(BaseModel):
    name: str | None = None
    model: str | None = None


class _Tags(BaseModel):
    models: list[_Tag] | None = None


class OllamaAdapter(HTTPProviderAdapter):
    """
    Adapter for Ollama's /api/tags.

    Anonymous only. For localhost/::1 bases the IPv4 literal is tried first,
    since loopback IPv6 resolution is unreliable on some systems; only a
    transport failure moves on to the next candidate.
    """

    kind = ProviderKind.OLLAMA
    timeout_seconds = 5
    requires_credential = False
    route_hint_key = "ERR_ROUTE_HINT_OLLAMA"

    def endpoint(self, base: httpx.URL) -> httpx.URL:
        return append_path(base, "api", "tags")

    def prepare(self, provider: Provider) -> list[PreparedRequest]:
        primary = self.endpoint(self.base_url(provider))
        candidates: list[PreparedRequest] = []
        if primary.host in LOOPBACK_HOSTS:
            candidates.append(
                PreparedRequest(
                    url=primary.copy_with(host=IPV4_LOOPBACK),
                    headers=httpx.Headers(provider.extra_headers),
                )
            )
        candidates.append(PreparedRequest(url=primary, headers=httpx.Headers(provider.extra_headers)))
        return candidates

    def exhausted_message(self, last_error: str | None) -> str:
        advice = self.messages("ERR_OLLAMA_LOCALHOST_IPV6_HINT")
        return "\n".join(part for part in (last_error, advice) if part)

    def parse_models(self, content: bytes) -> list[str]:
        try:
            tags = _Tags.model_validate_json(content)
        except ValidationError:
            return []
        names: list[str] = []
        for item in tags.models or []:
            name = item.name or item.model
            if name:
                names.append(name)
        return names
