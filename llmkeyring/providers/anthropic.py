"""Anthropic adapter."""

from __future__ import annotations

import httpx
from pydantic import BaseModel, ValidationError

from llmkeyring.providers.base import PreparedRequest, ProviderKind
from llmkeyring.providers.http_adapter import HTTPProviderAdapter
from llmkeyring.providers.urls import append_path

ANTHROPIC_VERSION = "2023-06-01"


class _Model(BaseModel):
    id: str


class _ModelsResponse(BaseModel):
    data: list[_Model]


class AnthropicAdapter(HTTPProviderAdapter):
    """GET {base}/v1/models with ``x-api-key`` and a pinned ``anthropic-version``."""

    kind = ProviderKind.ANTHROPIC
    timeout_seconds = 6

    def endpoint(self, base: httpx.URL) -> httpx.URL:
        return append_path(base, "v1", "models")

    def apply_credential(self, request: PreparedRequest, secret: str) -> None:
        request.headers["anthropic-version"] = ANTHROPIC_VERSION
        request.headers["x-api-key"] = secret

    def parse_models(self, content: bytes) -> list[str]:
        try:
            decoded = _ModelsResponse.model_validate_json(content)
        except ValidationError:
            return []
        return [item.id for item in decoded.data]
