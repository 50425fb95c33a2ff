"""OpenAI-compatible provider adapter (DeepSeek, Kimi, OpenRouter, Groq, ...)."""

from __future__ import annotations

import httpx
from pydantic import BaseModel, ValidationError

from llmkeyring.providers.base import ProviderKind
from llmkeyring.providers.http_adapter import HTTPProviderAdapter
from llmkeyring.providers.urls import append_path


class _Model(BaseModel):
    id: str


class _ModelsResponse(BaseModel):
    data: list[_Model]


class OpenAICompatAdapter(HTTPProviderAdapter):
    """GET {base}/v1/models with an optional bearer key."""

    kind = ProviderKind.OPENAI_COMPATIBLE
    timeout_seconds = 5
    requires_credential = False
    # most 404s here come from a DashScope base missing /compatible-mode
    route_hint_key = "ERR_ROUTE_HINT_ALIYUN"

    def endpoint(self, base: httpx.URL) -> httpx.URL:
        return append_path(base, "v1", "models")

    def parse_models(self, content: bytes) -> list[str]:
        try:
            decoded = _ModelsResponse.model_validate_json(content)
        except ValidationError:
            return []
        return [item.id for item in decoded.data]
