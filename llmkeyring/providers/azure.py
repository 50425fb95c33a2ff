"""Azure OpenAI adapter."""

from __future__ import annotations

import httpx
from pydantic import BaseModel, ValidationError

from llmkeyring.providers.base import PreparedRequest, ProviderKind
from llmkeyring.providers.http_adapter import HTTPProviderAdapter
from llmkeyring.providers.urls import append_path

AZURE_API_VERSION = "2023-05-15"


class _Deployment(BaseModel):
    id: str | None = None
    name: str | None = None


class _Deployments(BaseModel):
    value: list[_Deployment] | None = None


class AzureOpenAIAdapter(HTTPProviderAdapter):
    """GET {base}/openai/deployments?api-version=2023-05-15 with an ``api-key`` header."""

    kind = ProviderKind.AZURE_OPENAI
    timeout_seconds = 6
    route_hint_key = "ERR_ROUTE_HINT_AZURE"

    def endpoint(self, base: httpx.URL) -> httpx.URL:
        url = append_path(base, "openai", "deployments")
        return url.copy_add_param("api-version", AZURE_API_VERSION)

    def apply_credential(self, request: PreparedRequest, secret: str) -> None:
        request.headers["api-key"] = secret

    def parse_models(self, content: bytes) -> list[str]:
        try:
            decoded = _Deployments.model_validate_json(content)
        except ValidationError:
            return []
        # deployment names are what requests address, so they win over ids
        names: list[str] = []
        for item in decoded.value or []:
            name = item.name or item.id
            if name:
                names.append(name)
        return names
