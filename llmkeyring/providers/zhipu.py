"""Zhipu GLM native adapter."""

from __future__ import annotations

import httpx

from llmkeyring.providers.base import ProviderKind
from llmkeyring.providers.http_adapter import HTTPProviderAdapter, extract_model_ids, load_json
from llmkeyring.providers.urls import append_path


class ZhipuGLMNativeAdapter(HTTPProviderAdapter):
    """GET .../api/paas/v4/models with a bearer key."""

    kind = ProviderKind.ZHIPU_GLM_NATIVE
    timeout_seconds = 8
    route_hint_key = "ERR_ROUTE_HINT_ZHIPU"

    def endpoint(self, base: httpx.URL) -> httpx.URL:
        return append_path(base, "api", "paas", "v4", "models")

    def parse_models(self, content: bytes) -> list[str]:
        return extract_model_ids(load_json(content))
