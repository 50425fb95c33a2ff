"""Aliyun DashScope native adapter."""

from __future__ import annotations

import httpx

from llmkeyring.providers.base import ProviderKind
from llmkeyring.providers.http_adapter import HTTPProviderAdapter, extract_model_ids, load_json
from llmkeyring.providers.urls import append_path


class AliyunNativeAdapter(HTTPProviderAdapter):
    """
    GET .../api/v1/models with a bearer key.

    Accepts bases ending in nothing, ``/api`` or ``/api/v1`` and resolves
    each to ``/api/v1/models`` exactly once.
    """

    kind = ProviderKind.ALIYUN_NATIVE
    timeout_seconds = 5
    list_timeout_seconds = 8

    def endpoint(self, base: httpx.URL) -> httpx.URL:
        return append_path(base, "api", "v1", "models")

    def parse_models(self, content: bytes) -> list[str]:
        return extract_model_ids(load_json(content))
