"""Baidu Qianfan (Wenxin workshop) adapter."""

from __future__ import annotations

import httpx

from llmkeyring.providers.base import PreparedRequest, ProviderKind
from llmkeyring.providers.http_adapter import HTTPProviderAdapter, extract_model_ids, load_json
from llmkeyring.providers.urls import append_path


class BaiduQianfanAdapter(HTTPProviderAdapter):
    """
    GET /rpc/2.0/ai_custom/v1/wenxinworkshop/models?access_token=<token>.

    The stored secret is used as the access token as-is; no OAuth exchange.
    """

    kind = ProviderKind.BAIDU_QIANFAN
    timeout_seconds = 8
    route_hint_key = "ERR_ROUTE_HINT_BAIDU"

    def endpoint(self, base: httpx.URL) -> httpx.URL:
        return append_path(base, "rpc", "2.0", "ai_custom", "v1", "wenxinworkshop", "models")

    def apply_credential(self, request: PreparedRequest, secret: str) -> None:
        request.url = request.url.copy_add_param("access_token", secret)

    def parse_models(self, content: bytes) -> list[str]:
        return extract_model_ids(load_json(content))
