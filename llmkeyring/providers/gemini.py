"""Google Gemini adapters: Generative Language API and Vertex AI."""

from __future__ import annotations

import httpx
from pydantic import BaseModel, ValidationError

from llmkeyring.providers.base import PreparedRequest, ProviderKind
from llmkeyring.providers.http_adapter import HTTPProviderAdapter
from llmkeyring.providers.urls import append_path


class _Model(BaseModel):
    name: str


class _ModelsResponse(BaseModel):
    models: list[_Model] | None = None
    data: list[_Model] | None = None


class GoogleGeminiAdapter(HTTPProviderAdapter):
    """GET {base}/v1/models?key=<api key>."""

    kind = ProviderKind.GOOGLE_GEMINI
    timeout_seconds = 6

    def endpoint(self, base: httpx.URL) -> httpx.URL:
        return append_path(base, "v1", "models")

    def apply_credential(self, request: PreparedRequest, secret: str) -> None:
        request.url = request.url.copy_add_param("key", secret)

    def parse_models(self, content: bytes) -> list[str]:
        try:
            decoded = _ModelsResponse.model_validate_json(content)
        except ValidationError:
            return []
        items = decoded.models if decoded.models is not None else decoded.data or []
        return [item.name for item in items]


class VertexGeminiAdapter(HTTPProviderAdapter):
    """
    GET {base}/publishers/google/models with a bearer access token.

    The base is expected to carry the project and location segments, e.g.
    https://us-central1-aiplatform.googleapis.com/v1/projects/P/locations/us-central1
    """

    kind = ProviderKind.VERTEX_GEMINI
    timeout_seconds = 8
    route_hint_key = "ERR_VERTEX_BASE_HINT"

    def endpoint(self, base: httpx.URL) -> httpx.URL:
        return append_path(base, "publishers", "google", "models")

    def parse_models(self, content: bytes) -> list[str]:
        try:
            decoded = _ModelsResponse.model_validate_json(content)
        except ValidationError:
            return []
        return [item.name for item in decoded.models or []]
