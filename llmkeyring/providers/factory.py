"""Adapter factory: one adapter class per provider kind."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from llmkeyring.core import Messages
from llmkeyring.providers.aliyun import AliyunNativeAdapter
from llmkeyring.providers.anthropic import AnthropicAdapter
from llmkeyring.providers.azure import AzureOpenAIAdapter
from llmkeyring.providers.baidu import BaiduQianfanAdapter
from llmkeyring.providers.base import ProviderAdapter, ProviderKind
from llmkeyring.providers.gemini import GoogleGeminiAdapter, VertexGeminiAdapter
from llmkeyring.providers.ollama import OllamaAdapter
from llmkeyring.providers.openai_compat import OpenAICompatAdapter
from llmkeyring.providers.zhipu import ZhipuGLMNativeAdapter

if TYPE_CHECKING:
    from llmkeyring.storage.secrets import SecretStore

ADAPTERS: dict[ProviderKind, type[ProviderAdapter]] = {
    ProviderKind.OPENAI_COMPATIBLE: OpenAICompatAdapter,
    ProviderKind.OLLAMA: OllamaAdapter,
    ProviderKind.ALIYUN_NATIVE: AliyunNativeAdapter,
    ProviderKind.ANTHROPIC: AnthropicAdapter,
    ProviderKind.GOOGLE_GEMINI: GoogleGeminiAdapter,
    ProviderKind.AZURE_OPENAI: AzureOpenAIAdapter,
    ProviderKind.ZHIPU_GLM_NATIVE: ZhipuGLMNativeAdapter,
    ProviderKind.BAIDU_QIANFAN: BaiduQianfanAdapter,
    ProviderKind.VERTEX_GEMINI: VertexGeminiAdapter,
}

_missing = set(ProviderKind) - set(ADAPTERS)
if _missing:  # pragma: no cover - import-time totality check
    raise RuntimeError(f"No adapter registered for: {sorted(k.value for k in _missing)}")


def make_adapter(
    kind: ProviderKind,
    secrets: SecretStore,
    *,
    messages: Messages | None = None,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ProviderAdapter:
    """Instantiate the adapter for ``kind``."""
    adapter_cls = ADAPTERS[kind]
    return adapter_cls(secrets, messages=messages, timeout=timeout, transport=transport)
