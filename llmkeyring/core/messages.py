"""
Localized message catalog.

Adapters pick a key and its printf-style arguments; rendering into prose
happens here so the key set stays the contract.
"""

from __future__ import annotations

import os
from functools import lru_cache

EN: dict[str, str] = {
    "OK": "OK",
    "ERR_BASE_URL_INVALID": "Base URL is invalid",
    "ERR_AUTH_FAILED_HINT": "Authentication failed: check the API key and its permissions",
    "ERR_KEYCHAIN_MISSING": "No credential found in the secret store for this provider; save the API key again",
    "ERR_RATE_LIMITED": "Rate limited by the provider; try again later",
    "ERR_HTTP_CODE_FMT": "HTTP %d",
    "ERR_NO_MODELS_FOUND": "No models found",
    "ERR_LIST_MODELS_UNSUPPORTED": "Listing models is not supported for this provider",
    "ERR_ROUTE_HINT_ALIYUN": "Route not found: for DashScope compatible mode use https://dashscope.aliyuncs.com/compatible-mode",
    "ERR_ROUTE_HINT_OLLAMA": "Route not found: Ollama serves /api/tags; check the base URL",
    "ERR_ROUTE_HINT_AZURE": "Route not found: check the resource name and use https://<resource>.openai.azure.com",
    "ERR_ROUTE_HINT_ZHIPU": "Route not found: Zhipu GLM uses https://open.bigmodel.cn/api/paas/v4",
    "ERR_ROUTE_HINT_BAIDU": "Route not found: Qianfan uses https://aip.baidubce.com with an access_token",
    "ERR_VERTEX_BASE_HINT": "Route not found: the base URL must include /v1/projects/<project>/locations/<location>",
    "ERR_OLLAMA_LOCALHOST_IPV6_HINT": "Is Ollama running? If localhost fails, try http://127.0.0.1:11434 (IPv6 loopback may be unreachable)",
    "KindOpenAICompatible": "OpenAI compatible",
    "KindOllama": "Ollama",
    "KindAliyunNative": "Aliyun DashScope (native)",
    "KindAnthropic": "Anthropic",
    "KindGoogleGemini": "Google Gemini",
    "KindAzureOpenAI": "Azure OpenAI",
    "KindZhipuGLM": "Zhipu GLM",
    "KindBaiduQianfan": "Baidu Qianfan",
    "KindVertexGemini": "Vertex AI Gemini",
    "ProviderNameDeepSeek": "DeepSeek",
    "ProviderNameKimi": "Kimi",
    "ProviderNameAliyunNative": "Aliyun DashScope",
    "ProviderNameSiliconFlow": "SiliconFlow",
    "ProviderNameAnthropic": "Anthropic",
    "ProviderNameGoogleGemini": "Google Gemini",
    "ProviderNameAzureOpenAI": "Azure OpenAI",
    "ProviderNameOpenRouter": "OpenRouter",
    "ProviderNameTogether": "Together AI",
    "ProviderNameMistral": "Mistral",
    "ProviderNameGroq": "Groq",
    "ProviderNameFireworks": "Fireworks AI",
    "BlankProvider": "New provider",
}

ZH_HANS: dict[str, str] = {
    "OK": "正常",
    "ERR_BASE_URL_INVALID": "Base URL 无效",
    "ERR_AUTH_FAILED_HINT": "鉴权失败：请检查 API Key 及其权限",
    "ERR_KEYCHAIN_MISSING": "密钥库中找不到该服务商的凭据，请重新保存 API Key",
    "ERR_RATE_LIMITED": "请求被限流，请稍后再试",
    "ERR_HTTP_CODE_FMT": "HTTP %d",
    "ERR_NO_MODELS_FOUND": "未找到可用模型",
    "ERR_LIST_MODELS_UNSUPPORTED": "该服务商不支持列出模型",
    "ERR_ROUTE_HINT_ALIYUN": "路径不存在：DashScope 兼容模式请使用 https://dashscope.aliyuncs.com/compatible-mode",
    "ERR_ROUTE_HINT_OLLAMA": "路径不存在：Ollama 提供 /api/tags，请检查 Base URL",
    "ERR_ROUTE_HINT_AZURE": "路径不存在：请检查资源名称，并使用 https://<resource>.openai.azure.com",
    "ERR_ROUTE_HINT_ZHIPU": "路径不存在：智谱 GLM 请使用 https://open.bigmodel.cn/api/paas/v4",
    "ERR_ROUTE_HINT_BAIDU": "路径不存在：千帆请使用 https://aip.baidubce.com 并提供 access_token",
    "ERR_VERTEX_BASE_HINT": "路径不存在：Base URL 需包含 /v1/projects/<project>/locations/<location>",
    "ERR_OLLAMA_LOCALHOST_IPV6_HINT": "Ollama 是否已启动？若 localhost 不通，请尝试 http://127.0.0.1:11434（IPv6 回环可能不可达）",
    "KindOpenAICompatible": "OpenAI 兼容",
    "KindOllama": "Ollama",
    "KindAliyunNative": "阿里云百炼（原生）",
    "KindAnthropic": "Anthropic",
    "KindGoogleGemini": "Google Gemini",
    "KindAzureOpenAI": "Azure OpenAI",
    "KindZhipuGLM": "智谱 GLM",
    "KindBaiduQianfan": "百度千帆",
    "KindVertexGemini": "Vertex AI Gemini",
    "ProviderNameDeepSeek": "DeepSeek",
    "ProviderNameKimi": "Kimi",
    "ProviderNameAliyunNative": "阿里云百炼",
    "ProviderNameSiliconFlow": "硅基流动",
    "ProviderNameAnthropic": "Anthropic",
    "ProviderNameGoogleGemini": "Google Gemini",
    "ProviderNameAzureOpenAI": "Azure OpenAI",
    "ProviderNameOpenRouter": "OpenRouter",
    "ProviderNameTogether": "Together AI",
    "ProviderNameMistral": "Mistral",
    "ProviderNameGroq": "Groq",
    "ProviderNameFireworks": "Fireworks AI",
    "BlankProvider": "新服务商",
}

CATALOGS: dict[str, dict[str, str]] = {"en": EN, "zh-Hans": ZH_HANS}


def resolve_locale(locale: str) -> str:
    """Map a configured locale (``system``, ``en``, ``zh-Hans``) to a catalog name."""
    if locale in CATALOGS:
        return locale
    if locale == "system":
        for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
            value = os.environ.get(var)
            if value:
                return "zh-Hans" if value.lower().startswith("zh") else "en"
    return "en"


class Messages:
    """Render catalog keys for one locale."""

    def __init__(self, locale: str = "en"):
        self.locale = resolve_locale(locale)
        self._catalog = CATALOGS[self.locale]

    def __call__(self, key: str, *args: object) -> str:
        template = self._catalog.get(key) or EN.get(key) or key
        if args:
            return template % args
        return template


@lru_cache
def get_messages(locale: str | None = None) -> Messages:
    """Messages for ``locale``, or for the configured locale when omitted."""
    if locale is None:
        from llmkeyring.config import get_settings

        locale = get_settings().locale
    return Messages(locale)
