"""
Base-URL helpers: canonical bases per kind, vendor detection from a raw URL,
and idempotent endpoint path joining.

Everything here is pure; no I/O.
"""

from __future__ import annotations

import httpx

from llmkeyring.core import InvalidBaseURLError
from llmkeyring.providers.base import Provider, ProviderKind

ALIYUN_COMPATIBLE_BASE = "https://dashscope.aliyuncs.com/compatible-mode"
# must stay lowercase: parsed hosts are lowercased
AZURE_PLACEHOLDER_BASE = "https://your-resource-name.openai.azure.com"
VERTEX_PLACEHOLDER_BASE = (
    "https://us-central1-aiplatform.googleapis.com/v1/projects/YOUR_PROJECT/locations/us-central1"
)

# Host substring -> canonical OpenAI-compatible root. First match wins.
OPENAI_COMPATIBLE_HOSTS: list[tuple[str, str]] = [
    ("aliyuncs.com", ALIYUN_COMPATIBLE_BASE),
    ("openrouter.ai", "https://openrouter.ai/api"),
    ("together.xyz", "https://api.together.xyz"),
    ("mistral.ai", "https://api.mistral.ai"),
    ("groq.com", "https://api.groq.com/openai"),
    ("fireworks.ai", "https://api.fireworks.ai/inference"),
    ("moonshot", "https://api.moonshot.cn"),
    ("siliconflow", "https://api.siliconflow.cn"),
    ("deepseek.com", "https://api.deepseek.com"),
]

# Kinds whose canonical base does not depend on the input
FIXED_BASES: dict[ProviderKind, str] = {
    ProviderKind.ALIYUN_NATIVE: "https://dashscope.aliyuncs.com/api/v1",
    ProviderKind.OLLAMA: "http://127.0.0.1:11434",
    ProviderKind.ANTHROPIC: "https://api.anthropic.com",
    ProviderKind.GOOGLE_GEMINI: "https://generativelanguage.googleapis.com",
    ProviderKind.ZHIPU_GLM_NATIVE: "https://open.bigmodel.cn/api/paas/v4",
    ProviderKind.BAIDU_QIANFAN: "https://aip.baidubce.com",
    ProviderKind.VERTEX_GEMINI: VERTEX_PLACEHOLDER_BASE,
}

# Host substring -> suggested kind. Aliyun is handled first (compatible mode).
DETECTION_RULES: list[tuple[str, ProviderKind]] = [
    ("moonshot", ProviderKind.OPENAI_COMPATIBLE),
    ("siliconflow", ProviderKind.OPENAI_COMPATIBLE),
    ("openrouter.ai", ProviderKind.OPENAI_COMPATIBLE),
    ("together.xyz", ProviderKind.OPENAI_COMPATIBLE),
    ("mistral.ai", ProviderKind.OPENAI_COMPATIBLE),
    ("groq.com", ProviderKind.OPENAI_COMPATIBLE),
    ("fireworks.ai", ProviderKind.OPENAI_COMPATIBLE),
    ("anthropic.com", ProviderKind.ANTHROPIC),
    ("generativelanguage.googleapis.com", ProviderKind.GOOGLE_GEMINI),
    ("openai.azure.com", ProviderKind.AZURE_OPENAI),
    ("bigmodel.cn", ProviderKind.ZHIPU_GLM_NATIVE),
    ("baidubce.com", ProviderKind.BAIDU_QIANFAN),
    ("aiplatform.googleapis.com", ProviderKind.VERTEX_GEMINI),
]

REDACTED_PARAMS = ("key", "access_token")


def _host(raw: str) -> str | None:
    try:
        return httpx.URL(raw).host
    except httpx.InvalidURL:
        return None


def normalize(kind: ProviderKind, raw_base: str) -> str:
    """Canonical base for ``kind``; idempotent."""
    trimmed = raw_base.strip()
    host = _host(trimmed)
    if host is None:
        return trimmed

    if kind == ProviderKind.OPENAI_COMPATIBLE:
        for needle, base in OPENAI_COMPATIBLE_HOSTS:
            if needle in host:
                return base
        return trimmed
    if kind == ProviderKind.AZURE_OPENAI:
        if "openai.azure.com" in host:
            return f"https://{host}"
        return AZURE_PLACEHOLDER_BASE
    return FIXED_BASES[kind]


def suggest_kind_and_base(raw_url: str) -> tuple[ProviderKind, str] | None:
    """Propose a kind and canonical base from the host of ``raw_url``."""
    trimmed = raw_url.strip()
    host = _host(trimmed)
    if not host:
        return None
    if "aliyuncs.com" in host:
        # compatible mode maximizes client compatibility
        return (
            ProviderKind.OPENAI_COMPATIBLE,
            normalize(ProviderKind.OPENAI_COMPATIBLE, ALIYUN_COMPATIBLE_BASE),
        )
    for needle, kind in DETECTION_RULES:
        if needle in host:
            return kind, normalize(kind, trimmed)
    return None


def alternate_for(provider: Provider) -> tuple[ProviderKind, str] | None:
    """Toggle between Aliyun native and compatible mode; None for other vendors."""
    base = provider.base_url.strip()
    try:
        url = httpx.URL(base)
    except httpx.InvalidURL:
        return None
    if "aliyuncs.com" not in url.host:
        return None
    if "compatible-mode" in url.path:
        return ProviderKind.ALIYUN_NATIVE, normalize(ProviderKind.ALIYUN_NATIVE, base)
    return (
        ProviderKind.OPENAI_COMPATIBLE,
        normalize(ProviderKind.OPENAI_COMPATIBLE, ALIYUN_COMPATIBLE_BASE),
    )


def parse_base_url(raw_base: str) -> httpx.URL:
    """
    Parse a stored base URL.

    Raises:
        InvalidBaseURLError: not parsable, not http(s), or no host.
    """
    trimmed = raw_base.strip()
    try:
        url = httpx.URL(trimmed)
    except httpx.InvalidURL as exc:
        raise InvalidBaseURLError(details={"base_url": trimmed, "reason": str(exc)}) from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidBaseURLError(details={"base_url": trimmed})
    return url


def append_path(url: httpx.URL, *segments: str) -> httpx.URL:
    """
    Append endpoint segments without repeating what the base already ends with.

    ``append_path(URL("https://h/v1"), "v1", "models")`` gives ``https://h/v1/models``.
    The last segment is always appended.
    """
    parts = [part for segment in segments for part in segment.split("/") if part]
    existing = [part for part in url.path.split("/") if part]

    overlap = 0
    for size in range(min(len(parts) - 1, len(existing)), 0, -1):
        if existing[-size:] == parts[:size]:
            overlap = size
            break

    path = "/" + "/".join(existing + parts[overlap:])
    return url.copy_with(path=path)


def redact_url(url: httpx.URL | str) -> str:
    """URL text with credential query parameters masked, for logs."""
    try:
        parsed = httpx.URL(url) if isinstance(url, str) else url
    except httpx.InvalidURL:
        return "<invalid url>"
    for name in REDACTED_PARAMS:
        if name in parsed.params:
            parsed = parsed.copy_set_param(name, "***")
    return str(parsed)
