"""Built-in provider templates and the first-run seed list."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from uuid import uuid4

from llmkeyring.core import Messages, get_messages
from llmkeyring.providers.base import BearerAuth, NoAuth, Provider, ProviderKind
from llmkeyring.providers.urls import AZURE_PLACEHOLDER_BASE, VERTEX_PLACEHOLDER_BASE


class Template(str, Enum):
    """Starting points offered when adding a provider."""

    DEEPSEEK = "deepseek"
    KIMI = "kimi"
    ALIYUN_NATIVE = "aliyunNative"
    SILICONFLOW = "siliconflow"
    ANTHROPIC = "anthropic"
    GOOGLE_GEMINI = "googleGemini"
    VERTEX_GEMINI = "vertexGemini"
    AZURE_OPENAI = "azureOpenAI"
    OPENROUTER = "openRouter"
    TOGETHER = "together"
    MISTRAL = "mistral"
    GROQ = "groq"
    FIREWORKS = "fireworks"
    ZHIPU_GLM = "zhipuGLM"
    BAIDU_QIANFAN = "baiduQianfan"
    BLANK = "blank"


@dataclass(frozen=True)
class TemplateSpec:
    name_key: str
    kind: ProviderKind
    base_url: str
    with_key_ref: bool = False
    extra_headers: dict[str, str] = field(default_factory=dict)


TEMPLATES: dict[Template, TemplateSpec] = {
    Template.DEEPSEEK: TemplateSpec("ProviderNameDeepSeek", ProviderKind.OPENAI_COMPATIBLE, "https://api.deepseek.com"),
    Template.KIMI: TemplateSpec("ProviderNameKimi", ProviderKind.OPENAI_COMPATIBLE, "https://api.moonshot.cn"),
    Template.ALIYUN_NATIVE: TemplateSpec(
        "ProviderNameAliyunNative",
        ProviderKind.ALIYUN_NATIVE,
        "https://dashscope.aliyuncs.com/api/v1",
        with_key_ref=True,
    ),
    Template.SILICONFLOW: TemplateSpec("ProviderNameSiliconFlow", ProviderKind.OPENAI_COMPATIBLE, "https://api.siliconflow.cn"),
    Template.ANTHROPIC: TemplateSpec("ProviderNameAnthropic", ProviderKind.ANTHROPIC, "https://api.anthropic.com"),
    Template.GOOGLE_GEMINI: TemplateSpec(
        "ProviderNameGoogleGemini", ProviderKind.GOOGLE_GEMINI, "https://generativelanguage.googleapis.com"
    ),
    Template.VERTEX_GEMINI: TemplateSpec(
        "KindVertexGemini", ProviderKind.VERTEX_GEMINI, VERTEX_PLACEHOLDER_BASE, with_key_ref=True
    ),
    Template.AZURE_OPENAI: TemplateSpec(
        "ProviderNameAzureOpenAI", ProviderKind.AZURE_OPENAI, AZURE_PLACEHOLDER_BASE, with_key_ref=True
    ),
    Template.OPENROUTER: TemplateSpec(
        "ProviderNameOpenRouter",
        ProviderKind.OPENAI_COMPATIBLE,
        "https://openrouter.ai/api",
        extra_headers={"HTTP-Referer": "https://github.com/", "X-Title": "LLMKeyring"},
    ),
    Template.TOGETHER: TemplateSpec("ProviderNameTogether", ProviderKind.OPENAI_COMPATIBLE, "https://api.together.xyz"),
    Template.MISTRAL: TemplateSpec("ProviderNameMistral", ProviderKind.OPENAI_COMPATIBLE, "https://api.mistral.ai"),
    Template.GROQ: TemplateSpec("ProviderNameGroq", ProviderKind.OPENAI_COMPATIBLE, "https://api.groq.com/openai"),
    Template.FIREWORKS: TemplateSpec(
        "ProviderNameFireworks", ProviderKind.OPENAI_COMPATIBLE, "https://api.fireworks.ai/inference"
    ),
    Template.ZHIPU_GLM: TemplateSpec("KindZhipuGLM", ProviderKind.ZHIPU_GLM_NATIVE, "https://open.bigmodel.cn/api/paas/v4"),
    Template.BAIDU_QIANFAN: TemplateSpec("KindBaiduQianfan", ProviderKind.BAIDU_QIANFAN, "https://aip.baidubce.com"),
    Template.BLANK: TemplateSpec("BlankProvider", ProviderKind.OPENAI_COMPATIBLE, "https://"),
}

DEFAULT_SEED: list[Template] = [
    Template.DEEPSEEK,
    Template.KIMI,
    Template.ALIYUN_NATIVE,
    Template.SILICONFLOW,
    Template.ANTHROPIC,
    Template.GOOGLE_GEMINI,
    Template.AZURE_OPENAI,
    Template.OPENROUTER,
    Template.TOGETHER,
    Template.MISTRAL,
    Template.GROQ,
    Template.FIREWORKS,
    Template.ZHIPU_GLM,
    Template.BAIDU_QIANFAN,
    Template.VERTEX_GEMINI,
]


def new_key_ref() -> str:
    return f"prov_{uuid4()}"


def build_provider(template: Template, messages: Messages | None = None) -> Provider:
    """A fresh provider (new id) from ``template``."""
    messages = messages or get_messages()
    spec = TEMPLATES[template]
    auth = BearerAuth(key_ref=new_key_ref()) if spec.with_key_ref else NoAuth()
    return Provider(
        name=messages(spec.name_key),
        kind=spec.kind,
        base_url=spec.base_url,
        auth=auth,
        extra_headers=dict(spec.extra_headers),
    )


def default_providers(messages: Messages | None = None) -> list[Provider]:
    """Seed list used when the store is empty on first launch."""
    return [build_provider(template, messages) for template in DEFAULT_SEED]
