"""
Base provider model and adapter interface.

Defines the provider record shared by the registry and persistence, and the
contract every vendor adapter implements.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Annotated, Literal, NamedTuple, Union
from uuid import UUID, uuid4

import httpx
from pydantic import BaseModel, ConfigDict, Field

from llmkeyring.core import Messages, get_messages

if TYPE_CHECKING:
    from llmkeyring.storage.secrets import SecretStore


class ProviderKind(str, Enum):
    """Supported vendor protocol variants."""

    OPENAI_COMPATIBLE = "openAICompatible"
    OLLAMA = "ollama"
    ALIYUN_NATIVE = "aliyunNative"
    ANTHROPIC = "anthropic"
    GOOGLE_GEMINI = "googleGemini"
    AZURE_OPENAI = "azureOpenAI"
    ZHIPU_GLM_NATIVE = "zhipuGLMNative"
    BAIDU_QIANFAN = "baiduQianfan"
    VERTEX_GEMINI = "vertexGemini"

    @property
    def display_key(self) -> str:
        """Catalog key of the kind's display name."""
        return _KIND_DISPLAY_KEYS[self]


_KIND_DISPLAY_KEYS = {
    ProviderKind.OPENAI_COMPATIBLE: "KindOpenAICompatible",
    ProviderKind.OLLAMA: "KindOllama",
    ProviderKind.ALIYUN_NATIVE: "KindAliyunNative",
    ProviderKind.ANTHROPIC: "KindAnthropic",
    ProviderKind.GOOGLE_GEMINI: "KindGoogleGemini",
    ProviderKind.AZURE_OPENAI: "KindAzureOpenAI",
    ProviderKind.ZHIPU_GLM_NATIVE: "KindZhipuGLM",
    ProviderKind.BAIDU_QIANFAN: "KindBaiduQianfan",
    ProviderKind.VERTEX_GEMINI: "KindVertexGemini",
}


class NoAuth(BaseModel):
    """No credential attached."""

    model_config = ConfigDict(frozen=True)

    type: Literal["none"] = "none"


class BearerAuth(BaseModel):
    """Credential held in the secret store under ``key_ref``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["bearer"] = "bearer"
    key_ref: str = Field(alias="keyRef", min_length=1)


AuthMethod = Annotated[Union[NoAuth, BearerAuth], Field(discriminator="type")]


class TestStatus(str, Enum):
    """Outcome of the last health check."""

    __test__ = False

    UNKNOWN = "unknown"
    SUCCESS = "success"
    FAILURE = "failure"


class LastTest(BaseModel):
    """Last health-check outcome stored on a provider."""

    model_config = ConfigDict(frozen=True)

    status: TestStatus = TestStatus.UNKNOWN
    at: datetime | None = None
    message: str | None = None


class Provider(BaseModel):
    """A configured LLM endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID = Field(default_factory=uuid4, frozen=True)
    name: str
    kind: ProviderKind
    base_url: str = Field(alias="baseURL")
    default_model: str | None = Field(default=None, alias="defaultModel")
    enabled: bool = True
    auth: AuthMethod = Field(default_factory=NoAuth)
    extra_headers: dict[str, str] = Field(default_factory=dict, alias="extraHeaders")
    last_test: LastTest = Field(default_factory=LastTest, alias="lastTest")

    @property
    def key_ref(self) -> str | None:
        """Secret reference when the provider carries a bearer credential."""
        if isinstance(self.auth, BearerAuth):
            return self.auth.key_ref
        return None


@dataclass(frozen=True)
class TestResult:
    """Result of one health check."""

    __test__ = False

    status: TestStatus
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == TestStatus.SUCCESS


class ModelList(NamedTuple):
    """Model identifiers, or an empty list and the reason."""

    models: list[str]
    error: str | None = None


@dataclass
class PreparedRequest:
    """One outbound GET: URL plus the merged, case-insensitive header map."""

    url: httpx.URL
    headers: httpx.Headers = field(default_factory=httpx.Headers)


class RequestAborted(Exception):
    """Raised while preparing a request when no network call should be made."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ProviderAdapter(ABC):
    """
    Abstract base class for vendor adapters.

    Both operations are total: every failure comes back as a value
    (``TestResult`` or ``ModelList``), never as an exception.
    """

    kind: ProviderKind

    def __init__(
        self,
        secrets: SecretStore,
        *,
        messages: Messages | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.secrets = secrets
        self.messages = messages or get_messages()
        self.timeout_override = timeout
        self.transport = transport

    @abstractmethod
    async def test_health(self, provider: Provider) -> TestResult:
        """
        Check that the provider answers with a 2xx on its probe endpoint.

        Returns:
            TestResult with the ``OK`` message on success, or a hint-enriched
            failure message.
        """
        ...

    async def list_models(self, provider: Provider) -> ModelList:
        """
        List model identifiers offered by the provider.

        Adapters without a listing endpoint keep this default.
        """
        return ModelList([], self.messages("ERR_LIST_MODELS_UNSUPPORTED"))
