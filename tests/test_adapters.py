"""Tests for the vendor adapters and the shared request pipeline."""

from __future__ import annotations

import httpx
import pytest

from llmkeyring.core import Messages
from llmkeyring.providers import (
    ADAPTERS,
    BearerAuth,
    ModelList,
    NoAuth,
    Provider,
    ProviderAdapter,
    ProviderKind,
    TestResult,
    TestStatus,
    make_adapter,
)
from llmkeyring.providers.http_adapter import HTTPProviderAdapter
from llmkeyring.storage import MemorySecretStore, SecretStore
from tests.conftest import RecordingTransport, responding

BASES = {
    ProviderKind.OPENAI_COMPATIBLE: "https://api.deepseek.com",
    ProviderKind.OLLAMA: "http://127.0.0.1:11434",
    ProviderKind.ALIYUN_NATIVE: "https://dashscope.aliyuncs.com/api/v1",
    ProviderKind.ANTHROPIC: "https://api.anthropic.com",
    ProviderKind.GOOGLE_GEMINI: "https://generativelanguage.googleapis.com",
    ProviderKind.AZURE_OPENAI: "https://myres.openai.azure.com",
    ProviderKind.ZHIPU_GLM_NATIVE: "https://open.bigmodel.cn/api/paas/v4",
    ProviderKind.BAIDU_QIANFAN: "https://aip.baidubce.com",
    ProviderKind.VERTEX_GEMINI: "https://us-central1-aiplatform.googleapis.com/v1/projects/p/locations/us-central1",
}

CREDENTIAL_KINDS = [
    kind for kind in ProviderKind if kind not in (ProviderKind.OPENAI_COMPATIBLE, ProviderKind.OLLAMA)
]


def make_provider(kind: ProviderKind, key_ref: str | None = None, **kwargs) -> Provider:
    auth = BearerAuth(key_ref=key_ref) if key_ref else NoAuth()
    kwargs.setdefault("base_url", BASES[kind])
    return Provider(name=kind.value, kind=kind, auth=auth, **kwargs)


def adapter_for(
    kind: ProviderKind,
    secrets: SecretStore,
    transport: httpx.AsyncBaseTransport,
    messages: Messages,
) -> ProviderAdapter:
    return make_adapter(kind, secrets, messages=messages, transport=transport)


class FailingSecretStore(MemorySecretStore):
    def read(self, ref: str) -> str | None:
        raise RuntimeError("keychain locked")


def test_factory_covers_every_kind() -> None:
    assert set(ADAPTERS) == set(ProviderKind)
    for kind in ProviderKind:
        assert make_adapter(kind, MemorySecretStore()).kind == kind


@pytest.mark.asyncio
async def test_openai_compatible_anonymous_request(secrets, messages) -> None:
    """Anonymous DeepSeek health check hits /v1/models without Authorization."""
    transport = responding(200, json={"data": [{"id": "deepseek-chat"}]})
    adapter = adapter_for(ProviderKind.OPENAI_COMPATIBLE, secrets, transport, messages)

    result = await adapter.test_health(make_provider(ProviderKind.OPENAI_COMPATIBLE))

    assert result == TestResult(TestStatus.SUCCESS, "OK")
    assert result.ok
    (request,) = transport.requests
    assert str(request.url) == "https://api.deepseek.com/v1/models"
    assert "authorization" not in request.headers


@pytest.mark.asyncio
async def test_openai_compatible_bearer_and_existing_v1(secrets, messages) -> None:
    secrets.save("sk-live", "ref-1")
    transport = responding(200, json={"data": [{"id": "a"}, {"id": "b"}]})
    adapter = adapter_for(ProviderKind.OPENAI_COMPATIBLE, secrets, transport, messages)

    models = await adapter.list_models(
        make_provider(ProviderKind.OPENAI_COMPATIBLE, "ref-1", base_url="https://api.deepseek.com/v1")
    )

    assert models == ModelList(["a", "b"], None)
    request = transport.requests[0]
    assert str(request.url) == "https://api.deepseek.com/v1/models"
    assert request.headers["authorization"] == "Bearer sk-live"


@pytest.mark.asyncio
async def test_anthropic_headers(secrets, messages) -> None:
    secrets.save("sk-test", "ref-a")
    transport = responding(200, json={"data": [{"id": "claude-3-5-sonnet"}]})
    adapter = adapter_for(ProviderKind.ANTHROPIC, secrets, transport, messages)

    result = await adapter.test_health(make_provider(ProviderKind.ANTHROPIC, "ref-a"))

    assert result.status == TestStatus.SUCCESS
    request = transport.requests[0]
    assert str(request.url) == "https://api.anthropic.com/v1/models"
    assert request.headers["x-api-key"] == "sk-test"
    assert request.headers["anthropic-version"] == "2023-06-01"


@pytest.mark.asyncio
async def test_ollama_falls_through_to_configured_host(secrets, messages) -> None:
    """A transport failure on the IPv4 candidate moves on to localhost."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "127.0.0.1":
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"models": [{"name": "llama3"}]})

    transport = RecordingTransport(handler)
    adapter = adapter_for(ProviderKind.OLLAMA, secrets, transport, messages)
    provider = make_provider(ProviderKind.OLLAMA, base_url="http://localhost:11434")

    result = await adapter.test_health(provider)

    assert result.status == TestStatus.SUCCESS
    assert [str(r.url) for r in transport.requests] == [
        "http://127.0.0.1:11434/api/tags",
        "http://localhost:11434/api/tags",
    ]


@pytest.mark.asyncio
async def test_ollama_http_status_is_terminal(secrets, messages) -> None:
    transport = responding(404, text="")
    adapter = adapter_for(ProviderKind.OLLAMA, secrets, transport, messages)

    result = await adapter.test_health(make_provider(ProviderKind.OLLAMA, base_url="http://localhost:11434"))

    assert result.status == TestStatus.FAILURE
    assert result.message == messages("ERR_ROUTE_HINT_OLLAMA")
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_ollama_all_candidates_unreachable(secrets, messages) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport = RecordingTransport(handler)
    adapter = adapter_for(ProviderKind.OLLAMA, secrets, transport, messages)

    models = await adapter.list_models(make_provider(ProviderKind.OLLAMA, base_url="http://localhost:11434"))

    assert models.models == []
    assert models.error == "connection refused\n" + messages("ERR_OLLAMA_LOCALHOST_IPV6_HINT")
    assert len(transport.requests) == 2


@pytest.mark.asyncio
async def test_ollama_parses_name_or_model(secrets, messages) -> None:
    transport = responding(200, json={"models": [{"name": "llama3"}, {"model": "qwen2"}, {}]})
    adapter = adapter_for(ProviderKind.OLLAMA, secrets, transport, messages)

    models, error = await adapter.list_models(make_provider(ProviderKind.OLLAMA))

    assert models == ["llama3", "qwen2"]
    assert error is None


@pytest.mark.asyncio
@pytest.mark.parametrize("kind", list(ProviderKind))
async def test_rate_limited_hint_for_every_kind(kind, secrets, messages) -> None:
    secrets.save("secret", "ref-rl")
    transport = responding(429, text='{"error":"slow down"}')
    adapter = adapter_for(kind, secrets, transport, messages)

    result = await adapter.test_health(make_provider(kind, "ref-rl"))

    assert result.status == TestStatus.FAILURE
    assert result.message == messages("ERR_RATE_LIMITED") + ': {"error":"slow down"}'


@pytest.mark.asyncio
@pytest.mark.parametrize("kind", CREDENTIAL_KINDS)
async def test_missing_auth_makes_no_network_call(kind, secrets, messages) -> None:
    transport = responding(200, json={})
    adapter = adapter_for(kind, secrets, transport, messages)
    provider = make_provider(kind)

    result = await adapter.test_health(provider)
    models = await adapter.list_models(provider)

    assert result == TestResult(TestStatus.FAILURE, messages("ERR_AUTH_FAILED_HINT"))
    assert models == ModelList([], messages("ERR_AUTH_FAILED_HINT"))
    assert transport.requests == []


@pytest.mark.asyncio
@pytest.mark.parametrize("kind", [k for k in ProviderKind if k != ProviderKind.OLLAMA])
async def test_store_miss_reports_missing_credential(kind, secrets, messages) -> None:
    transport = responding(200, json={})
    adapter = adapter_for(kind, secrets, transport, messages)
    provider = make_provider(kind, "ref-absent")

    result = await adapter.test_health(provider)
    models = await adapter.list_models(provider)

    assert result.message == messages("ERR_KEYCHAIN_MISSING")
    assert result.message != messages("ERR_AUTH_FAILED_HINT")
    assert models == ModelList([], messages("ERR_KEYCHAIN_MISSING"))
    assert transport.requests == []


@pytest.mark.asyncio
async def test_store_failure_message_is_surfaced(messages) -> None:
    transport = responding(200, json={})
    adapter = adapter_for(ProviderKind.ANTHROPIC, FailingSecretStore(), transport, messages)

    result = await adapter.test_health(make_provider(ProviderKind.ANTHROPIC, "ref-a"))

    assert result == TestResult(TestStatus.FAILURE, "keychain locked")
    assert transport.requests == []


@pytest.mark.asyncio
async def test_invalid_base_url_makes_no_network_call(secrets, messages) -> None:
    transport = responding(200, json={})
    adapter = adapter_for(ProviderKind.OPENAI_COMPATIBLE, secrets, transport, messages)

    result = await adapter.test_health(make_provider(ProviderKind.OPENAI_COMPATIBLE, base_url="https://"))

    assert result == TestResult(TestStatus.FAILURE, messages("ERR_BASE_URL_INVALID"))
    assert transport.requests == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status_code", "body", "expected_key", "args"),
    [
        (401, "bad key", "ERR_AUTH_FAILED_HINT", ()),
        (403, "", "ERR_AUTH_FAILED_HINT", ()),
        (404, "nope", "ERR_ROUTE_HINT_ZHIPU", ()),
        (500, "boom", "ERR_HTTP_CODE_FMT", (500,)),
    ],
)
async def test_status_hints(status_code, body, expected_key, args, secrets, messages) -> None:
    secrets.save("k", "ref-z")
    transport = responding(status_code, text=body)
    adapter = adapter_for(ProviderKind.ZHIPU_GLM_NATIVE, secrets, transport, messages)

    result = await adapter.test_health(make_provider(ProviderKind.ZHIPU_GLM_NATIVE, "ref-z"))

    hint = messages(expected_key, *args)
    assert result.message == (f"{hint}: {body}" if body else hint)


@pytest.mark.asyncio
async def test_404_without_route_hint_uses_http_code(secrets, messages) -> None:
    secrets.save("k", "ref-a")
    transport = responding(404, text="")
    adapter = adapter_for(ProviderKind.ANTHROPIC, secrets, transport, messages)

    result = await adapter.test_health(make_provider(ProviderKind.ANTHROPIC, "ref-a"))

    assert result.message == "HTTP 404"


@pytest.mark.asyncio
async def test_transport_error_message_is_exception_text(secrets, messages) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    adapter = adapter_for(ProviderKind.OPENAI_COMPATIBLE, secrets, RecordingTransport(handler), messages)

    result = await adapter.test_health(make_provider(ProviderKind.OPENAI_COMPATIBLE))

    assert result == TestResult(TestStatus.FAILURE, "timed out")


@pytest.mark.asyncio
async def test_empty_list_reports_no_models(secrets, messages) -> None:
    adapter = adapter_for(ProviderKind.OPENAI_COMPATIBLE, secrets, responding(200, json={"data": []}), messages)

    assert await adapter.list_models(make_provider(ProviderKind.OPENAI_COMPATIBLE)) == ModelList(
        [], messages("ERR_NO_MODELS_FOUND")
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("kind", list(ProviderKind))
async def test_unparsable_body_reports_no_models(kind, secrets, messages) -> None:
    secrets.save("k", "ref-x")
    adapter = adapter_for(kind, secrets, responding(200, text="<html>ok</html>"), messages)

    models = await adapter.list_models(make_provider(kind, "ref-x"))

    assert models == ModelList([], messages("ERR_NO_MODELS_FOUND"))


@pytest.mark.asyncio
async def test_google_gemini_key_in_query(secrets, messages) -> None:
    secrets.save("AIza-test", "ref-g")
    transport = responding(200, json={"models": [{"name": "models/gemini-1.5-pro"}]})
    adapter = adapter_for(ProviderKind.GOOGLE_GEMINI, secrets, transport, messages)

    models, error = await adapter.list_models(make_provider(ProviderKind.GOOGLE_GEMINI, "ref-g"))

    assert (models, error) == (["models/gemini-1.5-pro"], None)
    request = transport.requests[0]
    assert request.url.path == "/v1/models"
    assert request.url.params["key"] == "AIza-test"
    assert "authorization" not in request.headers


@pytest.mark.asyncio
async def test_baidu_access_token_and_schemaless_list(secrets, messages) -> None:
    secrets.save("24.abc", "ref-b")
    transport = responding(200, json={"data": [{"model": "ernie-4.0"}, {"name": "ernie-lite", "id": "e-1"}]})
    adapter = adapter_for(ProviderKind.BAIDU_QIANFAN, secrets, transport, messages)

    models, error = await adapter.list_models(make_provider(ProviderKind.BAIDU_QIANFAN, "ref-b"))

    assert models == ["ernie-4.0", "e-1"]
    assert error is None
    request = transport.requests[0]
    assert request.url.path == "/rpc/2.0/ai_custom/v1/wenxinworkshop/models"
    assert request.url.params["access_token"] == "24.abc"


@pytest.mark.asyncio
async def test_aliyun_native_top_level_array_and_list_timeout(secrets, messages) -> None:
    secrets.save("sk-ali", "ref-ali")
    transport = responding(200, json=[{"id": "qwen-max"}, {"id": "qwen-plus"}])
    adapter = adapter_for(ProviderKind.ALIYUN_NATIVE, secrets, transport, messages)

    models, _ = await adapter.list_models(make_provider(ProviderKind.ALIYUN_NATIVE, "ref-ali"))

    assert models == ["qwen-max", "qwen-plus"]
    assert str(transport.requests[0].url) == "https://dashscope.aliyuncs.com/api/v1/models"
    assert adapter._timeout() == 5
    assert adapter._timeout(listing=True) == 8


@pytest.mark.asyncio
async def test_azure_deployments_prefer_names(secrets, messages) -> None:
    secrets.save("az-key", "ref-az")
    transport = responding(200, json={"value": [{"id": "d1", "name": "gpt4o-prod"}, {"id": "d2"}]})
    adapter = adapter_for(ProviderKind.AZURE_OPENAI, secrets, transport, messages)

    models, _ = await adapter.list_models(make_provider(ProviderKind.AZURE_OPENAI, "ref-az"))

    assert models == ["gpt4o-prod", "d2"]
    request = transport.requests[0]
    assert request.url.path == "/openai/deployments"
    assert request.url.params["api-version"] == "2023-05-15"
    assert request.headers["api-key"] == "az-key"


@pytest.mark.asyncio
async def test_vertex_publisher_models(secrets, messages) -> None:
    secrets.save("ya29.token", "ref-v")
    transport = responding(200, json={"models": [{"name": "publishers/google/models/gemini-1.5-pro"}]})
    adapter = adapter_for(ProviderKind.VERTEX_GEMINI, secrets, transport, messages)

    models, _ = await adapter.list_models(make_provider(ProviderKind.VERTEX_GEMINI, "ref-v"))

    assert models == ["publishers/google/models/gemini-1.5-pro"]
    request = transport.requests[0]
    assert str(request.url) == BASES[ProviderKind.VERTEX_GEMINI] + "/publishers/google/models"
    assert request.headers["authorization"] == "Bearer ya29.token"


@pytest.mark.asyncio
async def test_vendor_headers_override_extra_headers(secrets, messages) -> None:
    secrets.save("real", "ref-a")
    transport = responding(200, json={"data": [{"id": "m"}]})
    adapter = adapter_for(ProviderKind.ANTHROPIC, secrets, transport, messages)
    provider = make_provider(
        ProviderKind.ANTHROPIC,
        "ref-a",
        extra_headers={"x-api-key": "spoofed", "X-Title": "LLMKeyring"},
    )

    await adapter.test_health(provider)

    request = transport.requests[0]
    assert request.headers["x-api-key"] == "real"
    assert request.headers["x-title"] == "LLMKeyring"


@pytest.mark.asyncio
async def test_credential_header_replaces_differently_cased_extra_header(secrets, messages) -> None:
    secrets.save("sk-real", "ref-o")
    transport = responding(200, json={"data": []})
    adapter = adapter_for(ProviderKind.OPENAI_COMPATIBLE, secrets, transport, messages)
    provider = make_provider(
        ProviderKind.OPENAI_COMPATIBLE,
        "ref-o",
        extra_headers={"authorization": "Bearer user"},
    )

    await adapter.test_health(provider)

    (request,) = transport.requests
    assert request.headers.get_list("authorization") == ["Bearer sk-real"]


@pytest.mark.asyncio
async def test_azure_key_replaces_uppercase_extra_header(secrets, messages) -> None:
    secrets.save("az-real", "ref-az")
    transport = responding(200, json={"data": []})
    adapter = adapter_for(ProviderKind.AZURE_OPENAI, secrets, transport, messages)
    provider = make_provider(ProviderKind.AZURE_OPENAI, "ref-az", extra_headers={"API-KEY": "user"})

    await adapter.test_health(provider)

    (request,) = transport.requests
    assert request.headers.get_list("api-key") == ["az-real"]


def test_http_adapter_requires_endpoint_and_parser(secrets) -> None:
    class EndpointOnlyAdapter(HTTPProviderAdapter):
        kind = ProviderKind.OPENAI_COMPATIBLE

        def endpoint(self, base: httpx.URL) -> httpx.URL:
            return base

    with pytest.raises(TypeError):
        EndpointOnlyAdapter(secrets)


@pytest.mark.asyncio
async def test_default_list_models_is_unsupported(secrets, messages) -> None:
    class HealthOnlyAdapter(ProviderAdapter):
        kind = ProviderKind.OPENAI_COMPATIBLE

        async def test_health(self, provider: Provider) -> TestResult:
            return TestResult(TestStatus.SUCCESS, self.messages("OK"))

    adapter = HealthOnlyAdapter(secrets, messages=messages)

    assert await adapter.list_models(make_provider(ProviderKind.OPENAI_COMPATIBLE)) == ModelList(
        [], messages("ERR_LIST_MODELS_UNSUPPORTED")
    )


def test_timeout_override(secrets) -> None:
    assert make_adapter(ProviderKind.ZHIPU_GLM_NATIVE, secrets)._timeout() == 8
    assert make_adapter(ProviderKind.ANTHROPIC, secrets)._timeout() == 6
    assert make_adapter(ProviderKind.ANTHROPIC, secrets, timeout=2.5)._timeout(listing=True) == 2.5
