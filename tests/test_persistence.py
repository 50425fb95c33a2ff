"""Tests for provider persistence."""

from __future__ import annotations

import json
from uuid import uuid4

from llmkeyring.db import Preference
from llmkeyring.db.repositories import (
    DEFAULT_PROVIDER_KEY,
    PROVIDERS_KEY,
    ProviderPersistence,
    dump_providers,
    load_providers,
)
from llmkeyring.providers import BearerAuth, LastTest, NoAuth, Provider, ProviderKind, TestStatus
from llmkeyring.core import utcnow


def test_bearer_auth_round_trips() -> None:
    provider = Provider(
        name="Anthropic",
        kind=ProviderKind.ANTHROPIC,
        base_url="https://api.anthropic.com",
        auth=BearerAuth(key_ref="ref-123"),
    )

    (decoded,) = load_providers(dump_providers([provider]))

    assert decoded.auth == BearerAuth(key_ref="ref-123")
    assert decoded.key_ref == "ref-123"
    assert decoded == provider


def test_wire_format_uses_camel_case() -> None:
    provider = Provider(
        name="OpenRouter",
        kind=ProviderKind.OPENAI_COMPATIBLE,
        base_url="https://openrouter.ai/api",
        default_model="gpt-4o",
        extra_headers={"X-Title": "LLMKeyring"},
        last_test=LastTest(status=TestStatus.SUCCESS, at=utcnow(), message="OK"),
    )

    (payload,) = json.loads(dump_providers([provider]))

    assert payload["baseURL"] == "https://openrouter.ai/api"
    assert payload["defaultModel"] == "gpt-4o"
    assert payload["extraHeaders"] == {"X-Title": "LLMKeyring"}
    assert payload["auth"] == {"type": "none"}
    assert payload["lastTest"]["status"] == "success"
    assert payload["kind"] == "openAICompatible"


def test_load_empty_store(persistence: ProviderPersistence) -> None:
    assert persistence.load() == ([], None)


def test_save_and_load(persistence: ProviderPersistence) -> None:
    first = Provider(name="a", kind=ProviderKind.OLLAMA, base_url="http://127.0.0.1:11434")
    second = Provider(
        name="b", kind=ProviderKind.AZURE_OPENAI, base_url="https://r.openai.azure.com", auth=BearerAuth(key_ref="k")
    )

    persistence.save([first, second], second.id)
    providers, default_id = persistence.load()

    assert providers == [first, second]
    assert default_id == second.id

    persistence.save([first], None)
    providers, default_id = persistence.load()
    assert [p.id for p in providers] == [first.id]
    assert default_id is None


def test_corrupt_blob_loads_empty(persistence: ProviderPersistence, session_factory) -> None:
    default_id = uuid4()
    with session_factory() as session, session.begin():
        session.add(Preference(key=PROVIDERS_KEY, value="{not json"))
        session.add(Preference(key=DEFAULT_PROVIDER_KEY, value=json.dumps(str(default_id))))

    providers, loaded_default = persistence.load()

    assert providers == []
    assert loaded_default == default_id


def test_auth_decodes_from_stored_json() -> None:
    raw = json.dumps(
        [
            {
                "id": str(uuid4()),
                "name": "x",
                "kind": "baiduQianfan",
                "baseURL": "https://aip.baidubce.com",
                "enabled": True,
                "auth": {"type": "none"},
                "extraHeaders": {},
                "lastTest": {"status": "unknown"},
            }
        ]
    )

    (provider,) = load_providers(raw)

    assert provider.auth == NoAuth()
    assert provider.default_model is None
