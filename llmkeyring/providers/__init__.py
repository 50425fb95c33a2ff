"""Provider model, vendor adapters and the provider registry."""

from llmkeyring.providers.base import (
    AuthMethod,
    BearerAuth,
    LastTest,
    ModelList,
    NoAuth,
    Provider,
    ProviderAdapter,
    ProviderKind,
    TestResult,
    TestStatus,
)
from llmkeyring.providers.factory import ADAPTERS, make_adapter
from llmkeyring.providers.registry import ProviderRegistry
from llmkeyring.providers.templates import Template, build_provider, default_providers
from llmkeyring.providers.urls import (
    alternate_for,
    append_path,
    normalize,
    suggest_kind_and_base,
)

__all__ = [
    "AuthMethod",
    "BearerAuth",
    "LastTest",
    "ModelList",
    "NoAuth",
    "Provider",
    "ProviderAdapter",
    "ProviderKind",
    "TestResult",
    "TestStatus",
    "ADAPTERS",
    "make_adapter",
    "ProviderRegistry",
    "Template",
    "build_provider",
    "default_providers",
    "alternate_for",
    "append_path",
    "normalize",
    "suggest_kind_and_base",
]
