"""Database repositories for data access."""

from llmkeyring.db.repositories.providers import (
    DEFAULT_PROVIDER_KEY,
    PROVIDERS_KEY,
    ProviderPersistence,
    dump_providers,
    load_providers,
)

__all__ = [
    "DEFAULT_PROVIDER_KEY",
    "PROVIDERS_KEY",
    "ProviderPersistence",
    "dump_providers",
    "load_providers",
]
