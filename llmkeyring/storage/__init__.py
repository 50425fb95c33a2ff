"""Secret storage."""

from llmkeyring.storage.secrets import (
    MemorySecretStore,
    SecretStore,
    SQLSecretStore,
    build_cipher,
    derive_fernet_key,
)

__all__ = [
    "MemorySecretStore",
    "SecretStore",
    "SQLSecretStore",
    "build_cipher",
    "derive_fernet_key",
]
