"""LLM Keyring: provider registry, credential store and reachability checks."""

__version__ = "0.1.0"
