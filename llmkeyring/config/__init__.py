"""Configuration module for LLM Keyring."""

from llmkeyring.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
