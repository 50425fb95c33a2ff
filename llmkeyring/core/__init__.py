"""Core module with logging, structured errors and the message catalog."""

from llmkeyring.core.errors import (
    AppError,
    ErrorCode,
    ErrorResponse,
    InvalidBaseURLError,
    NotFoundError,
    ProviderError,
    ProviderUnavailableError,
    SecretStoreError,
    ValidationError,
)
from llmkeyring.core.logging import (
    bind_provider,
    get_logger,
    provider_ctx,
    request_id_ctx,
    setup_logging,
)
from llmkeyring.core.messages import Messages, get_messages
from llmkeyring.core.middleware import RequestContextMiddleware, setup_exception_handlers
from llmkeyring.core.time import utcnow

__all__ = [
    "AppError",
    "ErrorCode",
    "ErrorResponse",
    "InvalidBaseURLError",
    "NotFoundError",
    "ProviderError",
    "ProviderUnavailableError",
    "SecretStoreError",
    "ValidationError",
    "bind_provider",
    "get_logger",
    "provider_ctx",
    "request_id_ctx",
    "setup_logging",
    "RequestContextMiddleware",
    "setup_exception_handlers",
    "Messages",
    "get_messages",
    "utcnow",
]
