"""API routers."""

from llmkeyring.api.health import router as health_router
from llmkeyring.api.providers import router as providers_router

__all__ = ["health_router", "providers_router"]
