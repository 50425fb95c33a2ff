"""
LLM Keyring application.

FastAPI service for managing LLM provider endpoints: connectivity checks,
model listing and encrypted API key storage.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from llmkeyring import __version__
from llmkeyring.api import health_router, providers_router
from llmkeyring.api.providers import build_registry
from llmkeyring.config import get_settings
from llmkeyring.core import (
    RequestContextMiddleware,
    get_logger,
    setup_exception_handlers,
    setup_logging,
)
from llmkeyring.db import dispose_engine, reset_session_factory

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    setup_logging(
        level=settings.log_level,
        json_output=settings.log_json,
        log_file=settings.log_file or None,
    )
    logger.info(
        "Starting LLM Keyring",
        data={
            "host": settings.host,
            "port": settings.port,
            "environment": settings.environment,
            "locale": settings.locale,
        },
    )

    # Tests place their own registry on app.state
    registry_created = False
    if getattr(_app.state, "provider_registry", None) is None:
        _app.state.provider_registry = build_registry(settings)
        registry_created = True

    yield

    logger.info("Shutting down LLM Keyring")
    if registry_created:
        dispose_engine()
        reset_session_factory()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="LLM Keyring",
        description="Manage LLM provider endpoints, health checks and API keys",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # Setup exception handlers (must be before middleware)
    setup_exception_handlers(app)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(health_router)
    app.include_router(providers_router)

    return app


# Create application instance
app = create_app()
