"""
Shared request pipeline for HTTP-probing adapters.

Subclasses describe the vendor (endpoint, auth placement, 404 hint, response
shape); this class resolves credentials, issues the GET through
``HTTPClient`` and folds every outcome into a value.
"""

from __future__ import annotations

import json
from abc import abstractmethod
from typing import Any

import httpx

from llmkeyring.core import InvalidBaseURLError, bind_provider, get_logger
from llmkeyring.providers.base import (
    BearerAuth,
    ModelList,
    PreparedRequest,
    Provider,
    ProviderAdapter,
    RequestAborted,
    TestResult,
    TestStatus,
)
from llmkeyring.providers.http_client import (
    HTTPClient,
    HTTPResponse,
    HTTPStatusFailure,
    TransportFailure,
)
from llmkeyring.providers.urls import parse_base_url

logger = get_logger(__name__)

MODEL_ID_FIELDS = ("id", "name", "model")


class HTTPProviderAdapter(ProviderAdapter):
    """Adapter that probes one vendor endpoint with a GET."""

    timeout_seconds: float = 5
    list_timeout_seconds: float | None = None
    requires_credential: bool = True
    route_hint_key: str | None = None

    # -- request construction -------------------------------------------------

    def base_url(self, provider: Provider) -> httpx.URL:
        try:
            return parse_base_url(provider.base_url)
        except InvalidBaseURLError as exc:
            raise RequestAborted(self.messages("ERR_BASE_URL_INVALID")) from exc

    def resolve_secret(self, provider: Provider) -> str | None:
        """
        Read the provider's credential.

        Returns None only for anonymous access on kinds that allow it.

        Raises:
            RequestAborted: credential absent, missing from the store, or the
                store failed.
        """
        if not isinstance(provider.auth, BearerAuth):
            if self.requires_credential:
                raise RequestAborted(self.messages("ERR_AUTH_FAILED_HINT"))
            return None
        try:
            secret = self.secrets.read(provider.auth.key_ref)
        except Exception as exc:
            logger.warning(
                "Secret store read failed",
                data={"key_ref": provider.auth.key_ref, "error": str(exc)},
            )
            raise RequestAborted(str(exc) or type(exc).__name__) from exc
        if secret is None:
            raise RequestAborted(self.messages("ERR_KEYCHAIN_MISSING"))
        return secret

    @abstractmethod
    def endpoint(self, base: httpx.URL) -> httpx.URL:
        """Health/list URL for a parsed base, before credentials are applied."""

    def apply_credential(self, request: PreparedRequest, secret: str) -> None:
        """Place the secret on the request; default is a bearer header."""
        request.headers["Authorization"] = f"Bearer {secret}"

    def prepare(self, provider: Provider) -> list[PreparedRequest]:
        """
        Candidate requests, tried in order.

        extraHeaders are copied first so vendor headers set afterwards win.
        """
        url = self.endpoint(self.base_url(provider))
        secret = self.resolve_secret(provider)
        request = PreparedRequest(url=url, headers=httpx.Headers(provider.extra_headers))
        if secret is not None:
            self.apply_credential(request, secret)
        return [request]

    # -- outcome classification -----------------------------------------------

    def hint_for_status(self, code: int) -> str:
        if code in (401, 403):
            return self.messages("ERR_AUTH_FAILED_HINT")
        if code == 404 and self.route_hint_key:
            return self.messages(self.route_hint_key)
        if code == 429:
            return self.messages("ERR_RATE_LIMITED")
        return self.messages("ERR_HTTP_CODE_FMT", code)

    def status_message(self, failure: HTTPStatusFailure) -> str:
        hint = self.hint_for_status(failure.http_status)
        return f"{hint}: {failure.body}" if failure.body else hint

    def exhausted_message(self, last_error: str | None) -> str:
        """Message when every candidate failed at the transport level."""
        return last_error or self.messages("ERR_BASE_URL_INVALID")

    @abstractmethod
    def parse_models(self, content: bytes) -> list[str]:
        """Model identifiers from a 2xx body; [] for unexpected shapes."""

    # -- operations -----------------------------------------------------------

    async def _fetch(self, provider: Provider, timeout: float) -> HTTPResponse | str:
        """Response of the first candidate that answers, or a failure message."""
        try:
            candidates = self.prepare(provider)
        except RequestAborted as abort:
            return abort.message

        last_error: str | None = None
        async with HTTPClient(timeout=timeout, transport=self.transport) as client:
            for request in candidates:
                try:
                    return await client.get(request.url, request.headers)
                except HTTPStatusFailure as exc:
                    logger.info("Provider returned error status", data={"status": exc.http_status})
                    return self.status_message(exc)
                except TransportFailure as exc:
                    logger.info("Provider unreachable", data={"error": exc.message})
                    last_error = exc.message
        return self.exhausted_message(last_error)

    def _timeout(self, listing: bool = False) -> float:
        if self.timeout_override is not None:
            return self.timeout_override
        if listing and self.list_timeout_seconds is not None:
            return self.list_timeout_seconds
        return self.timeout_seconds

    async def test_health(self, provider: Provider) -> TestResult:
        with bind_provider(self.kind.value, provider.id):
            try:
                outcome = await self._fetch(provider, self._timeout())
            except Exception as exc:  # adapters never raise past this point
                logger.error("Health check crashed", exc_info=exc)
                return TestResult(TestStatus.FAILURE, str(exc) or type(exc).__name__)
        if isinstance(outcome, str):
            return TestResult(TestStatus.FAILURE, outcome)
        return TestResult(TestStatus.SUCCESS, self.messages("OK"))

    async def list_models(self, provider: Provider) -> ModelList:
        with bind_provider(self.kind.value, provider.id):
            try:
                outcome = await self._fetch(provider, self._timeout(listing=True))
                if isinstance(outcome, str):
                    return ModelList([], outcome)
                models = self.parse_models(outcome.content)
            except Exception as exc:  # adapters never raise past this point
                logger.error("Model listing crashed", exc_info=exc)
                return ModelList([], str(exc) or type(exc).__name__)
            if not models:
                return ModelList([], self.messages("ERR_NO_MODELS_FOUND"))
            logger.debug("Listed models", data={"count": len(models)})
        return ModelList(models, None)


def load_json(content: bytes) -> Any:
    """Decoded JSON, or None when the body is not JSON."""
    try:
        return json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def extract_model_ids(payload: Any) -> list[str]:
    """
    Schemaless extraction of model identifiers.

    Accepts a top-level array of objects, or an object whose ``data`` (else
    ``models``) is one. Per item the first string among id, name, model wins.
    """
    items: Any = []
    if isinstance(payload, list):
        items = payload
    elif isinstance(payload, dict):
        items = payload.get("data")
        if not isinstance(items, list):
            items = payload.get("models")
        if not isinstance(items, list):
            items = []

    ids: list[str] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        for key in MODEL_ID_FIELDS:
            value = item.get(key)
            if isinstance(value, str):
                ids.append(value)
                break
    return ids
