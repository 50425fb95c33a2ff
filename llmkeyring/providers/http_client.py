"""
Minimal GET transport for provider adapters.

Classifies every exchange into a 2xx response, an HTTP status failure
(code + body text) or a transport failure (no status code). No retries.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import TracebackType

import httpx

from llmkeyring.core import ProviderError, ProviderUnavailableError, get_logger, request_id_ctx
from llmkeyring.providers.urls import redact_url

logger = get_logger(__name__)


@dataclass(frozen=True)
class HTTPResponse:
    """Body and status of a 2xx response."""

    content: bytes
    status_code: int


class HTTPStatusFailure(ProviderError):
    """Non-2xx response. ``body`` is None when it is not valid UTF-8."""

    def __init__(self, http_status: int, body: str | None):
        self.http_status = http_status
        self.body = body
        super().__init__(
            f"HTTP {http_status}: {body or '<no body>'}",
            details={"status": http_status},
        )


class TransportFailure(ProviderUnavailableError):
    """DNS, connect, timeout or protocol failure before any status line."""


def create_http_client(
    timeout_seconds: float,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """
    Build a fresh AsyncClient with one timeout for connect, read and write.

    Args:
        timeout_seconds: Total timeout for each phase of the request.
        transport: Optional transport (used by tests with MockTransport).
    """
    timeout = httpx.Timeout(timeout_seconds)
    return httpx.AsyncClient(
        timeout=timeout,
        transport=transport,
        follow_redirects=True,
    )


class HTTPClient:
    """GET-with-headers client; one httpx session per instance, no cookie reuse."""

    def __init__(
        self,
        timeout: float = 5,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> HTTPClient:
        self._client = create_http_client(self.timeout, self._transport)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get(self, url: httpx.URL | str, headers: Mapping[str, str]) -> HTTPResponse:
        """
        Issue a GET and classify the outcome.

        Raises:
            HTTPStatusFailure: the server answered with a non-2xx status.
            TransportFailure: no HTTP response was obtained.
        """
        if self._client is None:
            self._client = create_http_client(self.timeout, self._transport)

        request_headers = httpx.Headers(headers)
        request_id = request_id_ctx.get()
        if request_id and "X-Request-ID" not in request_headers:
            request_headers["X-Request-ID"] = request_id

        logger.debug(
            "Provider request",
            data={"method": "GET", "url": redact_url(url), "timeout": self.timeout},
        )
        try:
            response = await self._client.get(url, headers=request_headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportFailure(describe_transport_error(exc), details={"url": redact_url(url)}) from exc

        if 200 <= response.status_code < 300:
            return HTTPResponse(content=response.content, status_code=response.status_code)
        raise HTTPStatusFailure(response.status_code, _decode_body(response.content))


def describe_transport_error(exc: Exception) -> str:
    """Underlying error text, or the exception type when the text is empty."""
    return str(exc) or type(exc).__name__


def _decode_body(content: bytes) -> str | None:
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        return None
