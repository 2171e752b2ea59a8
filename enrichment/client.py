"""Enrichment client - boundary to the external enrichment endpoint.

The endpoint receives a trigger link and answers with whatever structured
data it could extract. How it extracts that data is opaque here.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from types import TracebackType
from typing import Any

import httpx

from .cancellation import CancellationToken
from .config.settings import EnrichmentSettings
from .errors import EnrichmentCancelled, EnrichmentTimeoutError, EnrichmentTransportError
from .logging_config import TRACE
from .models import EnrichmentResult
from .schemas import EnrichmentRequestBody, EnrichmentResponseBody

logger = logging.getLogger(__name__)


class EnrichmentClient(ABC):
    """Abstract base class for enrichment sources"""

    @abstractmethod
    async def fetch(self, trigger_value: str, token: CancellationToken) -> EnrichmentResult:
        """Fetch structured data for an already-accepted trigger value.

        Raises:
            EnrichmentCancelled: if ``token`` was cancelled before settlement
            EnrichmentTransportError: on network or parse failure
        """
        pass


class HttpEnrichmentClient(EnrichmentClient):
    """Posts trigger values to the collection API's enrichment endpoint."""

    def __init__(
        self,
        url: str,
        api_token: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize client.

        Args:
            url: Absolute URL of the enrichment endpoint
            api_token: Bearer token sent as Authorization header, if set
            timeout: Per-request timeout in seconds; None waits indefinitely
            http_client: Shared httpx client; one is created (and owned) if omitted
        """
        self.url = url
        self.api_token = api_token
        self.timeout = timeout
        self._http = http_client
        self._owns_http = http_client is None

    @classmethod
    def from_settings(
        cls, settings: EnrichmentSettings, http_client: httpx.AsyncClient | None = None
    ) -> HttpEnrichmentClient:
        return cls(
            url=settings.enrichment_url,
            api_token=settings.api_token,
            timeout=settings.request_timeout_seconds,
            http_client=http_client,
        )

    async def __aenter__(self) -> HttpEnrichmentClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None

    async def fetch(self, trigger_value: str, token: CancellationToken) -> EnrichmentResult:
        token.raise_if_cancelled()

        # Race the HTTP call against the token so a cancellation aborts the
        # transport instead of waiting for the server.
        request_task = asyncio.ensure_future(self._post(trigger_value))
        cancel_task = asyncio.ensure_future(token.wait())
        try:
            await asyncio.wait({request_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancel_task.cancel()
            if not request_task.done():
                request_task.cancel()

        if not request_task.done() or request_task.cancelled():
            raise EnrichmentCancelled(f"Enrichment for {trigger_value} was cancelled")
        return request_task.result()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient()
            self._owns_http = True
        return self._http

    async def _post(self, trigger_value: str) -> EnrichmentResult:
        body = EnrichmentRequestBody(trigger_value=trigger_value).model_dump(by_alias=True)
        logger.log(TRACE, f"POST {self.url} body={body}")

        try:
            response = await self._client().post(self.url, json=body, headers=self._headers(), timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise EnrichmentTimeoutError(f"Enrichment request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise EnrichmentTransportError(f"Enrichment request failed: {type(e).__name__}: {e}") from e

        return parse_enrichment_response(response)


def _server_message(response: httpx.Response) -> str | None:
    """Pull a ``message`` out of an error body, if it is JSON and has one."""
    try:
        payload: Any = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return None


def parse_enrichment_response(response: httpx.Response) -> EnrichmentResult:
    """Convert an HTTP response into an EnrichmentResult.

    Raises:
        EnrichmentTransportError: if an OK response body is not valid JSON
            of the expected shape
    """
    if not response.is_success:
        message = _server_message(response) or f"Enrichment service returned HTTP {response.status_code}"
        logger.debug(f"Enrichment endpoint returned {response.status_code}: {message}")
        return EnrichmentResult(success=False, message=message, server_error=True)

    try:
        payload = EnrichmentResponseBody.model_validate(response.json())
    except ValueError as e:
        raise EnrichmentTransportError(f"Unparseable enrichment response: {e}") from e

    logger.log(TRACE, f"Enrichment response: {payload.model_dump(by_alias=True)}")

    if payload.success and payload.data is not None:
        return EnrichmentResult(success=True, fields=payload.data.present_fields(), message=payload.message)
    return EnrichmentResult(success=False, message=payload.message)
