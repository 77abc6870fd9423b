"""
Remote action transport.

Sends a RequestEnvelope to the remote action endpoint and returns the
ResponseEnvelope. Any parseable envelope is returned whatever the HTTP
status; connection failures, timeouts and non-envelope bodies raise
TransportError.

Exports:
    Transport: Protocol used by the panel manager
    HttpxTransport: httpx.AsyncClient implementation
"""

from typing import Optional, Protocol

import httpx
from pydantic import ValidationError as PydanticValidationError

from config.defaults import ClientDefaults
from core.models.envelope import RequestEnvelope, ResponseEnvelope
from exceptions import TransportError
from util_logger import LoggerFactory, ComponentType


class Transport(Protocol):
    async def send(self, request: RequestEnvelope) -> ResponseEnvelope:
        ...


class HttpxTransport:
    """
    Posts form-encoded remote actions with httpx.

    Usage:
        async with HttpxTransport("https://host/api/flyout") as transport:
            response = await transport.send(request)
    """

    def __init__(
        self,
        ajax_url: str,
        timeout: float = ClientDefaults.REQUEST_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.ajax_url = ajax_url
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None
        self.logger = LoggerFactory.create_logger(ComponentType.CLIENT, "HttpxTransport")

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def send(self, request: RequestEnvelope) -> ResponseEnvelope:
        client = await self._get_client()
        try:
            response = await client.post(self.ajax_url, data=request.to_fields())
        except httpx.TimeoutException:
            raise TransportError(f"Request timed out after {self.timeout}s")
        except httpx.RequestError as e:
            raise TransportError(str(e) or type(e).__name__)

        try:
            body = response.json()
        except ValueError:
            raise TransportError(f"HTTP {response.status_code}: invalid response body")

        try:
            envelope = ResponseEnvelope.model_validate(body)
        except PydanticValidationError:
            raise TransportError(f"HTTP {response.status_code}: response is not an envelope")

        if response.status_code >= 400:
            self.logger.debug(
                f"'{request.action}' returned HTTP {response.status_code} ({envelope.code})"
            )
        return envelope
