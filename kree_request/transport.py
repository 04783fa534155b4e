"""Transport contract and its httpx-backed implementation."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import httpx

from kree_request.model import RequestDescriptor, TransportResponse

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Executes a request descriptor and returns the fully buffered response.

    Implementations raise on connection, TLS or timeout failures and must be
    safe to call concurrently.
    """

    async def execute(self, descriptor: RequestDescriptor, timeout: float) -> TransportResponse: ...


class HttpxTransport:
    """``Transport`` on top of a shared ``httpx.AsyncClient``.

    The client is created on first use unless one is injected; only a client
    created here is closed by ``aclose``.
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client

    async def execute(self, descriptor: RequestDescriptor, timeout: float) -> TransportResponse:
        client = self.client
        request = client.build_request(
            descriptor.method.value,
            descriptor.url,
            headers=list(descriptor.headers),
            content=descriptor.body,
            timeout=httpx.Timeout(timeout),
        )
        response = await client.send(request, stream=True)
        try:
            body = await response.aread()
        finally:
            await response.aclose()
        logger.debug(
            "%s %s -> %s (%s bytes)",
            descriptor.method.value,
            descriptor.url,
            response.status_code,
            len(body),
        )
        return TransportResponse(
            status_code=response.status_code,
            headers=tuple(response.headers.multi_items()),
            body=body,
        )

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["HttpxTransport", "Transport"]
