from __future__ import annotations

from typing import Callable

import httpx
import pytest

from kree_request.client import KreeRequest
from kree_request.model import RequestDescriptor, TransportResponse
from kree_request.transport import HttpxTransport


class FakeTransport:
    """Scripted transport: returns queued responses or raises queued exceptions."""

    def __init__(self, *results: TransportResponse | BaseException) -> None:
        self.results = list(results)
        self.calls: list[tuple[RequestDescriptor, float]] = []

    async def execute(self, descriptor: RequestDescriptor, timeout: float) -> TransportResponse:
        self.calls.append((descriptor, timeout))
        result = self.results.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result


class RecordingSink:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def log(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def mock_client() -> Callable[..., KreeRequest]:
    """Build a ``KreeRequest`` whose httpx client is served by ``handler``."""

    def factory(handler, **kwargs) -> KreeRequest:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return KreeRequest(HttpxTransport(http_client), **kwargs)

    return factory
