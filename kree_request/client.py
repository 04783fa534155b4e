"""Typed JSON request helper composing build, transport, resolution and decoding."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from kree_request.builder import build_request
from kree_request.codec import JsonCodec
from kree_request.diagnostics import DiagnosticSink
from kree_request.errors import DeserializationError, SerializationError
from kree_request.formatting import json_string
from kree_request.model import (
    NO_BODY,
    BytesBody,
    Config,
    EmptyError,
    JsonBody,
    NoBody,
    RequestBody,
    StringBody,
    Success,
)
from kree_request.query import urlencoded_query_string
from kree_request.resolver import ResponseResolver
from kree_request.transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSET: Any = object()


class KreeRequest:
    """Issue JSON REST calls and resolve them into typed values or typed errors.

    Every operation encodes its body once, sends it, and raises one of the
    ``RequestError`` subclasses unchanged when the response is not a success.
    ``error_type`` is the shape expected for non-2xx bodies; the default
    ``EmptyError`` accepts any JSON object.
    """

    urlencoded_query_string = staticmethod(urlencoded_query_string)
    json_string = staticmethod(json_string)

    def __init__(
        self,
        transport: Transport | None = None,
        *,
        codec: JsonCodec | None = None,
        logger: DiagnosticSink | None = None,
    ) -> None:
        self._owns_transport = transport is None
        self.transport: Transport = transport if transport is not None else HttpxTransport()
        self.codec = codec or JsonCodec()
        self.logger = logger
        self._resolver = ResponseResolver(self.transport, self.codec, logger)

    def encode_body(self, body: RequestBody) -> bytes | None:
        if isinstance(body, NoBody):
            return None
        if isinstance(body, JsonBody):
            return self.codec.encode(body.value)
        if isinstance(body, StringBody):
            try:
                return body.text.encode(body.encoding)
            except (LookupError, UnicodeError) as exc:
                raise SerializationError(body.text, exc) from exc
        if isinstance(body, BytesBody):
            return bytes(body.data)
        raise TypeError(f"Unsupported request body: {body!r}")

    async def fetch(
        self,
        config: Config,
        body: RequestBody = NO_BODY,
        *,
        error_type: type[Any] = EmptyError,
    ) -> Success:
        """Send the request and return the raw successful response."""

        data = self.encode_body(body)
        descriptor, timeout = build_request(config, data)
        outcome = await self._resolver.resolve(descriptor, timeout, error_type)
        if isinstance(outcome, Success):
            return outcome
        logger.debug("%s %s resolved to %s", config.method.value, descriptor.url, type(outcome).__name__)
        raise outcome

    async def request(
        self,
        config: Config,
        body: RequestBody = NO_BODY,
        *,
        response_type: type[T] | None = None,
        error_type: type[Any] = EmptyError,
    ) -> T | None:
        """Send the request; decode the body into ``response_type`` when one is given."""

        success = await self.fetch(config, body, error_type=error_type)
        if response_type is None:
            return None
        try:
            return self.codec.decode(success.data, response_type)
        except Exception as exc:
            raise DeserializationError(success.status, success.data, exc) from exc

    async def request_json(
        self,
        config: Config,
        json: Any = _UNSET,
        *,
        response_type: type[T] | None = None,
        error_type: type[Any] = EmptyError,
    ) -> T | None:
        body: RequestBody = NO_BODY if json is _UNSET else JsonBody(json)
        return await self.request(config, body, response_type=response_type, error_type=error_type)

    async def request_string(
        self,
        config: Config,
        string: str,
        *,
        response_type: type[T] | None = None,
        error_type: type[Any] = EmptyError,
    ) -> T | None:
        return await self.request(
            config, StringBody(string), response_type=response_type, error_type=error_type
        )

    async def request_data(
        self,
        config: Config,
        data: bytes,
        *,
        response_type: type[T] | None = None,
        error_type: type[Any] = EmptyError,
    ) -> T | None:
        return await self.request(
            config, BytesBody(data), response_type=response_type, error_type=error_type
        )

    async def aclose(self) -> None:
        if self._owns_transport and isinstance(self.transport, HttpxTransport):
            await self.transport.aclose()

    async def __aenter__(self) -> KreeRequest:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["KreeRequest"]
