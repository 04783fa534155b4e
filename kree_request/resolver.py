"""Classification of transport results into a single request outcome."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from pydantic import ValidationError

from kree_request.codec import JsonCodec
from kree_request.diagnostics import DiagnosticSink
from kree_request.errors import ApiError, ApiErrorNotDecodable, GeneralError
from kree_request.formatting import json_string
from kree_request.model import EmptyError, RequestDescriptor, Success
from kree_request.transport import Transport

logger = logging.getLogger(__name__)

SUCCESS_STATUS = range(200, 300)
NO_CONTENT_PLACEHOLDER = "(none)"
UNFORMATTABLE_PLACEHOLDER = "-"

Outcome = Success | ApiError | ApiErrorNotDecodable | GeneralError


def flatten_headers(pairs: Iterable[tuple[str, str]]) -> dict[str, str]:
    """Collapse header pairs to one value per lower-cased name; the last value wins."""

    flattened: dict[str, str] = {}
    for name, value in pairs:
        flattened[name.lower()] = value
    return flattened


def format_exchange(descriptor: RequestDescriptor, output: bytes | None) -> str:
    if descriptor.body is None:
        input_text = NO_CONTENT_PLACEHOLDER
    else:
        input_text = json_string(descriptor.body, pretty_printed=True) or NO_CONTENT_PLACEHOLDER
    if not output:
        output_text = NO_CONTENT_PLACEHOLDER
    else:
        output_text = json_string(output, pretty_printed=True) or UNFORMATTABLE_PLACEHOLDER
    return f"{descriptor.method.value} {descriptor.url}\nbody: {input_text}\nresponse: {output_text}"


class ResponseResolver:
    """Runs one request attempt and resolves it to an ``Outcome``.

    2xx responses become ``Success``. Other statuses go through the error
    decode cascade: the body is validated as ``error_type`` and yields
    ``ApiError`` when it matches, ``ApiErrorNotDecodable`` on a validation
    failure, and ``GeneralError`` with the status for any other failure.
    Transport failures become ``GeneralError`` without a status.
    """

    def __init__(
        self,
        transport: Transport,
        codec: JsonCodec | None = None,
        sink: DiagnosticSink | None = None,
    ) -> None:
        self.transport = transport
        self.codec = codec or JsonCodec()
        self.sink = sink

    async def resolve(
        self,
        descriptor: RequestDescriptor,
        timeout: float,
        error_type: type[Any] = EmptyError,
    ) -> Outcome:
        try:
            response = await self.transport.execute(descriptor, timeout)
        except Exception as exc:
            logger.debug("%s %s failed in transport: %r", descriptor.method.value, descriptor.url, exc)
            self._log_exchange(descriptor, None)
            return GeneralError(None, exc)

        self._log_exchange(descriptor, response.body)

        status = int(response.status_code)
        if status in SUCCESS_STATUS:
            return Success(data=response.body, status=status, headers=flatten_headers(response.headers))
        return self._decode_error(status, response.body, error_type)

    def _decode_error(self, status: int, data: bytes, error_type: type[Any]) -> Outcome:
        try:
            decoded = self.codec.decode(data, error_type)
        except ValidationError as exc:
            return ApiErrorNotDecodable(status, exc)
        except Exception as exc:
            logger.debug("Error body for status %s raised %r while decoding", status, exc)
            return GeneralError(status, exc)
        return ApiError(status, decoded)

    def _log_exchange(self, descriptor: RequestDescriptor, output: bytes | None) -> None:
        if self.sink is None:
            return
        try:
            self.sink.log(format_exchange(descriptor, output))
        except Exception:
            logger.debug("Diagnostic sink failed for %s", descriptor.url, exc_info=True)


__all__ = [
    "NO_CONTENT_PLACEHOLDER",
    "Outcome",
    "ResponseResolver",
    "SUCCESS_STATUS",
    "flatten_headers",
    "format_exchange",
]
