"""JSON encoding and decoding of caller types through pydantic adapters."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter

from kree_request.errors import SerializationError

T = TypeVar("T")

_ANY_ADAPTER: TypeAdapter[Any] = TypeAdapter(Any)


@lru_cache(maxsize=256)
def _adapter_for(type_: Any) -> TypeAdapter[Any]:
    return TypeAdapter(type_)


class JsonCodec:
    """Encoder/decoder pair used for request bodies, responses and error bodies."""

    def __init__(
        self,
        *,
        by_alias: bool = True,
        exclude_none: bool = False,
        strict: bool = False,
    ) -> None:
        self.by_alias = by_alias
        self.exclude_none = exclude_none
        self.strict = strict

    def encode(self, value: Any) -> bytes:
        """Serialize ``value`` to JSON bytes, raising ``SerializationError`` on failure."""

        try:
            return _ANY_ADAPTER.dump_json(
                value,
                by_alias=self.by_alias,
                exclude_none=self.exclude_none,
            )
        except (TypeError, ValueError) as exc:
            raise SerializationError(value, exc) from exc

    def decode(self, data: bytes, type_: type[T]) -> T:
        """Validate JSON ``data`` as ``type_``.

        Raises ``pydantic.ValidationError`` when the payload is malformed or does
        not match the type; anything else raised by validators propagates as is.
        """

        return _adapter_for(type_).validate_json(data, strict=self.strict)


__all__ = ["JsonCodec"]
