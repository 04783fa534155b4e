"""Value objects describing a request, its payload and its resolved result."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from kree_request.errors import ConfigurationError
from kree_request.settings import BASE_URL_ENV, default_timeout, parse_timeout


class Method(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


@runtime_checkable
class Backend(Protocol):
    """Anything exposing the base URL of a logical API."""

    @property
    def base_url(self) -> str: ...


@dataclass(frozen=True)
class StaticBackend:
    base_url: str


@dataclass(frozen=True)
class EnvBackend:
    """Backend whose base URL is read from the environment on every access."""

    env_var: str = BASE_URL_ENV
    default: str | None = None

    @property
    def base_url(self) -> str:
        resolved = os.getenv(self.env_var) or self.default
        if not resolved:
            raise ConfigurationError(
                f"Base URL missing. Set {self.env_var} or pass a default explicitly."
            )
        return resolved


@dataclass(frozen=True)
class Config:
    """Immutable description of a single request."""

    method: Method
    backend: Backend
    path: str
    url_parameters: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    timeout: float = field(default_factory=default_timeout)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", Method(self.method))
        object.__setattr__(self, "url_parameters", MappingProxyType(dict(self.url_parameters)))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        object.__setattr__(self, "timeout", parse_timeout(self.timeout))


@dataclass(frozen=True)
class RequestDescriptor:
    """Transport-level request derived from a ``Config`` and an optional body."""

    url: str
    method: Method
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes | None = None

    @property
    def content_length(self) -> int | None:
        if self.body is None:
            return None
        return len(self.body)


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    headers: tuple[tuple[str, str], ...]
    body: bytes


@dataclass(frozen=True)
class Success:
    """Buffered 2xx response with headers flattened to one value per name."""

    data: bytes
    status: int
    headers: Mapping[str, str]


class NoBody:
    """Marker for requests sent without a body."""

    _instance: NoBody | None = None

    def __new__(cls) -> NoBody:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_BODY"


NO_BODY = NoBody()


@dataclass(frozen=True)
class JsonBody:
    value: Any


@dataclass(frozen=True)
class StringBody:
    text: str
    encoding: str = "utf-8"


@dataclass(frozen=True)
class BytesBody:
    data: bytes


RequestBody = NoBody | JsonBody | StringBody | BytesBody


class EmptyError(BaseModel):
    """Default error payload: any JSON object, contents ignored."""

    model_config = ConfigDict(extra="ignore", frozen=True)


__all__ = [
    "Backend",
    "BytesBody",
    "Config",
    "EmptyError",
    "EnvBackend",
    "JsonBody",
    "Method",
    "NO_BODY",
    "NoBody",
    "RequestBody",
    "RequestDescriptor",
    "StaticBackend",
    "StringBody",
    "Success",
    "TransportResponse",
]
