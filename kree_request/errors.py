"""Error taxonomy surfaced by request helpers.

Failures reach callers as exactly one of these kinds. ``RequestError`` subclasses
are the non-success outcomes of a resolved request and are raised unchanged by
the client; the remaining classes cover problems that happen before a request
is sent or after a successful response arrives.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

E = TypeVar("E")


class KreeRequestError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(KreeRequestError, ValueError):
    """Invalid request configuration or environment settings."""


class SerializationError(KreeRequestError):
    """The request payload could not be encoded."""

    def __init__(self, value: Any, error: BaseException) -> None:
        super().__init__(f"Request body not encodable: {error}")
        self.value = value
        self.error = error


class DeserializationError(KreeRequestError):
    """A successful response body did not match the requested type."""

    def __init__(self, status: int, data: bytes, error: BaseException) -> None:
        super().__init__(f"HTTP status: {status}, Response not decodable: {error}")
        self.status = status
        self.data = data
        self.error = error


class RequestError(KreeRequestError, Generic[E]):
    """Non-success outcome of a single request attempt.

    When ``error`` is an exception it becomes ``__cause__``, so raising the
    outcome keeps the underlying failure in the traceback.
    """

    status: int | None

    def __init__(self, status: int | None, error: Any) -> None:
        super().__init__(status, error)
        self.status = status
        self.error = error
        if isinstance(error, BaseException):
            self.__cause__ = error

    def __str__(self) -> str:
        return self.description

    @property
    def description(self) -> str:
        if self.status is not None:
            return f"HTTP status: {self.status}, Request error: {self.error}"
        return f"Request error: {self.error}"


class ApiError(RequestError[E]):
    """Non-2xx status whose body decoded into the declared error type."""

    status: int
    error: E

    @property
    def description(self) -> str:
        return f"HTTP status: {self.status}, ApiError: {self.error}"


class ApiErrorNotDecodable(RequestError[E]):
    """Non-2xx status whose body did not match the declared error type."""

    status: int

    @property
    def description(self) -> str:
        return f"HTTP status: {self.status}, ApiError not decodable: {self.error}"


class GeneralError(RequestError[E]):
    """Transport failure, or an unexpected failure while decoding an error body."""

    error: BaseException

    @property
    def description(self) -> str:
        if self.status is not None:
            return f"HTTP status: {self.status}, General error: {self.error}"
        return f"General error: {self.error}"


__all__ = [
    "ApiError",
    "ApiErrorNotDecodable",
    "ConfigurationError",
    "DeserializationError",
    "GeneralError",
    "KreeRequestError",
    "RequestError",
    "SerializationError",
]
