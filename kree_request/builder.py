"""Turns a request ``Config`` into a transport-level ``RequestDescriptor``."""

from __future__ import annotations

from kree_request.model import Config, RequestDescriptor
from kree_request.query import urlencoded_query_string


def build_request(config: Config, body: bytes | None = None) -> tuple[RequestDescriptor, float]:
    """Assemble the request descriptor and its timeout.

    The URL is the literal concatenation of base URL, path and encoded query;
    no slash normalization happens here. Every configured header becomes its own
    ``(name, value)`` pair so the transport adds rather than replaces values.
    """

    url = config.backend.base_url + config.path + urlencoded_query_string(config.url_parameters)
    headers = tuple((name, value) for name, value in config.headers.items())
    descriptor = RequestDescriptor(url=url, method=config.method, headers=headers, body=body)
    return descriptor, config.timeout


__all__ = ["build_request"]
