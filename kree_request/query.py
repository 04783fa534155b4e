"""URL query string encoding."""

from __future__ import annotations

from typing import Mapping
from urllib.parse import quote, urlencode

# Characters left literal inside query components (RFC 3986 query allowance
# minus the delimiters ``&``, ``=`` and ``#``).
_QUERY_SAFE = "/?:@!$'()*,;+"


def urlencoded_query_string(query: Mapping[str, str]) -> str:
    """Return ``?``-prefixed, percent-encoded query string for ``query``.

    Keys are emitted in sorted order so the output is stable for equal mappings.
    A literal ``+`` survives the first encoding pass and is then rewritten to
    ``%2b``, since many servers decode a bare ``+`` in a query as a space.
    An empty mapping yields an empty string.
    """

    if not query:
        return ""
    items = sorted((str(key), str(value)) for key, value in query.items())
    encoded = urlencode(items, safe=_QUERY_SAFE, quote_via=quote)
    return "?" + encoded.replace("+", "%2b")


__all__ = ["urlencoded_query_string"]
