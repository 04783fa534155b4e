"""Best-effort rendering of JSON bodies for log output."""

from __future__ import annotations

import json


def _text(data: bytes) -> str | None:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return None


def json_string(data: bytes, pretty_printed: bool = True) -> str | None:
    """Render ``data`` as readable text, or ``None`` when there is nothing to show.

    ``null`` maps to ``None``. A quoted JSON string is returned untouched.
    Objects and arrays are re-serialized (indented when ``pretty_printed``).
    Anything else falls back to the raw UTF-8 text. Never raises.
    """

    text = _text(data)
    if text is None:
        return None
    if text == "null":
        return None
    if text.startswith('"') and text.endswith('"'):
        return text
    try:
        parsed = json.loads(text)
        if not isinstance(parsed, (dict, list)):
            return text
        if pretty_printed:
            return json.dumps(parsed, indent=2, ensure_ascii=False)
        return json.dumps(parsed, separators=(",", ":"), ensure_ascii=False)
    except (ValueError, RecursionError):
        return text


__all__ = ["json_string"]
