"""Environment-driven defaults shared by request configurations."""

from __future__ import annotations

import math
import os

from kree_request.errors import ConfigurationError

DEFAULT_TIMEOUT_SECONDS = 30.0
TIMEOUT_ENV = "KREE_REQUEST_TIMEOUT"
BASE_URL_ENV = "KREE_REQUEST_BASE_URL"


def parse_timeout(raw: str | float | int) -> float:
    """Coerce a timeout value to positive seconds."""

    try:
        seconds = float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Timeout must be a number of seconds, got {raw!r}.") from exc
    if not math.isfinite(seconds) or seconds <= 0:
        raise ConfigurationError(f"Timeout must be positive, got {raw!r}.")
    return seconds


def default_timeout() -> float:
    raw = os.getenv(TIMEOUT_ENV)
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    return parse_timeout(raw)


__all__ = [
    "BASE_URL_ENV",
    "DEFAULT_TIMEOUT_SECONDS",
    "TIMEOUT_ENV",
    "default_timeout",
    "parse_timeout",
]
