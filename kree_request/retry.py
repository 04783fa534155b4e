"""Optional retry policy for wrapping whole client calls.

The client itself never retries; callers opt in per call site, since only they
know whether an operation is safe to repeat.
"""

from __future__ import annotations

from typing import Callable

from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from kree_request.errors import GeneralError, RequestError

RETRYABLE_STATUS_CODES = frozenset({408, 429})


def is_transient(exc: BaseException) -> bool:
    """True for transport failures and for statuses worth another attempt."""

    if not isinstance(exc, RequestError):
        return False
    if exc.status is None:
        return isinstance(exc, GeneralError)
    return exc.status in RETRYABLE_STATUS_CODES or exc.status >= 500


def retrying(
    *,
    attempts: int = 5,
    min_wait: float = 1,
    max_wait: float = 16,
    predicate: Callable[[BaseException], bool] = is_transient,
):
    """Build a ``tenacity`` decorator with exponential backoff.

    The last failure is re-raised unchanged once attempts are exhausted.
    """

    return retry(
        wait=wait_exponential(min=min_wait, max=max_wait),
        stop=stop_after_attempt(attempts),
        retry=retry_if_exception(predicate),
        reraise=True,
    )


__all__ = ["RETRYABLE_STATUS_CODES", "is_transient", "retrying"]
