"""Sinks that receive one diagnostic message per request attempt."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable


@runtime_checkable
class DiagnosticSink(Protocol):
    def log(self, message: str) -> None: ...


class LoggingSink:
    """Forward diagnostic messages to a stdlib logger."""

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.DEBUG) -> None:
        self.logger = logger or logging.getLogger("kree_request.exchange")
        self.level = level

    def log(self, message: str) -> None:
        self.logger.log(self.level, "%s", message)


__all__ = ["DiagnosticSink", "LoggingSink"]
