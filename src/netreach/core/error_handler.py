"""Side channel for failures that must not affect a reachability result.

An error handler is any callable taking ``(error, message)``. Strategies call
it for cleanup failures (and, for the walled-garden strategy, failed
requests); whatever the handler does, the check still returns a bool.
"""

from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[BaseException, str], None]


class DefaultErrorHandler:
    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def __call__(self, error: BaseException, message: str) -> None:
        self._log.error("%s", message, exc_info=error)

    def __repr__(self) -> str:
        return f"DefaultErrorHandler(log={self._log.name!r})"
