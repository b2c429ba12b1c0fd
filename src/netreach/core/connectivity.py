"""Entry points for observing or checking internet connectivity.

These fill in the usual defaults (socket strategy, port 80, 2 s interval and
timeout, logging error handler) so callers only pass what they care about.
"""

from __future__ import annotations

from typing import Callable

from netreach.core.error_handler import DefaultErrorHandler, ErrorHandler
from netreach.core.errors import InvalidArgumentError
from netreach.core.observer import InternetObservation
from netreach.core.settings import (
    DEFAULT_INITIAL_INTERVAL_MS,
    DEFAULT_INTERVAL_MS,
    DEFAULT_PORT,
    DEFAULT_TIMEOUT_MS,
    ObservingSettings,
)
from netreach.core.socket_strategy import SocketInternetObservingStrategy
from netreach.core.strategy import InternetObservingStrategy
from netreach.core.walled_garden_strategy import WalledGardenInternetObservingStrategy

STRATEGIES: dict[str, Callable[[], InternetObservingStrategy]] = {
    "socket": SocketInternetObservingStrategy,
    "walled_garden": WalledGardenInternetObservingStrategy,
}


def create_strategy(name: str) -> InternetObservingStrategy:
    factory = STRATEGIES.get((name or "").strip().lower())
    if factory is None:
        raise InvalidArgumentError(
            f"Unknown strategy: {name!r}",
            user_message=f"Unknown strategy {name!r}; expected one of: {', '.join(STRATEGIES)}.",
        )
    return factory()


def observe_internet_connectivity(
    strategy: InternetObservingStrategy | None = None,
    *,
    initial_interval_ms: int = DEFAULT_INITIAL_INTERVAL_MS,
    interval_ms: int = DEFAULT_INTERVAL_MS,
    host: str | None = None,
    port: int = DEFAULT_PORT,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    error_handler: ErrorHandler | None = None,
) -> InternetObservation:
    strategy = strategy or SocketInternetObservingStrategy()
    return strategy.observe_internet_connectivity(
        initial_interval_ms,
        interval_ms,
        host if host is not None else strategy.default_ping_host(),
        port,
        timeout_ms,
        error_handler if error_handler is not None else DefaultErrorHandler(),
    )


def observe_with_settings(
    settings: ObservingSettings,
    *,
    strategy: InternetObservingStrategy | None = None,
    error_handler: ErrorHandler | None = None,
) -> InternetObservation:
    return observe_internet_connectivity(
        strategy or create_strategy(settings.strategy),
        initial_interval_ms=settings.initial_interval_ms,
        interval_ms=settings.interval_ms,
        host=settings.host,
        port=settings.port,
        timeout_ms=settings.timeout_ms,
        error_handler=error_handler,
    )


def check_internet_connectivity(
    strategy: InternetObservingStrategy | None = None,
    *,
    host: str | None = None,
    port: int = DEFAULT_PORT,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    error_handler: ErrorHandler | None = None,
) -> bool:
    """Run a single blocking check, bounded by `timeout_ms`."""
    strategy = strategy or SocketInternetObservingStrategy()
    return strategy.check_internet_connectivity(
        host if host is not None else strategy.default_ping_host(),
        port,
        timeout_ms,
        error_handler if error_handler is not None else DefaultErrorHandler(),
    )
