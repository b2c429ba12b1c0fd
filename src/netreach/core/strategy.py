"""Common contract for internet reachability strategies."""

from __future__ import annotations

from abc import ABC, abstractmethod
import dataclasses
from typing import Final

from netreach.core.error_handler import ErrorHandler
from netreach.core.observer import InternetObservation
from netreach.core.settings import ProbeConfig, validate_target

HTTP_PROTOCOL: Final[str] = "http://"
HTTPS_PROTOCOL: Final[str] = "https://"


class InternetObservingStrategy(ABC):
    """A way of deciding whether a remote host can be reached right now.

    Implementations must never raise for a failed connectivity attempt: not
    being able to connect is a valid `False` result.
    """

    @abstractmethod
    def default_ping_host(self) -> str: ...

    @abstractmethod
    def adjust_host(self, host: str) -> str: ...

    @abstractmethod
    def is_connected(
        self,
        host: str,
        port: int,
        timeout_ms: int,
        error_handler: ErrorHandler,
    ) -> bool: ...

    def observe_internet_connectivity(
        self,
        initial_interval_ms: int,
        interval_ms: int,
        host: str,
        port: int,
        timeout_ms: int,
        error_handler: ErrorHandler,
    ) -> InternetObservation:
        """Poll `is_connected` and report only changes in reachability.

        Arguments are validated here, before anything is scheduled. The
        returned observation is idle until it is started or iterated.
        """
        config = ProbeConfig(
            initial_interval_ms=initial_interval_ms,
            interval_ms=interval_ms,
            host=host,
            port=port,
            timeout_ms=timeout_ms,
            error_handler=error_handler,
        )
        config = dataclasses.replace(config, host=self.adjust_host(config.host))
        return InternetObservation(config, self)

    def check_internet_connectivity(
        self,
        host: str,
        port: int,
        timeout_ms: int,
        error_handler: ErrorHandler,
    ) -> bool:
        validate_target(host, port, timeout_ms, error_handler)
        return self.is_connected(self.adjust_host(host), port, timeout_ms, error_handler)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
