from __future__ import annotations

import socket
import threading
from typing import Iterator

import pytest

from netreach.core.error_handler import ErrorHandler
from netreach.core.strategy import InternetObservingStrategy


class ScriptedStrategy(InternetObservingStrategy):
    """Returns queued results; the last one repeats forever."""

    def __init__(self, results: list[bool], *, default_host: str = "www.example.com") -> None:
        self._results = list(results)
        self._default_host = default_host
        self._lock = threading.Lock()
        self.adjusted: list[str] = []
        self.calls: list[tuple[str, int, int, ErrorHandler]] = []

    def default_ping_host(self) -> str:
        return self._default_host

    def adjust_host(self, host: str) -> str:
        self.adjusted.append(host)
        return f"adjusted.{host}"

    def is_connected(self, host: str, port: int, timeout_ms: int, error_handler: ErrorHandler) -> bool:
        with self._lock:
            self.calls.append((host, port, timeout_ms, error_handler))
            if len(self._results) > 1:
                return self._results.pop(0)
            return self._results[0]


@pytest.fixture
def scripted_strategy() -> type[ScriptedStrategy]:
    return ScriptedStrategy


@pytest.fixture
def listening_port() -> Iterator[int]:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        sock.listen(8)
        yield sock.getsockname()[1]


@pytest.fixture
def closed_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]
