from __future__ import annotations

from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
import threading
from typing import Iterator
from unittest import mock
from urllib.parse import urlsplit

import pytest

from netreach.core.errors import InvalidArgumentError
from netreach.core.walled_garden_strategy import (
    CONNECTION_ERROR_MESSAGE,
    DEFAULT_HOST,
    WalledGardenInternetObservingStrategy,
)

PORT = 80
TIMEOUT_MS = 30


class _Handler(BaseHTTPRequestHandler):
    hits: list[str] = []

    def do_GET(self) -> None:  # noqa: N802
        self.hits.append(self.path)
        status = {"/generate_204": 204, "/broken": 500, "/redirect": 302}.get(self.path, 200)
        self.send_response(status)
        if status == 302:
            self.send_header("Location", "/followed")
        self.send_header("Content-Length", "0")
        self.end_headers()

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        pass


@pytest.fixture
def http_server() -> Iterator[ThreadingHTTPServer]:
    _Handler.hits = []
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()
    thread.join(timeout=5)


@pytest.fixture
def strategy() -> WalledGardenInternetObservingStrategy:
    return WalledGardenInternetObservingStrategy()


def test_default_ping_host(strategy: WalledGardenInternetObservingStrategy) -> None:
    assert strategy.default_ping_host() == DEFAULT_HOST
    assert urlsplit(DEFAULT_HOST).hostname == "clients3.google.com"


@pytest.mark.parametrize(
    ("given", "expected"),
    [
        ("http://www.website.com", "http://www.website.com"),
        ("https://www.website.com", "https://www.website.com"),
        ("www.website.com", "http://www.website.com"),
        ("myhttp://host", "http://myhttp://host"),
    ],
)
def test_adjust_host_ensures_protocol_prefix(
    strategy: WalledGardenInternetObservingStrategy, given: str, expected: str
) -> None:
    assert strategy.adjust_host(given) == expected


def test_create_request(strategy: WalledGardenInternetObservingStrategy) -> None:
    request = strategy.create_request(DEFAULT_HOST, PORT)

    parts = urlsplit(request.full_url)
    assert parts.scheme == "http"
    assert parts.hostname == "clients3.google.com"
    assert parts.port == PORT
    assert parts.path == "/generate_204"
    assert request.get_method() == "GET"
    assert request.get_header("Cache-control") == "no-cache"
    assert request.get_header("Pragma") == "no-cache"


def test_create_request_replaces_port(strategy: WalledGardenInternetObservingStrategy) -> None:
    request = strategy.create_request("https://example.com:8443/path?q=1", 443)
    assert request.full_url == "https://example.com:443/path?q=1"


def test_request_failure_goes_to_error_handler(
    strategy: WalledGardenInternetObservingStrategy, monkeypatch
) -> None:
    error = OSError(CONNECTION_ERROR_MESSAGE)

    def fail(host: str, port: int) -> None:
        raise error

    monkeypatch.setattr(strategy, "create_request", fail)
    handler = mock.Mock()

    assert strategy.is_connected(DEFAULT_HOST, PORT, TIMEOUT_MS, handler) is False
    handler.assert_called_once_with(error, "Could not establish connection with WalledGardenStrategy")


def test_malformed_host_is_not_connected(strategy: WalledGardenInternetObservingStrategy) -> None:
    handler = mock.Mock()
    assert strategy.is_connected("http://", PORT, TIMEOUT_MS, handler) is False
    assert isinstance(handler.call_args.args[0], ValueError)


@pytest.mark.parametrize("path", ["/generate_204", "/ok", "/broken"])
def test_any_http_response_counts_as_connected(
    strategy: WalledGardenInternetObservingStrategy, http_server: ThreadingHTTPServer, path: str
) -> None:
    handler = mock.Mock()
    port = http_server.server_address[1]

    assert strategy.is_connected(f"http://127.0.0.1{path}", port, 2000, handler) is True
    handler.assert_not_called()


def test_redirects_are_not_followed(
    strategy: WalledGardenInternetObservingStrategy, http_server: ThreadingHTTPServer
) -> None:
    port = http_server.server_address[1]

    assert strategy.is_connected("http://127.0.0.1/redirect", port, 2000, mock.Mock()) is True
    assert _Handler.hits == ["/redirect"]


def test_closed_port_is_not_connected(
    strategy: WalledGardenInternetObservingStrategy, closed_port: int
) -> None:
    handler = mock.Mock()

    assert strategy.is_connected("http://127.0.0.1", closed_port, 1000, handler) is False
    handler.assert_called_once()
    error, message = handler.call_args.args
    assert isinstance(error, OSError)
    assert message == CONNECTION_ERROR_MESSAGE


def test_out_of_range_port_is_not_connected(strategy: WalledGardenInternetObservingStrategy) -> None:
    handler = mock.Mock()
    assert strategy.is_connected("http://127.0.0.1", 70000, 200, handler) is False
    handler.assert_called_once()
    assert handler.call_args.args[1] == CONNECTION_ERROR_MESSAGE


def test_out_of_range_port_rejected_before_check(strategy: WalledGardenInternetObservingStrategy) -> None:
    with pytest.raises(InvalidArgumentError):
        strategy.observe_internet_connectivity(0, 2000, DEFAULT_HOST, 70000, TIMEOUT_MS, mock.Mock())
