"""Reachability by opening a plain TCP connection to the host."""

from __future__ import annotations

import logging
import socket
from typing import Final

from netreach.core.error_handler import ErrorHandler
from netreach.core.strategy import HTTP_PROTOCOL, HTTPS_PROTOCOL, InternetObservingStrategy

logger = logging.getLogger(__name__)

DEFAULT_HOST: Final[str] = "www.google.com"
CLOSE_ERROR_MESSAGE: Final[str] = "Could not close the socket"


class SocketInternetObservingStrategy(InternetObservingStrategy):
    """Default strategy: connected means a TCP handshake with host:port succeeded."""

    def default_ping_host(self) -> str:
        return DEFAULT_HOST

    def adjust_host(self, host: str) -> str:
        # Raw sockets take a bare hostname.
        for prefix in (HTTP_PROTOCOL, HTTPS_PROTOCOL):
            if host.startswith(prefix):
                return host[len(prefix):]
        return host

    def create_socket(self) -> socket.socket:
        return socket.socket(socket.AF_INET, socket.SOCK_STREAM)

    def is_connected(
        self,
        host: str,
        port: int,
        timeout_ms: int,
        error_handler: ErrorHandler,
    ) -> bool:
        try:
            sock = self.create_socket()
        except OSError as exc:
            logger.debug("Could not create socket for %s:%s: %s", host, port, exc)
            return False
        return self.is_socket_connected(sock, host, port, timeout_ms, error_handler)

    def is_socket_connected(
        self,
        sock: socket.socket,
        host: str,
        port: int,
        timeout_ms: int,
        error_handler: ErrorHandler,
    ) -> bool:
        """Connect `sock` to host:port and always close it afterwards.

        A failed connect yields False. A failed close goes to `error_handler`
        and leaves the result untouched.
        """
        try:
            sock.settimeout(timeout_ms / 1000.0)
            sock.connect((host, port))
            connected = _is_socket_connected(sock)
        except (OSError, OverflowError) as exc:
            logger.debug("Socket check against %s:%s failed: %s", host, port, exc)
            connected = False
        finally:
            try:
                sock.close()
            except OSError as exc:
                error_handler(exc, CLOSE_ERROR_MESSAGE)
        return connected


def _is_socket_connected(sock: socket.socket) -> bool:
    try:
        sock.getpeername()
    except OSError:
        return False
    return True
