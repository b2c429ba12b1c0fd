"""Reachability by issuing an HTTP request to a walled-garden detection URL.

Captive portals usually accept TCP connections for any host, which fools the
socket strategy. Asking for a real HTTP response catches that case. Any
response counts, whatever its status code, and redirects are never followed.
"""

from __future__ import annotations

import http.client
import logging
from typing import Final
import urllib.error
import urllib.request
from urllib.parse import urlsplit, urlunsplit

from netreach.core.error_handler import ErrorHandler
from netreach.core.strategy import HTTP_PROTOCOL, HTTPS_PROTOCOL, InternetObservingStrategy

logger = logging.getLogger(__name__)

DEFAULT_HOST: Final[str] = "http://clients3.google.com/generate_204"
CONNECTION_ERROR_MESSAGE: Final[str] = "Could not establish connection with WalledGardenStrategy"
USER_AGENT: Final[str] = "netreach/0.1"


class _NoRedirectHandler(urllib.request.HTTPRedirectHandler):
    def redirect_request(self, req, fp, code, msg, headers, newurl):  # noqa: ANN001
        return None


class WalledGardenInternetObservingStrategy(InternetObservingStrategy):
    def default_ping_host(self) -> str:
        return DEFAULT_HOST

    def adjust_host(self, host: str) -> str:
        if host.startswith(HTTP_PROTOCOL) or host.startswith(HTTPS_PROTOCOL):
            return host
        return HTTP_PROTOCOL + host

    def create_request(self, host: str, port: int) -> urllib.request.Request:
        """Build an uncached GET for `host` with its port replaced by `port`."""
        parts = urlsplit(host)
        if not parts.hostname:
            raise ValueError(f"No host in URL: {host!r}")
        netloc = parts.hostname
        if ":" in netloc:
            netloc = f"[{netloc}]"
        url = urlunsplit((parts.scheme, f"{netloc}:{port}", parts.path, parts.query, ""))
        return urllib.request.Request(
            url,
            headers={
                "User-Agent": USER_AGENT,
                "Cache-Control": "no-cache",
                "Pragma": "no-cache",
            },
            method="GET",
        )

    def build_opener(self) -> urllib.request.OpenerDirector:
        # No proxies: the check is about this machine's own route out.
        return urllib.request.build_opener(
            urllib.request.ProxyHandler({}),
            _NoRedirectHandler(),
        )

    def is_connected(
        self,
        host: str,
        port: int,
        timeout_ms: int,
        error_handler: ErrorHandler,
    ) -> bool:
        try:
            request = self.create_request(host, port)
            with self.build_opener().open(request, timeout=timeout_ms / 1000.0) as response:
                logger.debug("Walled garden check %s -> HTTP %s", request.full_url, response.status)
            return True
        except urllib.error.HTTPError as exc:
            # A non-2xx answer still came from the network.
            exc.close()
            logger.debug("Walled garden check %s -> HTTP %s", host, exc.code)
            return True
        except (OSError, OverflowError, ValueError, http.client.HTTPException) as exc:
            error_handler(exc, CONNECTION_ERROR_MESSAGE)
            return False
