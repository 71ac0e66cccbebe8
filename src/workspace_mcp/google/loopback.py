"""One-shot loopback listener for the OAuth redirect.

The listener serves a single path, ``/oauth2callback``. The first request to
that path ends the wait whatever its outcome; requests to any other path get
a 404 and the listener keeps waiting.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any
from urllib.parse import parse_qs, urlparse

logger = logging.getLogger(__name__)

DEFAULT_PORT = 53177
CALLBACK_PATH = "/oauth2callback"


@dataclass
class CallbackResult:
    """Outcome of the OAuth callback."""

    status: int
    token: dict[str, Any] | None = None
    error: str | None = None

    @property
    def refresh_token(self) -> str | None:
        if self.token:
            return self.token.get("refresh_token") or None
        return None


class _CallbackHandler(BaseHTTPRequestHandler):
    server: LoopbackServer

    def do_GET(self) -> None:
        url = urlparse(self.path)
        if url.path != CALLBACK_PATH:
            self._reply(404, "Not Found")
            return

        code = parse_qs(url.query).get("code", [""])[0]
        if not code:
            self._reply(400, "Missing code")
            self.server.result = CallbackResult(status=400, error="Missing code")
            return

        try:
            token = self.server.exchange(code)
        except Exception as e:
            logger.error(f"Code exchange failed: {e}")
            self._reply(500, "Error")
            self.server.result = CallbackResult(status=500, error=str(e))
            return

        self._reply(200, "OK! You can close this window. The token is shown in the terminal.")
        self.server.result = CallbackResult(status=200, token=token)

    def _reply(self, status: int, body: str) -> None:
        payload = body.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug(f"{self.address_string()} - {format % args}")


class LoopbackServer(HTTPServer):
    """HTTP listener that waits for one OAuth callback.

    Example:
        >>> with LoopbackServer(exchange=auth.exchange_code) as server:
        ...     print(server.redirect_uri)
        ...     result = server.wait_for_callback(timeout=120)
    """

    def __init__(
        self,
        exchange: Callable[[str], dict[str, Any]],
        port: int = DEFAULT_PORT,
        host: str = "localhost",
    ):
        """Bind the listener.

        Args:
            exchange: Called with the authorization code; returns the token dict.
            port: Local port. 0 picks a free one.
            host: Interface to bind.
        """
        super().__init__((host, port), _CallbackHandler)
        self.exchange = exchange
        self.result: CallbackResult | None = None

    @property
    def port(self) -> int:
        return self.server_address[1]

    @property
    def redirect_uri(self) -> str:
        return f"http://localhost:{self.port}{CALLBACK_PATH}"

    def wait_for_callback(self, timeout: float | None = None) -> CallbackResult:
        """Serve requests until the callback path is hit, then close.

        Args:
            timeout: Total seconds to wait for the callback, however many
                other requests arrive meanwhile. None waits forever.

        Returns:
            The callback outcome; status 408 if the wait timed out.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        try:
            while self.result is None:
                if deadline is not None:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        self.handle_timeout()
                        break
                    self.timeout = remaining
                self.handle_request()
        finally:
            self.server_close()
        return self.result

    def handle_timeout(self) -> None:
        self.result = CallbackResult(status=408, error="Timed out waiting for OAuth callback")
