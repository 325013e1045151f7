"""Local HTTP server that receives the API key after browser login.

The dashboard redirects the browser to ``http://localhost:65535/?apiKey=...``
once the user has signed in; the handler captures the key and the CLI
continues in the terminal.
"""

from __future__ import annotations

import html
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer
from urllib.parse import parse_qs, urlparse

from .config import LOCAL_SERVER_HOST, LOCAL_SERVER_PORT

SUCCESS_HTML = (
    '<!DOCTYPE html><html lang="en"><head><meta charset="UTF-8">'
    "<title>Login Success</title>"
    "<style>body {font-family: sans-serif; text-align: center; margin-top: 50px;}"
    " img {max-width: 200px;} h1, p {margin: 20px 0;}</style></head><body>"
    '<img src="https://cdn.trieve.ai/trieve-logo.png" alt="Trieve Logo">'
    "<h1>Login Succeeded</h1><p>Return to your terminal to continue setup.</p>"
    "</body></html>"
)
_ERROR_HTML = (
    '<!DOCTYPE html><html lang="en"><head><meta charset="UTF-8">'
    "<title>Login Failed</title></head><body>"
    "<h1>Login Failed</h1><p>{message}</p></body></html>"
)


class ApiKeyCallbackHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the login redirect."""

    def log_message(self, format: str, *args: object) -> None:
        """Suppress default logging."""
        pass

    def do_GET(self) -> None:
        parsed = urlparse(self.path)
        if parsed.path == "/health":
            self._send(200, "text/plain", "OK")
            return

        params = parse_qs(parsed.query)
        api_key = params.get("apiKey", [None])[0]
        server: LocalLoginServer = self.server  # type: ignore

        if not api_key:
            # Browsers also ask for /favicon.ico; ignore anything without a key.
            self._send(400, "text/html", _ERROR_HTML.format(
                message=html.escape("Missing apiKey parameter")
            ))
            return

        server.received_api_key = api_key
        self._send(200, "text/html", SUCCESS_HTML)
        server._key_event.set()

    def _send(self, status: int, content_type: str, body: str) -> None:
        self.send_response(status)
        self.send_header("Content-Type", f"{content_type}; charset=UTF-8")
        self.end_headers()
        self.wfile.write(body.encode())


class LocalLoginServer(HTTPServer):
    """Loopback server that waits for a single API key callback."""

    def __init__(
        self, host: str = LOCAL_SERVER_HOST, port: int = LOCAL_SERVER_PORT
    ) -> None:
        super().__init__((host, port), ApiKeyCallbackHandler)
        self.received_api_key: str | None = None
        self._key_event = threading.Event()
        self._shutdown_event = threading.Event()

    @property
    def port(self) -> int:
        return self.server_address[1]

    def wait_for_api_key(self, timeout: float = 300.0) -> str | None:
        """Serve requests until an API key arrives.

        Returns:
            The API key, or None if *timeout* seconds passed first.
        """

        def serve_until_done() -> None:
            while not self._shutdown_event.is_set():
                self.handle_request()

        self.timeout = 0.5
        server_thread = threading.Thread(target=serve_until_done, daemon=True)
        server_thread.start()

        received = self._key_event.wait(timeout=timeout)
        self._shutdown_event.set()
        server_thread.join(timeout=2)
        return self.received_api_key if received else None


__all__ = ["LocalLoginServer", "SUCCESS_HTML"]
