"""Google OAuth 2.0 consent flow for the one-time setup command.

The bridge itself never runs this flow: it only refreshes access tokens
from the refresh token its callers supply. This module obtains that refresh
token once, by opening a browser on the Google consent page and receiving
the authorization callback on a local HTTP server.

Security considerations:
- A random state parameter protects the callback against CSRF
- Offline access with a forced consent prompt so Google returns a
  refresh token every time
"""

from __future__ import annotations

import errno
import json
import logging
import secrets
import time
import webbrowser
from collections.abc import Callable
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs, urlencode, urlparse

from google_auth_oauthlib.flow import Flow

from gmail_bridge.auth.credentials import GOOGLE_TOKEN_URI, OAuthCredentials
from gmail_bridge.utils.errors import AuthenticationError

logger = logging.getLogger(__name__)

# Everything the bridge's tools need, filters included (settings.basic)
GMAIL_SCOPES = [
    "https://www.googleapis.com/auth/gmail.modify",
    "https://www.googleapis.com/auth/gmail.compose",
    "https://www.googleapis.com/auth/gmail.send",
    "https://www.googleapis.com/auth/gmail.readonly",
    "https://www.googleapis.com/auth/gmail.labels",
    "https://www.googleapis.com/auth/gmail.settings.basic",
]

GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/v2/auth"
CALLBACK_PATH = "/oauth2callback"
DEFAULT_OAUTH_PORT = 3000

_SUCCESS_PAGE = (
    b"<html><body><h1>Authorization successful!</h1>"
    b"<p>You can close this window.</p></body></html>"
)
_FAILURE_PAGE = (
    b"<html><body><h1>Authorization failed</h1>"
    b"<p>Return to the terminal for details. You can close this window.</p>"
    b"</body></html>"
)


def load_client_file(path: str | Path) -> tuple[str, str]:
    """Read client_id and client_secret from a Google OAuth client file.

    Accepts the JSON downloaded from the Cloud Console for either a
    Desktop ("installed") or Web ("web") client.

    Args:
        path: Path to the client JSON file.

    Returns:
        Tuple of (client_id, client_secret).

    Raises:
        AuthenticationError: If the file is missing, not JSON, or lacks
            the client fields.
    """
    file_path = Path(path).resolve()
    if not file_path.exists():
        raise AuthenticationError(f"File not found: {file_path}")

    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise AuthenticationError(f"Could not read credentials file: {e}") from e

    config = None
    if isinstance(data, dict):
        config = data.get("installed") or data.get("web")
    if not isinstance(config, dict):
        raise AuthenticationError(
            'Invalid credentials file. Must contain "installed" or "web" key.'
        )

    client_id = config.get("client_id")
    client_secret = config.get("client_secret")
    if not client_id or not client_secret:
        raise AuthenticationError(
            "Invalid credentials file. Missing client_id or client_secret."
        )
    return client_id, client_secret


class SetupFlow:
    """Local-server OAuth flow that yields a refresh token.

    Opens a browser to the Google consent page and receives the callback
    on ``http://localhost:<port>/oauth2callback``.

    Example:
        >>> flow = SetupFlow(client_id, client_secret, port=3000)
        >>> credentials = flow.run_local_server()
        >>> credentials.refresh_token.get_secret_value()
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        port: int = DEFAULT_OAUTH_PORT,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._port = port

    @property
    def redirect_uri(self) -> str:
        """Callback URI for the currently configured port."""
        return f"http://localhost:{self._port}{CALLBACK_PATH}"

    def _get_client_config(self) -> dict[str, Any]:
        """Build OAuth client configuration dictionary.

        Returns:
            Client configuration in the format expected by google-auth-oauthlib.
        """
        return {
            "installed": {
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "auth_uri": GOOGLE_AUTH_URI,
                "token_uri": GOOGLE_TOKEN_URI,
                "redirect_uris": [self.redirect_uri],
            }
        }

    def create_auth_url(self, state: str | None = None) -> tuple[str, str]:
        """Create authorization URL for user consent.

        Args:
            state: Optional state parameter for CSRF protection.
                If not provided, a random 32-byte state is generated.

        Returns:
            Tuple of (auth_url, state).
        """
        if state is None:
            state = secrets.token_urlsafe(32)

        params = {
            "client_id": self._client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(GMAIL_SCOPES),
            "state": state,
            "access_type": "offline",
            "prompt": "consent",
        }

        auth_url = f"{GOOGLE_AUTH_URI}?{urlencode(params)}"
        logger.debug("Created auth URL with state: %s", state[:8] + "...")
        return auth_url, state

    def exchange_code(self, code: str) -> OAuthCredentials:
        """Exchange an authorization code for a refresh token.

        Args:
            code: Authorization code from the OAuth callback.

        Returns:
            Credentials holding this client and the new refresh token.

        Raises:
            AuthenticationError: If the exchange fails or Google returns no
                refresh token.
        """
        flow = Flow.from_client_config(
            self._get_client_config(),
            scopes=GMAIL_SCOPES,
            redirect_uri=self.redirect_uri,
        )

        try:
            flow.fetch_token(code=code)
        except Exception as e:
            logger.error("Failed to exchange authorization code: %s", e)
            raise AuthenticationError(
                f"Failed to exchange authorization code: {e}",
                details={"error_type": type(e).__name__},
            ) from e

        refresh_token = flow.credentials.refresh_token
        if not refresh_token:
            raise AuthenticationError(
                "No refresh token received. Revoke access at "
                "https://myaccount.google.com/permissions and run again."
            )

        logger.info("Successfully exchanged authorization code for tokens")
        return OAuthCredentials(
            client_id=self._client_id,
            client_secret=self._client_secret,
            refresh_token=refresh_token,
        )

    def _create_server(
        self,
        handler_class: type[BaseHTTPRequestHandler],
        port: int,
        max_attempts: int = 3,
    ) -> tuple[HTTPServer, int]:
        """Create HTTP server with fallback ports.

        Args:
            handler_class: HTTP request handler class for the server.
            port: Primary port to attempt binding.
            max_attempts: Maximum number of ports to try (default: 3).

        Returns:
            Tuple of (HTTPServer instance, actual port bound).

        Raises:
            AuthenticationError: If all port attempts fail.
        """
        for attempt in range(max_attempts):
            try_port = port + attempt
            try:
                server = HTTPServer(("localhost", try_port), handler_class)
                if attempt > 0:
                    logger.info(
                        "Using fallback port %d (port %d was in use)",
                        try_port,
                        port,
                    )
                return server, try_port
            except OSError as e:
                if e.errno == errno.EADDRINUSE:
                    logger.warning(
                        "Port %d in use, trying %d...", try_port, try_port + 1
                    )
                    continue
                raise

        raise AuthenticationError(
            f"Could not bind to ports {port}-{port + max_attempts - 1}. "
            "All ports are in use.",
            details={"attempted_ports": list(range(port, port + max_attempts))},
        )

    def run_local_server(
        self,
        timeout: int = 300,
        on_auth_url: Callable[[str], None] | None = None,
        open_browser: bool = True,
    ) -> OAuthCredentials:
        """Run the consent flow with a browser and a callback server.

        Note: a fallback port only works if its redirect URI is allowed for
        the client in the Cloud Console; Desktop clients allow any
        localhost port.

        Args:
            timeout: Seconds to wait for the user to finish consent.
            on_auth_url: Called with the consent URL once it is known.
            open_browser: Whether to open the URL in the default browser.

        Returns:
            Credentials including the new refresh token.

        Raises:
            AuthenticationError: If consent fails, is denied, times out, or
                the callback state does not match.
        """
        result: dict[str, str] = {}
        failure: list[AuthenticationError] = []
        # Set once the port is bound (below the handler class)
        state = ""

        def reject(handler: BaseHTTPRequestHandler, error: AuthenticationError) -> None:
            failure.append(error)
            handler.send_response(400)
            handler.send_header("Content-type", "text/html")
            handler.end_headers()
            handler.wfile.write(_FAILURE_PAGE)

        class CallbackHandler(BaseHTTPRequestHandler):
            """HTTP request handler for the OAuth callback."""

            def do_GET(handler_self) -> None:  # noqa: N802, N805
                parsed = urlparse(handler_self.path)
                if parsed.path != CALLBACK_PATH:
                    handler_self.send_response(404)
                    handler_self.end_headers()
                    return

                params = parse_qs(parsed.query)

                if "error" in params:
                    oauth_error = params["error"][0]
                    reject(
                        handler_self,
                        AuthenticationError(
                            f"OAuth error: {oauth_error}",
                            details={"oauth_error": oauth_error},
                        ),
                    )
                    return

                returned_state = params.get("state", [""])[0]
                if not secrets.compare_digest(returned_state, state):
                    reject(
                        handler_self,
                        AuthenticationError("State mismatch - possible CSRF attack"),
                    )
                    return

                code = params.get("code", [None])[0]
                if not code:
                    reject(
                        handler_self,
                        AuthenticationError("No authorization code received"),
                    )
                    return

                result["code"] = code
                handler_self.send_response(200)
                handler_self.send_header("Content-type", "text/html")
                handler_self.end_headers()
                handler_self.wfile.write(_SUCCESS_PAGE)

            def log_message(handler_self, format: str, *args: object) -> None:  # noqa: N805
                logger.debug("OAuth callback server: %s", format % args)

        server, self._port = self._create_server(CallbackHandler, self._port)
        auth_url, state = self.create_auth_url()

        if on_auth_url is not None:
            on_auth_url(auth_url)
        if open_browser:
            webbrowser.open(auth_url)
        logger.info("Waiting for authorization callback on port %d...", self._port)

        # Stray requests (favicon etc.) do not end the wait
        deadline = time.monotonic() + timeout
        try:
            while "code" not in result and not failure:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                server.timeout = remaining
                server.handle_request()
        finally:
            server.server_close()

        if failure:
            raise failure[0]

        if "code" not in result:
            raise AuthenticationError(
                "Authorization timed out or was cancelled",
                details={"timeout_seconds": timeout},
            )

        return self.exchange_code(result["code"])


__all__ = [
    "SetupFlow",
    "load_client_file",
    "GMAIL_SCOPES",
    "GOOGLE_AUTH_URI",
    "CALLBACK_PATH",
    "DEFAULT_OAUTH_PORT",
]
