"""Authentication module for the Gmail bridge.

This module resolves the OAuth credentials each request runs with and
provides the one-time consent flow that produces them:

- Authorization header parsing (``GMAIL client_id=...&...``)
- Environment credentials for STDIO and the webhook
- Webhook bearer-token check
- Local server OAuth flow for the setup command

Usage:
    >>> from gmail_bridge.auth import parse_authorization_header
    >>> credentials = parse_authorization_header(request.headers["authorization"])
"""

from gmail_bridge.auth.credentials import (
    AUTH_SCHEME,
    GOOGLE_TOKEN_URI,
    OAuthCredentials,
    check_webhook_secret,
    credentials_from_context,
    credentials_from_env,
    credentials_from_headers,
    parse_authorization_header,
)
from gmail_bridge.auth.oauth import GMAIL_SCOPES, SetupFlow, load_client_file

__all__ = [
    # Credentials
    "AUTH_SCHEME",
    "GOOGLE_TOKEN_URI",
    "OAuthCredentials",
    "check_webhook_secret",
    "credentials_from_context",
    "credentials_from_env",
    "credentials_from_headers",
    "parse_authorization_header",
    # Setup flow
    "GMAIL_SCOPES",
    "SetupFlow",
    "load_client_file",
]
