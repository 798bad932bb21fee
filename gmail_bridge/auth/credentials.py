"""OAuth credential resolution for tools and the webhook.

Tool calls over HTTP carry their credentials in the Authorization header:

    Authorization: GMAIL client_id=...&client_secret=...&refresh_token=...

Over STDIO there is no HTTP request, so the same three values are read from
the environment, which is also where the webhook takes them from.
"""

from __future__ import annotations

import logging
import os
import secrets
from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qs

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from gmail_bridge.utils.errors import AuthenticationError

logger = logging.getLogger(__name__)

AUTH_SCHEME = "GMAIL "
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"

ENV_CLIENT_ID = "GMAIL_CLIENT_ID"
ENV_CLIENT_SECRET = "GMAIL_CLIENT_SECRET"
ENV_REFRESH_TOKEN = "GMAIL_REFRESH_TOKEN"
ENV_WEBHOOK_SECRET = "WEBHOOK_SECRET"

MISSING_HEADER_MESSAGE = (
    "Gmail bridge requires OAuth credentials. "
    "Pass via Authorization header: "
    "GMAIL client_id=YOUR_CLIENT_ID&client_secret=YOUR_CLIENT_SECRET"
    "&refresh_token=YOUR_REFRESH_TOKEN\n\n"
    'Run "gmail-bridge-setup <credentials.json>" to generate credentials.'
)
MISSING_FIELDS_MESSAGE = (
    "Missing required credentials: client_id, client_secret, and refresh_token"
)


class OAuthCredentials(BaseModel):
    """OAuth client and refresh token used to call Gmail on a user's behalf."""

    model_config = ConfigDict(frozen=True)

    client_id: str = Field(..., min_length=1)
    client_secret: SecretStr
    refresh_token: SecretStr


def _build(
    client_id: str | None,
    client_secret: str | None,
    refresh_token: str | None,
) -> OAuthCredentials | None:
    if not client_id or not client_secret or not refresh_token:
        return None
    return OAuthCredentials(
        client_id=client_id,
        client_secret=SecretStr(client_secret),
        refresh_token=SecretStr(refresh_token),
    )


def parse_authorization_header(value: str | None) -> OAuthCredentials:
    """Parse a ``GMAIL client_id=...&client_secret=...&refresh_token=...`` header.

    Args:
        value: Raw Authorization header value.

    Returns:
        Parsed credentials.

    Raises:
        AuthenticationError: If the header is absent, uses another scheme,
            or lacks one of the three fields.
    """
    if not value or not value.startswith(AUTH_SCHEME):
        raise AuthenticationError(MISSING_HEADER_MESSAGE)

    params = parse_qs(value[len(AUTH_SCHEME) :].strip())
    credentials = _build(
        params.get("client_id", [None])[0],
        params.get("client_secret", [None])[0],
        params.get("refresh_token", [None])[0],
    )
    if credentials is None:
        raise AuthenticationError(MISSING_FIELDS_MESSAGE)
    return credentials


def credentials_from_env() -> OAuthCredentials:
    """Read credentials from the GMAIL_* environment variables.

    Raises:
        AuthenticationError: If any of the variables is unset or empty.
    """
    credentials = _build(
        os.getenv(ENV_CLIENT_ID),
        os.getenv(ENV_CLIENT_SECRET),
        os.getenv(ENV_REFRESH_TOKEN),
    )
    if credentials is None:
        raise AuthenticationError(
            f"Missing {ENV_CLIENT_ID}, {ENV_CLIENT_SECRET}, or {ENV_REFRESH_TOKEN}. "
            "Set them in the environment (or .env)."
        )
    return credentials


def credentials_from_headers(headers: Mapping[str, str] | None) -> OAuthCredentials:
    """Resolve credentials for a tool call.

    Args:
        headers: HTTP headers of the MCP request, or None when the call did
            not arrive over HTTP (STDIO transport).

    Returns:
        Credentials from the Authorization header, or from the environment
        when there is no HTTP request.
    """
    if headers is None:
        return credentials_from_env()
    return parse_authorization_header(headers.get("authorization"))


def credentials_from_context(ctx: Any) -> OAuthCredentials:
    """Resolve credentials from a FastMCP tool Context."""
    request = getattr(ctx.request_context, "request", None)
    headers = getattr(request, "headers", None) if request is not None else None
    return credentials_from_headers(headers)


def check_webhook_secret(authorization: str | None) -> bool:
    """Check the webhook bearer token against WEBHOOK_SECRET.

    Returns:
        True when no secret is configured or the header matches
        ``Bearer <secret>``.
    """
    secret = os.getenv(ENV_WEBHOOK_SECRET)
    if not secret:
        return True
    if not authorization:
        return False
    return secrets.compare_digest(
        authorization.encode("utf-8"), f"Bearer {secret}".encode("utf-8")
    )
