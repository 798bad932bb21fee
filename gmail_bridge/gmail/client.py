"""Per-request Gmail API client construction."""

from __future__ import annotations

import logging

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import Resource, build

from gmail_bridge.auth.credentials import GOOGLE_TOKEN_URI, OAuthCredentials
from gmail_bridge.utils.errors import AuthenticationError

logger = logging.getLogger(__name__)


def build_credentials(credentials: OAuthCredentials) -> Credentials:
    """Build google-auth credentials from the caller's OAuth fields.

    No access token is set; it is obtained from the refresh token.
    """
    return Credentials(  # type: ignore[no-untyped-call]
        token=None,
        refresh_token=credentials.refresh_token.get_secret_value(),
        token_uri=GOOGLE_TOKEN_URI,
        client_id=credentials.client_id,
        client_secret=credentials.client_secret.get_secret_value(),
    )


def build_service(credentials: OAuthCredentials) -> Resource:
    """Get an authenticated Gmail API service for one request.

    Exchanges the refresh token for a short-lived access token, then builds
    the service. Nothing is cached between calls.

    Args:
        credentials: OAuth client and refresh token for this request.

    Returns:
        Gmail API Resource object.

    Raises:
        AuthenticationError: If the token refresh fails.
    """
    creds = build_credentials(credentials)
    try:
        creds.refresh(Request())
    except Exception as e:
        logger.error("Token refresh failed: %s", e)
        raise AuthenticationError(f"Token refresh failed: {e}") from e

    service = build("gmail", "v1", credentials=creds, cache_discovery=False)
    logger.debug("Created Gmail service for client %s", credentials.client_id[:12])
    return service
