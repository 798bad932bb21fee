"""Pytest configuration and fixtures for Gmail bridge tests."""

import base64
import email
from email import policy
from email.message import EmailMessage

import pytest

from gmail_bridge.auth.credentials import OAuthCredentials


def _b64url(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def _parse_raw(raw: str) -> EmailMessage:
    data = base64.urlsafe_b64decode(raw + "=" * (-len(raw) % 4))
    return email.message_from_bytes(data, policy=policy.default)


@pytest.fixture
def b64url():
    """Encode text the way Gmail encodes part bodies (base64url, no padding)."""
    return _b64url


@pytest.fixture
def parse_raw():
    """Decode a ``raw`` message field and parse it with the email package."""
    return _parse_raw


@pytest.fixture
def oauth_credentials() -> OAuthCredentials:
    """Fixture providing OAuth credentials for a test client."""
    return OAuthCredentials(
        client_id="test-client-id.apps.googleusercontent.com",
        client_secret="test-client-secret",
        refresh_token="1//test-refresh-token",
    )


@pytest.fixture
def gmail_env(monkeypatch):
    """Fixture setting the GMAIL_* environment variables."""
    monkeypatch.setenv("GMAIL_CLIENT_ID", "env-client-id")
    monkeypatch.setenv("GMAIL_CLIENT_SECRET", "env-client-secret")
    monkeypatch.setenv("GMAIL_REFRESH_TOKEN", "env-refresh-token")


@pytest.fixture
def sample_email():
    """Fixture providing sample email data for testing."""
    return {
        "id": "18abc123def",
        "threadId": "18abc123def",
        "labelIds": ["INBOX", "UNREAD"],
        "snippet": "This is a test email snippet...",
        "payload": {
            "headers": [
                {"name": "From", "value": "sender@example.com"},
                {"name": "To", "value": "recipient@example.com"},
                {"name": "Subject", "value": "Test Email Subject"},
                {"name": "Date", "value": "Mon, 20 Jan 2026 10:00:00 -0500"},
            ],
            "mimeType": "text/plain",
            "body": {
                "data": "VGhpcyBpcyB0aGUgZW1haWwgYm9keSBjb250ZW50Lg==",
            },
        },
    }


@pytest.fixture
def mock_gmail_service(mocker):
    """Fixture providing a mocked Gmail API service."""
    mock_service = mocker.MagicMock()
    return mock_service
