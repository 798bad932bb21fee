"""Fixtures for tool tests."""

from __future__ import annotations

from contextlib import ExitStack
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

TOOL_MODULES = (
    "messages",
    "attachments",
    "drafts",
    "labels",
    "batch",
    "filters",
    "threads",
)


@pytest.fixture
def mock_gmail_service() -> MagicMock:
    """Mock Gmail API service."""
    return MagicMock()


@pytest.fixture
def mock_build_service(mock_gmail_service: MagicMock):
    """Patch build_service in every tool module to return the mock service."""
    with ExitStack() as stack:
        mocks = [
            stack.enter_context(
                patch(
                    f"gmail_bridge.tools.{module}.build_service",
                    return_value=mock_gmail_service,
                )
            )
            for module in TOOL_MODULES
        ]
        yield mocks


@pytest.fixture
def mock_audit_log():
    """Mock audit_log.record()."""
    with patch("gmail_bridge.tools.base.audit_log") as mock:
        yield mock


@pytest.fixture
def gmail(mock_gmail_service, mock_build_service, mock_audit_log) -> MagicMock:
    """Mock service wired into the tools, with audit logging silenced."""
    return mock_gmail_service


@pytest.fixture
def sample_message_list() -> list[dict[str, str]]:
    """Sample message list response."""
    return [
        {"id": "msg1", "threadId": "thread1"},
        {"id": "msg2", "threadId": "thread2"},
    ]


@pytest.fixture
def sample_full_message() -> dict[str, Any]:
    """Sample full message response."""
    return {
        "id": "msg1",
        "threadId": "thread1",
        "labelIds": ["INBOX", "UNREAD"],
        "snippet": "Test message snippet",
        "payload": {
            "headers": [
                {"name": "From", "value": "sender@example.com"},
                {"name": "To", "value": "recipient@example.com"},
                {"name": "Subject", "value": "Test Subject"},
                {"name": "Date", "value": "Mon, 20 Jan 2026 10:00:00 -0500"},
            ],
            "body": {"data": "VGVzdCBib2R5IGNvbnRlbnQ="},
        },
    }


@pytest.fixture
def sample_thread(sample_full_message: dict[str, Any]) -> dict[str, Any]:
    """Sample thread response."""
    second = dict(sample_full_message, id="msg2", labelIds=["INBOX"])
    return {
        "id": "thread1",
        "messages": [sample_full_message, second],
    }


@pytest.fixture
def sample_labels() -> list[dict[str, Any]]:
    """Sample labels list response."""
    return [
        {"id": "INBOX", "name": "INBOX", "type": "system", "messagesTotal": 10, "messagesUnread": 2},
        {"id": "UNREAD", "name": "UNREAD", "type": "system"},
        {"id": "Label_1", "name": "Work", "type": "user", "color": {"textColor": "#000000"}},
    ]
