"""Tests for the message tools."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock

import pytest

from gmail_bridge.schemas.tools import (
    DeleteEmailParams,
    ModifyEmailParams,
    ReadEmailParams,
    ReplyParams,
    SearchParams,
    SendEmailParams,
    TrashEmailParams,
)
from gmail_bridge.tools.messages import (
    NO_SEARCH_RESULTS,
    delete_email,
    modify_email,
    read_email,
    reply_references,
    reply_subject,
    reply_to_email,
    search_emails,
    send_email,
    trash_email,
)
from gmail_bridge.utils.errors import AuthenticationError, ValidationError


def _original(headers: dict[str, str], thread_id: str = "thread9") -> dict[str, Any]:
    return {
        "id": "orig1",
        "threadId": thread_id,
        "payload": {
            "headers": [{"name": k, "value": v} for k, v in headers.items()]
        },
    }


def _sent_body(gmail: MagicMock) -> dict[str, Any]:
    return gmail.users().messages().send.call_args.kwargs["body"]


class TestReplyHelpers:
    """Tests for subject and References helpers."""

    @pytest.mark.parametrize(
        "subject,expected",
        [
            ("Hello", "Re: Hello"),
            ("Re: Hello", "Re: Hello"),
            ("RE: Hello", "RE: Hello"),
            ("re:Hello", "re:Hello"),
            ("", "Re: "),
            ("Fwd: Hello", "Re: Fwd: Hello"),
        ],
    )
    def test_reply_subject(self, subject, expected):
        assert reply_subject(subject) == expected

    def test_reply_references(self):
        assert reply_references("<a@x>", "<b@x>") == "<a@x> <b@x>"
        assert reply_references("", "<b@x>") == "<b@x>"
        assert reply_references("", "") == ""


class TestSendEmail:
    """Tests for send_email tool."""

    @pytest.mark.asyncio
    async def test_send_success(self, gmail, oauth_credentials, parse_raw):
        gmail.users().messages().send.return_value.execute.return_value = {
            "id": "sent123",
            "threadId": "t1",
        }
        params = SendEmailParams(
            to="alice@example.com",
            subject="Hello",
            body="Hi Alice",
            cc=["bob@example.com"],
        )

        result = await send_email(params, oauth_credentials)

        assert result == "Email sent successfully. Message ID: sent123"
        body = _sent_body(gmail)
        assert "threadId" not in body
        parsed = parse_raw(body["raw"])
        assert parsed["To"] == "alice@example.com"
        assert parsed["Cc"] == "bob@example.com"
        assert parsed.get_content() == "Hi Alice"

    @pytest.mark.asyncio
    async def test_send_into_thread(self, gmail, oauth_credentials):
        gmail.users().messages().send.return_value.execute.return_value = {"id": "s1"}
        params = SendEmailParams(
            to="a@example.com", subject="S", body="B", thread_id="thread42"
        )

        await send_email(params, oauth_credentials)

        assert _sent_body(gmail)["threadId"] == "thread42"

    @pytest.mark.asyncio
    async def test_from_alias(self, gmail, oauth_credentials, parse_raw):
        gmail.users().messages().send.return_value.execute.return_value = {"id": "s1"}
        params = SendEmailParams(
            to="a@example.com",
            subject="S",
            body="B",
            from_email="Alias <alias@example.com>",
        )

        await send_email(params, oauth_credentials)

        assert parse_raw(_sent_body(gmail)["raw"])["From"] == "Alias <alias@example.com>"

    @pytest.mark.asyncio
    async def test_invalid_recipient(self, gmail, oauth_credentials):
        params = SendEmailParams(to="not-an-address", subject="S", body="B")

        with pytest.raises(ValidationError):
            await send_email(params, oauth_credentials)

        gmail.users().messages().send.assert_not_called()

    @pytest.mark.asyncio
    async def test_auth_failure_propagates(self, mock_build_service, mock_audit_log, oauth_credentials):
        for mock in mock_build_service:
            mock.side_effect = AuthenticationError("Token refresh failed: invalid_grant")
        params = SendEmailParams(to="a@example.com", subject="S", body="B")

        with pytest.raises(AuthenticationError):
            await send_email(params, oauth_credentials)

        call = mock_audit_log.record.call_args.kwargs
        assert call["outcome"] == "error"


class TestReadEmail:
    """Tests for read_email tool."""

    @pytest.mark.asyncio
    async def test_read_success(self, gmail, oauth_credentials, sample_full_message):
        gmail.users().messages().get.return_value.execute.return_value = (
            sample_full_message
        )

        result = json.loads(
            await read_email(ReadEmailParams(message_id="msg1"), oauth_credentials)
        )

        assert result == {
            "id": "msg1",
            "threadId": "thread1",
            "from": "sender@example.com",
            "to": "recipient@example.com",
            "subject": "Test Subject",
            "date": "Mon, 20 Jan 2026 10:00:00 -0500",
            "snippet": "Test message snippet",
            "body": "Test body content",
            "labels": ["INBOX", "UNREAD"],
        }
        gmail.users().messages().get.assert_called_with(
            userId="me", id="msg1", format="full"
        )

    @pytest.mark.asyncio
    async def test_invalid_id(self, gmail, oauth_credentials):
        with pytest.raises(ValidationError):
            await read_email(ReadEmailParams(message_id="bad id!"), oauth_credentials)


class TestSearchEmails:
    """Tests for search_emails tool."""

    @pytest.mark.asyncio
    async def test_no_results(self, gmail, oauth_credentials):
        gmail.users().messages().list.return_value.execute.return_value = {
            "resultSizeEstimate": 0
        }

        result = await search_emails(SearchParams(query="from:nobody"), oauth_credentials)

        assert result == NO_SEARCH_RESULTS
        gmail.users().messages().get.assert_not_called()

    @pytest.mark.asyncio
    async def test_results_with_metadata(
        self, gmail, oauth_credentials, sample_message_list, sample_full_message
    ):
        gmail.users().messages().list.return_value.execute.return_value = {
            "messages": sample_message_list
        }
        second = dict(sample_full_message, id="msg2", threadId="thread2")
        gmail.users().messages().get.return_value.execute.side_effect = [
            sample_full_message,
            second,
        ]

        result = json.loads(
            await search_emails(SearchParams(query="is:unread"), oauth_credentials)
        )

        assert [m["id"] for m in result] == ["msg1", "msg2"]
        assert all(m["body"] == "" for m in result)
        assert result[0]["subject"] == "Test Subject"
        gmail.users().messages().get.assert_called_with(
            userId="me",
            id="msg2",
            format="metadata",
            metadataHeaders=["From", "To", "Subject", "Date"],
        )

    @pytest.mark.asyncio
    async def test_max_results_clamped(self, gmail, oauth_credentials):
        gmail.users().messages().list.return_value.execute.return_value = {}

        await search_emails(SearchParams(query="x", max_results=250), oauth_credentials)

        gmail.users().messages().list.assert_called_with(
            userId="me", q="x", maxResults=100
        )


class TestDeleteAndTrash:
    """Tests for delete_email and trash_email."""

    @pytest.mark.asyncio
    async def test_delete(self, gmail, oauth_credentials):
        result = await delete_email(DeleteEmailParams(message_id="msg1"), oauth_credentials)

        assert result == "Email msg1 permanently deleted."
        gmail.users().messages().delete.assert_called_with(userId="me", id="msg1")

    @pytest.mark.asyncio
    async def test_trash(self, gmail, oauth_credentials):
        result = await trash_email(TrashEmailParams(message_id="msg1"), oauth_credentials)

        assert result == "Email msg1 moved to trash."
        gmail.users().messages().trash.assert_called_with(userId="me", id="msg1")


class TestModifyEmail:
    """Tests for modify_email tool."""

    @pytest.mark.asyncio
    async def test_labels_reported(self, gmail, oauth_credentials):
        gmail.users().messages().modify.return_value.execute.return_value = {
            "id": "msg1",
            "labelIds": ["INBOX", "STARRED"],
        }
        params = ModifyEmailParams(
            message_id="msg1", add_labels=["STARRED"], remove_labels=["UNREAD"]
        )

        result = await modify_email(params, oauth_credentials)

        assert result == "Email modified. Labels: INBOX, STARRED"
        gmail.users().messages().modify.assert_called_with(
            userId="me",
            id="msg1",
            body={"addLabelIds": ["STARRED"], "removeLabelIds": ["UNREAD"]},
        )


class TestReplyToEmail:
    """Tests for reply_to_email tool."""

    @pytest.fixture
    def original(self) -> dict[str, Any]:
        return _original(
            {
                "From": "Alice <alice@example.com>",
                "To": "me@example.com, carol@example.com",
                "Cc": "dave@example.com",
                "Subject": "Lunch plans",
                "Message-ID": "<orig@mail.example.com>",
                "References": "<first@mail.example.com>",
            }
        )

    @pytest.mark.asyncio
    async def test_reply(self, gmail, oauth_credentials, original, parse_raw):
        gmail.users().messages().get.return_value.execute.return_value = original
        gmail.users().messages().send.return_value.execute.return_value = {"id": "r1"}

        result = await reply_to_email(
            ReplyParams(message_id="orig1", body="Sounds good"), oauth_credentials
        )

        assert result == "Reply sent. Message ID: r1"
        body = _sent_body(gmail)
        assert body["threadId"] == "thread9"
        parsed = parse_raw(body["raw"])
        assert parsed["To"] == "Alice <alice@example.com>"
        assert parsed["Cc"] is None
        assert str(parsed["Subject"]) == "Re: Lunch plans"
        assert parsed["In-Reply-To"] == "<orig@mail.example.com>"
        assert parsed["References"] == (
            "<first@mail.example.com> <orig@mail.example.com>"
        )

    @pytest.mark.asyncio
    async def test_reply_all_copies_recipients(
        self, gmail, oauth_credentials, original, parse_raw
    ):
        gmail.users().messages().get.return_value.execute.return_value = original
        gmail.users().messages().send.return_value.execute.return_value = {"id": "r1"}

        await reply_to_email(
            ReplyParams(message_id="orig1", body="All", reply_all=True),
            oauth_credentials,
        )

        parsed = parse_raw(_sent_body(gmail)["raw"])
        assert parsed["Cc"] == "me@example.com, carol@example.com, dave@example.com"

    @pytest.mark.asyncio
    async def test_existing_prefix_kept(self, gmail, oauth_credentials, parse_raw):
        gmail.users().messages().get.return_value.execute.return_value = _original(
            {"From": "a@example.com", "Subject": "RE: Budget"}
        )
        gmail.users().messages().send.return_value.execute.return_value = {"id": "r1"}

        await reply_to_email(ReplyParams(message_id="orig1", body="ok"), oauth_credentials)

        parsed = parse_raw(_sent_body(gmail)["raw"])
        assert str(parsed["Subject"]) == "RE: Budget"
        assert parsed["In-Reply-To"] is None
        assert parsed["References"] is None

    @pytest.mark.asyncio
    async def test_missing_from(self, gmail, oauth_credentials):
        gmail.users().messages().get.return_value.execute.return_value = _original(
            {"Subject": "No sender"}
        )

        with pytest.raises(ValidationError, match="no From header"):
            await reply_to_email(
                ReplyParams(message_id="orig1", body="x"), oauth_credentials
            )

        gmail.users().messages().send.assert_not_called()
