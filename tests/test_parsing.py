"""Tests for the Gmail payload decoder."""

from __future__ import annotations

from typing import Any

import pytest

from gmail_bridge.gmail.parsing import (
    MAX_PART_DEPTH,
    decode_base64url,
    decode_text,
    extract_body,
    find_attachments,
    get_header,
    parse_message,
    to_standard_base64,
)
from gmail_bridge.utils.errors import ValidationError


def _attachment_part(filename: str, attachment_id: str, **extra: Any) -> dict[str, Any]:
    part: dict[str, Any] = {
        "filename": filename,
        "body": {"attachmentId": attachment_id, "size": extra.pop("size", 10)},
    }
    part.update(extra)
    return part


class TestGetHeader:
    """Tests for get_header."""

    HEADERS = [
        {"name": "From", "value": "sender@example.com"},
        {"name": "subject", "value": "lower-case name"},
        {"name": "SUBJECT", "value": "second subject"},
    ]

    def test_case_insensitive(self) -> None:
        assert get_header(self.HEADERS, "from") == "sender@example.com"
        assert get_header(self.HEADERS, "FROM") == "sender@example.com"

    def test_first_match_wins(self) -> None:
        assert get_header(self.HEADERS, "Subject") == "lower-case name"

    def test_missing_header_is_empty(self) -> None:
        assert get_header(self.HEADERS, "Cc") == ""
        assert get_header([], "From") == ""
        assert get_header(None, "From") == ""

    def test_null_value_is_empty(self) -> None:
        assert get_header([{"name": "To", "value": None}], "To") == ""


class TestBase64:
    """Tests for base64url helpers."""

    def test_decode_without_padding(self, b64url) -> None:
        assert decode_base64url(b64url("ab")) == b"ab"
        assert decode_base64url(b64url("abc")) == b"abc"
        assert decode_base64url(b64url("abcd")) == b"abcd"

    def test_decode_url_safe_alphabet(self) -> None:
        assert decode_base64url("-_8") == b"\xfb\xff"

    def test_decode_text_replaces_invalid_utf8(self) -> None:
        assert decode_text("_w") == "�"

    def test_decode_text_invalid_base64(self) -> None:
        assert decode_text("a") == ""

    def test_to_standard_base64(self) -> None:
        assert to_standard_base64("ab-_cd") == "ab+/cd"


class TestExtractBody:
    """Tests for body extraction preference order."""

    def test_plain_preferred_over_html(self, b64url) -> None:
        payload = {
            "parts": [
                {"mimeType": "text/html", "body": {"data": b64url("<p>html</p>")}},
                {"mimeType": "text/plain", "body": {"data": b64url("plain")}},
            ]
        }
        assert extract_body(payload) == "plain"

    def test_html_fallback(self, b64url) -> None:
        payload = {
            "parts": [
                {"mimeType": "text/html", "body": {"data": b64url("<p>html</p>")}},
            ]
        }
        assert extract_body(payload) == "<p>html</p>"

    def test_plain_part_without_data_skipped(self, b64url) -> None:
        payload = {
            "parts": [
                {"mimeType": "text/plain", "body": {"size": 0}},
                {"mimeType": "text/html", "body": {"data": b64url("<i>x</i>")}},
            ]
        }
        assert extract_body(payload) == "<i>x</i>"

    def test_nested_alternative_inside_mixed(self, b64url) -> None:
        payload = {
            "mimeType": "multipart/mixed",
            "parts": [
                {
                    "mimeType": "multipart/alternative",
                    "parts": [
                        {"mimeType": "text/plain", "body": {"data": b64url("nested")}},
                        {"mimeType": "text/html", "body": {"data": b64url("<p>n</p>")}},
                    ],
                },
                _attachment_part("a.pdf", "att1", mimeType="application/pdf"),
            ],
        }
        assert extract_body(payload) == "nested"

    def test_single_part_payload(self, b64url) -> None:
        assert extract_body({"body": {"data": b64url("single")}}) == "single"

    def test_no_body(self) -> None:
        assert extract_body({}) == ""
        assert extract_body(None) == ""
        assert extract_body({"parts": [{"mimeType": "image/png", "body": {}}]}) == ""


class TestParseMessage:
    """Tests for parse_message."""

    def test_full_message(self, sample_email: dict[str, Any]) -> None:
        message = parse_message(sample_email)

        assert message.id == "18abc123def"
        assert message.thread_id == "18abc123def"
        assert message.sender == "sender@example.com"
        assert message.to == "recipient@example.com"
        assert message.subject == "Test Email Subject"
        assert message.date == "Mon, 20 Jan 2026 10:00:00 -0500"
        assert message.body == "This is the email body content."
        assert message.labels == ["INBOX", "UNREAD"]

    def test_serialized_keys(self, sample_email: dict[str, Any]) -> None:
        data = parse_message(sample_email).model_dump(by_alias=True)

        assert list(data) == [
            "id",
            "threadId",
            "from",
            "to",
            "subject",
            "date",
            "snippet",
            "body",
            "labels",
        ]

    def test_sparse_message_defaults(self) -> None:
        message = parse_message({"id": "m1"})

        assert message.thread_id == ""
        assert message.sender == ""
        assert message.subject == ""
        assert message.snippet == ""
        assert message.body == ""
        assert message.labels == []

    def test_missing_id_raises(self, sample_email: dict[str, Any]) -> None:
        del sample_email["id"]
        with pytest.raises(ValidationError):
            parse_message(sample_email)


class TestFindAttachments:
    """Tests for attachment discovery."""

    def test_depth_first_order(self) -> None:
        payload = {
            "parts": [
                {
                    "mimeType": "multipart/alternative",
                    "parts": [
                        {"mimeType": "text/plain", "filename": "", "body": {"data": "eA"}},
                        _attachment_part("inline.png", "att1", mimeType="image/png"),
                    ],
                },
                _attachment_part("report.pdf", "att2", mimeType="application/pdf"),
                {
                    "mimeType": "multipart/mixed",
                    "parts": [
                        _attachment_part("deep.txt", "att3", mimeType="text/plain"),
                    ],
                },
            ]
        }

        attachments = find_attachments(payload)

        assert [a.id for a in attachments] == ["att1", "att2", "att3"]
        assert [a.filename for a in attachments] == [
            "inline.png",
            "report.pdf",
            "deep.txt",
        ]

    def test_defaults(self) -> None:
        payload = {
            "parts": [
                {"filename": "blob", "body": {"attachmentId": "att1"}},
            ]
        }

        (attachment,) = find_attachments(payload)

        assert attachment.mime_type == "application/octet-stream"
        assert attachment.size == 0
        assert attachment.model_dump(by_alias=True) == {
            "id": "att1",
            "filename": "blob",
            "mimeType": "application/octet-stream",
            "size": 0,
        }

    def test_part_needs_filename_and_attachment_id(self) -> None:
        payload = {
            "parts": [
                {"filename": "", "body": {"attachmentId": "att1"}},
                {"filename": "no-id.txt", "body": {"data": "eA"}},
            ]
        }
        assert find_attachments(payload) == []

    def test_no_parts(self) -> None:
        assert find_attachments({"body": {"data": "eA"}}) == []
        assert find_attachments(None) == []

    def test_depth_guard(self) -> None:
        leaf = _attachment_part("deep.bin", "att-deep")
        node: dict[str, Any] = {"parts": [leaf]}
        for _ in range(MAX_PART_DEPTH + 5):
            node = {"parts": [node]}
        payload = {"parts": [_attachment_part("top.bin", "att-top"), node]}

        attachments = find_attachments(payload)

        assert [a.id for a in attachments] == ["att-top"]
