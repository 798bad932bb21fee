"""Tests for the tool-call audit trail."""

import json

import pytest

from gmail_bridge.middleware.audit_logger import (
    REDACTED,
    AuditLog,
    ToolCallRecord,
    audit_enabled,
    redact,
)


def _read_record(capsys) -> dict:
    err = capsys.readouterr().err.strip()
    return json.loads(err)["audit"]


class TestRedact:
    """Tests for redact."""

    def test_content_and_secrets_masked(self):
        params = {
            "to": "a@example.com",
            "body": "private text",
            "html_body": "<p>private</p>",
            "Refresh_Token": "1//abc",
        }

        assert redact(params) == {
            "to": "a@example.com",
            "body": REDACTED,
            "html_body": REDACTED,
            "Refresh_Token": REDACTED,
        }

    def test_nested_attachment_content(self):
        params = {
            "attachments": [
                {"filename": "a.pdf", "mimeType": "application/pdf", "content": "JVBE"}
            ]
        }

        (attachment,) = redact(params)["attachments"]
        assert attachment == {
            "filename": "a.pdf",
            "mimeType": "application/pdf",
            "content": REDACTED,
        }

    def test_empty_values_kept(self):
        assert redact({"html_body": None, "body": ""}) == {"html_body": None, "body": ""}

    def test_input_not_mutated(self):
        params = {"body": "text"}
        redact(params)
        assert params == {"body": "text"}


class TestAuditLog:
    """Tests for AuditLog."""

    def test_writes_json_line_to_stderr(self, capsys):
        AuditLog().record(
            "read_email",
            {"message_id": "m1"},
            elapsed_ms=12.5,
        )

        captured = capsys.readouterr()
        assert captured.out == ""
        record = json.loads(captured.err)["audit"]
        assert record["tool"] == "read_email"
        assert record["params"] == {"message_id": "m1"}
        assert record["outcome"] == "ok"
        assert record["error"] is None
        assert record["elapsed_ms"] == 12.5
        assert record["at"]

    def test_error_outcome(self, capsys):
        AuditLog().record(
            "send_email",
            {"to": "a@example.com", "body": "secret plans"},
            outcome="error",
            error="Failed to send message: 403",
        )

        record = _read_record(capsys)
        assert record["outcome"] == "error"
        assert record["error"] == "Failed to send message: 403"
        assert record["params"]["body"] == REDACTED

    def test_disabled_writes_nothing(self, capsys):
        AuditLog(enabled=False).write(ToolCallRecord(tool="list_labels"))

        assert capsys.readouterr().err == ""

    @pytest.mark.parametrize(
        "value,expected",
        [("true", True), ("", True), ("false", False), ("0", False), ("NO", False)],
    )
    def test_audit_enabled(self, monkeypatch, value, expected):
        monkeypatch.setenv("AUDIT_LOG", value)

        assert audit_enabled() is expected
