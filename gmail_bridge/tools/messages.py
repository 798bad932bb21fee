"""Message tools for the Gmail bridge.

This module implements the tools that act on individual messages:
- send_email: Compose and send a message
- read_email: Read one message with its decoded body
- search_emails: Search with Gmail query syntax
- delete_email / trash_email: Permanent delete or move to trash
- modify_email: Add or remove labels
- reply_to_email: Reply in the original thread
"""

from __future__ import annotations

import logging

from gmail_bridge.auth.credentials import OAuthCredentials
from gmail_bridge.gmail.client import build_service
from gmail_bridge.gmail.messages import (
    delete_message,
    get_message,
    list_messages,
    modify_message,
    send_message,
    trash_message,
)
from gmail_bridge.gmail.mime import build_raw_message
from gmail_bridge.gmail.parsing import get_header, parse_message
from gmail_bridge.middleware.validator import (
    validate_address,
    validate_address_list,
    validate_identifier,
)
from gmail_bridge.schemas.messages import OutboundMessage
from gmail_bridge.schemas.tools import (
    ComposeParams,
    DeleteEmailParams,
    ModifyEmailParams,
    ReadEmailParams,
    ReplyParams,
    SearchParams,
    SendEmailParams,
    TrashEmailParams,
)
from gmail_bridge.tools.base import build_model, execute_tool, to_json
from gmail_bridge.utils.errors import ValidationError

logger = logging.getLogger(__name__)

SEARCH_HEADERS = ["From", "To", "Subject", "Date"]
REPLY_HEADERS = ["From", "To", "Cc", "Subject", "Message-ID", "References"]

NO_SEARCH_RESULTS = "No emails found matching your query."


def compose_message(params: ComposeParams) -> OutboundMessage:
    """Turn compose parameters into an OutboundMessage.

    Raises:
        ValidationError: If an address is malformed or a header value
            contains a line break.
    """
    return build_model(
        OutboundMessage,
        to=validate_address(params.to, "to"),
        sender=validate_address(params.from_email, "from_email")
        if params.from_email
        else None,
        cc=validate_address_list(params.cc, "cc"),
        bcc=validate_address_list(params.bcc, "bcc"),
        subject=params.subject,
        plain_body=params.body,
        html_body=params.html_body,
        attachments=params.attachments,
    )


def reply_subject(subject: str) -> str:
    """Prefix ``Re: `` unless the subject already carries it."""
    if subject[:3].lower() == "re:":
        return subject
    return f"Re: {subject}"


def reply_references(references: str, message_id: str) -> str:
    """Append the replied-to Message-ID to the References chain."""
    return " ".join(part for part in (references, message_id) if part)


async def send_email(params: SendEmailParams, credentials: OAuthCredentials) -> str:
    """Send an email with optional HTML body and attachments.

    Args:
        params: SendEmailParams with recipients, subject, bodies,
            optional thread_id and attachments.
        credentials: OAuth credentials of the caller.

    Returns:
        Status line with the new message ID.
    """

    def operation() -> str:
        message = compose_message(params)
        thread_id = (
            validate_identifier(params.thread_id, "thread_id")
            if params.thread_id
            else None
        )
        service = build_service(credentials)
        sent = send_message(service, build_raw_message(message), thread_id)
        return f"Email sent successfully. Message ID: {sent.id}"

    return await execute_tool("send_email", params.model_dump(), operation)


async def read_email(params: ReadEmailParams, credentials: OAuthCredentials) -> str:
    """Read a specific email by ID.

    Returns:
        JSON with id, threadId, from, to, subject, date, snippet, body, labels.
    """

    def operation() -> str:
        message_id = validate_identifier(params.message_id, "message_id")
        service = build_service(credentials)
        message = get_message(service, message_id, format="full")
        return to_json(parse_message(message))

    return await execute_tool("read_email", params.model_dump(), operation)


async def search_emails(params: SearchParams, credentials: OAuthCredentials) -> str:
    """Search emails using Gmail query syntax.

    Fetches metadata for each hit, one request at a time. Bodies are
    left empty.

    Returns:
        JSON list of messages, or a notice when nothing matched.
    """

    def operation() -> str:
        service = build_service(credentials)
        refs = list_messages(service, params.query, params.limit).messages
        if not refs:
            return NO_SEARCH_RESULTS

        results = []
        for ref in refs:
            detail = get_message(
                service, ref.id, format="metadata", metadata_headers=SEARCH_HEADERS
            )
            results.append(parse_message(detail).model_copy(update={"body": ""}))

        logger.debug("Search %r returned %d messages", params.query, len(results))
        return to_json(results)

    return await execute_tool("search_emails", params.model_dump(), operation)


async def delete_email(params: DeleteEmailParams, credentials: OAuthCredentials) -> str:
    """Permanently delete an email. Cannot be undone."""

    def operation() -> str:
        message_id = validate_identifier(params.message_id, "message_id")
        delete_message(build_service(credentials), message_id)
        return f"Email {message_id} permanently deleted."

    return await execute_tool("delete_email", params.model_dump(), operation)


async def trash_email(params: TrashEmailParams, credentials: OAuthCredentials) -> str:
    """Move an email to trash."""

    def operation() -> str:
        message_id = validate_identifier(params.message_id, "message_id")
        trash_message(build_service(credentials), message_id)
        return f"Email {message_id} moved to trash."

    return await execute_tool("trash_email", params.model_dump(), operation)


async def modify_email(params: ModifyEmailParams, credentials: OAuthCredentials) -> str:
    """Add or remove labels on an email.

    Returns:
        Status line listing the labels the message carries afterwards.
    """

    def operation() -> str:
        message_id = validate_identifier(params.message_id, "message_id")
        modified = modify_message(
            build_service(credentials),
            message_id,
            add_labels=params.add_labels,
            remove_labels=params.remove_labels,
        )
        return f"Email modified. Labels: {', '.join(modified.label_ids)}"

    return await execute_tool("modify_email", params.model_dump(), operation)


async def reply_to_email(params: ReplyParams, credentials: OAuthCredentials) -> str:
    """Reply to an email in its thread.

    The reply goes to the original sender; with ``reply_all`` the original
    To and Cc recipients are copied. In-Reply-To and References are set so
    clients thread the reply.

    Raises:
        ValidationError: If the original message has no From header.
    """

    def operation() -> str:
        message_id = validate_identifier(params.message_id, "message_id")
        service = build_service(credentials)
        original = get_message(
            service, message_id, format="metadata", metadata_headers=REPLY_HEADERS
        )
        headers = (original.get("payload") or {}).get("headers") or []

        sender = get_header(headers, "From")
        if not sender:
            raise ValidationError(
                f"Message {message_id} has no From header to reply to",
                field="message_id",
            )

        cc: list[str] = []
        if params.reply_all:
            cc = [v for v in (get_header(headers, "To"), get_header(headers, "Cc")) if v]

        original_id = get_header(headers, "Message-ID")
        message = build_model(
            OutboundMessage,
            to=sender,
            cc=cc,
            subject=reply_subject(get_header(headers, "Subject")),
            plain_body=params.body,
            html_body=params.html_body,
            in_reply_to=original_id or None,
            references=reply_references(get_header(headers, "References"), original_id)
            or None,
        )

        sent = send_message(
            service, build_raw_message(message), original.get("threadId") or None
        )
        return f"Reply sent. Message ID: {sent.id}"

    return await execute_tool("reply_to_email", params.model_dump(), operation)
