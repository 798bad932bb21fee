"""FastMCP server for the Gmail bridge.

This module provides the FastMCP server instance with tool registrations.
23 tools are registered, grouped by Gmail resource:

- Message Tools (7): send, read, search, delete, trash, modify, reply
- Attachment Tools (2): list and download attachments
- Draft Tools (4): create, list, send, delete drafts
- Label Tools (4): list, create, update, delete labels
- Batch Tools (2): batch modify and batch delete messages
- Filter Tools (3): list, create, delete filters
- Thread Tools (1): get a whole thread

Every tool resolves the caller's OAuth credentials per call: from the
``Authorization: GMAIL ...`` header over HTTP, from the GMAIL_* environment
variables over STDIO. The send-email webhook is mounted as a custom route.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from mcp.server.fastmcp import Context, FastMCP
from mcp.types import ToolAnnotations

from gmail_bridge import tools
from gmail_bridge.auth.credentials import credentials_from_context
from gmail_bridge.schemas.messages import AttachmentPart
from gmail_bridge.schemas.tools import (
    BatchDeleteParams,
    BatchModifyParams,
    CreateDraftParams,
    CreateFilterParams,
    CreateLabelParams,
    DeleteDraftParams,
    DeleteEmailParams,
    DeleteFilterParams,
    DeleteLabelParams,
    DownloadAttachmentParams,
    GetThreadParams,
    LabelListVisibility,
    ListAttachmentsParams,
    ListDraftsParams,
    MessageListVisibility,
    ModifyEmailParams,
    ReadEmailParams,
    ReplyParams,
    SearchParams,
    SendDraftParams,
    SendEmailParams,
    TrashEmailParams,
    UpdateLabelParams,
)
from gmail_bridge.tools.base import build_model
from gmail_bridge.webhook import WEBHOOK_PATH, send_email_webhook

logger = logging.getLogger(__name__)

SERVER_NAME = "gmail-bridge"
STREAMABLE_HTTP_PATH = "/api/mcp"
TOOL_COUNT = 23

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True)
WRITE = ToolAnnotations(readOnlyHint=False, destructiveHint=False, idempotentHint=False)
IDEMPOTENT_WRITE = ToolAnnotations(
    readOnlyHint=False, destructiveHint=False, idempotentHint=True
)
DESTRUCTIVE = ToolAnnotations(readOnlyHint=False, destructiveHint=True, idempotentHint=True)


# =============================================================================
# Lifespan Context Manager
# =============================================================================


@asynccontextmanager
async def server_lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Lifespan context manager for server startup/shutdown.

    The bridge keeps no state between calls, so this only logs.

    Args:
        server: The FastMCP server instance.

    Yields:
        Empty context dict (no shared state needed).
    """
    logger.info("Gmail bridge starting up...")
    yield {}
    logger.info("Gmail bridge shutting down...")


# =============================================================================
# Message Tool Wrappers
# =============================================================================


def _register_message_tools(mcp: FastMCP) -> None:
    """Register message tools with the FastMCP server.

    Args:
        mcp: The FastMCP server instance.
    """

    @mcp.tool(name="send_email", annotations=WRITE)
    async def send_email_tool(
        ctx: Context,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
        cc: list[str] | None = None,
        bcc: list[str] | None = None,
        from_email: str | None = None,
        thread_id: str | None = None,
        attachments: list[AttachmentPart] | None = None,
    ) -> str:
        """Send an email with optional HTML body and attachments.

        Args:
            to: Recipient email address.
            subject: Email subject.
            body: Plain text body.
            html_body: HTML body (optional).
            cc: CC recipients.
            bcc: BCC recipients.
            from_email: Sender address, e.g. a send-as alias (optional).
            thread_id: Thread ID to reply to.
            attachments: Files as {filename, mimeType, content (base64)}.
        """
        params = build_model(
            SendEmailParams,
            to=to,
            subject=subject,
            body=body,
            html_body=html_body,
            cc=cc or [],
            bcc=bcc or [],
            from_email=from_email,
            thread_id=thread_id,
            attachments=attachments or [],
        )
        return await tools.send_email(params, credentials_from_context(ctx))

    @mcp.tool(name="read_email", annotations=READ_ONLY)
    async def read_email_tool(ctx: Context, message_id: str) -> str:
        """Read a specific email by ID.

        Returns id, threadId, from, to, subject, date, snippet, body and labels.

        Args:
            message_id: The message ID.
        """
        params = build_model(ReadEmailParams, message_id=message_id)
        return await tools.read_email(params, credentials_from_context(ctx))

    @mcp.tool(name="search_emails", annotations=READ_ONLY)
    async def search_emails_tool(ctx: Context, query: str, max_results: int = 10) -> str:
        """Search emails using Gmail query syntax.

        Gmail query syntax examples:
        - from:sender@example.com - Messages from specific sender
        - subject:keyword - Messages with keyword in subject
        - is:unread - Unread messages
        - has:attachment - Messages with attachments

        Args:
            query: Gmail search query.
            max_results: Maximum results to return (default: 10, max: 100).
        """
        params = build_model(SearchParams, query=query, max_results=max_results)
        return await tools.search_emails(params, credentials_from_context(ctx))

    @mcp.tool(name="delete_email", annotations=DESTRUCTIVE)
    async def delete_email_tool(ctx: Context, message_id: str) -> str:
        """Permanently delete an email. This cannot be undone; use trash_email
        to keep it recoverable.

        Args:
            message_id: The message ID to delete.
        """
        params = build_model(DeleteEmailParams, message_id=message_id)
        return await tools.delete_email(params, credentials_from_context(ctx))

    @mcp.tool(name="trash_email", annotations=IDEMPOTENT_WRITE)
    async def trash_email_tool(ctx: Context, message_id: str) -> str:
        """Move an email to trash.

        Args:
            message_id: The message ID to trash.
        """
        params = build_model(TrashEmailParams, message_id=message_id)
        return await tools.trash_email(params, credentials_from_context(ctx))

    @mcp.tool(name="modify_email", annotations=IDEMPOTENT_WRITE)
    async def modify_email_tool(
        ctx: Context,
        message_id: str,
        add_labels: list[str] | None = None,
        remove_labels: list[str] | None = None,
    ) -> str:
        """Add or remove labels on an email (mark read/unread, star, archive).

        Args:
            message_id: The message ID.
            add_labels: Label IDs to add (e.g., STARRED, IMPORTANT, UNREAD).
            remove_labels: Label IDs to remove (e.g., UNREAD to mark read,
                INBOX to archive).
        """
        params = build_model(
            ModifyEmailParams,
            message_id=message_id,
            add_labels=add_labels or [],
            remove_labels=remove_labels or [],
        )
        return await tools.modify_email(params, credentials_from_context(ctx))

    @mcp.tool(name="reply_to_email", annotations=WRITE)
    async def reply_to_email_tool(
        ctx: Context,
        message_id: str,
        body: str,
        html_body: str | None = None,
        reply_all: bool = False,
    ) -> str:
        """Reply to an email in its thread.

        Args:
            message_id: Message ID to reply to.
            body: Reply body (plain text).
            html_body: Reply body (HTML, optional).
            reply_all: Reply to all recipients.
        """
        params = build_model(
            ReplyParams,
            message_id=message_id,
            body=body,
            html_body=html_body,
            reply_all=reply_all,
        )
        return await tools.reply_to_email(params, credentials_from_context(ctx))


# =============================================================================
# Attachment Tool Wrappers
# =============================================================================


def _register_attachment_tools(mcp: FastMCP) -> None:
    """Register attachment tools with the FastMCP server."""

    @mcp.tool(name="list_attachments", annotations=READ_ONLY)
    async def list_attachments_tool(ctx: Context, message_id: str) -> str:
        """List attachments on an email.

        Args:
            message_id: The message ID.
        """
        params = build_model(ListAttachmentsParams, message_id=message_id)
        return await tools.list_attachments(params, credentials_from_context(ctx))

    @mcp.tool(name="download_attachment", annotations=READ_ONLY)
    async def download_attachment_tool(
        ctx: Context, message_id: str, attachment_id: str
    ) -> str:
        """Download an attachment from an email (returns base64 data).

        Args:
            message_id: The message ID.
            attachment_id: The attachment ID (from list_attachments).
        """
        params = build_model(
            DownloadAttachmentParams,
            message_id=message_id,
            attachment_id=attachment_id,
        )
        return await tools.download_attachment(params, credentials_from_context(ctx))


# =============================================================================
# Draft Tool Wrappers
# =============================================================================


def _register_draft_tools(mcp: FastMCP) -> None:
    """Register draft tools with the FastMCP server."""

    @mcp.tool(name="create_draft", annotations=WRITE)
    async def create_draft_tool(
        ctx: Context,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
        cc: list[str] | None = None,
        bcc: list[str] | None = None,
        from_email: str | None = None,
        thread_id: str | None = None,
        attachments: list[AttachmentPart] | None = None,
    ) -> str:
        """Create an email draft.

        Args:
            to: Recipient email address.
            subject: Email subject.
            body: Plain text body.
            html_body: HTML body (optional).
            cc: CC recipients.
            bcc: BCC recipients.
            from_email: Sender address, e.g. a send-as alias (optional).
            thread_id: Thread ID for a reply draft.
            attachments: Files as {filename, mimeType, content (base64)}.
        """
        params = build_model(
            CreateDraftParams,
            to=to,
            subject=subject,
            body=body,
            html_body=html_body,
            cc=cc or [],
            bcc=bcc or [],
            from_email=from_email,
            thread_id=thread_id,
            attachments=attachments or [],
        )
        return await tools.create_draft(params, credentials_from_context(ctx))

    @mcp.tool(name="list_drafts", annotations=READ_ONLY)
    async def list_drafts_tool(ctx: Context, max_results: int = 10) -> str:
        """List email drafts.

        Args:
            max_results: Maximum drafts to return (default: 10).
        """
        params = build_model(ListDraftsParams, max_results=max_results)
        return await tools.list_drafts(params, credentials_from_context(ctx))

    @mcp.tool(name="send_draft", annotations=WRITE)
    async def send_draft_tool(ctx: Context, draft_id: str) -> str:
        """Send an existing draft.

        Args:
            draft_id: The draft ID to send.
        """
        params = build_model(SendDraftParams, draft_id=draft_id)
        return await tools.send_draft(params, credentials_from_context(ctx))

    @mcp.tool(name="delete_draft", annotations=DESTRUCTIVE)
    async def delete_draft_tool(ctx: Context, draft_id: str) -> str:
        """Delete a draft.

        Args:
            draft_id: The draft ID to delete.
        """
        params = build_model(DeleteDraftParams, draft_id=draft_id)
        return await tools.delete_draft(params, credentials_from_context(ctx))


# =============================================================================
# Label Tool Wrappers
# =============================================================================


def _register_label_tools(mcp: FastMCP) -> None:
    """Register label tools with the FastMCP server."""

    @mcp.tool(name="list_labels", annotations=READ_ONLY)
    async def list_labels_tool(ctx: Context) -> str:
        """List all Gmail labels with message counts."""
        return await tools.list_labels(credentials_from_context(ctx))

    @mcp.tool(name="create_label", annotations=WRITE)
    async def create_label_tool(
        ctx: Context,
        name: str,
        message_list_visibility: MessageListVisibility = "show",
        label_list_visibility: LabelListVisibility = "labelShow",
    ) -> str:
        """Create a new Gmail label.

        Args:
            name: Label name (use / for nesting, e.g., "Work/Projects").
            message_list_visibility: Show or hide in message list (show, hide).
            label_list_visibility: Visibility in label list
                (labelShow, labelShowIfUnread, labelHide).
        """
        params = build_model(
            CreateLabelParams,
            name=name,
            message_list_visibility=message_list_visibility,
            label_list_visibility=label_list_visibility,
        )
        return await tools.create_label(params, credentials_from_context(ctx))

    @mcp.tool(name="update_label", annotations=IDEMPOTENT_WRITE)
    async def update_label_tool(
        ctx: Context,
        label_id: str,
        name: str | None = None,
        message_list_visibility: MessageListVisibility | None = None,
        label_list_visibility: LabelListVisibility | None = None,
    ) -> str:
        """Rename a label or change its visibility.

        Args:
            label_id: The label ID to update.
            name: New label name.
            message_list_visibility: Show or hide in message list.
            label_list_visibility: Visibility in label list.
        """
        params = build_model(
            UpdateLabelParams,
            label_id=label_id,
            name=name,
            message_list_visibility=message_list_visibility,
            label_list_visibility=label_list_visibility,
        )
        return await tools.update_label(params, credentials_from_context(ctx))

    @mcp.tool(name="delete_label", annotations=DESTRUCTIVE)
    async def delete_label_tool(ctx: Context, label_id: str) -> str:
        """Delete a label.

        Args:
            label_id: The label ID to delete.
        """
        params = build_model(DeleteLabelParams, label_id=label_id)
        return await tools.delete_label(params, credentials_from_context(ctx))


# =============================================================================
# Batch Tool Wrappers
# =============================================================================


def _register_batch_tools(mcp: FastMCP) -> None:
    """Register batch tools with the FastMCP server."""

    @mcp.tool(name="batch_modify_emails", annotations=IDEMPOTENT_WRITE)
    async def batch_modify_emails_tool(
        ctx: Context,
        message_ids: list[str],
        add_labels: list[str] | None = None,
        remove_labels: list[str] | None = None,
    ) -> str:
        """Add or remove labels on multiple emails at once (max 50).

        Args:
            message_ids: Message IDs to modify; IDs past the first 50 are ignored.
            add_labels: Label IDs to add.
            remove_labels: Label IDs to remove.
        """
        params = build_model(
            BatchModifyParams,
            message_ids=message_ids,
            add_labels=add_labels or [],
            remove_labels=remove_labels or [],
        )
        return await tools.batch_modify_emails(params, credentials_from_context(ctx))

    @mcp.tool(name="batch_delete_emails", annotations=DESTRUCTIVE)
    async def batch_delete_emails_tool(ctx: Context, message_ids: list[str]) -> str:
        """Permanently delete multiple emails (max 50). This cannot be undone.

        Args:
            message_ids: Message IDs to delete; IDs past the first 50 are ignored.
        """
        params = build_model(BatchDeleteParams, message_ids=message_ids)
        return await tools.batch_delete_emails(params, credentials_from_context(ctx))


# =============================================================================
# Filter Tool Wrappers
# =============================================================================


def _register_filter_tools(mcp: FastMCP) -> None:
    """Register filter tools with the FastMCP server."""

    @mcp.tool(name="list_filters", annotations=READ_ONLY)
    async def list_filters_tool(ctx: Context) -> str:
        """List all email filters."""
        return await tools.list_filters(credentials_from_context(ctx))

    @mcp.tool(name="create_filter", annotations=WRITE)
    async def create_filter_tool(
        ctx: Context,
        from_email: str | None = None,
        to: str | None = None,
        subject: str | None = None,
        query: str | None = None,
        add_label_ids: list[str] | None = None,
        remove_label_ids: list[str] | None = None,
        forward: str | None = None,
        star: bool = False,
        mark_important: bool = False,
        mark_read: bool = False,
        archive: bool = False,
        trash: bool = False,
    ) -> str:
        """Create an email filter.

        Needs at least one criterion (from_email, to, subject, query) and
        at least one action (labels, forward, or a shorthand flag).

        Args:
            from_email: Match sender.
            to: Match recipient.
            subject: Match subject.
            query: Gmail search query to match.
            add_label_ids: Label IDs to add.
            remove_label_ids: Label IDs to remove.
            forward: Forward matches to this address.
            star: Star matches.
            mark_important: Mark matches important.
            mark_read: Mark matches as read.
            archive: Skip the inbox.
            trash: Move matches to trash.
        """
        params = build_model(
            CreateFilterParams,
            from_email=from_email,
            to=to,
            subject=subject,
            query=query,
            add_label_ids=add_label_ids or [],
            remove_label_ids=remove_label_ids or [],
            forward=forward,
            star=star,
            mark_important=mark_important,
            mark_read=mark_read,
            archive=archive,
            trash=trash,
        )
        return await tools.create_filter(params, credentials_from_context(ctx))

    @mcp.tool(name="delete_filter", annotations=DESTRUCTIVE)
    async def delete_filter_tool(ctx: Context, filter_id: str) -> str:
        """Delete an email filter.

        Args:
            filter_id: The filter ID to delete.
        """
        params = build_model(DeleteFilterParams, filter_id=filter_id)
        return await tools.delete_filter(params, credentials_from_context(ctx))


# =============================================================================
# Thread Tool Wrappers
# =============================================================================


def _register_thread_tools(mcp: FastMCP) -> None:
    """Register thread tools with the FastMCP server."""

    @mcp.tool(name="get_thread", annotations=READ_ONLY)
    async def get_thread_tool(ctx: Context, thread_id: str) -> str:
        """Get all messages in a thread.

        Args:
            thread_id: Thread ID.
        """
        params = build_model(GetThreadParams, thread_id=thread_id)
        return await tools.get_thread(params, credentials_from_context(ctx))


# =============================================================================
# Server Factory
# =============================================================================


def create_server() -> FastMCP:
    """Create and configure the FastMCP server instance.

    Creates a FastMCP server with:
    - Lifespan context manager for startup/shutdown logging
    - All 23 Gmail tools
    - The send-email webhook route (served by the HTTP transports)
    - A stateless streamable HTTP endpoint at /api/mcp

    Returns:
        Configured FastMCP server instance.
    """
    server = FastMCP(
        name=SERVER_NAME,
        lifespan=server_lifespan,
        streamable_http_path=STREAMABLE_HTTP_PATH,
        stateless_http=True,
    )

    _register_message_tools(server)
    _register_attachment_tools(server)
    _register_draft_tools(server)
    _register_label_tools(server)
    _register_batch_tools(server)
    _register_filter_tools(server)
    _register_thread_tools(server)

    server.custom_route(WEBHOOK_PATH, methods=["POST"])(send_email_webhook)

    logger.info("Gmail bridge created with %d tools registered", TOOL_COUNT)
    return server


# =============================================================================
# Global Server Instance
# =============================================================================

# Create the global server instance for use by __main__.py
mcp = create_server()
