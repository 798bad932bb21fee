"""Attachment tools for the Gmail bridge."""

from __future__ import annotations

import logging

from gmail_bridge.auth.credentials import OAuthCredentials
from gmail_bridge.gmail.client import build_service
from gmail_bridge.gmail.messages import get_attachment, get_message
from gmail_bridge.gmail.parsing import find_attachments, to_standard_base64
from gmail_bridge.middleware.validator import MAX_ATTACHMENT_ID_LENGTH, validate_identifier
from gmail_bridge.schemas.tools import DownloadAttachmentParams, ListAttachmentsParams
from gmail_bridge.tools.base import execute_tool, to_json
from gmail_bridge.utils.errors import GmailAPIError

logger = logging.getLogger(__name__)

NO_ATTACHMENTS = "No attachments found on this message."


async def list_attachments(
    params: ListAttachmentsParams, credentials: OAuthCredentials
) -> str:
    """List the attachments of an email.

    Returns:
        JSON list of ``{id, filename, mimeType, size}`` in part order, or a
        notice when the message has none.
    """

    def operation() -> str:
        message_id = validate_identifier(params.message_id, "message_id")
        message = get_message(build_service(credentials), message_id, format="full")
        attachments = find_attachments(message.get("payload"))
        if not attachments:
            return NO_ATTACHMENTS
        return to_json(attachments)

    return await execute_tool("list_attachments", params.model_dump(), operation)


async def download_attachment(
    params: DownloadAttachmentParams, credentials: OAuthCredentials
) -> str:
    """Download an attachment as standard base64.

    Returns:
        JSON ``{attachmentId, base64, sizeBytes}``.

    Raises:
        GmailAPIError: If Gmail returns no attachment data.
    """

    def operation() -> str:
        message_id = validate_identifier(params.message_id, "message_id")
        attachment_id = validate_identifier(
            params.attachment_id, "attachment_id", MAX_ATTACHMENT_ID_LENGTH
        )
        attachment = get_attachment(build_service(credentials), message_id, attachment_id)
        if not attachment.data:
            raise GmailAPIError(f"No attachment data returned for {attachment_id}")
        return to_json(
            {
                "attachmentId": attachment_id,
                "base64": to_standard_base64(attachment.data),
                "sizeBytes": attachment.size,
            }
        )

    return await execute_tool("download_attachment", params.model_dump(), operation)
