"""Gmail message operations."""

from __future__ import annotations

import logging
from typing import Any

from googleapiclient.discovery import Resource

from gmail_bridge.schemas.gmail import (
    AttachmentBody,
    MessageList,
    MessageRef,
    parse_response,
)
from gmail_bridge.utils.errors import api_error

logger = logging.getLogger(__name__)


def list_messages(
    service: Resource,
    query: str = "",
    max_results: int = 10,
) -> MessageList:
    """List messages matching a Gmail search query (single page)."""
    try:
        response = (
            service.users()
            .messages()
            .list(userId="me", q=query, maxResults=max_results)
            .execute()
        )
    except Exception as e:
        logger.error("Failed to list messages: %s", e)
        raise api_error("Failed to list messages", e) from e

    result = parse_response(MessageList, response, "messages.list")
    logger.debug("Listed %d messages", len(result.messages))
    return result


def get_message(
    service: Resource,
    message_id: str,
    format: str = "full",
    metadata_headers: list[str] | None = None,
) -> dict[str, Any]:
    """Get a specific message by ID."""
    kwargs: dict[str, Any] = {"userId": "me", "id": message_id, "format": format}
    if metadata_headers:
        kwargs["metadataHeaders"] = metadata_headers
    try:
        message = service.users().messages().get(**kwargs).execute()
    except Exception as e:
        logger.error("Failed to get message %s: %s", message_id, e)
        raise api_error(f"Failed to get message {message_id}", e) from e

    logger.debug("Retrieved message %s", message_id)
    return message


def send_message(
    service: Resource, raw: str, thread_id: str | None = None
) -> MessageRef:
    """Send a base64url encoded RFC 2822 message."""
    body: dict[str, Any] = {"raw": raw}
    if thread_id:
        body["threadId"] = thread_id
    try:
        sent = service.users().messages().send(userId="me", body=body).execute()
    except Exception as e:
        logger.error("Failed to send message: %s", e)
        raise api_error("Failed to send message", e) from e

    result = parse_response(MessageRef, sent, "messages.send")
    logger.info("Sent message %s", result.id)
    return result


def modify_message(
    service: Resource,
    message_id: str,
    add_labels: list[str] | None = None,
    remove_labels: list[str] | None = None,
) -> MessageRef:
    """Modify message labels."""
    body = {"addLabelIds": add_labels or [], "removeLabelIds": remove_labels or []}
    try:
        modified = (
            service.users()
            .messages()
            .modify(userId="me", id=message_id, body=body)
            .execute()
        )
    except Exception as e:
        logger.error("Failed to modify message %s: %s", message_id, e)
        raise api_error(f"Failed to modify message {message_id}", e) from e

    logger.info("Modified labels on message %s", message_id)
    return parse_response(MessageRef, modified, "messages.modify")


def trash_message(service: Resource, message_id: str) -> None:
    """Move message to trash."""
    try:
        service.users().messages().trash(userId="me", id=message_id).execute()
    except Exception as e:
        logger.error("Failed to trash message %s: %s", message_id, e)
        raise api_error(f"Failed to trash message {message_id}", e) from e
    logger.info("Trashed message %s", message_id)


def delete_message(service: Resource, message_id: str) -> None:
    """Permanently delete a message."""
    try:
        service.users().messages().delete(userId="me", id=message_id).execute()
    except Exception as e:
        logger.error("Failed to delete message %s: %s", message_id, e)
        raise api_error(f"Failed to delete message {message_id}", e) from e
    logger.info("Permanently deleted message %s", message_id)


def batch_modify_messages(
    service: Resource,
    message_ids: list[str],
    add_labels: list[str] | None = None,
    remove_labels: list[str] | None = None,
) -> None:
    """Batch modify labels on multiple messages."""
    body = {
        "ids": message_ids,
        "addLabelIds": add_labels or [],
        "removeLabelIds": remove_labels or [],
    }
    try:
        service.users().messages().batchModify(userId="me", body=body).execute()
    except Exception as e:
        logger.error("Failed to batch modify messages: %s", e)
        raise api_error("Failed to batch modify messages", e) from e
    logger.info("Batch modified %d messages", len(message_ids))


def batch_delete_messages(service: Resource, message_ids: list[str]) -> None:
    """Permanently delete multiple messages."""
    try:
        service.users().messages().batchDelete(
            userId="me", body={"ids": message_ids}
        ).execute()
    except Exception as e:
        logger.error("Failed to batch delete messages: %s", e)
        raise api_error("Failed to batch delete messages", e) from e
    logger.info("Batch deleted %d messages", len(message_ids))


def get_attachment(
    service: Resource, message_id: str, attachment_id: str
) -> AttachmentBody:
    """Get the data of a message attachment."""
    try:
        response = (
            service.users()
            .messages()
            .attachments()
            .get(userId="me", messageId=message_id, id=attachment_id)
            .execute()
        )
    except Exception as e:
        logger.error(
            "Failed to get attachment %s of message %s: %s",
            attachment_id,
            message_id,
            e,
        )
        raise api_error(f"Failed to get attachment {attachment_id}", e) from e

    logger.debug("Retrieved attachment %s of message %s", attachment_id, message_id)
    return parse_response(AttachmentBody, response, "messages.attachments.get")
