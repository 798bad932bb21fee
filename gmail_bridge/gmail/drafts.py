"""Gmail draft operations."""

from __future__ import annotations

import logging
from typing import Any

from googleapiclient.discovery import Resource

from gmail_bridge.schemas.gmail import Draft, DraftList, MessageRef, parse_response
from gmail_bridge.utils.errors import api_error

logger = logging.getLogger(__name__)


def create_draft(
    service: Resource, raw: str, thread_id: str | None = None
) -> Draft:
    """Create a draft from a base64url encoded RFC 2822 message."""
    message: dict[str, Any] = {"raw": raw}
    if thread_id:
        message["threadId"] = thread_id
    try:
        draft = (
            service.users()
            .drafts()
            .create(userId="me", body={"message": message})
            .execute()
        )
    except Exception as e:
        logger.error("Failed to create draft: %s", e)
        raise api_error("Failed to create draft", e) from e

    result = parse_response(Draft, draft, "drafts.create")
    logger.info("Created draft %s", result.id)
    return result


def list_drafts(service: Resource, max_results: int = 10) -> DraftList:
    """List drafts (single page)."""
    try:
        response = (
            service.users().drafts().list(userId="me", maxResults=max_results).execute()
        )
    except Exception as e:
        logger.error("Failed to list drafts: %s", e)
        raise api_error("Failed to list drafts", e) from e

    result = parse_response(DraftList, response, "drafts.list")
    logger.debug("Listed %d drafts", len(result.drafts))
    return result


def get_draft(service: Resource, draft_id: str, format: str = "metadata") -> Draft:
    """Get a draft with its message."""
    try:
        draft = (
            service.users()
            .drafts()
            .get(userId="me", id=draft_id, format=format)
            .execute()
        )
    except Exception as e:
        logger.error("Failed to get draft %s: %s", draft_id, e)
        raise api_error(f"Failed to get draft {draft_id}", e) from e

    logger.debug("Retrieved draft %s", draft_id)
    return parse_response(Draft, draft, "drafts.get")


def send_draft(service: Resource, draft_id: str) -> MessageRef:
    """Send an existing draft."""
    try:
        sent = service.users().drafts().send(userId="me", body={"id": draft_id}).execute()
    except Exception as e:
        logger.error("Failed to send draft %s: %s", draft_id, e)
        raise api_error(f"Failed to send draft {draft_id}", e) from e

    result = parse_response(MessageRef, sent, "drafts.send")
    logger.info("Sent draft %s as message %s", draft_id, result.id)
    return result


def delete_draft(service: Resource, draft_id: str) -> None:
    """Delete a draft."""
    try:
        service.users().drafts().delete(userId="me", id=draft_id).execute()
    except Exception as e:
        logger.error("Failed to delete draft %s: %s", draft_id, e)
        raise api_error(f"Failed to delete draft {draft_id}", e) from e
    logger.info("Deleted draft %s", draft_id)
