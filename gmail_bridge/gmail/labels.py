"""Gmail label operations."""

from __future__ import annotations

import logging
from typing import Any

from googleapiclient.discovery import Resource

from gmail_bridge.schemas.gmail import Label, LabelList, parse_response
from gmail_bridge.utils.errors import api_error

logger = logging.getLogger(__name__)


def list_labels(service: Resource) -> list[Label]:
    """List all labels in the mailbox."""
    try:
        response = service.users().labels().list(userId="me").execute()
    except Exception as e:
        logger.error("Failed to list labels: %s", e)
        raise api_error("Failed to list labels", e) from e

    labels = parse_response(LabelList, response, "labels.list").labels
    logger.debug("Listed %d labels", len(labels))
    return labels


def create_label(
    service: Resource,
    name: str,
    label_list_visibility: str = "labelShow",
    message_list_visibility: str = "show",
) -> Label:
    """Create a new label."""
    body = {
        "name": name,
        "labelListVisibility": label_list_visibility,
        "messageListVisibility": message_list_visibility,
    }
    try:
        label = service.users().labels().create(userId="me", body=body).execute()
    except Exception as e:
        logger.error("Failed to create label %s: %s", name, e)
        raise api_error(f"Failed to create label {name}", e) from e

    result = parse_response(Label, label, "labels.create")
    logger.info("Created label %s (%s)", result.id, name)
    return result


def update_label(
    service: Resource,
    label_id: str,
    name: str | None = None,
    label_list_visibility: str | None = None,
    message_list_visibility: str | None = None,
) -> Label:
    """Update an existing label, changing only the supplied fields."""
    body: dict[str, Any] = {"id": label_id}
    if name:
        body["name"] = name
    if label_list_visibility:
        body["labelListVisibility"] = label_list_visibility
    if message_list_visibility:
        body["messageListVisibility"] = message_list_visibility

    try:
        label = (
            service.users()
            .labels()
            .patch(userId="me", id=label_id, body=body)
            .execute()
        )
    except Exception as e:
        logger.error("Failed to update label %s: %s", label_id, e)
        raise api_error(f"Failed to update label {label_id}", e) from e

    logger.info("Updated label %s", label_id)
    return parse_response(Label, label, "labels.patch")


def delete_label(service: Resource, label_id: str) -> None:
    """Delete a label."""
    try:
        service.users().labels().delete(userId="me", id=label_id).execute()
    except Exception as e:
        logger.error("Failed to delete label %s: %s", label_id, e)
        raise api_error(f"Failed to delete label {label_id}", e) from e
    logger.info("Deleted label %s", label_id)
