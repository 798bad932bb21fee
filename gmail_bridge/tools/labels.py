"""Label tools for the Gmail bridge.

This module implements:
- list_labels: All system and user labels with counts
- create_label / update_label / delete_label
"""

from __future__ import annotations

import logging

from gmail_bridge.auth.credentials import OAuthCredentials
from gmail_bridge.gmail.client import build_service
from gmail_bridge.gmail.labels import create_label as gmail_create_label
from gmail_bridge.gmail.labels import delete_label as gmail_delete_label
from gmail_bridge.gmail.labels import list_labels as gmail_list_labels
from gmail_bridge.gmail.labels import update_label as gmail_update_label
from gmail_bridge.middleware.validator import validate_identifier, validate_label_name
from gmail_bridge.schemas.tools import (
    CreateLabelParams,
    DeleteLabelParams,
    UpdateLabelParams,
)
from gmail_bridge.tools.base import execute_tool, to_json

logger = logging.getLogger(__name__)

LABEL_FIELDS = ("id", "name", "type", "messagesTotal", "messagesUnread")


async def list_labels(credentials: OAuthCredentials) -> str:
    """List all Gmail labels.

    Returns:
        JSON list of ``{id, name, type, messagesTotal, messagesUnread}``.
    """

    def operation() -> str:
        labels = gmail_list_labels(build_service(credentials))
        return to_json(
            [
                {key: label.model_dump(by_alias=True).get(key) for key in LABEL_FIELDS}
                for label in labels
            ]
        )

    return await execute_tool("list_labels", {}, operation)


async def create_label(params: CreateLabelParams, credentials: OAuthCredentials) -> str:
    """Create a new label."""

    def operation() -> str:
        name = validate_label_name(params.name)
        label = gmail_create_label(
            build_service(credentials),
            name,
            label_list_visibility=params.label_list_visibility,
            message_list_visibility=params.message_list_visibility,
        )
        return f"Label created: {label.name} (ID: {label.id})"

    return await execute_tool("create_label", params.model_dump(), operation)


async def update_label(params: UpdateLabelParams, credentials: OAuthCredentials) -> str:
    """Rename a label or change its visibility. Unset fields are left as is."""

    def operation() -> str:
        label_id = validate_identifier(params.label_id, "label_id")
        name = validate_label_name(params.name) if params.name is not None else None
        label = gmail_update_label(
            build_service(credentials),
            label_id,
            name=name,
            label_list_visibility=params.label_list_visibility,
            message_list_visibility=params.message_list_visibility,
        )
        return f"Label updated: {label.name}"

    return await execute_tool("update_label", params.model_dump(), operation)


async def delete_label(params: DeleteLabelParams, credentials: OAuthCredentials) -> str:
    """Delete a label. Messages keep existing, the label is removed from them."""

    def operation() -> str:
        label_id = validate_identifier(params.label_id, "label_id")
        gmail_delete_label(build_service(credentials), label_id)
        return f"Label {label_id} deleted."

    return await execute_tool("delete_label", params.model_dump(), operation)
