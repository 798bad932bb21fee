"""Draft tools for the Gmail bridge.

This module implements:
- create_draft: Compose a draft (same fields as send_email)
- list_drafts: Drafts with their To, Subject and Date
- send_draft / delete_draft
"""

from __future__ import annotations

import logging

from gmail_bridge.auth.credentials import OAuthCredentials
from gmail_bridge.gmail.client import build_service
from gmail_bridge.gmail.drafts import create_draft as gmail_create_draft
from gmail_bridge.gmail.drafts import delete_draft as gmail_delete_draft
from gmail_bridge.gmail.drafts import get_draft, list_drafts as gmail_list_drafts
from gmail_bridge.gmail.drafts import send_draft as gmail_send_draft
from gmail_bridge.gmail.mime import build_raw_message
from gmail_bridge.gmail.parsing import get_header
from gmail_bridge.middleware.validator import validate_identifier
from gmail_bridge.schemas.tools import (
    CreateDraftParams,
    DeleteDraftParams,
    ListDraftsParams,
    SendDraftParams,
)
from gmail_bridge.tools.base import execute_tool, to_json
from gmail_bridge.tools.messages import compose_message

logger = logging.getLogger(__name__)

NO_DRAFTS = "No drafts found."


async def create_draft(params: CreateDraftParams, credentials: OAuthCredentials) -> str:
    """Create an email draft."""

    def operation() -> str:
        message = compose_message(params)
        thread_id = (
            validate_identifier(params.thread_id, "thread_id")
            if params.thread_id
            else None
        )
        draft = gmail_create_draft(
            build_service(credentials), build_raw_message(message), thread_id
        )
        return f"Draft created. Draft ID: {draft.id}"

    return await execute_tool("create_draft", params.model_dump(), operation)


async def list_drafts(params: ListDraftsParams, credentials: OAuthCredentials) -> str:
    """List drafts, fetching the metadata of each one in turn.

    Returns:
        JSON list of ``{draftId, messageId, to, subject, date}``, or a
        notice when there are no drafts.
    """

    def operation() -> str:
        service = build_service(credentials)
        drafts = gmail_list_drafts(service, params.max_results).drafts
        if not drafts:
            return NO_DRAFTS

        details = []
        for draft in drafts:
            message = get_draft(service, draft.id, format="metadata").message or {}
            headers = (message.get("payload") or {}).get("headers") or []
            details.append(
                {
                    "draftId": draft.id,
                    "messageId": message.get("id"),
                    "to": get_header(headers, "To"),
                    "subject": get_header(headers, "Subject"),
                    "date": get_header(headers, "Date"),
                }
            )
        return to_json(details)

    return await execute_tool("list_drafts", params.model_dump(), operation)


async def send_draft(params: SendDraftParams, credentials: OAuthCredentials) -> str:
    """Send an existing draft."""

    def operation() -> str:
        draft_id = validate_identifier(params.draft_id, "draft_id")
        sent = gmail_send_draft(build_service(credentials), draft_id)
        return f"Draft sent. Message ID: {sent.id}"

    return await execute_tool("send_draft", params.model_dump(), operation)


async def delete_draft(params: DeleteDraftParams, credentials: OAuthCredentials) -> str:
    """Delete a draft."""

    def operation() -> str:
        draft_id = validate_identifier(params.draft_id, "draft_id")
        gmail_delete_draft(build_service(credentials), draft_id)
        return f"Draft {draft_id} deleted."

    return await execute_tool("delete_draft", params.model_dump(), operation)
