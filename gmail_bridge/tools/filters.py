"""Filter tools for the Gmail bridge."""

from __future__ import annotations

import logging

from gmail_bridge.auth.credentials import OAuthCredentials
from gmail_bridge.gmail.client import build_service
from gmail_bridge.gmail.filters import (
    build_filter_action,
    build_filter_criteria,
)
from gmail_bridge.gmail.filters import create_filter as gmail_create_filter
from gmail_bridge.gmail.filters import delete_filter as gmail_delete_filter
from gmail_bridge.gmail.filters import list_filters as gmail_list_filters
from gmail_bridge.middleware.validator import validate_identifier
from gmail_bridge.schemas.tools import CreateFilterParams, DeleteFilterParams
from gmail_bridge.tools.base import execute_tool, to_json

logger = logging.getLogger(__name__)


async def list_filters(credentials: OAuthCredentials) -> str:
    """List all email filters as JSON."""

    def operation() -> str:
        return to_json(gmail_list_filters(build_service(credentials)))

    return await execute_tool("list_filters", {}, operation)


async def create_filter(params: CreateFilterParams, credentials: OAuthCredentials) -> str:
    """Create a filter from criteria, explicit labels and shorthand flags.

    Raises:
        ValidationError: If no criterion or no action is given.
    """

    def operation() -> str:
        criteria = build_filter_criteria(
            from_email=params.from_email,
            to=params.to,
            subject=params.subject,
            query=params.query,
        )
        action = build_filter_action(
            add_label_ids=params.add_label_ids,
            remove_label_ids=params.remove_label_ids,
            forward=params.forward,
            star=params.star,
            mark_important=params.mark_important,
            mark_read=params.mark_read,
            archive=params.archive,
            trash=params.trash,
        )
        created = gmail_create_filter(build_service(credentials), criteria, action)
        return f"Filter created. ID: {created.id}"

    return await execute_tool("create_filter", params.model_dump(), operation)


async def delete_filter(params: DeleteFilterParams, credentials: OAuthCredentials) -> str:
    """Delete a filter."""

    def operation() -> str:
        filter_id = validate_identifier(params.filter_id, "filter_id")
        gmail_delete_filter(build_service(credentials), filter_id)
        return f"Filter {filter_id} deleted."

    return await execute_tool("delete_filter", params.model_dump(), operation)
