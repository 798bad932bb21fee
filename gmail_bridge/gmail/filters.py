"""Gmail filter operations and filter action shorthands."""

from __future__ import annotations

import logging
from typing import Any

from googleapiclient.discovery import Resource

from gmail_bridge.schemas.gmail import Filter, FilterList, parse_response
from gmail_bridge.utils.errors import ValidationError, api_error

logger = logging.getLogger(__name__)

LABEL_INBOX = "INBOX"
LABEL_UNREAD = "UNREAD"
LABEL_TRASH = "TRASH"
LABEL_STARRED = "STARRED"
LABEL_IMPORTANT = "IMPORTANT"


def _extend_unique(labels: list[str], extra: list[str]) -> list[str]:
    for label in extra:
        if label not in labels:
            labels.append(label)
    return labels


def build_filter_criteria(
    from_email: str | None = None,
    to: str | None = None,
    subject: str | None = None,
    query: str | None = None,
) -> dict[str, str]:
    """Build a filter ``criteria`` object from the non-empty fields."""
    criteria = {"from": from_email, "to": to, "subject": subject, "query": query}
    return {key: value for key, value in criteria.items() if value}


def build_filter_action(
    add_label_ids: list[str] | None = None,
    remove_label_ids: list[str] | None = None,
    forward: str | None = None,
    star: bool = False,
    mark_important: bool = False,
    mark_read: bool = False,
    archive: bool = False,
    trash: bool = False,
) -> dict[str, Any]:
    """Build a filter ``action`` object, expanding the boolean shorthands.

    ``mark_read`` removes UNREAD and ``archive`` removes INBOX. ``trash``,
    ``star`` and ``mark_important`` add TRASH, STARRED and IMPORTANT after
    any explicit labels.

    Returns:
        Action dict with ``addLabelIds``, ``removeLabelIds`` and ``forward``
        present only when non-empty.
    """
    add_ids = _extend_unique([], list(add_label_ids or []))
    remove_ids = _extend_unique([], list(remove_label_ids or []))

    if trash:
        _extend_unique(add_ids, [LABEL_TRASH])
    if star:
        _extend_unique(add_ids, [LABEL_STARRED])
    if mark_important:
        _extend_unique(add_ids, [LABEL_IMPORTANT])
    if mark_read:
        _extend_unique(remove_ids, [LABEL_UNREAD])
    if archive:
        _extend_unique(remove_ids, [LABEL_INBOX])

    action: dict[str, Any] = {}
    if add_ids:
        action["addLabelIds"] = add_ids
    if remove_ids:
        action["removeLabelIds"] = remove_ids
    if forward:
        action["forward"] = forward
    return action


def list_filters(service: Resource) -> list[Filter]:
    """List all filters."""
    try:
        response = service.users().settings().filters().list(userId="me").execute()
    except Exception as e:
        logger.error("Failed to list filters: %s", e)
        raise api_error("Failed to list filters", e) from e

    filters = parse_response(FilterList, response, "settings.filters.list").filters
    logger.debug("Listed %d filters", len(filters))
    return filters


def create_filter(
    service: Resource, criteria: dict[str, Any], action: dict[str, Any]
) -> Filter:
    """Create a filter.

    Raises:
        ValidationError: If criteria or action is empty.
        GmailAPIError: If the Gmail call fails.
    """
    if not criteria:
        raise ValidationError(
            "Filter needs at least one criterion: from, to, subject, or query",
            field="criteria",
        )
    if not action:
        raise ValidationError(
            "Filter needs at least one action: labels, forward, or a shorthand",
            field="action",
        )

    body = {"criteria": criteria, "action": action}
    try:
        created = (
            service.users().settings().filters().create(userId="me", body=body).execute()
        )
    except Exception as e:
        logger.error("Failed to create filter: %s", e)
        raise api_error("Failed to create filter", e) from e

    result = parse_response(Filter, created, "settings.filters.create")
    logger.info("Created filter %s", result.id)
    return result


def delete_filter(service: Resource, filter_id: str) -> None:
    """Delete a filter."""
    try:
        service.users().settings().filters().delete(userId="me", id=filter_id).execute()
    except Exception as e:
        logger.error("Failed to delete filter %s: %s", filter_id, e)
        raise api_error(f"Failed to delete filter {filter_id}", e) from e
    logger.info("Deleted filter %s", filter_id)
