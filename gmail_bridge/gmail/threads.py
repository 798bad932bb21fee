"""Gmail thread operations."""

from __future__ import annotations

import logging
from typing import Any

from googleapiclient.discovery import Resource

from gmail_bridge.utils.errors import api_error

logger = logging.getLogger(__name__)


def get_thread(
    service: Resource, thread_id: str, format: str = "full"
) -> dict[str, Any]:
    """Get a thread with all its messages."""
    try:
        thread = (
            service.users()
            .threads()
            .get(userId="me", id=thread_id, format=format)
            .execute()
        )
    except Exception as e:
        logger.error("Failed to get thread %s: %s", thread_id, e)
        raise api_error(f"Failed to get thread {thread_id}", e) from e

    msg_count = len(thread.get("messages", []))
    logger.debug("Retrieved thread %s with %d messages", thread_id, msg_count)
    return thread
