"""Batch message tools for the Gmail bridge.

At most MAX_BATCH_SIZE IDs go to Gmail per call; extra IDs are dropped and
the result text reports how many were actually submitted.
"""

from __future__ import annotations

import logging

from gmail_bridge.auth.credentials import OAuthCredentials
from gmail_bridge.gmail.client import build_service
from gmail_bridge.gmail.messages import batch_delete_messages, batch_modify_messages
from gmail_bridge.middleware.validator import limit_batch
from gmail_bridge.schemas.tools import BatchDeleteParams, BatchModifyParams
from gmail_bridge.tools.base import execute_tool

logger = logging.getLogger(__name__)


async def batch_modify_emails(
    params: BatchModifyParams, credentials: OAuthCredentials
) -> str:
    """Add or remove labels on up to 50 emails at once."""

    def operation() -> str:
        ids = limit_batch(params.message_ids)
        batch_modify_messages(
            build_service(credentials),
            ids,
            add_labels=params.add_labels,
            remove_labels=params.remove_labels,
        )
        return f"Batch modified {len(ids)} emails."

    return await execute_tool("batch_modify_emails", params.model_dump(), operation)


async def batch_delete_emails(
    params: BatchDeleteParams, credentials: OAuthCredentials
) -> str:
    """Permanently delete up to 50 emails at once. Cannot be undone."""

    def operation() -> str:
        ids = limit_batch(params.message_ids)
        batch_delete_messages(build_service(credentials), ids)
        return f"Batch deleted {len(ids)} emails."

    return await execute_tool("batch_delete_emails", params.model_dump(), operation)
