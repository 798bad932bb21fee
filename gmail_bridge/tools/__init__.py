"""Gmail bridge tools package.

This package contains all MCP tool implementations. Each handler takes a
parameter model and the caller's OAuth credentials and returns text.
Tools are organized by the Gmail resource they act on.
"""

from gmail_bridge.tools.attachments import download_attachment, list_attachments
from gmail_bridge.tools.base import build_model, execute_tool, to_json
from gmail_bridge.tools.batch import batch_delete_emails, batch_modify_emails
from gmail_bridge.tools.drafts import (
    create_draft,
    delete_draft,
    list_drafts,
    send_draft,
)
from gmail_bridge.tools.filters import create_filter, delete_filter, list_filters
from gmail_bridge.tools.labels import (
    create_label,
    delete_label,
    list_labels,
    update_label,
)
from gmail_bridge.tools.messages import (
    delete_email,
    modify_email,
    read_email,
    reply_to_email,
    search_emails,
    send_email,
    trash_email,
)
from gmail_bridge.tools.threads import get_thread

__all__ = [
    # Base utilities
    "build_model",
    "execute_tool",
    "to_json",
    # Message tools
    "send_email",
    "read_email",
    "search_emails",
    "delete_email",
    "trash_email",
    "modify_email",
    "reply_to_email",
    # Attachment tools
    "list_attachments",
    "download_attachment",
    # Draft tools
    "create_draft",
    "list_drafts",
    "send_draft",
    "delete_draft",
    # Label tools
    "list_labels",
    "create_label",
    "update_label",
    "delete_label",
    # Batch tools
    "batch_modify_emails",
    "batch_delete_emails",
    # Filter tools
    "list_filters",
    "create_filter",
    "delete_filter",
    # Thread tools
    "get_thread",
]
