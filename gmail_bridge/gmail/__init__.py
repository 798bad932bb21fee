"""Gmail API operations and the MIME envelope codec."""

from gmail_bridge.gmail.client import build_service
from gmail_bridge.gmail.drafts import (
    create_draft,
    delete_draft,
    get_draft,
    list_drafts,
    send_draft,
)
from gmail_bridge.gmail.filters import (
    build_filter_action,
    build_filter_criteria,
    create_filter,
    delete_filter,
    list_filters,
)
from gmail_bridge.gmail.labels import (
    create_label,
    delete_label,
    list_labels,
    update_label,
)
from gmail_bridge.gmail.messages import (
    batch_delete_messages,
    batch_modify_messages,
    delete_message,
    get_attachment,
    get_message,
    list_messages,
    modify_message,
    send_message,
    trash_message,
)
from gmail_bridge.gmail.mime import build_raw_message
from gmail_bridge.gmail.parsing import (
    extract_body,
    find_attachments,
    get_header,
    parse_message,
)
from gmail_bridge.gmail.threads import get_thread

__all__ = [
    "build_service",
    "build_raw_message",
    "get_header",
    "extract_body",
    "parse_message",
    "find_attachments",
    "list_messages",
    "get_message",
    "send_message",
    "modify_message",
    "trash_message",
    "delete_message",
    "batch_modify_messages",
    "batch_delete_messages",
    "get_attachment",
    "create_draft",
    "list_drafts",
    "get_draft",
    "send_draft",
    "delete_draft",
    "list_labels",
    "create_label",
    "update_label",
    "delete_label",
    "build_filter_criteria",
    "build_filter_action",
    "list_filters",
    "create_filter",
    "delete_filter",
    "get_thread",
]
