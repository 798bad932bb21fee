"""Pydantic parameter models for the Gmail bridge tools.

One model per tool. Models are grouped by the Gmail resource the tool
works on: messages, attachments, drafts, labels, batch, filters, threads.
"""

from typing import Literal

from pydantic import BaseModel, Field

from gmail_bridge.schemas.messages import AttachmentPart

MAX_SEARCH_RESULTS = 100

MessageListVisibility = Literal["show", "hide"]
LabelListVisibility = Literal["labelShow", "labelShowIfUnread", "labelHide"]


# =============================================================================
# Shared Parameter Models
# =============================================================================


class MessageIdParams(BaseModel):
    """Parameters for tools that act on a single message."""

    message_id: str = Field(
        ...,
        min_length=1,
        description="Gmail message ID",
    )


class DraftIdParams(BaseModel):
    """Parameters for tools that act on a single draft."""

    draft_id: str = Field(
        ...,
        min_length=1,
        description="Gmail draft ID",
    )


class LabelIdParams(BaseModel):
    """Parameters for tools that act on a single label."""

    label_id: str = Field(
        ...,
        min_length=1,
        description="Gmail label ID",
    )


class FilterIdParams(BaseModel):
    """Parameters for tools that act on a single filter."""

    filter_id: str = Field(
        ...,
        min_length=1,
        description="Gmail filter ID",
    )


class ComposeParams(BaseModel):
    """Parameters for composing a message (send_email, create_draft)."""

    to: str = Field(
        ...,
        min_length=1,
        description="Recipient email address",
    )
    subject: str = Field(
        ...,
        min_length=1,
        description="Email subject",
    )
    body: str = Field(
        ...,
        description="Plain text body",
    )
    html_body: str | None = Field(
        None,
        description="HTML body (optional)",
    )
    cc: list[str] = Field(
        default_factory=list,
        description="CC recipients",
    )
    bcc: list[str] = Field(
        default_factory=list,
        description="BCC recipients",
    )
    from_email: str | None = Field(
        None,
        description="Sender address, e.g. a send-as alias (optional)",
    )
    thread_id: str | None = Field(
        None,
        description="Thread ID to place the message in (optional)",
    )
    attachments: list[AttachmentPart] = Field(
        default_factory=list,
        description="File attachments with base64 content",
    )


# =============================================================================
# Message Tool Parameter Models
# =============================================================================


class SendEmailParams(ComposeParams):
    """Parameters for send_email tool."""


class ReadEmailParams(MessageIdParams):
    """Parameters for read_email tool."""


class SearchParams(BaseModel):
    """Parameters for search_emails tool.

    Searches emails using Gmail's query syntax. ``max_results`` above 100 is
    clamped rather than rejected.
    """

    query: str = Field(
        ...,
        description='Gmail search query (e.g., "from:user@example.com", "is:unread")',
    )
    max_results: int = Field(
        default=10,
        ge=1,
        description="Maximum results to return (max 100)",
    )

    @property
    def limit(self) -> int:
        return min(self.max_results, MAX_SEARCH_RESULTS)


class DeleteEmailParams(MessageIdParams):
    """Parameters for delete_email tool (permanent delete)."""


class TrashEmailParams(MessageIdParams):
    """Parameters for trash_email tool."""


class ModifyEmailParams(MessageIdParams):
    """Parameters for modify_email tool."""

    add_labels: list[str] = Field(
        default_factory=list,
        description="Label IDs to add (e.g., STARRED, IMPORTANT, or a custom label ID)",
    )
    remove_labels: list[str] = Field(
        default_factory=list,
        description="Label IDs to remove (e.g., UNREAD, INBOX)",
    )


class ReplyParams(MessageIdParams):
    """Parameters for reply_to_email tool."""

    body: str = Field(
        ...,
        description="Reply body (plain text)",
    )
    html_body: str | None = Field(
        None,
        description="Reply body (HTML, optional)",
    )
    reply_all: bool = Field(
        default=False,
        description="Reply to all recipients",
    )


# =============================================================================
# Attachment Tool Parameter Models
# =============================================================================


class ListAttachmentsParams(MessageIdParams):
    """Parameters for list_attachments tool."""


class DownloadAttachmentParams(MessageIdParams):
    """Parameters for download_attachment tool."""

    attachment_id: str = Field(
        ...,
        min_length=1,
        description="Attachment ID (from list_attachments)",
    )


# =============================================================================
# Draft Tool Parameter Models
# =============================================================================


class CreateDraftParams(ComposeParams):
    """Parameters for create_draft tool."""


class ListDraftsParams(BaseModel):
    """Parameters for list_drafts tool."""

    max_results: int = Field(
        default=10,
        ge=1,
        le=500,
        description="Maximum drafts to return",
    )


class SendDraftParams(DraftIdParams):
    """Parameters for send_draft tool."""


class DeleteDraftParams(DraftIdParams):
    """Parameters for delete_draft tool."""


# =============================================================================
# Label Tool Parameter Models
# =============================================================================


class CreateLabelParams(BaseModel):
    """Parameters for create_label tool."""

    name: str = Field(
        ...,
        min_length=1,
        description="Label name (use / for nesting, e.g., 'Work/Projects')",
    )
    message_list_visibility: MessageListVisibility = Field(
        default="show",
        description="Show or hide messages with this label in the message list",
    )
    label_list_visibility: LabelListVisibility = Field(
        default="labelShow",
        description="Label visibility in the label list",
    )


class UpdateLabelParams(LabelIdParams):
    """Parameters for update_label tool. Only supplied fields change."""

    name: str | None = Field(
        None,
        description="New label name",
    )
    message_list_visibility: MessageListVisibility | None = Field(
        None,
        description="Show or hide messages with this label in the message list",
    )
    label_list_visibility: LabelListVisibility | None = Field(
        None,
        description="Label visibility in the label list",
    )


class DeleteLabelParams(LabelIdParams):
    """Parameters for delete_label tool."""


# =============================================================================
# Batch Tool Parameter Models
# =============================================================================


class BatchModifyParams(BaseModel):
    """Parameters for batch_modify_emails tool.

    Only the first 50 IDs are submitted.
    """

    message_ids: list[str] = Field(
        ...,
        min_length=1,
        description="Message IDs to modify (max 50)",
    )
    add_labels: list[str] = Field(
        default_factory=list,
        description="Label IDs to add",
    )
    remove_labels: list[str] = Field(
        default_factory=list,
        description="Label IDs to remove",
    )


class BatchDeleteParams(BaseModel):
    """Parameters for batch_delete_emails tool (permanent delete).

    Only the first 50 IDs are submitted.
    """

    message_ids: list[str] = Field(
        ...,
        min_length=1,
        description="Message IDs to permanently delete (max 50)",
    )


# =============================================================================
# Filter Tool Parameter Models
# =============================================================================


class CreateFilterParams(BaseModel):
    """Parameters for create_filter tool.

    At least one criterion and one action are required.
    """

    from_email: str | None = Field(None, description="Match sender")
    to: str | None = Field(None, description="Match recipient")
    subject: str | None = Field(None, description="Match subject")
    query: str | None = Field(None, description="Gmail search query to match")
    add_label_ids: list[str] = Field(
        default_factory=list,
        description="Label IDs to add to matching messages",
    )
    remove_label_ids: list[str] = Field(
        default_factory=list,
        description="Label IDs to remove from matching messages",
    )
    forward: str | None = Field(None, description="Forward matching messages to this address")
    star: bool = Field(default=False, description="Star matching messages")
    mark_important: bool = Field(default=False, description="Mark matching messages important")
    mark_read: bool = Field(default=False, description="Mark matching messages as read")
    archive: bool = Field(default=False, description="Skip the inbox")
    trash: bool = Field(default=False, description="Move matching messages to trash")


class DeleteFilterParams(FilterIdParams):
    """Parameters for delete_filter tool."""


# =============================================================================
# Thread Tool Parameter Models
# =============================================================================


class GetThreadParams(BaseModel):
    """Parameters for get_thread tool."""

    thread_id: str = Field(
        ...,
        min_length=1,
        description="Gmail thread ID",
    )
