"""Pydantic schemas for the Gmail bridge.

This module exports the message data model and the tool parameter models.
"""

from gmail_bridge.schemas.messages import (
    AttachmentInfo,
    AttachmentPart,
    InboundMessage,
    OutboundMessage,
)
from gmail_bridge.schemas.tools import (
    BatchDeleteParams,
    BatchModifyParams,
    CreateDraftParams,
    CreateFilterParams,
    CreateLabelParams,
    DeleteDraftParams,
    DeleteEmailParams,
    DeleteFilterParams,
    DeleteLabelParams,
    DownloadAttachmentParams,
    GetThreadParams,
    ListAttachmentsParams,
    ListDraftsParams,
    ModifyEmailParams,
    ReadEmailParams,
    ReplyParams,
    SearchParams,
    SendDraftParams,
    SendEmailParams,
    TrashEmailParams,
    UpdateLabelParams,
)

__all__ = [
    # Message data model
    "AttachmentInfo",
    "AttachmentPart",
    "InboundMessage",
    "OutboundMessage",
    # Message tools
    "SendEmailParams",
    "ReadEmailParams",
    "SearchParams",
    "DeleteEmailParams",
    "TrashEmailParams",
    "ModifyEmailParams",
    "ReplyParams",
    # Attachment tools
    "ListAttachmentsParams",
    "DownloadAttachmentParams",
    # Draft tools
    "CreateDraftParams",
    "ListDraftsParams",
    "SendDraftParams",
    "DeleteDraftParams",
    # Label tools
    "CreateLabelParams",
    "UpdateLabelParams",
    "DeleteLabelParams",
    # Batch tools
    "BatchModifyParams",
    "BatchDeleteParams",
    # Filter tools
    "CreateFilterParams",
    "DeleteFilterParams",
    # Thread tools
    "GetThreadParams",
]
