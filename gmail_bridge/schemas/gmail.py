"""Typed views of the Gmail API responses used by the bridge.

Each model declares the fields the tools rely on. Unknown fields are kept
so raw resources can still be passed through where a tool returns them.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from gmail_bridge.utils.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


class GmailResource(BaseModel):
    """Base for Gmail API response models."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class MessageRef(GmailResource):
    """Message reference returned by list, send and modify calls."""

    id: str
    thread_id: str = Field(default="", alias="threadId")
    label_ids: list[str] = Field(default_factory=list, alias="labelIds")


class MessageList(GmailResource):
    """Response of ``users.messages.list``."""

    messages: list[MessageRef] = Field(default_factory=list)
    next_page_token: str | None = Field(default=None, alias="nextPageToken")


class AttachmentBody(GmailResource):
    """Response of ``users.messages.attachments.get``."""

    data: str | None = None
    size: int = 0


class Draft(GmailResource):
    """Draft resource. ``message`` is the raw message resource when present."""

    id: str
    message: dict[str, Any] | None = None


class DraftList(GmailResource):
    """Response of ``users.drafts.list``."""

    drafts: list[Draft] = Field(default_factory=list)


class Label(GmailResource):
    """Label resource."""

    id: str
    name: str = ""
    type: str | None = None
    messages_total: int | None = Field(default=None, alias="messagesTotal")
    messages_unread: int | None = Field(default=None, alias="messagesUnread")


class LabelList(GmailResource):
    """Response of ``users.labels.list``."""

    labels: list[Label] = Field(default_factory=list)


class Filter(GmailResource):
    """Filter resource from ``users.settings.filters``."""

    id: str
    criteria: dict[str, Any] = Field(default_factory=dict)
    action: dict[str, Any] = Field(default_factory=dict)


class FilterList(GmailResource):
    """Response of ``users.settings.filters.list``."""

    filters: list[Filter] = Field(default_factory=list, alias="filter")


def parse_response(model: type[ModelT], data: Any, operation: str) -> ModelT:
    """Validate a Gmail API response against its model.

    Args:
        model: Response model class.
        data: Decoded JSON response.
        operation: Gmail call name, used in the error message.

    Returns:
        Validated model instance.

    Raises:
        ValidationError: If a required field is missing or malformed.
    """
    try:
        return model.model_validate(data or {})
    except PydanticValidationError as e:
        missing = ", ".join(
            ".".join(str(loc) for loc in err["loc"]) for err in e.errors()
        )
        raise ValidationError(
            f"Unexpected response from {operation}: invalid or missing {missing}",
            details={"operation": operation},
        ) from e
