"""Message data model shared by the MIME codec and the tools.

These models are transient: built per request, never persisted.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ATTACHMENT_MIME_TYPE = "application/octet-stream"


def _reject_line_breaks(value: str) -> str:
    if "\r" in value or "\n" in value:
        raise ValueError("must not contain line breaks")
    return value


class AttachmentPart(BaseModel):
    """A file to attach to an outgoing message.

    ``content`` is already base64-encoded by the caller; the encoder only
    inlines it.
    """

    model_config = ConfigDict(populate_by_name=True)

    filename: str = Field(
        ...,
        min_length=1,
        description='File name (e.g., "report.pdf")',
    )
    mime_type: str = Field(
        ...,
        alias="mimeType",
        min_length=1,
        description='MIME type (e.g., "application/pdf", "image/png")',
    )
    content: str = Field(
        ...,
        description="File content as base64 encoded string",
    )

    @field_validator("filename", "mime_type")
    @classmethod
    def _check_header_safe(cls, value: str) -> str:
        value = _reject_line_breaks(value)
        if '"' in value:
            raise ValueError("must not contain double quotes")
        return value


class OutboundMessage(BaseModel):
    """The logical representation of an email to be sent or drafted."""

    to: str = Field(..., min_length=1)
    sender: str | None = None
    cc: list[str] = Field(default_factory=list)
    bcc: list[str] = Field(default_factory=list)
    subject: str = Field(..., min_length=1)
    plain_body: str
    html_body: str | None = None
    in_reply_to: str | None = None
    references: str | None = None
    attachments: list[AttachmentPart] = Field(default_factory=list)

    @field_validator("to", "sender", "subject", "in_reply_to", "references")
    @classmethod
    def _check_header_value(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return _reject_line_breaks(value)

    @field_validator("cc", "bcc")
    @classmethod
    def _check_address_list(cls, value: list[str]) -> list[str]:
        return [_reject_line_breaks(address) for address in value]


class InboundMessage(BaseModel):
    """Flat view of a Gmail message, serialized with Gmail-style keys."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    thread_id: str = Field(default="", alias="threadId")
    sender: str = Field(default="", alias="from")
    to: str = ""
    subject: str = ""
    date: str = ""
    snippet: str = ""
    body: str = ""
    labels: list[str] = Field(default_factory=list)


class AttachmentInfo(BaseModel):
    """An attachment found in a message part tree."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    filename: str
    mime_type: str = Field(default=DEFAULT_ATTACHMENT_MIME_TYPE, alias="mimeType")
    size: int = 0
