"""MIME envelope decoder for Gmail message payloads.

Gmail returns messages as a tree of parts, each with ``headers``, a
``mimeType``, optional ``filename`` and a ``body`` that holds either
inline base64url ``data`` or an ``attachmentId``. The helpers here flatten
that tree. Sparse input degrades to defaults instead of raising.
"""

from __future__ import annotations

import base64
import logging
from collections.abc import Iterator
from typing import Any

from gmail_bridge.schemas.messages import (
    DEFAULT_ATTACHMENT_MIME_TYPE,
    AttachmentInfo,
    InboundMessage,
)
from gmail_bridge.utils.errors import ValidationError

logger = logging.getLogger(__name__)

# Guard against malformed or self-referencing part trees.
MAX_PART_DEPTH = 64


def get_header(headers: list[dict[str, Any]] | None, name: str) -> str:
    """Look up a header value by name, case-insensitively.

    Args:
        headers: Gmail header list (``[{"name": ..., "value": ...}]``).
        name: Header name to find.

    Returns:
        Value of the first matching header, or ``""`` if absent.
    """
    wanted = name.lower()
    for header in headers or []:
        if (header.get("name") or "").lower() == wanted:
            return header.get("value") or ""
    return ""


def decode_base64url(data: str) -> bytes:
    """Decode base64url data, tolerating missing padding."""
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded)


def decode_text(data: str) -> str:
    """Decode base64url data into UTF-8 text.

    Returns:
        Decoded string, or empty string if the data is not valid base64.
    """
    try:
        return decode_base64url(data).decode("utf-8", errors="replace")
    except ValueError as e:
        logger.warning("Failed to decode base64 body data: %s", e)
        return ""


def to_standard_base64(data: str) -> str:
    """Convert base64url text to the standard base64 alphabet."""
    return data.replace("-", "+").replace("_", "/")


def _part_data(part: dict[str, Any]) -> str:
    return (part.get("body") or {}).get("data") or ""


def _find_body(payload: dict[str, Any], depth: int) -> str:
    parts = payload.get("parts")
    if not parts:
        data = _part_data(payload)
        return decode_text(data) if data else ""

    for mime_type in ("text/plain", "text/html"):
        for part in parts:
            if part.get("mimeType") == mime_type and _part_data(part):
                return decode_text(_part_data(part))

    if depth >= MAX_PART_DEPTH:
        logger.warning("Message part tree deeper than %d levels", MAX_PART_DEPTH)
        return ""

    for part in parts:
        if part.get("parts"):
            body = _find_body(part, depth + 1)
            if body:
                return body
    return ""


def extract_body(payload: dict[str, Any] | None) -> str:
    """Extract the text body of a message payload.

    Prefers the first ``text/plain`` sub-part, then the first ``text/html``
    sub-part, then nested multipart parts in order. A payload without
    sub-parts uses its own body.

    Args:
        payload: The ``payload`` field of a Gmail message.

    Returns:
        Decoded body text, or ``""`` when none is found.
    """
    if not payload:
        return ""
    return _find_body(payload, 0)


def parse_message(message: dict[str, Any]) -> InboundMessage:
    """Flatten a Gmail message resource into an InboundMessage.

    Args:
        message: Message resource as returned by ``messages.get``.

    Returns:
        InboundMessage with headers, snippet, decoded body and labels.

    Raises:
        ValidationError: If the message has no ``id``.
    """
    message_id = message.get("id")
    if not message_id:
        raise ValidationError("Gmail message is missing its id", field="id")

    payload = message.get("payload") or {}
    headers = payload.get("headers") or []

    return InboundMessage(
        id=message_id,
        thread_id=message.get("threadId") or "",
        sender=get_header(headers, "From"),
        to=get_header(headers, "To"),
        subject=get_header(headers, "Subject"),
        date=get_header(headers, "Date"),
        snippet=message.get("snippet") or "",
        body=extract_body(payload),
        labels=list(message.get("labelIds") or []),
    )


def iter_parts(
    parts: list[dict[str, Any]] | None, depth: int = 0
) -> Iterator[dict[str, Any]]:
    """Walk a part tree depth-first, yielding parts in array order."""
    if not parts:
        return
    if depth >= MAX_PART_DEPTH:
        logger.warning("Skipping message parts deeper than %d levels", MAX_PART_DEPTH)
        return
    for part in parts:
        yield part
        yield from iter_parts(part.get("parts"), depth + 1)


def find_attachments(payload: dict[str, Any] | None) -> list[AttachmentInfo]:
    """Collect the attachments of a message payload.

    A part is an attachment when it has a non-empty ``filename`` and a
    ``body.attachmentId``.

    Args:
        payload: The ``payload`` field of a Gmail message.

    Returns:
        Attachments in depth-first, array order.
    """
    attachments: list[AttachmentInfo] = []
    for part in iter_parts((payload or {}).get("parts")):
        body = part.get("body") or {}
        filename = part.get("filename")
        attachment_id = body.get("attachmentId")
        if filename and attachment_id:
            attachments.append(
                AttachmentInfo(
                    id=attachment_id,
                    filename=filename,
                    mime_type=part.get("mimeType") or DEFAULT_ATTACHMENT_MIME_TYPE,
                    size=body.get("size") or 0,
                )
            )
    return attachments
