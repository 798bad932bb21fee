"""MIME envelope encoder.

Serializes an OutboundMessage into the base64url string Gmail expects in
the ``raw`` field of ``messages.send`` and ``drafts.create``.

Layout of the produced message:

- attachments present: ``multipart/mixed``; the first part carries the
  body (``multipart/alternative`` when HTML is given, else ``text/plain``),
  then one part per attachment in input order
- HTML without attachments: ``multipart/alternative``, plain part first
- plain text only: a single ``text/plain`` part

Every text part is base64 transfer-encoded and lines end in CRLF.
"""

from __future__ import annotations

import base64
import logging
import secrets
from email import policy
from email.charset import BASE64, Charset
from email.header import Header
from email.message import Message
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from gmail_bridge.schemas.messages import AttachmentPart, OutboundMessage
from gmail_bridge.utils.errors import ValidationError

logger = logging.getLogger(__name__)

BASE64_LINE_LENGTH = 76
MAX_BOUNDARY_ATTEMPTS = 8

# CRLF line endings; display names in address headers may be UTF-8
SERIALIZE_POLICY = policy.SMTPUTF8

SUBJECT_CHARSET = Charset("utf-8")
SUBJECT_CHARSET.header_encoding = BASE64


def encode_base64url(data: bytes) -> str:
    """Encode bytes as base64url without padding."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def encode_subject(subject: str) -> str:
    """Encode a subject as UTF-8 base64 encoded words."""
    return Header(subject, SUBJECT_CHARSET, header_name="Subject").encode()


def generate_boundary(prefix: str, forbidden: list[str]) -> str:
    """Generate a random boundary token that occurs in none of ``forbidden``.

    Args:
        prefix: Readable prefix, e.g. ``"mixed"``.
        forbidden: Texts the boundary must not appear in.

    Returns:
        Boundary token such as ``mixed_3f2a...``.

    Raises:
        ValidationError: If no collision-free token was found.
    """
    for _ in range(MAX_BOUNDARY_ATTEMPTS):
        boundary = f"{prefix}_{secrets.token_hex(16)}"
        if not any(boundary in text for text in forbidden):
            return boundary
    raise ValidationError(
        "Could not generate a MIME boundary that does not collide with content"
    )


def _collision_sources(message: OutboundMessage) -> list[str]:
    sources = [message.plain_body]
    if message.html_body:
        sources.append(message.html_body)
    for attachment in message.attachments:
        sources.append(attachment.filename)
        sources.append(attachment.content)
    return sources


def _nested(part: Message) -> Message:
    # MIME-Version belongs on the top-level entity only
    del part["MIME-Version"]
    return part


def _alternative(boundary: str, plain: str, html: str) -> MIMEMultipart:
    # Clients render the last alternative they support, so plain goes first.
    part = MIMEMultipart("alternative", boundary=boundary)
    part.attach(_nested(MIMEText(plain, "plain", "utf-8")))
    part.attach(_nested(MIMEText(html, "html", "utf-8")))
    return part


def _attachment_part(attachment: AttachmentPart) -> MIMEBase:
    maintype, _, subtype = attachment.mime_type.partition("/")
    if not subtype:
        maintype, subtype = "application", "octet-stream"

    # The caller already base64-encoded the content; only refold it.
    content = "".join(attachment.content.split())
    part = MIMEBase(maintype, subtype, name=attachment.filename)
    part.set_payload(
        "\n".join(
            content[i : i + BASE64_LINE_LENGTH]
            for i in range(0, len(content), BASE64_LINE_LENGTH)
        )
    )
    part["Content-Transfer-Encoding"] = "base64"
    part.add_header("Content-Disposition", "attachment", filename=attachment.filename)
    return _nested(part)


def build_mime_message(message: OutboundMessage) -> Message:
    """Build the message as an ``email`` package object tree."""
    forbidden = _collision_sources(message)

    root: Message
    if message.attachments:
        root = MIMEMultipart("mixed", boundary=generate_boundary("mixed", forbidden))
        if message.html_body:
            root.attach(
                _nested(
                    _alternative(
                        generate_boundary("alt", forbidden),
                        message.plain_body,
                        message.html_body,
                    )
                )
            )
        else:
            root.attach(_nested(MIMEText(message.plain_body, "plain", "utf-8")))
        for attachment in message.attachments:
            root.attach(_attachment_part(attachment))
    elif message.html_body:
        root = _alternative(
            generate_boundary("alt", forbidden), message.plain_body, message.html_body
        )
    else:
        root = MIMEText(message.plain_body, "plain", "utf-8")

    root["To"] = message.to
    if message.sender:
        root["From"] = message.sender
    if message.cc:
        root["Cc"] = ", ".join(message.cc)
    if message.bcc:
        root["Bcc"] = ", ".join(message.bcc)
    root["Subject"] = encode_subject(message.subject)
    if message.in_reply_to:
        root["In-Reply-To"] = message.in_reply_to
    if message.references:
        root["References"] = message.references
    return root


def build_raw_message(message: OutboundMessage) -> str:
    """Serialize a message into a base64url string for Gmail's ``raw`` field.

    Args:
        message: The message to encode.

    Returns:
        Base64url encoded RFC 2822 message, without padding.

    Raises:
        ValidationError: If no collision-free boundary could be generated.
    """
    raw = build_mime_message(message).as_bytes(policy=SERIALIZE_POLICY)
    logger.debug(
        "Built raw message to %s (%d bytes, %d attachments)",
        message.to,
        len(raw),
        len(message.attachments),
    )
    return encode_base64url(raw)
