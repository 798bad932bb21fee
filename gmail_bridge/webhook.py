"""Send-email webhook.

``POST /api/send-email`` sends a message with the server's own Gmail
credentials (the GMAIL_* environment variables). Intended for cron jobs,
workflow tools and scripts that cannot speak MCP.

Request body::

    {"to": "...", "subject": "...", "body": "...",
     "attachments": [{"filename": "...", "mimeType": "...", "content": "<base64>"}]}

When WEBHOOK_SECRET is set, ``Authorization: Bearer <secret>`` is required.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field, StrictStr, field_validator
from starlette.requests import Request
from starlette.responses import JSONResponse

from gmail_bridge.auth.credentials import check_webhook_secret, credentials_from_env
from gmail_bridge.gmail.client import build_service
from gmail_bridge.gmail.messages import send_message
from gmail_bridge.gmail.mime import build_raw_message
from gmail_bridge.schemas.messages import AttachmentPart, OutboundMessage
from gmail_bridge.tools.base import build_model
from gmail_bridge.utils.errors import ValidationError

logger = logging.getLogger(__name__)

WEBHOOK_PATH = "/api/send-email"
INVALID_PAYLOAD = "Missing or invalid: to, subject, body"


class WebhookPayload(BaseModel):
    """JSON body accepted by the send-email webhook."""

    to: StrictStr = Field(..., min_length=1)
    subject: StrictStr = Field(..., min_length=1)
    body: StrictStr
    attachments: list[AttachmentPart] | None = None

    @field_validator("attachments", mode="before")
    @classmethod
    def _ignore_non_list(cls, value: object) -> object:
        # Anything but a JSON array means "no attachments"
        return value if isinstance(value, list) else None


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def parse_payload(data: object) -> OutboundMessage:
    """Validate a webhook body and turn it into an OutboundMessage.

    Raises:
        ValidationError: If a field is missing or has the wrong shape.
    """
    if not isinstance(data, dict):
        raise ValidationError(INVALID_PAYLOAD)
    try:
        payload = build_model(WebhookPayload, **data)
    except ValidationError as e:
        raise ValidationError(f"{INVALID_PAYLOAD} ({e.message})", field=e.field) from e
    return build_model(
        OutboundMessage,
        to=payload.to,
        subject=payload.subject,
        plain_body=payload.body,
        attachments=payload.attachments or [],
    )


async def send_email_webhook(request: Request) -> JSONResponse:
    """Handle ``POST /api/send-email``.

    Returns:
        200 ``{"ok": true, "messageId": ...}`` on success, 401 on a bad
        bearer token, 400 on a bad body, 500 on any other failure.
    """
    if not check_webhook_secret(request.headers.get("authorization")):
        return _error("Unauthorized", 401)

    try:
        data = await request.json()
    except ValueError:
        return _error("Invalid JSON body", 400)

    try:
        message = parse_payload(data)
    except ValidationError as e:
        return _error(e.message, 400)

    try:
        service = build_service(credentials_from_env())
        sent = send_message(service, build_raw_message(message))
    except Exception as e:
        logger.error("send-email error: %s", e)
        return _error(getattr(e, "message", str(e)), 500)

    logger.info("Webhook sent message %s", sent.id)
    return JSONResponse({"ok": True, "messageId": sent.id})
