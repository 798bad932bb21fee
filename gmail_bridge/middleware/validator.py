"""Input validation utilities."""

from __future__ import annotations

import logging
import re

from gmail_bridge.utils.errors import ValidationError

logger = logging.getLogger(__name__)

# Gmail message, thread, draft, label and filter IDs
IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+$")
MAX_IDENTIFIER_LENGTH = 256

# Attachment IDs are opaque tokens, often several hundred characters long
MAX_ATTACHMENT_ID_LENGTH = 4096

# Batch endpoints accept at most this many IDs per call
MAX_BATCH_SIZE = 50


def validate_identifier(
    value: str, field: str = "id", max_length: int = MAX_IDENTIFIER_LENGTH
) -> str:
    """Validate a Gmail resource identifier.

    Args:
        value: Identifier to validate.
        field: Parameter name, used in error messages.
        max_length: Longest accepted identifier.

    Returns:
        Validated identifier (stripped).

    Raises:
        ValidationError: If the identifier is empty or malformed.
    """
    value = value.strip()
    if not value:
        raise ValidationError(f"{field} cannot be empty", field=field)

    if len(value) > max_length:
        raise ValidationError(f"{field} too long", field=field)

    if not IDENTIFIER_PATTERN.match(value):
        raise ValidationError(f"Invalid {field} format: {value}", field=field)

    return value


def limit_batch(message_ids: list[str], field: str = "message_ids") -> list[str]:
    """Validate a batch of message IDs and keep the first MAX_BATCH_SIZE.

    Args:
        message_ids: Requested message IDs.
        field: Parameter name, used in error messages.

    Returns:
        At most MAX_BATCH_SIZE validated IDs, in input order.

    Raises:
        ValidationError: If the list is empty or an ID is malformed.
    """
    if not message_ids:
        raise ValidationError(f"{field} cannot be empty", field=field)

    if len(message_ids) > MAX_BATCH_SIZE:
        logger.info(
            "Batch of %d IDs truncated to the first %d",
            len(message_ids),
            MAX_BATCH_SIZE,
        )

    return [validate_identifier(mid, field) for mid in message_ids[:MAX_BATCH_SIZE]]


def validate_address(address: str, field: str = "to") -> str:
    """Validate an address header value.

    Accepts bare addresses and ``Name <addr>`` forms; checks only that the
    value is non-empty, contains ``@`` and holds no line breaks.

    Raises:
        ValidationError: If the address is empty or malformed.
    """
    address = address.strip()
    if not address:
        raise ValidationError(f"{field} cannot be empty", field=field)

    if "\r" in address or "\n" in address:
        raise ValidationError(f"{field} must not contain line breaks", field=field)

    if "@" not in address:
        raise ValidationError(f"Invalid email address in {field}: {address}", field=field)

    return address


def validate_address_list(addresses: list[str], field: str = "cc") -> list[str]:
    """Validate a list of address header values."""
    return [validate_address(a, field) for a in addresses]


def validate_label_name(name: str) -> str:
    """Validate Gmail label name.

    Args:
        name: Label name to validate.

    Returns:
        Validated label name.

    Raises:
        ValidationError: If label name is invalid.
    """
    name = name.strip()
    if not name:
        raise ValidationError("Label name cannot be empty", field="name")

    if len(name) > 225:
        raise ValidationError("Label name too long (max 225 characters)", field="name")

    return name
