"""Middleware module for the Gmail bridge."""

from gmail_bridge.middleware.audit_logger import (
    AuditLog,
    ToolCallRecord,
    audit_log,
    redact,
)
from gmail_bridge.middleware.validator import (
    MAX_BATCH_SIZE,
    limit_batch,
    validate_address,
    validate_address_list,
    validate_identifier,
    validate_label_name,
)

__all__ = [
    "AuditLog",
    "ToolCallRecord",
    "audit_log",
    "redact",
    "MAX_BATCH_SIZE",
    "limit_batch",
    "validate_address",
    "validate_address_list",
    "validate_identifier",
    "validate_label_name",
]
