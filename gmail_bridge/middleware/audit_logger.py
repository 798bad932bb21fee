"""Per-call audit trail for the Gmail tools.

Each tool invocation produces one ``{"audit": {...}}`` JSON line on stderr,
so the trail never mixes with MCP messages on stdout. Message bodies,
attachment data and OAuth secrets are replaced by ``[REDACTED]``; IDs,
addresses and label names are kept. Set ``AUDIT_LOG=false`` to disable.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

REDACTED = "[REDACTED]"

# Parameter names whose values never reach the trail
REDACTED_KEYS = frozenset(
    {
        "body",
        "html_body",
        "content",
        "raw",
        "data",
        "client_secret",
        "refresh_token",
        "access_token",
        "authorization",
    }
)


class ToolCallRecord(BaseModel):
    at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    tool: str
    outcome: Literal["ok", "error"] = "ok"
    params: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None
    elapsed_ms: float | None = None


def redact(value: Any) -> Any:
    """Return ``value`` with message content and secrets masked, recursively."""
    if isinstance(value, dict):
        return {
            key: (REDACTED if value[key] else value[key])
            if key.lower() in REDACTED_KEYS
            else redact(value[key])
            for key in value
        }
    if isinstance(value, list):
        return [redact(item) for item in value]
    return value


class AuditLog:
    """Writes ToolCallRecords to stderr as JSON lines."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def write(self, record: ToolCallRecord) -> None:
        if not self.enabled:
            return
        try:
            print(
                json.dumps({"audit": record.model_dump()}, default=str),
                file=sys.stderr,
                flush=True,
            )
        except Exception as e:
            logger.error("Failed to write audit record for %s: %s", record.tool, e)

    def record(
        self,
        tool: str,
        params: dict[str, Any],
        outcome: Literal["ok", "error"] = "ok",
        error: str | None = None,
        elapsed_ms: float | None = None,
    ) -> None:
        """Redact ``params`` and write one record for a finished tool call."""
        self.write(
            ToolCallRecord(
                tool=tool,
                outcome=outcome,
                params=redact(params),
                error=error,
                elapsed_ms=elapsed_ms,
            )
        )


def audit_enabled() -> bool:
    return os.getenv("AUDIT_LOG", "true").lower() not in ("false", "0", "no")


audit_log = AuditLog(enabled=audit_enabled())
