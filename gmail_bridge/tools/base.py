"""Base utilities for Gmail bridge tools.

This module provides shared utilities used by all tools including:
- Parameter model construction with bridge error types
- Text payload helpers
- Audit logging wrapper
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from gmail_bridge.middleware.audit_logger import audit_log
from gmail_bridge.utils.errors import ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")
ModelT = TypeVar("ModelT", bound=BaseModel)


# =============================================================================
# Parameter Construction
# =============================================================================


def build_model(model: type[ModelT], **values: Any) -> ModelT:
    """Construct a pydantic model, raising the bridge ValidationError on failure.

    Args:
        model: Model class to build.
        **values: Field values.

    Returns:
        Validated model instance.

    Raises:
        ValidationError: Naming the first offending field.
    """
    try:
        return model(**values)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(loc) for loc in first["loc"])
        raise ValidationError(f"Invalid {field}: {first['msg']}", field=field) from e


# =============================================================================
# Response Helpers
# =============================================================================


def to_json(data: Any) -> str:
    """Render a tool payload as 2-space indented JSON."""
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True)
    elif isinstance(data, list):
        data = [
            item.model_dump(by_alias=True) if isinstance(item, BaseModel) else item
            for item in data
        ]
    return json.dumps(data, indent=2, ensure_ascii=False)


# =============================================================================
# Tool Execution Wrapper
# =============================================================================


async def execute_tool(
    tool_name: str,
    params: dict[str, Any],
    operation: Callable[[], T],
) -> T:
    """Execute a tool with timing and audit logging.

    Args:
        tool_name: Name of the tool being executed.
        params: Tool parameters (for audit logging).
        operation: The actual operation to execute (sync callable).

    Returns:
        Result of the operation.

    Raises:
        GmailBridgeError: If operation fails.
    """
    start_time = time.perf_counter()
    outcome = "ok"
    error: str | None = None

    try:
        return operation()
    except Exception as e:
        outcome = "error"
        error = str(e)
        raise
    finally:
        duration_ms = (time.perf_counter() - start_time) * 1000
        audit_log.record(
            tool=tool_name,
            params=params,
            outcome=outcome,
            error=error,
            elapsed_ms=duration_ms,
        )
